from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ProgramFileError
from .interpreter import DEFAULT_MEMORY_SIZE, BrainfuckInterpreter, InputSource, OutputSink
from .state import InterpreterState
from .streams import CollectOutput, StaticInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOptions:
    memory_size: int = DEFAULT_MEMORY_SIZE
    cooperative: bool = True


@dataclass(frozen=True)
class RunResult:
    output: str
    state: InterpreterState
    steps: int


def load_program(path: str | Path, *, encoding: str = "utf-8") -> str:
    p = Path(path)
    try:
        return p.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ProgramFileError(message=f"Cannot read program {str(p)!r}: {e}", path=str(p)) from e


async def run_string(
    program: str,
    *,
    input_text: str = "",
    options: Optional[RunOptions] = None,
    on_output: Optional[OutputSink] = None,
    on_input_request: Optional[InputSource] = None,
) -> RunResult:
    """Run a program to completion and collect everything it printed.

    ``input_text`` is offered once, on the first input request. Pass
    ``on_input_request`` instead to supply input interactively.
    """
    opts = options if options is not None else RunOptions()
    collected = CollectOutput()

    def sink(char: str) -> None:
        collected(char)
        if on_output is not None:
            on_output(char)

    source = on_input_request if on_input_request is not None else StaticInput(input_text)
    interpreter = BrainfuckInterpreter(
        program, opts.memory_size, sink, source, cooperative=opts.cooperative
    )
    state = await interpreter.run()
    return RunResult(output=collected.text, state=state, steps=interpreter.step_count)


async def run_file(path: str | Path, *, encoding: str = "utf-8", **kwargs) -> RunResult:
    return await run_string(load_program(path, encoding=encoding), **kwargs)


def run_sync(program: str, *, input_text: str = "", options: Optional[RunOptions] = None) -> RunResult:
    return asyncio.run(run_string(program, input_text=input_text, options=options))
