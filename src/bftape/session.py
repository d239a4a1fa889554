from __future__ import annotations

import enum
import logging
from typing import Optional

from .api import RunOptions
from .interpreter import BrainfuckInterpreter, InputSource, OutputSink
from .source import SourcePosition, locate
from .state import InterpreterState

logger = logging.getLogger(__name__)


class ExecutionState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class Session:
    """
    Start / pause / resume / step / reset controller around one program.

    An interpreter is created lazily on the first ``start()`` or ``step()``
    and discarded by ``reset()``; starting from idle always begins from a
    fresh machine.
    """

    def __init__(
        self,
        program: str,
        *,
        on_output: Optional[OutputSink] = None,
        on_input_request: Optional[InputSource] = None,
        options: Optional[RunOptions] = None,
    ):
        self.program = program
        self.on_output = on_output
        self.on_input_request = on_input_request
        self.options = options if options is not None else RunOptions()
        self.execution_state = ExecutionState.IDLE
        self.interpreter: Optional[BrainfuckInterpreter] = None
        self.last_state: Optional[InterpreterState] = None

    def _create_interpreter(self) -> BrainfuckInterpreter:
        self.interpreter = BrainfuckInterpreter(
            self.program,
            self.options.memory_size,
            self.on_output,
            self.on_input_request,
            cooperative=self.options.cooperative,
        )
        return self.interpreter

    def _settle(self, interpreter: BrainfuckInterpreter, state: InterpreterState) -> Optional[InterpreterState]:
        if interpreter is not self.interpreter:
            # Discarded by reset() while its run loop was still waiting.
            return None
        self.last_state = state
        if interpreter.active:
            self.execution_state = ExecutionState.RUNNING
        elif state.is_paused:
            self.execution_state = ExecutionState.PAUSED
        else:
            self.execution_state = ExecutionState.IDLE
        return state

    async def start(self) -> Optional[InterpreterState]:
        """Run from idle, or resume when paused.

        Returns the state the run loop stopped in. Resuming before the earlier
        run loop has noticed the pause only cancels the pause: that loop keeps
        going, this call returns None, and ``last_state`` is refreshed when the
        original ``start()`` finishes.
        """
        if self.execution_state is ExecutionState.PAUSED and self.interpreter is not None:
            interpreter = self.interpreter
            self.execution_state = ExecutionState.RUNNING
            if interpreter.active:
                await interpreter.resume()
                return None
            state = await interpreter.resume()
            return self._settle(interpreter, state if state is not None else interpreter.get_state())

        if self.execution_state is not ExecutionState.IDLE:
            return None

        interpreter = self._create_interpreter()
        self.execution_state = ExecutionState.RUNNING
        logger.debug("session started")
        return self._settle(interpreter, await interpreter.run())

    def pause(self) -> None:
        if self.interpreter is not None and self.execution_state is ExecutionState.RUNNING:
            self.interpreter.pause()
            self.execution_state = ExecutionState.PAUSED

    async def step(self) -> Optional[InterpreterState]:
        if self.execution_state is ExecutionState.RUNNING:
            return None
        if self.interpreter is not None and self.interpreter.busy:
            # Paused, but the run loop is still waiting for input.
            return None
        interpreter = self.interpreter if self.interpreter is not None else self._create_interpreter()
        await interpreter.step()
        if interpreter is not self.interpreter:
            return None
        self.last_state = interpreter.get_state()
        return self.last_state

    def reset(self) -> None:
        if self.interpreter is not None:
            self.interpreter.reset()
        self.interpreter = None
        self.last_state = None
        self.execution_state = ExecutionState.IDLE

    def current_state(self) -> Optional[InterpreterState]:
        if self.interpreter is None:
            return None
        return self.interpreter.get_state()

    def current_position(self) -> Optional[SourcePosition]:
        state = self.current_state()
        if state is None:
            return None
        return locate(self.program, state.program_counter)

    def current_line(self) -> Optional[int]:
        pos = self.current_position()
        return None if pos is None else pos.line
