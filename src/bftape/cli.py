from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from typing import List, Optional

from .api import RunOptions, load_program
from .errors import BFTapeError
from .interpreter import DEFAULT_MEMORY_SIZE, BrainfuckInterpreter
from .memory_view import memory_window, render_window
from .source import check_brackets, locate
from .streams import StaticInput, StreamInput, StreamOutput

logger = logging.getLogger(__name__)


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def _dump_memory(memory, cells: int) -> str:
    values = [int(b) for b in memory[:cells]]
    return "\n".join(" ".join(f"{v:3d}" for v in values[i:i + 8]) for i in range(0, len(values), 8))


def _status_line(interpreter: BrainfuckInterpreter) -> str:
    state = interpreter.get_state()
    val = state.cell
    ascii_char = chr(val) if 32 <= val <= 126 else '.'
    pos = locate(interpreter.program, state.program_counter)
    instruction = interpreter.current_instruction()
    return (f"PC: {state.program_counter} ({pos.line + 1}:{pos.column + 1}) | Pointer: {state.pointer} | "
            f"Instruction: '{instruction if instruction is not None else 'End'}' | "
            f"Value: {val} ('{ascii_char}') | Steps: {interpreter.step_count:,}")


def _warn_brackets(program: str) -> None:
    for diag in check_brackets(program):
        logger.warning("%s", diag)


async def _cmd_run(args: argparse.Namespace) -> int:
    program = load_program(args.file)
    _warn_brackets(program)

    source = StaticInput(args.input) if args.input is not None else StreamInput(sys.stdin)
    options = RunOptions(memory_size=args.memory_size, cooperative=not args.batch)
    interpreter = BrainfuckInterpreter(
        program, options.memory_size, StreamOutput(sys.stdout), source, cooperative=options.cooperative
    )

    start = time.time()
    state = await interpreter.run()
    end = time.time()

    if args.stats:
        print(f"\n================\nExecution took {(end - start) * 1000:.2f} ms "
              f"({interpreter.step_count:,} steps)", file=sys.stderr)
    if args.dump:
        print(_dump_memory(state.memory, args.dump), file=sys.stderr)
    return 0


async def _cmd_trace(args: argparse.Namespace) -> int:
    program = load_program(args.file)
    _warn_brackets(program)

    interpreter = BrainfuckInterpreter(
        program, args.memory_size, StreamOutput(sys.stdout), StaticInput(args.input or ""),
    )
    print(_status_line(interpreter))
    for _ in range(args.steps):
        if not await interpreter.step():
            print("Program finished.")
            break
        state = interpreter.get_state()
        print()
        print(_status_line(interpreter))
        print(render_window(memory_window(state.memory, state.pointer, args.window), state.pointer))
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    program = load_program(args.file)
    diagnostics = check_brackets(program)
    for diag in diagnostics:
        print(diag)
        print()
    if diagnostics:
        print(f"{len(diagnostics)} unmatched bracket(s) in {args.file}")
        return 1
    print(f"{args.file}: brackets balanced")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bftape", description="Step-wise Brainfuck interpreter.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a program to completion")
    run.add_argument("file")
    run.add_argument("--memory-size", type=_positive_int, default=DEFAULT_MEMORY_SIZE,
                     help=f"Tape length in cells (default {DEFAULT_MEMORY_SIZE})")
    run.add_argument("--input", default=None, help="Fixed input text instead of reading stdin lines")
    run.add_argument("--batch", action="store_true", help="Do not yield to the event loop between steps")
    run.add_argument("--stats", action="store_true", help="Print execution time and step count to stderr")
    run.add_argument("--dump", type=int, default=0, metavar="N", help="Print the first N cells after the run")

    trace = sub.add_parser("trace", help="Step through a program printing machine state")
    trace.add_argument("file")
    trace.add_argument("--memory-size", type=_positive_int, default=DEFAULT_MEMORY_SIZE)
    trace.add_argument("--input", default=None)
    trace.add_argument("--steps", type=int, default=100, help="Maximum steps to show (default 100)")
    trace.add_argument("--window", type=int, default=20, help="Memory cells to show around the pointer")

    check = sub.add_parser("check", help="Report unmatched brackets")
    check.add_argument("file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "check":
            return _cmd_check(args)
        if args.command == "trace":
            return asyncio.run(_cmd_trace(args))
        return asyncio.run(_cmd_run(args))
    except BFTapeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
