from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


def _build_context(lines: List[str], line_no_1: int, *, context: int = 2, column: Optional[int] = None) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx and column is not None:
            out.append(' ' * (len(f"{prefix} {i:4d} | ") + column - 1) + '^')
    return "\n".join(out)


def _hint_for(message: str) -> Optional[str]:
    msg = message.lower()
    if "unmatched ']'" in msg:
        return 'A "]" with no open loop is ignored; remove it or add the missing "[".'
    if "unmatched '['" in msg:
        return 'A "[" reached on a zero cell skips to the end of the program; add the missing "]".'
    if 'memory size' in msg:
        return 'The tape needs at least one cell. The classic size is 30000.'
    return None


@dataclass
class BFTapeError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class InvalidMemorySizeError(BFTapeError, ValueError):
    memory_size: object


@dataclass
class ReentrantStepError(BFTapeError, RuntimeError):
    program_counter: int


@dataclass
class ProgramFileError(BFTapeError):
    path: str


@dataclass(frozen=True)
class BracketDiagnostic:
    message: str
    index: int
    line: int
    column: int
    context: str

    def __str__(self) -> str:
        hint = _hint_for(self.message)
        hint_block = f"\nHint: {hint}" if hint else ""
        return f"BracketError: {self.message} (line {self.line}, column {self.column})\n{self.context}{hint_block}"


def make_memory_size_error(memory_size: object) -> InvalidMemorySizeError:
    message = f"Invalid memory size: {memory_size!r} (expected a positive integer)"
    hint = _hint_for(message)
    hint_block = f"\nHint: {hint}" if hint else ""
    return InvalidMemorySizeError(message=f"{message}{hint_block}", memory_size=memory_size)


def make_bracket_diagnostic(*, message: str, source: str, index: int) -> BracketDiagnostic:
    before = source[:index]
    line = before.count('\n') + 1
    column = index - (before.rfind('\n') + 1) + 1
    ctx = _build_context(source.split('\n'), line, column=column)
    return BracketDiagnostic(message=message, index=index, line=line, column=column, context=ctx)
