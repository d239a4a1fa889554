from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .errors import BracketDiagnostic, make_bracket_diagnostic

INSTRUCTIONS = frozenset('><+-.,[]')

# Prints "Hello World!\n".
HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)

# Program shown when nothing else is loaded; prints "Hello World!\n".
DEFAULT_PROGRAM = (
    "++++++++++[>+++++++>++++++++++>+++>+<<<<-]\n"
    ">++.>+.+++++++..+++.>++.<<+++++++++++++++.\n"
    ">.+++.------.--------.>+.>."
)


@dataclass(frozen=True)
class SourcePosition:
    line: int  # 0-based
    column: int  # 0-based


def is_code_char(ch: str) -> bool:
    return ch in INSTRUCTIONS


def strip_comments(source: str) -> str:
    return ''.join(c for c in source if is_code_char(c))


def locate(program: str, program_counter: int) -> SourcePosition:
    """Map a program counter to the line and column it points at.

    A counter at or past the end maps to the position just after the last
    character, so a finished program keeps its final line marked.
    """
    pc = max(0, min(program_counter, len(program)))
    before = program[:pc]
    line = before.count('\n')
    column = pc - (before.rfind('\n') + 1)
    return SourcePosition(line=line, column=column)


def find_unmatched_brackets(program: str) -> List[int]:
    """Indexes of every '[' or ']' that has no partner, in source order."""
    stack: List[int] = []
    stray: List[int] = []
    for i, ch in enumerate(program):
        if ch == '[':
            stack.append(i)
        elif ch == ']':
            if stack:
                stack.pop()
            else:
                stray.append(i)
    return sorted(stray + stack)


def check_brackets(program: str) -> List[BracketDiagnostic]:
    out: List[BracketDiagnostic] = []
    for index in find_unmatched_brackets(program):
        message = f"Unmatched '{program[index]}'"
        out.append(make_bracket_diagnostic(message=message, source=program, index=index))
    return out
