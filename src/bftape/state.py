from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np


@dataclass(frozen=True, eq=False)
class InterpreterState:
    """Point-in-time copy of the machine, as handed out by ``get_state()``.

    ``memory`` is a private read-only copy of the tape; writing to it raises
    ``ValueError`` and can never reach the running interpreter.
    """

    memory: np.ndarray
    pointer: int
    program_counter: int
    output: str
    input: str
    input_index: int
    is_running: bool
    is_paused: bool

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InterpreterState):
            return NotImplemented
        return (
            bool(np.array_equal(self.memory, other.memory))
            and self.pointer == other.pointer
            and self.program_counter == other.program_counter
            and self.output == other.output
            and self.input == other.input
            and self.input_index == other.input_index
            and self.is_running == other.is_running
            and self.is_paused == other.is_paused
        )

    @property
    def cell(self) -> int:
        return int(self.memory[self.pointer])

    @property
    def pending_input(self) -> str:
        return self.input[self.input_index:]

    @property
    def consumed_input(self) -> str:
        return self.input[:self.input_index]


@dataclass
class MachineState:
    memory_size: int
    memory: np.ndarray = field(init=False)
    pointer: int = 0
    program_counter: int = 0
    output: List[str] = field(default_factory=list)
    input: str = ""
    input_index: int = 0
    is_running: bool = False
    is_paused: bool = False
    # Program counters of the currently open '[' instructions.
    loop_stack: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.memory = np.zeros(self.memory_size, dtype=np.uint8)

    def reset(self) -> None:
        self.memory.fill(0)
        self.pointer = 0
        self.program_counter = 0
        self.output.clear()
        self.input = ""
        self.input_index = 0
        self.is_running = False
        self.is_paused = False
        self.loop_stack.clear()

    def snapshot(self) -> InterpreterState:
        memory = self.memory.copy()
        memory.flags.writeable = False
        return InterpreterState(
            memory=memory,
            pointer=self.pointer,
            program_counter=self.program_counter,
            output=''.join(self.output),
            input=self.input,
            input_index=self.input_index,
            is_running=self.is_running,
            is_paused=self.is_paused,
        )
