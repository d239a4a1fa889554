from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Set, Union

import numpy as np

from .errors import ReentrantStepError, make_memory_size_error
from .state import InterpreterState, MachineState

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_SIZE = 30000

OutputSink = Callable[[str], None]
InputSource = Callable[[], Union[str, Awaitable[str]]]


class BrainfuckInterpreter:
    """
    Step-wise Brainfuck virtual machine.

    Machine model:
    - A fixed-size tape of 8-bit cells; cell arithmetic wraps modulo 256
    - The data pointer wraps around both ends of the tape
    - Loops are matched at run time with a stack of open '[' positions

    I/O:
    - ``on_output`` is called with one character for every '.' executed
    - ``on_input_request`` is called (and awaited when it returns an
      awaitable) whenever ',' executes with the input buffer exhausted

    ``step()`` is not reentrant. A second call while one is suspended on
    input raises ``ReentrantStepError``.
    """

    def __init__(
        self,
        program: str,
        memory_size: int = DEFAULT_MEMORY_SIZE,
        on_output: Optional[OutputSink] = None,
        on_input_request: Optional[InputSource] = None,
        *,
        cooperative: bool = True,
    ):
        if isinstance(memory_size, bool) or not isinstance(memory_size, (int, np.integer)) or memory_size <= 0:
            raise make_memory_size_error(memory_size)

        self._program = program
        self._state = MachineState(int(memory_size))
        self.on_output = on_output
        self.on_input_request = on_input_request
        self.cooperative = cooperative
        self.step_count = 0
        self._stepping = False
        self._looping = False
        self._reported: Set[int] = set()
        # Bumped by reset(); a step suspended across a reset drops its effects.
        self._generation = 0
        logger.debug("interpreter created: %d chars, %d cells", len(program), memory_size)

    @property
    def program(self) -> str:
        return self._program

    @property
    def memory_size(self) -> int:
        return len(self._state.memory)

    @property
    def active(self) -> bool:
        """True while a run loop is executing, even if a pause is pending."""
        return self._looping

    @property
    def busy(self) -> bool:
        """True while a run loop is active or a step is waiting for input."""
        return self._looping or self._stepping

    @property
    def loop_depth(self) -> int:
        return len(self._state.loop_stack)

    def current_instruction(self) -> Optional[str]:
        pc = self._state.program_counter
        if 0 <= pc < len(self._program):
            return self._program[pc]
        return None

    def get_state(self) -> InterpreterState:
        return self._state.snapshot()

    def reset(self) -> None:
        """Reinitialize the machine in place, keeping the program.

        A step waiting for input when reset is called is abandoned: the text
        it eventually receives is discarded and it returns False.
        """
        self._generation += 1
        self._state.reset()
        self.step_count = 0
        self._reported.clear()
        logger.debug("interpreter reset")

    # ===== Execution =====

    async def step(self) -> bool:
        """
        Execute exactly one instruction.

        The only suspension point is ',' with an exhausted input buffer and an
        input source bound.

        Returns:
            True if an instruction was executed, False if the program counter
            had already run off the end of the program or the step was
            abandoned by a reset while it waited for input.
        """
        state = self._state
        if self._stepping:
            raise ReentrantStepError(
                message=f"step() called while the step at {state.program_counter} is still waiting for input",
                program_counter=state.program_counter,
            )
        if state.program_counter >= len(self._program):
            state.is_running = False
            return False

        generation = self._generation
        self._stepping = True
        try:
            await self._execute(self._program[state.program_counter])
        finally:
            self._stepping = False

        if generation != self._generation:
            return False
        state.program_counter += 1
        self.step_count += 1
        return True

    async def _execute(self, command: str) -> None:
        state = self._state
        memory = state.memory
        ptr = state.pointer

        if command == '>':
            state.pointer = (ptr + 1) % len(memory)
        elif command == '<':
            state.pointer = (ptr - 1) % len(memory)
        elif command == '+':
            memory[ptr] = (int(memory[ptr]) + 1) & 255
        elif command == '-':
            memory[ptr] = (int(memory[ptr]) - 1) & 255
        elif command == '.':
            char = chr(memory[ptr])
            state.output.append(char)
            if self.on_output is not None:
                self.on_output(char)
        elif command == ',':
            await self._read_input()
        elif command == '[':
            if memory[ptr] == 0:
                state.program_counter = self._find_loop_end(state.program_counter)
            else:
                state.loop_stack.append(state.program_counter)
        elif command == ']':
            self._close_loop(memory[ptr] != 0)

    async def _read_input(self) -> None:
        state = self._state
        if self.on_input_request is not None and state.input_index >= len(state.input):
            logger.debug("input exhausted at pc=%d, requesting more", state.program_counter)
            generation = self._generation
            text = self.on_input_request()
            if inspect.isawaitable(text):
                text = await text
            if generation != self._generation:
                logger.debug("input arrived after reset, discarded")
                return
            state.input += text or ""

        if state.input_index < len(state.input):
            # Code points above 255 keep their low byte.
            state.memory[state.pointer] = ord(state.input[state.input_index]) & 255
            state.input_index += 1
        else:
            state.memory[state.pointer] = 0

    def _find_loop_end(self, start: int) -> int:
        depth = 1
        i = start + 1
        program = self._program
        while i < len(program) and depth > 0:
            if program[i] == '[':
                depth += 1
            elif program[i] == ']':
                depth -= 1
            i += 1
        if depth > 0:
            self._report(start, "unmatched '[' at %d: skipping to end of program")
        # Lands on the matching ']' (or the last character) so the
        # increment in step() moves past it.
        return i - 1

    def _close_loop(self, cell_nonzero: bool) -> None:
        state = self._state
        if not state.loop_stack:
            self._report(state.program_counter, "unmatched ']' at %d: ignored")
            return
        if cell_nonzero:
            state.program_counter = state.loop_stack[-1]
        else:
            state.loop_stack.pop()

    def _report(self, index: int, message: str) -> None:
        if index not in self._reported:
            self._reported.add(index)
            logger.warning(message, index)

    async def run(self) -> InterpreterState:
        """
        Step until the program ends or ``pause()`` is observed.

        Control is yielded to the event loop after every step unless the
        interpreter was built with ``cooperative=False``. Calling ``run()``
        while a run loop is already active only clears a pending pause.

        Returns:
            Snapshot of the state at the moment the loop exited.
        """
        state = self._state
        state.is_paused = False
        if self._looping:
            return self.get_state()

        state.is_running = True
        self._looping = True
        try:
            while state.is_running and not state.is_paused:
                if not await self.step():
                    state.is_running = False
                    break
                if self.cooperative:
                    await asyncio.sleep(0)
        finally:
            self._looping = False
            state.is_running = False

        if state.is_paused:
            logger.debug("run paused at pc=%d after %d steps", state.program_counter, self.step_count)
        else:
            logger.debug("run finished after %d steps", self.step_count)
        return self.get_state()

    def pause(self) -> None:
        self._state.is_paused = True

    async def resume(self) -> Optional[InterpreterState]:
        if not self._state.is_paused:
            return None
        return await self.run()
