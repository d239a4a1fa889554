#!/usr/bin/env python3

import asyncio
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bftape import BrainfuckInterpreter, memory_window, render_window


async def main():
    # Counts cell 1 up forever; cell 0 stays 1 so the loop never exits.
    interpreter = BrainfuckInterpreter("+[>+<]")

    task = asyncio.create_task(interpreter.run())
    await asyncio.sleep(0.01)
    interpreter.pause()
    state = await task
    print(f"Paused at PC {state.program_counter} after {interpreter.step_count} steps")
    print(render_window(memory_window(state.memory, state.pointer, 4), state.pointer))

    task = asyncio.create_task(interpreter.resume())
    await asyncio.sleep(0.01)
    interpreter.pause()
    state = await task
    print(f"Paused again at PC {state.program_counter} after {interpreter.step_count} steps")
    print(render_window(memory_window(state.memory, state.pointer, 4), state.pointer))


if __name__ == "__main__":
    asyncio.run(main())
