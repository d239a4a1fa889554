#!/usr/bin/env python3

import asyncio
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bftape import BrainfuckInterpreter, StreamInput, StreamOutput


async def main():
    # Echo every typed line; an empty line or end of input stops the loop.
    program = ",[.,]"
    interpreter = BrainfuckInterpreter(program, on_output=StreamOutput(), on_input_request=StreamInput())
    await interpreter.run()


if __name__ == "__main__":
    asyncio.run(main())
