#!/usr/bin/env python3

import asyncio
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bftape import BrainfuckInterpreter, HELLO_WORLD, StreamOutput


async def main():
    interpreter = BrainfuckInterpreter(HELLO_WORLD, on_output=StreamOutput(), cooperative=False)
    await interpreter.run()


if __name__ == "__main__":
    asyncio.run(main())
