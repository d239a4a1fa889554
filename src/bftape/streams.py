from __future__ import annotations

import asyncio
import logging
import sys
from typing import List, Optional, TextIO

logger = logging.getLogger(__name__)


class StreamOutput:
    """Output sink writing each character straight through to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def __call__(self, char: str) -> None:
        self.stream.write(char)
        self.stream.flush()


class CollectOutput:
    def __init__(self) -> None:
        self.chars: List[str] = []

    def __call__(self, char: str) -> None:
        self.chars.append(char)

    @property
    def text(self) -> str:
        return ''.join(self.chars)


class StreamInput:
    """
    Input source reading one line per request from a text stream.

    The read happens in a worker thread so the event loop stays free while a
    user types. The trailing newline is dropped, matching what a terminal
    hands back when Enter is pressed. End of stream yields "".
    """

    def __init__(self, stream: Optional[TextIO] = None, *, keep_newline: bool = False):
        self.stream = stream if stream is not None else sys.stdin
        self.keep_newline = keep_newline
        self.requests = 0

    async def __call__(self) -> str:
        self.requests += 1
        line = await asyncio.to_thread(self.stream.readline)
        if not line:
            logger.debug("input stream exhausted")
            return ""
        if not self.keep_newline:
            line = line.rstrip('\r\n')
        return line


class StaticInput:
    """Input source handing out a fixed text on the first request only."""

    def __init__(self, text: str):
        self.text = text
        self.requests = 0

    def __call__(self) -> str:
        self.requests += 1
        if self.requests == 1:
            return self.text
        return ""


class QueueInput:
    """Input source fed programmatically; a request waits until ``feed()``."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self.requests = 0

    def feed(self, text: str) -> None:
        self._queue.put_nowait(text)

    @property
    def waiting(self) -> int:
        return self._queue.qsize()

    async def __call__(self) -> str:
        self.requests += 1
        return await self._queue.get()
