from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class MemoryWindow:
    start: int
    values: List[int]

    @property
    def end(self) -> int:
        return self.start + len(self.values)

    def addresses(self) -> range:
        return range(self.start, self.end)


def memory_window(memory: Sequence[int], pointer: int, visible_cells: int = 20) -> MemoryWindow:
    """Slice of the tape around the pointer.

    The window starts half a window before the pointer and is clamped to the
    tape, so near the ends it shows fewer cells before or after the pointer.
    """
    if visible_cells <= 0:
        return MemoryWindow(start=pointer, values=[])
    start = max(0, pointer - visible_cells // 2)
    end = min(len(memory), start + visible_cells)
    return MemoryWindow(start=start, values=[int(v) for v in memory[start:end]])


def render_window(window: MemoryWindow, pointer: int) -> str:
    """Three text rows: pointer marker, cell values, addresses."""
    width = max([3] + [len(str(a)) for a in window.addresses()])
    marks: List[str] = []
    values: List[str] = []
    addrs: List[str] = []
    for addr, value in zip(window.addresses(), window.values):
        marks.append(('v' if addr == pointer else '').center(width))
        values.append(f"{value:>{width}d}")
        addrs.append(f"{addr:>{width}d}")
    return "\n".join(' '.join(row).rstrip() for row in (marks, values, addrs))
