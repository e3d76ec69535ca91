# voxel_evo/sim/ids.py
from __future__ import annotations


class IdAllocator:
    """Monotonic id source owned by one Simulation (creatures and species each get one)."""
    def __init__(self, start: int = 0):
        self._next = start

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    def peek(self) -> int:
        return self._next
