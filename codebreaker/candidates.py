"""
Candidate set: fixed arena of every combination with a tombstone flag.

Entries are never removed or reordered, so an index stays valid for the
whole session and ascending index order is the selector's tie-break.
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np

from .space import (
    COMBINATIONS, COMBINATION_MASK, ELIMINATED_BIT,
    build_combination_space, combination_tables, reverse_slots,
)


class CandidateSet:
    """All COMBINATIONS entries, each 15-bit combination | eliminated flag."""

    def __init__(self):
        self.entries = build_combination_space()
        self.slots, self.counts = combination_tables()

    @property
    def capacity(self) -> int:
        return COMBINATIONS

    def __len__(self) -> int:
        return int(np.count_nonzero((self.entries & ELIMINATED_BIT) == 0))

    def value(self, index: int) -> int:
        return int(self.entries[index]) & COMBINATION_MASK

    def is_eliminated(self, index: int) -> bool:
        return bool(self.entries[index] & ELIMINATED_BIT)

    def mark_eliminated(self, index: int):
        self.entries[index] |= ELIMINATED_BIT

    def eliminate(self, mask: np.ndarray):
        """Set the flag on every entry selected by a boolean mask."""
        self.entries[mask] |= ELIMINATED_BIT

    def surviving_mask(self) -> np.ndarray:
        return (self.entries & ELIMINATED_BIT) == 0

    def survivors(self) -> Iterator[int]:
        """Indices of surviving entries, ascending."""
        for index in np.flatnonzero(self.surviving_mask()):
            yield int(index)

    def index_of(self, combination: int) -> int:
        # entry i holds reverse_slots(i), and the reversal is its own inverse
        return reverse_slots(combination & COMBINATION_MASK)

    def __repr__(self) -> str:
        return f"CandidateSet({len(self)}/{self.capacity} surviving)"
