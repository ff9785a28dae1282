"""
Guess selector — greedy first-match pick over the surviving candidates.

Scan order is ascending arena index. Rules, strongest first:
  explore    nothing hit last round (red + white == 0): first survivor with
             exactly 3 colours, one of them used 3+ times
  diversify  something hit: first survivor with at least 2 colours that
             the last guess did not use
  default    first survivor
"""

from __future__ import annotations

import logging

import numpy as np

from .candidates import CandidateSet
from .space import COLORS, color_counts

log = logging.getLogger(__name__)

EXPLORE_DISTINCT  = 3
EXPLORE_REPEATS   = 3
DIVERSIFY_COLDIFF = 2


def choose_next_guess(candidates: CandidateSet, guess: int,
                      red: int, white: int) -> int | None:
    """Next combination to send, or None if nothing survives."""
    alive = np.flatnonzero(candidates.surviving_mask())
    if alive.size == 0:
        return None

    counts = candidates.counts[alive]
    present = counts > 0

    if red + white == 0:
        explore = (present.sum(axis=1) == EXPLORE_DISTINCT) & \
                  (counts.max(axis=1) >= EXPLORE_REPEATS)
        hits = np.flatnonzero(explore)
        if hits.size:
            index = int(alive[hits[0]])
            log.debug("explore pick at index %d", index)
            return candidates.value(index)
    else:
        unused = np.array(color_counts(guess), dtype=np.int16) == 0
        coldiff = (present & unused).sum(axis=1)
        hits = np.flatnonzero(coldiff >= DIVERSIFY_COLDIFF)
        if hits.size:
            index = int(alive[hits[0]])
            log.debug("diversify pick at index %d", index)
            return candidates.value(index)

    return candidates.value(int(alive[0]))


def scan_next_guess(candidates: CandidateSet, guess: int,
                    red: int, white: int) -> int | None:
    """
    Same choice as choose_next_guess, walking survivors one at a time.

    Slower; kept as the readable statement of the scan order.
    """
    kinda = red + white
    guess_count = color_counts(guess)
    chosen = None
    preferred = None
    for index in candidates.survivors():
        value = candidates.value(index)
        if chosen is None:
            chosen = value
        counts = color_counts(value)
        distinct = sum(1 for c in range(COLORS) if counts[c])
        coldiff = sum(1 for c in range(COLORS) if counts[c] and not guess_count[c])
        if kinda == 0 and distinct == EXPLORE_DISTINCT and max(counts) >= EXPLORE_REPEATS:
            return value
        if preferred is None and kinda >= 1 and coldiff >= DIVERSIFY_COLDIFF:
            preferred = value
    return preferred if preferred is not None else chosen
