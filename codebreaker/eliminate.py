"""
Elimination filter — drop candidates that contradict a round's feedback.

All rules are necessary conditions: a candidate that would really produce
(red, white) against the guess is never dropped, but some inconsistent
candidates may slip through a given round.

Per candidate, with kinda = red + white:
  1. permeq != red
  2. some colour with guessCount > kinda and candCount >= guessCount
  3. kinda == 0 and any colour shared with the guess
  4. colorEqSum > kinda   (sum of candCount over colours where
                           candCount <= guessCount; larger counts add 0)
  5. diffCols > SLOTS - kinda
  6. colorDiff > SLOTS - kinda   (sum |guessCount - candCount| / 2)
  7. permeq > SLOTS - white
  8. red == 0 and white > 0 and permeq > 0
"""

from __future__ import annotations

import logging

import numpy as np

from .candidates import CandidateSet
from .space import COLORS, COMBINATION_MASK, SLOTS, color_counts, unpack_combination

log = logging.getLogger(__name__)


def is_inconsistent(candidate: int, guess: int, red: int, white: int) -> bool:
    """Scalar form of the filter for a single candidate combination."""
    kinda = red + white
    guess_count = color_counts(guess)
    cand_count = color_counts(candidate)

    permeq = sum(1 for g, c in zip(unpack_combination(guess),
                                   unpack_combination(candidate)) if g == c)
    if permeq != red:
        return True

    color_eq = 0
    diff_cols = 0
    color_diff = 0
    for c in range(COLORS):
        g, n = guess_count[c], cand_count[c]
        if g > kinda and n >= g:
            return True
        if kinda == 0 and n and g:
            return True
        if n <= g:
            color_eq += n
        if n > 0 and g == 0:
            diff_cols += 1
        color_diff += abs(g - n)
    color_diff //= 2

    return (color_eq > kinda
            or diff_cols > SLOTS - kinda
            or color_diff > SLOTS - kinda
            or permeq > SLOTS - white
            or (red == 0 and white > 0 and permeq > 0))


def eliminate_wrongs(candidates: CandidateSet, guess: int,
                     red: int, white: int) -> int:
    """
    Mark every surviving candidate the feedback rules out, plus the guess
    itself. Returns the number of newly eliminated entries.
    """
    guess &= COMBINATION_MASK
    kinda = red + white

    guess_slots = np.array(unpack_combination(guess), dtype=np.int16)
    guess_count = np.bincount(guess_slots, minlength=COLORS).astype(np.int16)
    cand_count = candidates.counts.astype(np.int16)
    present = cand_count > 0

    permeq = (candidates.slots == guess_slots).sum(axis=1)
    over_represented = ((guess_count > kinda) & (cand_count >= guess_count)).any(axis=1)
    if kinda == 0:
        shares_color = (present & (guess_count > 0)).any(axis=1)
    else:
        shares_color = np.zeros(len(cand_count), dtype=bool)
    color_eq = np.where(cand_count <= guess_count, cand_count, 0).sum(axis=1)
    diff_cols = (present & (guess_count == 0)).sum(axis=1)
    color_diff = np.abs(guess_count - cand_count).sum(axis=1) // 2

    wrong = (
        (permeq != red)
        | over_represented
        | shares_color
        | (color_eq > kinda)
        | (diff_cols > SLOTS - kinda)
        | (color_diff > SLOTS - kinda)
        | (permeq > SLOTS - white)
    )
    if red == 0 and white > 0:
        wrong |= permeq > 0
    wrong[candidates.index_of(guess)] = True

    newly = wrong & candidates.surviving_mask()
    candidates.eliminate(newly)
    count = int(np.count_nonzero(newly))
    log.debug("eliminated %d candidates (red=%d white=%d), %d left",
              count, red, white, len(candidates))
    return count
