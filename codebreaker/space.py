"""
Combination space for the 5-slot / 8-colour code-breaking game.

Word format: 5 slots × 3-bit colour = 15-bit combination field, slot i in
bits [3i, 3i+2]. Bit 15 is free and gets reused by candidate entries
(eliminated flag) and by outbound guesses (parity).
"""

from __future__ import annotations

import functools

import numpy as np


# ---------------------------------------------------------------------------
# Word format
# ---------------------------------------------------------------------------

COLORS      = 8
SLOTS       = 5
COLOR_SHIFT = 3
COLOR_MASK  = 0x7

COMBINATIONS     = COLORS ** SLOTS                 # 32768
COMBINATION_MASK = (1 << (SLOTS * COLOR_SHIFT)) - 1  # 0x7FFF

ELIMINATED_BIT = 0x8000
PARITY_SHIFT   = 15

# beige, darkblue, green, orange, red, black (schwarz), violet, white
COLOR_NAMES = "bdgorsvw"


def slot_color(value: int, slot: int) -> int:
    return (value >> (COLOR_SHIFT * slot)) & COLOR_MASK


def pack_combination(colors) -> int:
    """Pack a sequence of SLOTS colours (slot 0 first) into a combination."""
    colors = list(colors)
    if len(colors) != SLOTS:
        raise ValueError(f"expected {SLOTS} colours, got {len(colors)}")
    value = 0
    for slot, color in enumerate(colors):
        if not 0 <= color < COLORS:
            raise ValueError(f"colour {color} out of range in slot {slot}")
        value |= color << (COLOR_SHIFT * slot)
    return value


def unpack_combination(value: int) -> tuple[int, ...]:
    return tuple(slot_color(value, slot) for slot in range(SLOTS))


def color_counts(value: int) -> list[int]:
    """Occurrences of each colour among the SLOTS positions."""
    counts = [0] * COLORS
    for slot in range(SLOTS):
        counts[slot_color(value, slot)] += 1
    return counts


def reverse_slots(value: int) -> int:
    """Swap slot fields 0<->4 and 1<->3; slot 2 stays. Self-inverse."""
    out = 0
    for slot in range(SLOTS):
        out |= slot_color(value, slot) << (COLOR_SHIFT * (SLOTS - 1 - slot))
    return out


# ---------------------------------------------------------------------------
# Colour letters
# ---------------------------------------------------------------------------

def parse_combination(text: str) -> int:
    """'bdgor' -> combination, slot 0 first."""
    text = text.strip().lower()
    if len(text) != SLOTS:
        raise ValueError(f"expected {SLOTS} colour letters, got {text!r}")
    colors = []
    for ch in text:
        idx = COLOR_NAMES.find(ch)
        if idx < 0:
            raise ValueError(f"unknown colour {ch!r} (use one of {COLOR_NAMES!r})")
        colors.append(idx)
    return pack_combination(colors)


def format_combination(value: int) -> str:
    return "".join(COLOR_NAMES[c] for c in unpack_combination(value))


# ---------------------------------------------------------------------------
# Space builder
# ---------------------------------------------------------------------------

def build_combination_space() -> np.ndarray:
    """
    Every combination, indexed by enumeration order.

    Entry i holds reverse_slots(i): the arbiter expects slot order mirrored
    relative to the counting index, so the enumeration walks the last slot
    fastest on the wire. Eliminated flag clear for all entries.
    """
    idx = np.arange(COMBINATIONS, dtype=np.uint16)
    space = np.zeros(COMBINATIONS, dtype=np.uint16)
    for slot in range(SLOTS):
        field = (idx >> (COLOR_SHIFT * slot)) & COLOR_MASK
        space |= field << (COLOR_SHIFT * (SLOTS - 1 - slot))
    return space


@functools.lru_cache(maxsize=None)
def combination_tables() -> tuple[np.ndarray, np.ndarray]:
    """
    Read-only lookup tables over the combination space.

    Returns (slots, counts):
      - slots:  (COMBINATIONS, SLOTS) uint8, colour of each slot per entry
      - counts: (COMBINATIONS, COLORS) uint8, occurrences of each colour
    """
    space = build_combination_space()
    slots = np.stack(
        [(space >> (COLOR_SHIFT * s)) & COLOR_MASK for s in range(SLOTS)],
        axis=1,
    ).astype(np.uint8)
    counts = (slots[:, :, None] == np.arange(COLORS, dtype=np.uint8)).sum(axis=1)
    counts = counts.astype(np.uint8)
    slots.flags.writeable = False
    counts.flags.writeable = False
    return slots, counts
