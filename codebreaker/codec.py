"""
Wire codec for the guess/feedback protocol.

Outbound guess: 16-bit message = 15-bit combination | parity << 15,
sent low byte first. Inbound feedback: one byte,
  bits 6-7  error  (1 = parity error, 2 = game lost, 3 = both)
  bits 3-5  white
  bits 0-2  red
"""

from __future__ import annotations

from dataclasses import dataclass

from .space import COMBINATION_MASK, COLOR_MASK, COLOR_SHIFT, PARITY_SHIFT, SLOTS


GUESS_BYTES    = 2
FEEDBACK_BYTES = 1

ERROR_SHIFT = 6
ERROR_MASK  = 0x3
WHITE_SHIFT = COLOR_SHIFT
RED_SHIFT   = 0

ERROR_PARITY = 0x1
ERROR_LOST   = 0x2

# 3 colours, 2-2-1 pattern: (5, 3, 3, 6, 6) -> bytes 0xDD, 0x6C
INITIAL_GUESS = 0x6CDD


# ---------------------------------------------------------------------------
# Guess
# ---------------------------------------------------------------------------

def parity_bit(value: int) -> int:
    """XOR fold of bits 0-14."""
    return bin(value & COMBINATION_MASK).count("1") & 1


def encode_guess(combination: int) -> int:
    combination &= COMBINATION_MASK
    return combination | (parity_bit(combination) << PARITY_SHIFT)


def check_parity(message: int) -> bool:
    """True if the 16-bit message carries an even number of set bits."""
    return bin(message & 0xFFFF).count("1") % 2 == 0


def guess_to_bytes(message: int) -> bytes:
    return bytes((message & 0xFF, (message >> 8) & 0xFF))


def bytes_to_guess(data: bytes) -> int:
    if len(data) != GUESS_BYTES:
        raise ValueError(f"guess message is {GUESS_BYTES} bytes, got {len(data)}")
    return data[0] | (data[1] << 8)


# ---------------------------------------------------------------------------
# Feedback
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Feedback:
    error: int
    white: int
    red: int

    @property
    def hits(self) -> int:
        return self.red + self.white

    @property
    def parity_error(self) -> bool:
        return bool(self.error & ERROR_PARITY)

    @property
    def game_lost(self) -> bool:
        return bool(self.error & ERROR_LOST)

    @property
    def solved(self) -> bool:
        return self.error == 0 and self.red == SLOTS

    @property
    def is_well_formed(self) -> bool:
        return self.hits <= SLOTS

    def __str__(self) -> str:
        return f"error={self.error} red={self.red} white={self.white}"


def decode_feedback(byte: int) -> Feedback:
    """Pure field extraction. red + white is not checked here."""
    return Feedback(
        error=(byte >> ERROR_SHIFT) & ERROR_MASK,
        white=(byte >> WHITE_SHIFT) & COLOR_MASK,
        red=(byte >> RED_SHIFT) & COLOR_MASK,
    )


def encode_feedback(error: int, red: int, white: int) -> int:
    return ((error & ERROR_MASK) << ERROR_SHIFT) | \
           ((white & COLOR_MASK) << WHITE_SHIFT) | \
           ((red & COLOR_MASK) << RED_SHIFT)
