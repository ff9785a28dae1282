"""
Session controller — drives the guess / feedback round loop.

State machine:
  START -> AWAIT_FEEDBACK -> (EVALUATE -> AWAIT_FEEDBACK)* -> DONE

One send, one blocking receive per round. The session owns its candidate
set for its whole lifetime; the filter and selector get it passed in.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from .candidates import CandidateSet
from .codec import (
    FEEDBACK_BYTES, INITIAL_GUESS, ERROR_LOST, ERROR_PARITY,
    Feedback, decode_feedback, encode_guess, guess_to_bytes,
)
from .eliminate import eliminate_wrongs
from .errors import CandidatesExhausted, MalformedFeedback
from .selector import choose_next_guess
from .space import COMBINATION_MASK, SLOTS, format_combination

log = logging.getLogger(__name__)


# State machine states
S_START          = 0
S_AWAIT_FEEDBACK = 1
S_EVALUATE       = 2
S_DONE           = 3


class Outcome(enum.Enum):
    SOLVED = "solved"
    PARITY_ERROR = "parity error"
    GAME_LOST = "game lost"
    MULTIPLE_ERRORS = "multiple errors"


def outcome_for(feedback: Feedback) -> Outcome | None:
    """Terminal outcome for a feedback, or None if the game goes on."""
    if feedback.error == ERROR_PARITY | ERROR_LOST:
        return Outcome.MULTIPLE_ERRORS
    if feedback.error == ERROR_PARITY:
        return Outcome.PARITY_ERROR
    if feedback.error == ERROR_LOST:
        return Outcome.GAME_LOST
    if feedback.red == SLOTS:
        return Outcome.SOLVED
    return None


@dataclass
class SessionResult:
    outcome: Outcome
    rounds: int
    guesses: list[int] = field(default_factory=list)
    feedback: list[Feedback] = field(default_factory=list)

    @property
    def solved(self) -> bool:
        return self.outcome is Outcome.SOLVED


class Session:
    """
    One game against an arbiter.

    Args:
        transport: object with send(bytes) and recv_exact(n) -> bytes.
        initial_guess: 16-bit guess message sent in the first round.
    """

    def __init__(self, transport, initial_guess: int = INITIAL_GUESS):
        self.transport = transport
        self.candidates = CandidateSet()
        self.state = S_START
        self.guess = initial_guess
        self.rounds = 0
        self.outcome: Outcome | None = None
        self.last_feedback: Feedback | None = None
        self.last_byte = 0
        self.guesses: list[int] = []
        self.feedback: list[Feedback] = []

    def _send_guess(self, message: int):
        log.debug("round %d: guess %s (0x%04X)", self.rounds + 1,
                  format_combination(message & COMBINATION_MASK), message)
        self.guesses.append(message)
        self.transport.send(guess_to_bytes(message))

    def step(self):
        """Advance the state machine by one transition."""
        if self.state == S_START:
            self._send_guess(self.guess)
            self.state = S_AWAIT_FEEDBACK

        elif self.state == S_AWAIT_FEEDBACK:
            self.last_byte = self.transport.recv_exact(FEEDBACK_BYTES)[0]
            self.last_feedback = decode_feedback(self.last_byte)
            self.feedback.append(self.last_feedback)
            self.rounds += 1
            log.debug("round %d: feedback 0x%02X (%s)",
                      self.rounds, self.last_byte, self.last_feedback)
            self.state = S_EVALUATE

        elif self.state == S_EVALUATE:
            fb = self.last_feedback
            self.outcome = outcome_for(fb)
            if self.outcome is not None:
                self.state = S_DONE
                return
            if not fb.is_well_formed:
                raise MalformedFeedback(self.last_byte, fb.red, fb.white)

            previous = self.guess & COMBINATION_MASK
            eliminate_wrongs(self.candidates, previous, fb.red, fb.white)
            nxt = choose_next_guess(self.candidates, previous, fb.red, fb.white)
            if nxt is None:
                raise CandidatesExhausted(
                    f"no candidate left after {self.rounds} rounds")
            self.guess = encode_guess(nxt)
            self._send_guess(self.guess)
            self.state = S_AWAIT_FEEDBACK

    def run(self) -> SessionResult:
        while self.state != S_DONE:
            self.step()
        log.debug("session done: %s after %d rounds", self.outcome.value, self.rounds)
        return SessionResult(self.outcome, self.rounds,
                             list(self.guesses), list(self.feedback))


def play(transport, initial_guess: int = INITIAL_GUESS) -> SessionResult:
    return Session(transport, initial_guess).run()
