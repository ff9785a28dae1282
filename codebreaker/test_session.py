"""
Session controller: scripted feedback scenarios and full games against
the in-process arbiter.
"""

from __future__ import annotations

import random

import pytest

from codebreaker.arbiter import Arbiter
from codebreaker.codec import INITIAL_GUESS, encode_guess
from codebreaker.errors import CandidatesExhausted, ConnectionLost, MalformedFeedback
from codebreaker.session import (
    Outcome, Session, S_AWAIT_FEEDBACK, S_DONE, S_EVALUATE, S_START, play,
)
from codebreaker.space import COMBINATIONS, COMBINATION_MASK, pack_combination
from codebreaker.transport import LoopbackTransport


class ScriptedTransport:
    """Replays canned feedback bytes and records what was sent."""

    def __init__(self, replies: bytes):
        self.replies = bytearray(replies)
        self.sent: list[bytes] = []

    def send(self, data: bytes):
        self.sent.append(bytes(data))

    def recv_exact(self, n: int) -> bytes:
        if len(self.replies) < n:
            raise ConnectionLost("script exhausted")
        out = bytes(self.replies[:n])
        del self.replies[:n]
        return out


# ---------------------------------------------------------------------------
# Scripted scenarios
# ---------------------------------------------------------------------------

def test_immediate_solve():
    transport = ScriptedTransport(b"\x05")
    session = Session(transport)
    result = session.run()
    assert result.outcome is Outcome.SOLVED
    assert result.rounds == 1
    assert transport.sent == [b"\xdd\x6c"]
    assert len(session.candidates) == COMBINATIONS


@pytest.mark.parametrize("byte,outcome", [
    (0x40, Outcome.PARITY_ERROR),
    (0x5A, Outcome.PARITY_ERROR),
    (0x45, Outcome.PARITY_ERROR),
    (0x80, Outcome.GAME_LOST),
    (0xC0, Outcome.MULTIPLE_ERRORS),
])
def test_error_bits_end_the_game(byte, outcome):
    transport = ScriptedTransport(bytes([byte]))
    result = Session(transport).run()
    assert result.outcome is outcome
    assert result.rounds == 1
    assert len(transport.sent) == 1


def test_state_transitions():
    transport = ScriptedTransport(b"\x00\x05")
    session = Session(transport)
    assert session.state == S_START
    session.step()
    assert session.state == S_AWAIT_FEEDBACK
    session.step()
    assert session.state == S_EVALUATE
    session.step()
    assert session.state == S_AWAIT_FEEDBACK
    # zero hits on soovv -> explore pick bbbdg = 0x2200
    assert transport.sent[1] == b"\x00\x22"
    session.step()
    session.step()
    assert session.state == S_DONE
    assert session.outcome is Outcome.SOLVED
    assert session.rounds == 2


def test_malformed_feedback_fails_loudly():
    transport = ScriptedTransport(bytes([(3 << 3) | 4]))
    with pytest.raises(MalformedFeedback) as exc:
        Session(transport).run()
    assert exc.value.red == 4 and exc.value.white == 3


def test_contradictory_feedback_exhausts_candidates():
    # red 4 then red 0 on the same colours cannot both hold
    transport = ScriptedTransport(b"\x04\x00\x00\x00\x00\x00\x00\x00")
    with pytest.raises(CandidatesExhausted):
        Session(transport, initial_guess=encode_guess(0)).run()


def test_connection_lost_propagates():
    with pytest.raises(ConnectionLost):
        Session(ScriptedTransport(b"")).run()


# ---------------------------------------------------------------------------
# Full games
# ---------------------------------------------------------------------------

def test_secret_equal_to_initial_guess():
    result = play(LoopbackTransport(Arbiter(INITIAL_GUESS & COMBINATION_MASK)))
    assert result.solved
    assert result.rounds == 1


@pytest.mark.parametrize("colors", [
    [0, 0, 0, 0, 0],
    [7, 7, 7, 7, 7],
    [0, 1, 2, 3, 4],
    [5, 3, 6, 6, 3],
    [2, 7, 2, 7, 1],
])
def test_solves_fixed_secrets(colors):
    secret = pack_combination(colors)
    result = play(LoopbackTransport(Arbiter(secret)))
    assert result.solved
    assert result.guesses[-1] & COMBINATION_MASK == secret
    assert result.rounds == len(result.guesses) == len(result.feedback)


def test_terminates_within_ten_rounds():
    rng = random.Random(2015)
    for secret in rng.sample(range(COMBINATIONS), 30):
        result = play(LoopbackTransport(Arbiter(secret)))
        assert result.solved, secret
        assert result.rounds <= 10, secret


def test_no_guess_repeats():
    result = play(LoopbackTransport(Arbiter(pack_combination([6, 1, 4, 1, 0]))))
    assert len(set(result.guesses)) == len(result.guesses)
