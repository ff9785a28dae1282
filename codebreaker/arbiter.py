"""
Reference arbiter — the other end of the guess / feedback protocol.

Scores each 2-byte guess against a fixed secret and answers with one
feedback byte. Flags a parity error when the guess has odd parity, and
declares the game lost once MAX_ROUNDS guesses went by without a solve.

Usage:
  codebreaker-arbiter 1280 bdgor
"""

from __future__ import annotations

import argparse
import logging
import socketserver
import sys

from .codec import (
    ERROR_LOST, ERROR_PARITY, FEEDBACK_BYTES, GUESS_BYTES,
    bytes_to_guess, check_parity, decode_feedback, encode_feedback,
)
from .space import (
    COLORS, COMBINATION_MASK, SLOTS,
    color_counts, format_combination, parse_combination, unpack_combination,
)

log = logging.getLogger(__name__)

MAX_ROUNDS = 35


def score(secret: int, guess: int) -> tuple[int, int]:
    """(red, white) of a guess against the secret."""
    red = sum(1 for s, g in zip(unpack_combination(secret),
                                unpack_combination(guess)) if s == g)
    secret_count = color_counts(secret)
    guess_count = color_counts(guess)
    common = sum(min(secret_count[c], guess_count[c]) for c in range(COLORS))
    return red, common - red


class Arbiter:
    """Game state for one secret."""

    def __init__(self, secret: int, max_rounds: int = MAX_ROUNDS):
        self.secret = secret & COMBINATION_MASK
        self.max_rounds = max_rounds
        self.rounds = 0
        self.finished = False

    def evaluate(self, message: int) -> int:
        """Feedback byte for a 16-bit guess message."""
        self.rounds += 1
        error = 0
        if not check_parity(message):
            error |= ERROR_PARITY
        red, white = score(self.secret, message & COMBINATION_MASK)
        if red != SLOTS and self.rounds >= self.max_rounds:
            error |= ERROR_LOST
        if error or red == SLOTS:
            self.finished = True
        return encode_feedback(error, red, white)


# ---------------------------------------------------------------------------
# TCP server
# ---------------------------------------------------------------------------

class ArbiterHandler(socketserver.BaseRequestHandler):
    """One game per connection."""

    def handle(self):
        arbiter = Arbiter(self.server.secret, self.server.max_rounds)
        peer = "%s:%d" % self.client_address[:2]
        log.debug("game started with %s", peer)
        while not arbiter.finished:
            data = self._recv_exact(GUESS_BYTES)
            if data is None:
                log.debug("%s left after %d rounds", peer, arbiter.rounds)
                return
            reply = arbiter.evaluate(bytes_to_guess(data))
            log.debug("%s round %d: feedback %s", peer, arbiter.rounds,
                      decode_feedback(reply))
            self.request.sendall(reply.to_bytes(FEEDBACK_BYTES, "little"))
        self.server.games_played += 1

    def _recv_exact(self, n: int) -> bytes | None:
        buf = b""
        while len(buf) < n:
            chunk = self.request.recv(n - len(buf))
            if not chunk:
                return None
            buf += chunk
        return buf


class ArbiterServer(socketserver.TCPServer):
    allow_reuse_address = True

    def __init__(self, address: tuple[str, int], secret: int,
                 max_rounds: int = MAX_ROUNDS):
        self.secret = secret & COMBINATION_MASK
        self.max_rounds = max_rounds
        self.games_played = 0
        super().__init__(address, ArbiterHandler)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    parser = argparse.ArgumentParser(description="Serve one code-breaking game per connection")
    parser.add_argument("port", type=int, help="TCP port to listen on")
    parser.add_argument("secret", type=parse_combination,
                        help="secret, 5 letters from 'bdgorsvw' (slot 0 first)")
    parser.add_argument("--host", default="127.0.0.1", help="Address to bind")
    parser.add_argument("--max-rounds", type=int, default=MAX_ROUNDS,
                        help="Guesses allowed before the game is lost")
    parser.add_argument("--once", action="store_true", help="Exit after the first game")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every round")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(message)s", stream=sys.stderr)

    with ArbiterServer((args.host, args.port), args.secret, args.max_rounds) as server:
        print(f"Arbiter on {args.host}:{server.server_address[1]}, "
              f"secret {format_combination(args.secret)}")
        if args.once:
            server.handle_request()
        else:
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                pass
        print(f"Games played: {server.games_played}")


if __name__ == "__main__":
    main()
