"""
Code-breaking client — connects to an arbiter and plays until the game ends.

Usage:
  codebreaker localhost 1280
  codebreaker 127.0.0.1 1280 -v

Exit status: 0 secret found, 2 parity error, 3 game lost, 4 both,
1 anything else (arguments, connection, malformed feedback).
"""

from __future__ import annotations

import argparse
import logging
import sys

from .errors import CodebreakerError
from .session import Outcome, Session
from .transport import SocketTransport

log = logging.getLogger(__name__)

EXIT_SUCCESS         = 0
EXIT_FAILURE         = 1
EXIT_PARITY_ERROR    = 2
EXIT_GAME_LOST       = 3
EXIT_MULTIPLE_ERRORS = 4

EXIT_CODES = {
    Outcome.SOLVED: EXIT_SUCCESS,
    Outcome.PARITY_ERROR: EXIT_PARITY_ERROR,
    Outcome.GAME_LOST: EXIT_GAME_LOST,
    Outcome.MULTIPLE_ERRORS: EXIT_MULTIPLE_ERRORS,
}


class ArgumentParser(argparse.ArgumentParser):
    """Argument errors exit with EXIT_FAILURE; 2 is taken by parity errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def port_number(text: str) -> int:
    try:
        port = int(text, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a decimal port number: {text!r}") from None
    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError("use a valid TCP/IP port range (1-65535)")
    return port


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="codebreaker",
                            description="Break the arbiter's secret in as few rounds as possible")
    parser.add_argument("host", help="Arbiter IPv4 address ('localhost' accepted)")
    parser.add_argument("port", type=port_number, help="Arbiter TCP port (1-65535)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug log every round")
    return parser


def report(outcome: Outcome, rounds: int):
    if outcome in (Outcome.PARITY_ERROR, Outcome.MULTIPLE_ERRORS):
        print("Parity error")
    if outcome in (Outcome.GAME_LOST, Outcome.MULTIPLE_ERRORS):
        print("Game lost")
    if outcome is Outcome.SOLVED:
        print(f"Rounds: {rounds}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(message)s", stream=sys.stderr)

    try:
        with SocketTransport(args.host, args.port) as transport:
            result = Session(transport).run()
    except CodebreakerError as e:
        print(f"codebreaker: {e}", file=sys.stderr)
        return EXIT_FAILURE

    report(result.outcome, result.rounds)
    log.debug("shutting down client")
    return EXIT_CODES[result.outcome]


if __name__ == "__main__":
    sys.exit(main())
