"""
Client entry point: argument checks, exit codes, end-to-end game over TCP.
"""

from __future__ import annotations

import argparse
import socket
import threading

import pytest

from codebreaker.arbiter import ArbiterServer
from codebreaker.client import (
    EXIT_CODES, EXIT_FAILURE, EXIT_GAME_LOST, EXIT_SUCCESS, main, port_number,
)
from codebreaker.session import Outcome
from codebreaker.space import pack_combination


def _serve(secret, max_rounds=35):
    server = ArbiterServer(("127.0.0.1", 0), secret, max_rounds)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server, thread


def _stop(server, thread):
    server.shutdown()
    server.server_close()
    thread.join()


def test_exit_code_mapping():
    assert EXIT_CODES == {
        Outcome.SOLVED: 0,
        Outcome.PARITY_ERROR: 2,
        Outcome.GAME_LOST: 3,
        Outcome.MULTIPLE_ERRORS: 4,
    }


@pytest.mark.parametrize("text", ["0", "65536", "-1", "12ab", "", "port"])
def test_port_number_rejects(text):
    with pytest.raises(argparse.ArgumentTypeError):
        port_number(text)


def test_port_number_accepts_range_ends():
    assert port_number("1") == 1
    assert port_number("65535") == 65535


@pytest.mark.parametrize("argv", [["localhost"], ["localhost", "0"],
                                  ["localhost", "80x"], ["a", "1", "2"]])
def test_bad_arguments_exit_with_failure(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code == EXIT_FAILURE


def test_connection_refused_is_failure(capsys):
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    assert main(["localhost", str(port)]) == EXIT_FAILURE
    assert "codebreaker:" in capsys.readouterr().err


def test_plays_and_wins(capsys):
    server, thread = _serve(pack_combination([2, 7, 2, 7, 1]))
    try:
        assert main(["localhost", str(server.server_address[1])]) == EXIT_SUCCESS
    finally:
        _stop(server, thread)
    out = capsys.readouterr().out
    assert out.startswith("Rounds: ")
    assert server.games_played == 1


def test_game_lost_exit_code(capsys):
    server, thread = _serve(pack_combination([2, 7, 2, 7, 1]), max_rounds=1)
    try:
        assert main(["127.0.0.1", str(server.server_address[1])]) == EXIT_GAME_LOST
    finally:
        _stop(server, thread)
    assert capsys.readouterr().out == "Game lost\n"
