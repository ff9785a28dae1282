"""Exception taxonomy. Protocol-reported game outcomes are not errors."""

from __future__ import annotations


class CodebreakerError(Exception):
    pass


class TransportError(CodebreakerError):
    """Connectivity failure. Fatal; the protocol has no reconnect."""


class ConnectionFailed(TransportError):
    pass


class ConnectionLost(TransportError):
    pass


class ProtocolError(CodebreakerError):
    pass


class MalformedFeedback(ProtocolError):
    """Feedback with red + white > SLOTS."""

    def __init__(self, byte: int, red: int, white: int):
        super().__init__(f"malformed feedback 0x{byte:02X}: red={red} white={white}")
        self.byte = byte
        self.red = red
        self.white = white


class CandidatesExhausted(ProtocolError):
    """Every candidate was eliminated: the feedback history is contradictory."""
