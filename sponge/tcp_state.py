"""Summaries of a TCP connection's state, compared with the official state names."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class State(enum.Enum):
    """Official state names from the TCP specification."""

    LISTEN = 0
    SYN_RCVD = 1
    SYN_SENT = 2
    ESTABLISHED = 3
    CLOSE_WAIT = 4
    LAST_ACK = 5
    FIN_WAIT_1 = 6
    FIN_WAIT_2 = 7
    CLOSING = 8
    TIME_WAIT = 9
    CLOSED = 10
    RESET = 11


class ReceiverStateSummary(str, enum.Enum):
    """What a receiver can be doing."""

    ERROR = "error (connection was reset)"
    LISTEN = "waiting for SYN: ackno is empty"
    SYN_RECV = "SYN received (ackno exists), and input to stream hasn't ended"
    FIN_RECV = "input to stream has ended"


class SenderStateSummary(str, enum.Enum):
    """What a sender can be doing."""

    ERROR = "error (connection was reset)"
    CLOSED = "waiting for stream to begin (no SYN sent)"
    SYN_SENT = "stream started but nothing acknowledged"
    SYN_ACKED = "stream ongoing"
    FIN_SENT = "stream finished (FIN sent) but not fully acknowledged"
    FIN_ACKED = "stream finished and fully acknowledged"


def receiver_state_summary(receiver) -> ReceiverStateSummary:
    """Summarize a receiver exposing ``stream_out()`` and ``ackno()``."""
    stream = receiver.stream_out()
    if stream.error():
        return ReceiverStateSummary.ERROR
    if receiver.ackno() is None:
        return ReceiverStateSummary.LISTEN
    if stream.input_ended():
        return ReceiverStateSummary.FIN_RECV
    return ReceiverStateSummary.SYN_RECV


def sender_state_summary(sender) -> SenderStateSummary:
    """Summarize a sender exposing ``stream_in()``, ``next_seqno_absolute()`` and ``bytes_in_flight()``."""
    stream = sender.stream_in()
    next_seqno = sender.next_seqno_absolute()
    in_flight = sender.bytes_in_flight()
    if stream.error():
        return SenderStateSummary.ERROR
    if next_seqno == 0:
        return SenderStateSummary.CLOSED
    if next_seqno == in_flight:
        return SenderStateSummary.SYN_SENT
    if not stream.eof():
        return SenderStateSummary.SYN_ACKED
    if next_seqno < stream.bytes_written() + 2:
        return SenderStateSummary.SYN_ACKED
    if in_flight:
        return SenderStateSummary.FIN_SENT
    return SenderStateSummary.FIN_ACKED


_R = ReceiverStateSummary
_S = SenderStateSummary

# state -> (sender, receiver, active, linger_after_streams_finish)
_OFFICIAL = {
    State.LISTEN: (_S.CLOSED, _R.LISTEN, True, True),
    State.SYN_RCVD: (_S.SYN_SENT, _R.SYN_RECV, True, True),
    State.SYN_SENT: (_S.SYN_SENT, _R.LISTEN, True, True),
    State.ESTABLISHED: (_S.SYN_ACKED, _R.SYN_RECV, True, True),
    State.CLOSE_WAIT: (_S.SYN_ACKED, _R.FIN_RECV, True, False),
    State.LAST_ACK: (_S.FIN_SENT, _R.FIN_RECV, True, False),
    State.CLOSING: (_S.FIN_SENT, _R.FIN_RECV, True, True),
    State.FIN_WAIT_1: (_S.FIN_SENT, _R.SYN_RECV, True, True),
    State.FIN_WAIT_2: (_S.FIN_ACKED, _R.SYN_RECV, True, True),
    State.TIME_WAIT: (_S.FIN_ACKED, _R.FIN_RECV, True, True),
    State.RESET: (_S.ERROR, _R.ERROR, False, False),
    State.CLOSED: (_S.FIN_ACKED, _R.FIN_RECV, False, False),
}


@dataclass(frozen=True)
class TCPState:
    """The sender and receiver summaries plus the connection's active and linger bits."""

    sender: SenderStateSummary = SenderStateSummary.CLOSED
    receiver: ReceiverStateSummary = ReceiverStateSummary.LISTEN
    active: bool = True
    linger_after_streams_finish: bool = True

    @classmethod
    def from_state(cls, state: State) -> TCPState:
        """The state corresponding to an official TCP state name."""
        sender, receiver, active, linger = _OFFICIAL[State(state)]
        return cls(sender, receiver, active, linger)

    @classmethod
    def from_endpoints(cls, sender, receiver, active: bool, linger: bool) -> TCPState:
        """The state of a connection with this sender, receiver and bits.

        An inactive connection never lingers.
        """
        return cls(
            sender_state_summary(sender),
            receiver_state_summary(receiver),
            bool(active),
            bool(linger) if active else False,
        )

    def name(self) -> str:
        """A one-line description of the state."""
        return (
            f"sender=`{self.sender.value}`, receiver=`{self.receiver.value}`, "
            f"active={int(self.active)}, "
            f"linger_after_streams_finish={int(self.linger_after_streams_finish)}"
        )