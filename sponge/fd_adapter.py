"""Adapters that carry TCP segments over an underlying datagram transport."""

from __future__ import annotations

from typing import Optional

from sponge.parser import ParseError
from sponge.sockets import UDPSocket
from sponge.tcp_config import FdAdapterConfig
from sponge.tcp_segment import TCPSegment


class FdAdapterBase:
    """Configuration and listening state shared by every adapter.

    While ``listening`` is true the adapter waits for a peer's SYN and then
    records that peer as its destination.
    """

    def __init__(self) -> None:
        self.config = FdAdapterConfig()
        self.listening = False
        self.elapsed_ms = 0

    def tick(self, ms_since_last_tick: int) -> None:
        """Record the passage of time; the base adapter has no timers to run."""
        self.elapsed_ms += ms_since_last_tick


class TCPOverUDPSocketAdapter(FdAdapterBase):
    """Reads and writes TCP segments as UDP payloads."""

    def __init__(self, sock: UDPSocket) -> None:
        super().__init__()
        self._sock = sock

    @property
    def socket(self) -> UDPSocket:
        """The underlying UDP socket."""
        return self._sock

    def read(self) -> Optional[TCPSegment]:
        """Receive one datagram and return its segment, or None if unrelated or invalid."""
        datagram = self._sock.recv()

        if not self.listening and datagram.source_address != self.config.destination:
            return None

        try:
            seg = TCPSegment.parse(datagram.payload, 0)
        except ParseError:
            return None

        if self.listening:
            if seg.header.syn and not seg.header.rst:
                self.config.destination = datagram.source_address
                self.listening = False
            else:
                return None

        return seg

    def write(self, seg: TCPSegment) -> None:
        """Fill in the ports of ``seg`` and send it to the destination."""
        seg.header.sport = self.config.source.port()
        seg.header.dport = self.config.destination.port()
        self._sock.sendto(self.config.destination, seg.serialize(0))

    def fileno(self) -> int:
        """The descriptor number of the underlying socket."""
        return self._sock.fileno()