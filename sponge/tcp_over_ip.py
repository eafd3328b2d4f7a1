"""Carrying TCP segments inside IPv4 datagrams, optionally over a TUN device."""

from __future__ import annotations

import ipaddress
from typing import Optional

from sponge.address import Address
from sponge.fd_adapter import FdAdapterBase
from sponge.file_descriptor import FileDescriptor
from sponge.ipv4_datagram import IPv4Datagram
from sponge.ipv4_header import IPv4Header
from sponge.parser import ParseError
from sponge.tcp_segment import TCPSegment


def _dotted(address: int) -> str:
    return str(ipaddress.IPv4Address(address & 0xFFFFFFFF))


class TCPOverIPv4Adapter(FdAdapterBase):
    """Converts between TCP segments and IPv4 datagrams for one connection."""

    def unwrap_tcp_in_ip(self, ip_dgram: IPv4Datagram) -> Optional[TCPSegment]:
        """Return the TCP segment in ``ip_dgram``, or None if invalid or unrelated.

        While listening, a SYN without RST fixes the connection's addresses
        and ports: our source becomes the datagram's destination and our
        destination its source.
        """
        header = ip_dgram.header
        # Binding to address "0" is allowed; replies come from the address contacted.
        if not self.listening and header.dst != self.config.source.ipv4_numeric():
            return None
        if not self.listening and header.src != self.config.destination.ipv4_numeric():
            return None
        if header.proto != IPv4Header.PROTO_TCP:
            return None

        try:
            seg = TCPSegment.parse(ip_dgram.payload.concatenate(), header.pseudo_cksum())
        except ParseError:
            return None

        if seg.header.dport != self.config.source.port():
            return None

        if self.listening:
            if seg.header.syn and not seg.header.rst:
                self.config.source = Address(_dotted(header.dst), self.config.source.port())
                self.config.destination = Address(_dotted(header.src), seg.header.sport)
                self.listening = False
            else:
                return None

        if seg.header.sport != self.config.destination.port():
            return None

        return seg

    def wrap_tcp_in_ip(self, seg: TCPSegment) -> IPv4Datagram:
        """Set the ports of ``seg`` and wrap it in an IPv4 datagram."""
        seg.header.sport = self.config.source.port()
        seg.header.dport = self.config.destination.port()

        ip_dgram = IPv4Datagram()
        ip_dgram.header.src = self.config.source.ipv4_numeric()
        ip_dgram.header.dst = self.config.destination.ipv4_numeric()
        ip_dgram.header.length = (
            ip_dgram.header.hlen * 4 + seg.header.doff * 4 + len(seg.payload)
        )
        ip_dgram.payload = seg.serialize(ip_dgram.header.pseudo_cksum())
        return ip_dgram


class TCPOverIPv4OverTunFdAdapter(TCPOverIPv4Adapter):
    """Reads and writes IPv4 datagrams carrying TCP on a TUN device."""

    def __init__(self, tun: FileDescriptor) -> None:
        super().__init__()
        self._tun = tun

    @property
    def tun(self) -> FileDescriptor:
        """The underlying TUN device."""
        return self._tun

    def read(self) -> Optional[TCPSegment]:
        """Read one datagram and return its segment, or None if invalid or unrelated."""
        try:
            ip_dgram = IPv4Datagram.parse(self._tun.read())
        except ParseError:
            return None
        return self.unwrap_tcp_in_ip(ip_dgram)

    def write(self, seg: TCPSegment) -> None:
        """Wrap ``seg`` in an IPv4 datagram and write it to the device."""
        self._tun.write(self.wrap_tcp_in_ip(seg).serialize())

    def fileno(self) -> int:
        """The descriptor number of the device."""
        return self._tun.fileno()