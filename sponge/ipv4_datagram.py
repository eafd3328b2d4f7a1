"""IPv4 datagrams: a header and its payload."""

from __future__ import annotations

from dataclasses import dataclass, field

from sponge.buffer import BufferList
from sponge.ipv4_header import IPv4Header
from sponge.parser import NetParser, ParseError, ParseResult


@dataclass
class IPv4Datagram:
    """An IPv4 header and the payload it carries."""

    header: IPv4Header = field(default_factory=IPv4Header)
    payload: BufferList = field(default_factory=BufferList)

    def __post_init__(self) -> None:
        if not isinstance(self.payload, BufferList):
            self.payload = BufferList(self.payload)

    @classmethod
    def parse(cls, data) -> IPv4Datagram:
        """Parse a datagram; raise :class:`ParseError` if it is malformed."""
        parser = NetParser(bytes(data))
        header = IPv4Header.parse(parser)
        payload = BufferList(parser.buffer)
        if len(payload) != header.payload_length():
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        parser.check()
        return cls(header=header, payload=payload)

    def serialize(self) -> BufferList:
        """Return the header, with its checksum computed, followed by the payload."""
        if len(self.payload) != self.header.payload_length():
            raise ValueError("IPv4Datagram.serialize: payload is wrong size")
        out = BufferList(self.header.with_checksum().serialize())
        out.append(self.payload)
        return out


InternetDatagram = IPv4Datagram