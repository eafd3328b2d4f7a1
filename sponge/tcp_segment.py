"""TCP segments: a header and a payload, with checksum handling."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from sponge.buffer import Buffer, BufferList
from sponge.parser import NetParser, ParseError, ParseResult
from sponge.tcp_header import TCPHeader
from sponge.util import InternetChecksum


@dataclass
class TCPSegment:
    """A TCP header and the payload it carries."""

    header: TCPHeader = field(default_factory=TCPHeader)
    payload: Buffer = field(default_factory=Buffer)

    def __post_init__(self) -> None:
        if not isinstance(self.payload, Buffer):
            self.payload = Buffer(self.payload)

    @classmethod
    def parse(cls, data, datagram_layer_checksum: int = 0) -> TCPSegment:
        """Parse a segment, verifying its checksum.

        ``datagram_layer_checksum`` is the pseudo-header sum from the layer
        below (zero when there is none).
        """
        raw = bytes(data)
        check = InternetChecksum(datagram_layer_checksum)
        check.add(raw)
        if check.value():
            raise ParseError(ParseResult.BAD_CHECKSUM)
        parser = NetParser(raw)
        header = TCPHeader.parse(parser)
        payload = Buffer(parser.buffer)
        parser.check()
        return cls(header=header, payload=payload)

    def serialize(self, datagram_layer_checksum: int = 0) -> BufferList:
        """Return the header, with its checksum computed, followed by the payload."""
        header_out = replace(self.header, cksum=0)
        check = InternetChecksum(datagram_layer_checksum)
        check.add(header_out.serialize())
        check.add(self.payload)
        header_out.cksum = check.value()
        out = BufferList(header_out.serialize())
        out.append(self.payload)
        return out

    def length_in_sequence_space(self) -> int:
        """Payload length, plus one for SYN and one for FIN."""
        return len(self.payload) + int(self.header.syn) + int(self.header.fin)