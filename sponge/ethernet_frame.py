"""Ethernet frames: a header followed by a payload."""

from __future__ import annotations

from dataclasses import dataclass, field

from sponge.buffer import BufferList
from sponge.ethernet_header import EthernetHeader
from sponge.parser import NetParser


@dataclass
class EthernetFrame:
    """An Ethernet header and the payload it carries."""

    header: EthernetHeader = field(default_factory=EthernetHeader)
    payload: BufferList = field(default_factory=BufferList)

    @classmethod
    def parse(cls, data) -> EthernetFrame:
        """Parse a frame; raise :class:`ParseError` if it is malformed."""
        parser = NetParser(bytes(data))
        header = EthernetHeader.parse(parser)
        payload = BufferList(parser.buffer)
        parser.check()
        return cls(header=header, payload=payload)

    def serialize(self) -> BufferList:
        """Return the header bytes followed by the payload."""
        out = BufferList(self.header.serialize())
        out.append(self.payload)
        return out