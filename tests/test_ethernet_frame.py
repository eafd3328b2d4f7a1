import pytest

from sponge.buffer import BufferList
from sponge.ethernet_frame import EthernetFrame
from sponge.ethernet_header import ETHERNET_BROADCAST, EthernetHeader
from sponge.parser import ParseError, ParseResult

SRC = bytes([0x02, 0, 0, 0, 0, 0x01])


def _header():
    return EthernetHeader(dst=ETHERNET_BROADCAST, src=SRC, type=EthernetHeader.TYPE_ARP)


def test_serialize_is_header_then_payload():
    frame = EthernetFrame(_header(), BufferList(b"hello"))
    wire = frame.serialize()
    assert wire.concatenate() == _header().serialize() + b"hello"
    assert len(wire) == EthernetHeader.LENGTH + 5


def test_round_trip():
    frame = EthernetFrame(_header(), BufferList(b"payload bytes"))
    parsed = EthernetFrame.parse(frame.serialize().concatenate())
    assert parsed.header == frame.header
    assert parsed.payload.concatenate() == b"payload bytes"


def test_header_only_frame_has_empty_payload():
    parsed = EthernetFrame.parse(_header().serialize())
    assert len(parsed.payload) == 0
    assert parsed.header.type == EthernetHeader.TYPE_ARP


def test_too_short_frame():
    with pytest.raises(ParseError) as info:
        EthernetFrame.parse(b"\x00" * 10)
    assert info.value.result is ParseResult.PACKET_TOO_SHORT


def test_default_frame_serializes_to_header_length():
    assert len(EthernetFrame().serialize()) == EthernetHeader.LENGTH