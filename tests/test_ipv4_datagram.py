import pytest

from sponge.buffer import BufferList
from sponge.ipv4_datagram import IPv4Datagram
from sponge.ipv4_header import IPv4Header
from sponge.parser import ParseError, ParseResult
from sponge.util import InternetChecksum


def _datagram(payload: bytes) -> IPv4Datagram:
    header = IPv4Header(
        length=IPv4Header.LENGTH + len(payload), src=0x0A000001, dst=0x0A000002
    )
    return IPv4Datagram(header, payload)


def test_known_header_checksum():
    header = IPv4Header(
        length=0x73, ttl=0x40, proto=0x11, src=0xC0A80001, dst=0xC0A800C7
    )
    wire = bytes(IPv4Datagram(header, bytes(0x73 - 20)).serialize())
    assert wire[10:12] == b"\xb8\x61"


def test_serialized_header_verifies():
    wire = bytes(_datagram(b"abcdef").serialize())
    check = InternetChecksum()
    check.add(wire[: IPv4Header.LENGTH])
    assert check.value() == 0


def test_round_trip():
    original = _datagram(b"hello, world")
    parsed = IPv4Datagram.parse(original.serialize())
    assert parsed.payload == b"hello, world"
    assert parsed.header.src == original.header.src
    assert parsed.header.dst == original.header.dst
    assert parsed.header.length == original.header.length


def test_serialize_leaves_header_untouched():
    datagram = _datagram(b"xyz")
    datagram.serialize()
    assert datagram.header.cksum == 0


def test_payload_is_buffer_list():
    datagram = _datagram(b"xyz")
    assert isinstance(datagram.payload, BufferList)
    assert datagram.payload.concatenate() == b"xyz"


def test_serialize_rejects_wrong_payload_size():
    datagram = _datagram(b"xyz")
    datagram.payload = BufferList(b"toolong")
    with pytest.raises(ValueError, match="payload is wrong size"):
        datagram.serialize()


def test_parse_too_short():
    with pytest.raises(ParseError) as info:
        IPv4Datagram.parse(b"\x45\x00")
    assert info.value.result is ParseResult.PACKET_TOO_SHORT


def test_parse_extra_bytes_is_truncated_packet():
    wire = bytes(_datagram(b"abc").serialize()) + b"extra"
    with pytest.raises(ParseError) as info:
        IPv4Datagram.parse(wire)
    assert info.value.result is ParseResult.TRUNCATED_PACKET


def test_parse_corrupted_header():
    wire = bytearray(_datagram(b"abc").serialize().concatenate())
    wire[8] ^= 0xFF
    with pytest.raises(ParseError) as info:
        IPv4Datagram.parse(bytes(wire))
    assert info.value.result is ParseResult.BAD_CHECKSUM