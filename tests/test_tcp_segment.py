import pytest

from sponge.buffer import Buffer, BufferList
from sponge.ipv4_header import IPv4Header
from sponge.parser import ParseError, ParseResult
from sponge.tcp_header import TCPHeader
from sponge.tcp_segment import TCPSegment
from sponge.util import InternetChecksum


def _segment(payload=b"payload bytes", **flags) -> TCPSegment:
    header = TCPHeader(sport=4000, dport=80, seqno=1000, ackno=2000, win=100, **flags)
    return TCPSegment(header, payload)


def _pseudo(payload_length: int) -> int:
    ip = IPv4Header(
        length=IPv4Header.LENGTH + TCPHeader.LENGTH + payload_length,
        src=0x0A000001,
        dst=0x0A000002,
    )
    return ip.pseudo_cksum()


def test_round_trip_without_pseudo_header():
    original = _segment(ack=True)
    parsed = TCPSegment.parse(original.serialize())
    assert parsed.header == original.header
    assert parsed.header.sport == 4000
    assert parsed.payload == b"payload bytes"


def test_round_trip_with_pseudo_header():
    original = _segment()
    pseudo = _pseudo(len(original.payload))
    parsed = TCPSegment.parse(original.serialize(pseudo), pseudo)
    assert parsed.header == original.header
    assert parsed.payload.copy() == b"payload bytes"


def test_serialized_segment_verifies_to_zero():
    pseudo = _pseudo(13)
    wire = _segment().serialize(pseudo)
    check = InternetChecksum(pseudo)
    check.add(wire)
    assert check.value() == 0


def test_wrong_pseudo_checksum_rejected():
    wire = _segment().serialize(_pseudo(13))
    with pytest.raises(ParseError) as info:
        TCPSegment.parse(wire, 0)
    assert info.value.result is ParseResult.BAD_CHECKSUM


def test_corrupted_payload_rejected():
    wire = bytearray(_segment().serialize().concatenate())
    wire[-1] ^= 0x40
    with pytest.raises(ParseError) as info:
        TCPSegment.parse(bytes(wire))
    assert info.value.result is ParseResult.BAD_CHECKSUM


def test_short_data_rejected():
    with pytest.raises(ParseError) as info:
        TCPSegment.parse(bytes(10))
    assert info.value.result is ParseResult.BAD_CHECKSUM


def test_serialize_leaves_header_checksum_alone():
    segment = _segment()
    segment.header.cksum = 0x1234
    wire = segment.serialize().concatenate()
    assert segment.header.cksum == 0x1234
    assert TCPSegment.parse(wire).header == segment.header


def test_serialize_returns_header_then_payload():
    wire = _segment(b"abc").serialize()
    assert isinstance(wire, BufferList)
    assert len(wire) == TCPHeader.LENGTH + 3
    assert wire.concatenate().endswith(b"abc")


def test_payload_coerced_to_buffer():
    segment = TCPSegment(TCPHeader(), b"xyz")
    assert isinstance(segment.payload, Buffer)
    assert segment.payload == b"xyz"


def test_length_in_sequence_space_empty():
    assert TCPSegment().length_in_sequence_space() == 0


def test_length_in_sequence_space_payload_only():
    assert _segment(b"hello").length_in_sequence_space() == len(b"hello")


@pytest.mark.parametrize("flag", ["syn", "fin"])
def test_each_flag_adds_one(flag):
    plain = _segment(b"hello")
    flagged = _segment(b"hello", **{flag: True})
    assert flagged.length_in_sequence_space() == plain.length_in_sequence_space() + 1


def test_both_flags_add_two():
    plain = _segment(b"")
    both = _segment(b"", syn=True, fin=True)
    assert both.length_in_sequence_space() - plain.length_in_sequence_space() == 2