import pytest

from sponge.buffer import Buffer
from sponge.parser import (
    NetParser,
    ParseError,
    ParseResult,
    unparse_u8,
    unparse_u16,
    unparse_u32,
)


def test_parse_integers_in_network_order():
    parser = NetParser(b"\x01\x02\x03\x04\x05\x06\x07")
    assert parser.u8() == 0x01
    assert parser.u16() == 0x0203
    assert parser.u32() == 0x04050607
    assert parser.buffer == b""
    assert parser.error is ParseResult.NO_ERROR
    parser.check()


def test_parse_from_buffer():
    buf = Buffer(b"\xff\x00\xab\xcd")
    buf.remove_prefix(2)
    parser = NetParser(buf)
    assert parser.u16() == 0xABCD


def test_short_read_sets_error_and_returns_zero():
    parser = NetParser(b"\x12\x34")
    assert parser.u32() == 0
    assert parser.error is ParseResult.PACKET_TOO_SHORT
    assert parser.buffer == b"\x12\x34"


def test_error_is_sticky():
    parser = NetParser(b"\x12\x34")
    parser.u32()
    assert parser.u8() == 0
    assert parser.buffer == b"\x12\x34"


def test_check_raises_parse_error():
    parser = NetParser(b"")
    parser.u8()
    with pytest.raises(ParseError) as info:
        parser.check()
    assert info.value.result is ParseResult.PACKET_TOO_SHORT
    assert str(info.value) == "PacketTooShort"


def test_remove_prefix():
    parser = NetParser(b"abcdef")
    parser.remove_prefix(4)
    assert parser.buffer == b"ef"
    parser.remove_prefix(3)
    assert parser.error is ParseResult.PACKET_TOO_SHORT
    assert parser.buffer == b"ef"


@pytest.mark.parametrize(
    "result, name",
    [
        (ParseResult.NO_ERROR, "NoError"),
        (ParseResult.BAD_CHECKSUM, "BadChecksum"),
        (ParseResult.PACKET_TOO_SHORT, "PacketTooShort"),
        (ParseResult.WRONG_IP_VERSION, "WrongIPVersion"),
        (ParseResult.HEADER_TOO_SHORT, "HeaderTooShort"),
        (ParseResult.TRUNCATED_PACKET, "TruncatedPacket"),
    ],
)
def test_result_names(result, name):
    assert str(result) == name


def test_unparse_values():
    assert unparse_u8(0xAB) == b"\xab"
    assert unparse_u16(0x1234) == b"\x12\x34"
    assert unparse_u32(0x01020304) == b"\x01\x02\x03\x04"


def test_unparse_truncates_to_width():
    assert unparse_u8(0x1AB) == b"\xab"
    assert unparse_u16(0x51234) == b"\x12\x34"


@pytest.mark.parametrize("value", [0, 1, 0x7FFF, 0xFFFF, 0x12345678, 0xFFFFFFFF])
def test_round_trip(value):
    data = unparse_u32(value) + unparse_u16(value) + unparse_u8(value)
    parser = NetParser(data)
    assert parser.u32() == value & 0xFFFFFFFF
    assert parser.u16() == value & 0xFFFF
    assert parser.u8() == value & 0xFF
    assert parser.error is ParseResult.NO_ERROR