"""IPv4 datagram header (options are skipped, not interpreted)."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, replace
from typing import ClassVar

from sponge.parser import (
    NetParser,
    ParseError,
    ParseResult,
    unparse_u8,
    unparse_u16,
    unparse_u32,
)
from sponge.util import InternetChecksum

_HEADER_LENGTH = 20

_BOOL_TEXT = {True: "true", False: "false"}


def _format_ip(address: int) -> str:
    return str(ipaddress.IPv4Address(address & 0xFFFFFFFF))


@dataclass
class IPv4Header:
    """The fields of an IPv4 header.

    ``length`` is the total datagram length and ``hlen`` the header length
    in 32-bit words.
    """

    LENGTH: ClassVar[int] = _HEADER_LENGTH
    DEFAULT_TTL: ClassVar[int] = 128
    PROTO_TCP: ClassVar[int] = 6

    ver: int = 4
    hlen: int = _HEADER_LENGTH // 4
    tos: int = 0
    length: int = 0
    ident: int = 0
    df: bool = True
    mf: bool = False
    offset: int = 0
    ttl: int = 128
    proto: int = 6
    cksum: int = 0
    src: int = 0
    dst: int = 0

    @classmethod
    def parse(cls, parser: NetParser) -> IPv4Header:
        """Read a header from ``parser``; raise :class:`ParseError` on failure.

        Checks the version, the header length, the total length against the
        data available and the header checksum.
        """
        original = parser.buffer
        data_size = len(original)
        if data_size < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)

        first_byte = parser.u8()
        tos = parser.u8()
        length = parser.u16()
        ident = parser.u16()
        fo_val = parser.u16()
        header = cls(
            ver=first_byte >> 4,
            hlen=first_byte & 0x0F,
            tos=tos,
            length=length,
            ident=ident,
            df=bool(fo_val & 0x4000),
            mf=bool(fo_val & 0x2000),
            offset=fo_val & 0x1FFF,
            ttl=parser.u8(),
            proto=parser.u8(),
            cksum=parser.u16(),
            src=parser.u32(),
            dst=parser.u32(),
        )

        if data_size < 4 * header.hlen:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        if header.ver != 4:
            raise ParseError(ParseResult.WRONG_IP_VERSION)
        if header.hlen < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if data_size != header.length:
            raise ParseError(ParseResult.TRUNCATED_PACKET)

        parser.remove_prefix(header.hlen * 4 - cls.LENGTH)
        parser.check()

        check = InternetChecksum()
        check.add(original[: 4 * header.hlen])
        if check.value():
            raise ParseError(ParseResult.BAD_CHECKSUM)
        return header

    def serialize(self) -> bytes:
        """Return the header bytes, padded to ``4 * hlen``; the checksum is not recomputed."""
        if self.ver != 4:
            raise ValueError("wrong IP version")
        if 4 * self.hlen < self.LENGTH:
            raise ValueError("IP header too short")
        fo_val = (
            (0x4000 if self.df else 0)
            | (0x2000 if self.mf else 0)
            | (self.offset & 0x1FFF)
        )
        raw = b"".join(
            (
                unparse_u8((self.ver << 4) | (self.hlen & 0xF)),
                unparse_u8(self.tos),
                unparse_u16(self.length),
                unparse_u16(self.ident),
                unparse_u16(fo_val),
                unparse_u8(self.ttl),
                unparse_u8(self.proto),
                unparse_u16(self.cksum),
                unparse_u32(self.src),
                unparse_u32(self.dst),
            )
        )
        return raw.ljust(4 * self.hlen, b"\x00")

    def payload_length(self) -> int:
        """Length of the payload, as a 16-bit value."""
        return (self.length - 4 * self.hlen) & 0xFFFF

    def pseudo_cksum(self) -> int:
        """The pseudo-header's contribution to a TCP checksum."""
        total = (self.src >> 16) + (self.src & 0xFFFF)
        total += (self.dst >> 16) + (self.dst & 0xFFFF)
        total += self.proto
        total += self.payload_length()
        return total & 0xFFFFFFFF

    def with_checksum(self) -> IPv4Header:
        """Return a copy whose ``cksum`` field is correct for its other fields."""
        check = InternetChecksum()
        check.add(replace(self, cksum=0).serialize())
        return replace(self, cksum=check.value())

    def __str__(self) -> str:
        return (
            f"IP version: {self.ver:x}\n"
            f"IP hdr len: {self.hlen:x}\n"
            f"IP tos: {self.tos:x}\n"
            f"IP dgram len: {self.length:x}\n"
            f"IP id: {self.ident:x}\n"
            f"Flags: df: {_BOOL_TEXT[bool(self.df)]} mf: {_BOOL_TEXT[bool(self.mf)]}\n"
            f"Offset: {self.offset:x}\n"
            f"TTL: {self.ttl:x}\n"
            f"Protocol: {self.proto:x}\n"
            f"Checksum: {self.cksum:x}\n"
            f"Src addr: {self.src:x}\n"
            f"Dst addr: {self.dst:x}\n"
        )

    def summary(self) -> str:
        """A one-line human-readable summary."""
        ttl_part = "" if self.ttl >= 10 else f"ttl={self.ttl}, "
        return (
            f"IPv{self.ver:x}, len={self.length:x}, protocol={self.proto:x}, "
            f"{ttl_part}src={_format_ip(self.src)}, dst={_format_ip(self.dst)}"
        )