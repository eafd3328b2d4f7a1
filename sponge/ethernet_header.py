"""Ethernet frame header."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sponge.parser import NetParser, ParseError, ParseResult, unparse_u8, unparse_u16

ETHERNET_ADDRESS_LENGTH = 6

#: The Ethernet broadcast address, ff:ff:ff:ff:ff:ff.
ETHERNET_BROADCAST = b"\xff" * ETHERNET_ADDRESS_LENGTH


def format_ethernet_address(address) -> str:
    """Return an Ethernet address as colon-separated lower-case hex pairs."""
    return ":".join(f"{byte:02x}" for byte in bytes(address))


def read_ethernet_address(parser: NetParser) -> bytes:
    """Read a six-byte Ethernet address from ``parser``."""
    return bytes(parser.u8() for _ in range(ETHERNET_ADDRESS_LENGTH))


def check_ethernet_address(address) -> bytes:
    """Return ``address`` as bytes, insisting on six of them."""
    raw = bytes(address)
    if len(raw) != ETHERNET_ADDRESS_LENGTH:
        raise ValueError(f"Ethernet address must be 6 bytes, got {len(raw)}")
    return raw


@dataclass
class EthernetHeader:
    """Destination, source and type fields of an Ethernet frame."""

    LENGTH: ClassVar[int] = 14
    TYPE_IPV4: ClassVar[int] = 0x800
    TYPE_ARP: ClassVar[int] = 0x806

    dst: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    src: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    type: int = 0

    def __post_init__(self) -> None:
        self.dst = check_ethernet_address(self.dst)
        self.src = check_ethernet_address(self.src)

    @classmethod
    def parse(cls, parser: NetParser) -> EthernetHeader:
        """Read a header from ``parser``; raise :class:`ParseError` on failure."""
        if len(parser.buffer) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        dst = read_ethernet_address(parser)
        src = read_ethernet_address(parser)
        frame_type = parser.u16()
        parser.check()
        return cls(dst=dst, src=src, type=frame_type)

    def serialize(self) -> bytes:
        """Return the 14 header bytes."""
        return (
            b"".join(unparse_u8(byte) for byte in self.dst)
            + b"".join(unparse_u8(byte) for byte in self.src)
            + unparse_u16(self.type)
        )

    def __str__(self) -> str:
        if self.type == self.TYPE_IPV4:
            type_name = "IPv4"
        elif self.type == self.TYPE_ARP:
            type_name = "ARP"
        else:
            type_name = f"[unknown type {self.type:x}!]"
        return (
            f"dst={format_ethernet_address(self.dst)}, "
            f"src={format_ethernet_address(self.src)}, type={type_name}"
        )