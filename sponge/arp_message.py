"""ARP messages for Ethernet and IPv4."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import ClassVar

from sponge.ethernet_header import (
    ETHERNET_ADDRESS_LENGTH,
    EthernetHeader,
    check_ethernet_address,
    format_ethernet_address,
    read_ethernet_address,
)
from sponge.parser import (
    NetParser,
    ParseError,
    ParseResult,
    unparse_u8,
    unparse_u16,
    unparse_u32,
)

_IPV4_ADDRESS_LENGTH = 4


def _format_ip(address: int) -> str:
    return str(ipaddress.IPv4Address(address & 0xFFFFFFFF))


@dataclass
class ARPMessage:
    """An ARP request or reply; only Ethernet/IPv4 is supported."""

    LENGTH: ClassVar[int] = 28
    TYPE_ETHERNET: ClassVar[int] = 1
    OPCODE_REQUEST: ClassVar[int] = 1
    OPCODE_REPLY: ClassVar[int] = 2

    hardware_type: int = 1
    protocol_type: int = EthernetHeader.TYPE_IPV4
    hardware_address_size: int = ETHERNET_ADDRESS_LENGTH
    protocol_address_size: int = _IPV4_ADDRESS_LENGTH
    opcode: int = 0
    sender_ethernet_address: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    sender_ip_address: int = 0
    target_ethernet_address: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    target_ip_address: int = 0

    def __post_init__(self) -> None:
        self.sender_ethernet_address = check_ethernet_address(self.sender_ethernet_address)
        self.target_ethernet_address = check_ethernet_address(self.target_ethernet_address)

    @classmethod
    def parse(cls, data) -> ARPMessage:
        """Parse a message; raise :class:`ParseError` if short or unsupported."""
        parser = NetParser(bytes(data))
        if len(parser.buffer) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        message = cls(
            hardware_type=parser.u16(),
            protocol_type=parser.u16(),
            hardware_address_size=parser.u8(),
            protocol_address_size=parser.u8(),
            opcode=parser.u16(),
        )
        if not message.supported():
            raise ParseError(ParseResult.UNSUPPORTED)
        message.sender_ethernet_address = read_ethernet_address(parser)
        message.sender_ip_address = parser.u32()
        message.target_ethernet_address = read_ethernet_address(parser)
        message.target_ip_address = parser.u32()
        parser.check()
        return message

    def supported(self) -> bool:
        """Whether this is an Ethernet/IPv4 request or reply."""
        return (
            self.hardware_type == self.TYPE_ETHERNET
            and self.protocol_type == EthernetHeader.TYPE_IPV4
            and self.hardware_address_size == ETHERNET_ADDRESS_LENGTH
            and self.protocol_address_size == _IPV4_ADDRESS_LENGTH
            and self.opcode in (self.OPCODE_REQUEST, self.OPCODE_REPLY)
        )

    def serialize(self) -> bytes:
        """Return the 28 wire bytes; raise ValueError if unsupported."""
        if not self.supported():
            raise ValueError(
                "ARPMessage.serialize(): unsupported field combination "
                "(must be Ethernet/IP, and request or reply)"
            )
        return b"".join(
            (
                unparse_u16(self.hardware_type),
                unparse_u16(self.protocol_type),
                unparse_u8(self.hardware_address_size),
                unparse_u8(self.protocol_address_size),
                unparse_u16(self.opcode),
                self.sender_ethernet_address,
                unparse_u32(self.sender_ip_address),
                self.target_ethernet_address,
                unparse_u32(self.target_ip_address),
            )
        )

    def __str__(self) -> str:
        if self.opcode == self.OPCODE_REQUEST:
            opcode_name = "REQUEST"
        elif self.opcode == self.OPCODE_REPLY:
            opcode_name = "REPLY"
        else:
            opcode_name = "(unknown type)"
        return (
            f"opcode={opcode_name}, "
            f"sender={format_ethernet_address(self.sender_ethernet_address)}"
            f"/{_format_ip(self.sender_ip_address)}, "
            f"target={format_ethernet_address(self.target_ethernet_address)}"
            f"/{_format_ip(self.target_ip_address)}"
        )