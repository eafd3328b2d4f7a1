"""TCP segment header (options are skipped, not interpreted)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sponge.parser import (
    NetParser,
    ParseError,
    ParseResult,
    unparse_u8,
    unparse_u16,
    unparse_u32,
)

_HEADER_LENGTH = 20

_URG = 0b0010_0000
_ACK = 0b0001_0000
_PSH = 0b0000_1000
_RST = 0b0000_0100
_SYN = 0b0000_0010
_FIN = 0b0000_0001

_BOOL_TEXT = {True: "true", False: "false"}


@dataclass(eq=False)
class TCPHeader:
    """The fields of a TCP header; ``seqno`` and ``ackno`` are 32-bit values."""

    LENGTH: ClassVar[int] = _HEADER_LENGTH

    sport: int = 0
    dport: int = 0
    seqno: int = 0
    ackno: int = 0
    doff: int = _HEADER_LENGTH // 4
    urg: bool = False
    ack: bool = False
    psh: bool = False
    rst: bool = False
    syn: bool = False
    fin: bool = False
    win: int = 0
    cksum: int = 0
    uptr: int = 0

    @classmethod
    def parse(cls, parser: NetParser) -> TCPHeader:
        """Read a header from ``parser``; raise :class:`ParseError` on failure."""
        sport = parser.u16()
        dport = parser.u16()
        seqno = parser.u32()
        ackno = parser.u32()
        doff = parser.u8() >> 4
        flags = parser.u8()
        header = cls(
            sport=sport,
            dport=dport,
            seqno=seqno,
            ackno=ackno,
            doff=doff,
            urg=bool(flags & _URG),
            ack=bool(flags & _ACK),
            psh=bool(flags & _PSH),
            rst=bool(flags & _RST),
            syn=bool(flags & _SYN),
            fin=bool(flags & _FIN),
            win=parser.u16(),
            cksum=parser.u16(),
            uptr=parser.u16(),
        )
        parser.check()
        if header.doff < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        parser.remove_prefix(header.doff * 4 - cls.LENGTH)
        parser.check()
        return header

    def _flag_byte(self) -> int:
        return (
            (_URG if self.urg else 0)
            | (_ACK if self.ack else 0)
            | (_PSH if self.psh else 0)
            | (_RST if self.rst else 0)
            | (_SYN if self.syn else 0)
            | (_FIN if self.fin else 0)
        )

    def serialize(self) -> bytes:
        """Return the header bytes, padded to ``4 * doff``; the checksum is not recomputed."""
        if self.doff < 5:
            raise ValueError("TCP header too short")
        raw = b"".join(
            (
                unparse_u16(self.sport),
                unparse_u16(self.dport),
                unparse_u32(self.seqno),
                unparse_u32(self.ackno),
                unparse_u8(self.doff << 4),
                unparse_u8(self._flag_byte()),
                unparse_u16(self.win),
                unparse_u16(self.cksum),
                unparse_u16(self.uptr),
            )
        )
        return raw.ljust(4 * self.doff, b"\x00")

    def __str__(self) -> str:
        flags = " ".join(
            f"{name}: {_BOOL_TEXT[bool(value)]}"
            for name, value in (
                ("urg", self.urg),
                ("ack", self.ack),
                ("psh", self.psh),
                ("rst", self.rst),
                ("syn", self.syn),
                ("fin", self.fin),
            )
        )
        return (
            f"TCP source port: {self.sport:x}\n"
            f"TCP dest port: {self.dport:x}\n"
            f"TCP seqno: {self.seqno:x}\n"
            f"TCP ackno: {self.ackno:x}\n"
            f"TCP doff: {self.doff:x}\n"
            f"Flags: {flags}\n"
            f"TCP winsize: {self.win:x}\n"
            f"TCP cksum: {self.cksum:x}\n"
            f"TCP uptr: {self.uptr:x}\n"
        )

    def summary(self) -> str:
        """A one-line summary of the flags, sequence numbers and window."""
        flags = (
            ("S" if self.syn else "")
            + ("A" if self.ack else "")
            + ("R" if self.rst else "")
            + ("F" if self.fin else "")
        )
        return (
            f"Header(flags={flags},seqno={self.seqno},"
            f"ack={self.ackno},win={self.win})"
        )

    def _compared(self) -> tuple:
        return (
            self.seqno,
            self.ackno,
            self.doff,
            self.urg,
            self.ack,
            self.psh,
            self.rst,
            self.syn,
            self.fin,
            self.win,
            self.uptr,
        )

    def __eq__(self, other) -> bool:
        """Compare everything except the ports and the checksum."""
        if not isinstance(other, TCPHeader):
            return NotImplemented
        return self._compared() == other._compared()

    __hash__ = None  # type: ignore[assignment]