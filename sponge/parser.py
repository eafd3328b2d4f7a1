"""Network-byte-order integer parsing and serialization."""

from __future__ import annotations

import enum


class ParseResult(enum.Enum):
    """Outcome of parsing a datagram, segment, frame or ARP message."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5
    UNSUPPORTED = 6

    def __str__(self) -> str:
        return _NAMES[self]


_NAMES = {
    ParseResult.NO_ERROR: "NoError",
    ParseResult.BAD_CHECKSUM: "BadChecksum",
    ParseResult.PACKET_TOO_SHORT: "PacketTooShort",
    ParseResult.WRONG_IP_VERSION: "WrongIPVersion",
    ParseResult.HEADER_TOO_SHORT: "HeaderTooShort",
    ParseResult.TRUNCATED_PACKET: "TruncatedPacket",
    ParseResult.UNSUPPORTED: "Unsupported",
}


class ParseError(ValueError):
    """Raised when data cannot be parsed; ``result`` says why."""

    def __init__(self, result: ParseResult) -> None:
        super().__init__(str(result))
        self.result = result


class NetParser:
    """Reads big-endian integers from the front of a byte string.

    Errors are sticky: once a read runs past the end, every later read
    returns zero and consumes nothing, and :meth:`check` raises.
    """

    def __init__(self, data) -> None:
        self._data = memoryview(bytes(data))
        self._error = ParseResult.NO_ERROR

    @property
    def buffer(self) -> bytes:
        """The bytes not yet consumed."""
        return bytes(self._data)

    @property
    def error(self) -> ParseResult:
        """The first error encountered, or ``ParseResult.NO_ERROR``."""
        return self._error

    def _take(self, size: int) -> memoryview | None:
        if size > len(self._data):
            self._error = ParseResult.PACKET_TOO_SHORT
        if self._error is not ParseResult.NO_ERROR:
            return None
        head, self._data = self._data[:size], self._data[size:]
        return head

    def _parse_int(self, size: int) -> int:
        head = self._take(size)
        return 0 if head is None else int.from_bytes(head, "big")

    def u8(self) -> int:
        """Parse an 8-bit integer."""
        return self._parse_int(1)

    def u16(self) -> int:
        """Parse a 16-bit integer in network byte order."""
        return self._parse_int(2)

    def u32(self) -> int:
        """Parse a 32-bit integer in network byte order."""
        return self._parse_int(4)

    def remove_prefix(self, n: int) -> None:
        """Skip ``n`` bytes."""
        self._take(n)

    def check(self) -> None:
        """Raise :class:`ParseError` if any read has failed."""
        if self._error is not ParseResult.NO_ERROR:
            raise ParseError(self._error)


def _unparse_int(value: int, size: int) -> bytes:
    return (value & ((1 << (8 * size)) - 1)).to_bytes(size, "big")


def unparse_u8(value: int) -> bytes:
    """Serialize the low 8 bits of ``value``."""
    return _unparse_int(value, 1)


def unparse_u16(value: int) -> bytes:
    """Serialize the low 16 bits of ``value`` in network byte order."""
    return _unparse_int(value, 2)


def unparse_u32(value: int) -> bytes:
    """Serialize the low 32 bits of ``value`` in network byte order."""
    return _unparse_int(value, 4)