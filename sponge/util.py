"""Internet checksum, timing, random seeding and hexdump helpers."""

from __future__ import annotations

import os
import random
import sys
import time
from typing import TextIO

_PROGRAM_START = time.monotonic()

# Size of the Mersenne Twister state, in 32-bit words.
_MT_STATE_WORDS = 624


def timestamp_ms() -> int:
    """Return the number of milliseconds since the module was loaded."""
    return int((time.monotonic() - _PROGRAM_START) * 1000)


def random_generator() -> random.Random:
    """Return a Mersenne Twister generator seeded with plenty of system entropy."""
    seed = int.from_bytes(os.urandom(_MT_STATE_WORDS * 4), "big")
    return random.Random(seed)


class InternetChecksum:
    """The Internet checksum, usable both to compute and to verify.

    Evaluated over a header or segment that already holds a correct
    checksum field, :meth:`value` returns zero. The result is in host
    byte order.
    """

    def __init__(self, initial_sum: int = 0) -> None:
        self._sum = initial_sum & 0xFFFFFFFF
        self._parity = False

    def add(self, data) -> None:
        """Add bytes (or anything convertible with ``bytes()``) to the sum."""
        chunk = bytes(data)
        if not chunk:
            return
        body = chunk
        if self._parity:
            # An odd byte was left over: this byte is the low half of a word.
            self._sum += chunk[0]
            body = chunk[1:]
        self._sum += (sum(body[0::2]) << 8) + sum(body[1::2])
        if len(chunk) % 2:
            self._parity = not self._parity

    def value(self) -> int:
        """Return the folded, complemented 16-bit checksum."""
        total = self._sum
        while total > 0xFFFF:
            total = (total >> 16) + (total & 0xFFFF)
        return ~total & 0xFFFF


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte < 0x7F else "."


def format_hexdump(data, indent: int = 0) -> str:
    """Return a hexdump of ``data``: 16 bytes per line, offsets in hex."""
    raw = bytes(data)
    indent_string = " " * indent
    parts: list[str] = []
    pchars = ""
    for printed, byte in enumerate(raw):
        if printed & 0xF == 0:
            if printed:
                parts.append("    " + pchars + "\n")
                pchars = ""
            parts.append(f"{indent_string}{printed:08x}:    ")
        elif printed & 1 == 0:
            parts.append(" ")
        parts.append(f"{byte:02x}")
        pchars += _printable(byte)
    remainder = (16 - (len(raw) & 0xF)) % 16
    parts.append(" " * (2 * remainder + remainder // 2 + 4) + (pchars or " "))
    parts.append("\n\n")
    return "".join(parts)


def hexdump(data, indent: int = 0, file: TextIO | None = None) -> None:
    """Write a hexdump of ``data`` to ``file`` (standard output by default)."""
    out = sys.stdout if file is None else file
    out.write(format_hexdump(data, indent))
    out.flush()