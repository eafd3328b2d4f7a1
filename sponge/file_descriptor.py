"""Reference-counted file descriptor handles with EOF and I/O counters."""

from __future__ import annotations

import os
import sys

from sponge.buffer import Buffer, BufferList, BufferViewList

# Largest number of bytes taken by a single read.
_MAX_READ = 1024 * 1024


class _FDWrapper:
    """The kernel descriptor shared by every FileDescriptor that refers to it."""

    __slots__ = ("fd", "eof", "closed", "read_count", "write_count")

    def __init__(self, fd: int) -> None:
        if fd < 0:
            raise ValueError(f"invalid fd number:{fd}")
        self.fd = fd
        self.eof = False
        self.closed = False
        self.read_count = 0
        self.write_count = 0

    def close(self) -> None:
        os.close(self.fd)
        self.eof = True
        self.closed = True

    def __del__(self) -> None:
        if getattr(self, "closed", True):
            return
        try:
            self.close()
        except OSError as exc:
            print(f"Exception destructing FDWrapper: {exc}", file=sys.stderr)


def _as_view_list(data) -> BufferViewList:
    if isinstance(data, BufferViewList):
        copied = BufferList()
        for view in data.views():
            copied.append(bytes(view))
        return BufferViewList(copied)
    if isinstance(data, str):
        data = data.encode()
    if isinstance(data, (BufferList, Buffer)):
        return BufferViewList(data)
    return BufferViewList(bytes(data))


class FileDescriptor:
    """A handle on a kernel file descriptor.

    Handles made with :meth:`duplicate` share the descriptor, its EOF and
    closed flags, and its read and write counters. The descriptor is closed
    when the last handle goes away, unless it was closed before.
    """

    def __init__(self, fd) -> None:
        """Take an integer descriptor, or share the descriptor of another handle."""
        if isinstance(fd, FileDescriptor):
            self._internal = fd._internal
        else:
            self._internal = _FDWrapper(int(fd))

    def _register_read(self) -> None:
        self._internal.read_count += 1

    def _register_write(self) -> None:
        self._internal.write_count += 1

    def read(self, limit: int = sys.maxsize) -> bytes:
        """Read up to ``limit`` bytes; fewer may come back.

        An empty result for a non-zero limit marks the descriptor at EOF.
        """
        size_to_read = min(_MAX_READ, limit)
        data = os.read(self.fd_num(), size_to_read)
        if limit > 0 and not data:
            self._internal.eof = True
        if len(data) > size_to_read:
            raise RuntimeError("read() read more than requested")
        self._register_read()
        return data

    def write(self, data, write_all: bool = True) -> int:
        """Write bytes, a Buffer or a BufferList; return the number written.

        With ``write_all`` the call repeats until everything is written.
        """
        buffer = _as_view_list(data)
        total = 0
        while True:
            views = buffer.views() or [memoryview(b"")]
            written = os.writev(self.fd_num(), views)
            if written == 0 and len(buffer) != 0:
                raise RuntimeError("write returned 0 given non-empty input buffer")
            if written > len(buffer):
                raise RuntimeError("write wrote more than length of input buffer")
            self._register_write()
            buffer.remove_prefix(written)
            total += written
            if not (write_all and len(buffer)):
                return total

    def close(self) -> None:
        """Close the underlying descriptor for every handle that shares it."""
        self._internal.close()

    def duplicate(self) -> FileDescriptor:
        """Return another handle on the same descriptor."""
        return FileDescriptor(self)

    def set_blocking(self, blocking_state: bool) -> None:
        """Make the descriptor blocking (True) or non-blocking (False)."""
        os.set_blocking(self.fd_num(), blocking_state)

    def fileno(self) -> int:
        """The descriptor number, for use with ``select`` and friends."""
        return self._internal.fd

    def fd_num(self) -> int:
        """The descriptor number."""
        return self._internal.fd

    def eof(self) -> bool:
        """Whether a read has hit end of file."""
        return self._internal.eof

    def closed(self) -> bool:
        """Whether the descriptor has been closed."""
        return self._internal.closed

    def read_count(self) -> int:
        """How many times the descriptor has been read."""
        return self._internal.read_count

    def write_count(self) -> int:
        """How many times the descriptor has been written."""
        return self._internal.write_count

    def __enter__(self) -> FileDescriptor:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.closed():
            self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fd={self.fd_num()}, closed={self.closed()})"