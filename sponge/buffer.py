"""Shared read-only byte strings that can discard bytes from the front."""

from __future__ import annotations

from collections import deque
from typing import Iterable


class Buffer:
    """A read-only byte string that can drop bytes from its front cheaply.

    Copies made with ``Buffer(other)`` share storage but have independent
    start positions.
    """

    __slots__ = ("_storage", "_offset")

    def __init__(self, data=b"") -> None:
        if isinstance(data, Buffer):
            self._storage = data._storage
            self._offset = data._offset
        else:
            self._storage = bytes(data)
            self._offset = 0

    def __bytes__(self) -> bytes:
        return self._storage[self._offset :]

    def __len__(self) -> int:
        return len(self._storage) - self._offset

    def __eq__(self, other) -> bool:
        if isinstance(other, Buffer):
            return bytes(self) == bytes(other)
        if isinstance(other, (bytes, bytearray, memoryview)):
            return bytes(self) == bytes(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Buffer({bytes(self)!r})"

    def at(self, n: int) -> int:
        """Return the byte at position ``n``."""
        if not 0 <= n < len(self):
            raise IndexError("Buffer.at")
        return self._storage[self._offset + n]

    def copy(self) -> bytes:
        """Return the contents as a new ``bytes`` object."""
        return bytes(self)

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes."""
        if not 0 <= n <= len(self):
            raise IndexError("Buffer.remove_prefix")
        self._offset += n
        if self._offset == len(self._storage):
            self._storage = b""
            self._offset = 0

    def _view(self) -> memoryview:
        return memoryview(self._storage)[self._offset :]


def _as_buffers(data) -> Iterable[Buffer]:
    if isinstance(data, BufferList):
        return tuple(data._buffers)
    if isinstance(data, Buffer):
        return (data,)
    return (Buffer(data),)


class BufferList:
    """A discontiguous byte string made of several buffers.

    Used for packets that carry stacked headers and a payload, so headers
    can be prepended without copying the payload.
    """

    def __init__(self, data=None) -> None:
        self._buffers: deque[Buffer] = deque()
        if data is not None:
            self.append(data)

    @property
    def buffers(self) -> tuple[Buffer, ...]:
        """The underlying buffers, in order."""
        return tuple(self._buffers)

    def append(self, other) -> None:
        """Append a BufferList, Buffer or bytes-like object."""
        self._buffers.extend(Buffer(buf) for buf in _as_buffers(other))

    def to_buffer(self) -> Buffer:
        """Return the contents as one Buffer; only if it is contiguous."""
        if not self._buffers:
            return Buffer()
        if len(self._buffers) == 1:
            return Buffer(self._buffers[0])
        raise ValueError(
            "BufferList: use concatenate() to combine a multi-Buffer BufferList"
        )

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across buffers."""
        if n < 0:
            raise IndexError("BufferList.remove_prefix")
        while n > 0:
            if not self._buffers:
                raise IndexError("BufferList.remove_prefix")
            front = self._buffers[0]
            if n < len(front):
                front.remove_prefix(n)
                n = 0
            else:
                n -= len(front)
                self._buffers.popleft()

    def __len__(self) -> int:
        return sum(len(buf) for buf in self._buffers)

    def concatenate(self) -> bytes:
        """Return all bytes joined into one ``bytes`` object."""
        return b"".join(bytes(buf) for buf in self._buffers)

    def __bytes__(self) -> bytes:
        return self.concatenate()

    def __eq__(self, other) -> bool:
        if isinstance(other, (BufferList, Buffer, bytes, bytearray, memoryview)):
            return self.concatenate() == bytes(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BufferList({[bytes(buf) for buf in self._buffers]!r})"


class BufferViewList:
    """A temporary, non-owning view of a discontiguous byte string."""

    def __init__(self, data) -> None:
        if isinstance(data, BufferList):
            views = [buf._view() for buf in data._buffers]
        elif isinstance(data, Buffer):
            views = [data._view()]
        else:
            views = [memoryview(data).cast("B")]
        self._views: deque[memoryview] = deque(views)

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across views."""
        if n < 0:
            raise IndexError("BufferViewList.remove_prefix")
        while n > 0:
            if not self._views:
                raise IndexError("BufferViewList.remove_prefix")
            front = self._views[0]
            if n < len(front):
                self._views[0] = front[n:]
                n = 0
            else:
                n -= len(front)
                self._views.popleft()

    def __len__(self) -> int:
        return sum(len(view) for view in self._views)

    def views(self) -> list[memoryview]:
        """Return the views, suitable for ``os.writev`` or ``socket.sendmsg``."""
        return list(self._views)