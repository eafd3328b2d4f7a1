"""Socket wrappers built on FileDescriptor: UDP, TCP and Unix-domain stream."""

from __future__ import annotations

import socket
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from sponge.address import Address
from sponge.buffer import Buffer, BufferList, BufferViewList
from sponge.file_descriptor import FileDescriptor


def _payload_views(payload) -> BufferViewList:
    if isinstance(payload, BufferViewList):
        return payload
    if isinstance(payload, str):
        payload = payload.encode()
    if isinstance(payload, (Buffer, BufferList)):
        return BufferViewList(payload)
    return BufferViewList(bytes(payload))


class Socket(FileDescriptor):
    """A network socket owned through a FileDescriptor."""

    def __init__(self, family: int, kind: int, fd=None) -> None:
        """Create a new socket, or adopt ``fd`` after checking its family and type."""
        if fd is None:
            super().__init__(socket.socket(family, kind).detach())
            return
        super().__init__(fd)
        with self._borrowed() as sock:
            if hasattr(socket, "SO_DOMAIN"):
                actual_family = sock.getsockopt(socket.SOL_SOCKET, socket.SO_DOMAIN)
            else:
                actual_family = int(sock.family)
            actual_kind = sock.getsockopt(socket.SOL_SOCKET, socket.SO_TYPE)
        if actual_family != family:
            raise RuntimeError("socket domain mismatch")
        if actual_kind != kind:
            raise RuntimeError("socket type mismatch")

    @contextmanager
    def _borrowed(self) -> Iterator[socket.socket]:
        sock = socket.socket(fileno=self.fd_num())
        try:
            yield sock
        finally:
            sock.detach()

    def bind(self, address: Address) -> None:
        """Bind to a local address."""
        with self._borrowed() as sock:
            sock.bind(address.sockaddr())

    def connect(self, address: Address) -> None:
        """Connect to a peer address."""
        with self._borrowed() as sock:
            sock.connect(address.sockaddr())

    def shutdown(self, how: int) -> None:
        """Shut down reading, writing or both (``socket.SHUT_*``)."""
        with self._borrowed() as sock:
            sock.shutdown(how)
        if how == socket.SHUT_RD:
            self._register_read()
        elif how == socket.SHUT_WR:
            self._register_write()
        elif how == socket.SHUT_RDWR:
            self._register_read()
            self._register_write()
        else:
            raise ValueError("Socket.shutdown() called with invalid `how`")

    def local_address(self) -> Address:
        """The address this socket is bound to."""
        with self._borrowed() as sock:
            return Address.from_sockaddr(sock.getsockname())

    def peer_address(self) -> Address:
        """The address of the connected peer."""
        with self._borrowed() as sock:
            return Address.from_sockaddr(sock.getpeername())

    def set_reuseaddr(self) -> None:
        """Allow the local address to be reused sooner."""
        with self._borrowed() as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)


@dataclass
class ReceivedDatagram:
    """A UDP payload and the address it came from."""

    source_address: Address
    payload: bytes


class UDPSocket(Socket):
    """An IPv4 UDP socket."""

    def __init__(self, fd=None) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_DGRAM, fd)

    def recv(self, mtu: int = 65536) -> ReceivedDatagram:
        """Receive one datagram; raise RuntimeError if it is larger than ``mtu``."""
        with self._borrowed() as sock:
            payload, _ancdata, flags, source = sock.recvmsg(mtu)
        if flags & socket.MSG_TRUNC:
            raise RuntimeError("recvfrom (oversized datagram)")
        self._register_read()
        return ReceivedDatagram(Address.from_sockaddr(source), payload)

    def _send(self, payload, destination: Address | None) -> None:
        views = _payload_views(payload)
        with self._borrowed() as sock:
            if destination is None:
                sent = sock.sendmsg(views.views())
            else:
                sent = sock.sendmsg(views.views(), [], 0, destination.sockaddr())
        if sent != len(views):
            raise RuntimeError("datagram payload too big for sendmsg()")
        self._register_write()

    def sendto(self, destination: Address, payload) -> None:
        """Send a datagram to ``destination``."""
        self._send(payload, destination)

    def send(self, payload) -> None:
        """Send a datagram to the connected peer."""
        self._send(payload, None)


class TCPSocket(Socket):
    """An IPv4 TCP socket."""

    def __init__(self, fd=None) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_STREAM, fd)

    def listen(self, backlog: int = 16) -> None:
        """Mark the socket as accepting connections."""
        with self._borrowed() as sock:
            sock.listen(backlog)

    def accept(self) -> TCPSocket:
        """Wait for and return a new connection."""
        self._register_read()
        with self._borrowed() as sock:
            conn, _peer = sock.accept()
        return TCPSocket(FileDescriptor(conn.detach()))


class LocalStreamSocket(Socket):
    """A Unix-domain stream socket."""

    def __init__(self, fd) -> None:
        super().__init__(socket.AF_UNIX, socket.SOCK_STREAM, fd)


def local_stream_socket_pair() -> tuple[LocalStreamSocket, LocalStreamSocket]:
    """Return two connected Unix-domain stream sockets."""
    first, second = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
    return (
        LocalStreamSocket(FileDescriptor(first.detach())),
        LocalStreamSocket(FileDescriptor(second.detach())),
    )