"""Socket addresses: numeric IPv4 parsing, name resolution and conversions."""

from __future__ import annotations

import ipaddress
import socket


def _lookup(node: str, service: str, flags: int) -> tuple[int, tuple]:
    """Resolve ``node``/``service`` to the first IPv4 socket address found."""
    infos = socket.getaddrinfo(node, service, socket.AF_INET, 0, 0, flags)
    if not infos:
        raise RuntimeError("getaddrinfo returned successfully but with no results")
    family, _type, _proto, _canonname, sockaddr = infos[0]
    return family, sockaddr


def _family_of(sockaddr) -> int:
    if isinstance(sockaddr, (str, bytes)):
        return socket.AF_UNIX
    if isinstance(sockaddr, tuple) and len(sockaddr) == 2:
        return socket.AF_INET
    if isinstance(sockaddr, tuple) and len(sockaddr) == 4:
        return socket.AF_INET6
    raise ValueError(f"unrecognised socket address: {sockaddr!r}")


class Address:
    """An IPv4 address and port, or another socket address taken from the kernel."""

    __slots__ = ("_family", "_sockaddr")

    def __init__(self, ip: str, port: int = 0) -> None:
        """Build from a dotted-quad string and a numeric port; nothing is looked up."""
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port out of range: {port}")
        self._family, self._sockaddr = _lookup(
            ip, str(port), socket.AI_NUMERICHOST | socket.AI_NUMERICSERV
        )

    @classmethod
    def _from_parts(cls, family: int, sockaddr) -> Address:
        obj = cls.__new__(cls)
        obj._family = family
        obj._sockaddr = sockaddr
        return obj

    @classmethod
    def resolve(cls, hostname: str, service: str) -> Address:
        """Resolve a host name and a service name (e.g. ``"http"``) or number."""
        family, sockaddr = _lookup(hostname, service, getattr(socket, "AI_ALL", 0))
        return cls._from_parts(family, sockaddr)

    @classmethod
    def from_ipv4_numeric(cls, ip_address: int) -> Address:
        """Build an address with port 0 from a 32-bit numeric IPv4 address."""
        ip = str(ipaddress.IPv4Address(ip_address & 0xFFFFFFFF))
        return cls._from_parts(socket.AF_INET, (ip, 0))

    @classmethod
    def from_sockaddr(cls, sockaddr) -> Address:
        """Build from a socket address as returned by the ``socket`` module."""
        return cls._from_parts(_family_of(sockaddr), sockaddr)

    @property
    def family(self) -> int:
        """The address family (``socket.AF_INET`` for IPv4)."""
        return self._family

    def ip_port(self) -> tuple[str, int]:
        """Return the numeric IP address string and the port."""
        if self._family not in (socket.AF_INET, socket.AF_INET6):
            raise ValueError("ip_port called on a non-IP address")
        return self._sockaddr[0], int(self._sockaddr[1])

    def ip(self) -> str:
        """Return the numeric IP address string, e.g. ``"18.243.0.1"``."""
        return self.ip_port()[0]

    def port(self) -> int:
        """Return the port number."""
        return self.ip_port()[1]

    def ipv4_numeric(self) -> int:
        """Return the IPv4 address as an integer in host byte order."""
        if self._family != socket.AF_INET:
            raise ValueError("ipv4_numeric called on non-IPv4 address")
        return int(ipaddress.IPv4Address(self._sockaddr[0]))

    def sockaddr(self):
        """Return the address in the form the ``socket`` module expects."""
        return self._sockaddr

    def __str__(self) -> str:
        ip, port = self.ip_port()
        return f"{ip}:{port}"

    def __repr__(self) -> str:
        return f"Address.from_sockaddr({self._sockaddr!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._family == other._family and self._sockaddr == other._sockaddr

    def __hash__(self) -> int:
        return hash((self._family, self._sockaddr))