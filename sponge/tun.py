"""Handles on persistent Linux TUN and TAP devices."""

from __future__ import annotations

import fcntl
import os
import struct

from sponge.file_descriptor import FileDescriptor

CLONEDEV = "/dev/net/tun"

TUNSETIFF = 0x400454CA
IFF_TUN = 0x0001
IFF_TAP = 0x0002
IFF_NO_PI = 0x1000
IFNAMSIZ = 16

_IFREQ_SIZE = 40


def _ifreq(devname: str, flags: int) -> bytes:
    """Build a ``struct ifreq`` naming the device (NUL-terminated) with ``flags``."""
    name = devname.encode()[: IFNAMSIZ - 1]
    return struct.pack(f"{IFNAMSIZ}sH", name, flags).ljust(_IFREQ_SIZE, b"\x00")


class TunTapFD(FileDescriptor):
    """A descriptor attached to an existing persistent TUN or TAP device.

    A TUN device carries IP datagrams and a TAP device Ethernet frames;
    neither carries packet-information headers.
    """

    def __init__(self, devname: str, is_tun: bool) -> None:
        super().__init__(os.open(CLONEDEV, os.O_RDWR))
        flags = (IFF_TUN if is_tun else IFF_TAP) | IFF_NO_PI
        try:
            fcntl.ioctl(self.fd_num(), TUNSETIFF, _ifreq(devname, flags))
        except BaseException:
            self.close()
            raise


class TunFD(TunTapFD):
    """A descriptor attached to an existing TUN device."""

    def __init__(self, devname: str) -> None:
        super().__init__(devname, True)


class TapFD(TunTapFD):
    """A descriptor attached to an existing TAP device."""

    def __init__(self, devname: str) -> None:
        super().__init__(devname, False)