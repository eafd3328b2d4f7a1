import fcntl
import os
import struct
from unittest import mock

import pytest

from sponge.tun import (
    CLONEDEV,
    IFF_NO_PI,
    IFF_TAP,
    IFF_TUN,
    IFNAMSIZ,
    TUNSETIFF,
    TapFD,
    TunFD,
    TunTapFD,
)


@pytest.fixture
def pipe_fds():
    r, w = os.pipe()
    yield r, w
    for fd in (r, w):
        try:
            os.close(fd)
        except OSError:
            pass


def test_tun_device_request(pipe_fds):
    r, _w = pipe_fds
    with mock.patch.object(os, "open", return_value=r) as fake_open, mock.patch.object(
        fcntl, "ioctl"
    ) as fake_ioctl:
        device = TunFD("tun144")
    fake_open.assert_called_once_with(CLONEDEV, os.O_RDWR)
    fd_arg, request, buf = fake_ioctl.call_args.args
    assert fd_arg == r
    assert request == TUNSETIFF
    assert buf[:IFNAMSIZ] == b"tun144".ljust(IFNAMSIZ, b"\x00")
    (flags,) = struct.unpack_from("H", buf, IFNAMSIZ)
    assert flags == IFF_TUN | IFF_NO_PI
    assert device.fd_num() == r
    device.close()
    assert device.closed()


def test_tap_device_flags(pipe_fds):
    r, _w = pipe_fds
    with mock.patch.object(os, "open", return_value=r), mock.patch.object(
        fcntl, "ioctl"
    ) as fake_ioctl:
        device = TapFD("tap10")
    buf = fake_ioctl.call_args.args[2]
    (flags,) = struct.unpack_from("H", buf, IFNAMSIZ)
    assert flags == IFF_TAP | IFF_NO_PI
    assert buf[:IFNAMSIZ] == b"tap10".ljust(IFNAMSIZ, b"\x00")
    assert device.fd_num() == r
    device.close()


def test_long_name_is_truncated_and_terminated(pipe_fds):
    r, _w = pipe_fds
    name = "abcdefghijklmnopqrstu"
    with mock.patch.object(os, "open", return_value=r), mock.patch.object(
        fcntl, "ioctl"
    ) as fake_ioctl:
        device = TunFD(name)
    buf = fake_ioctl.call_args.args[2]
    assert buf[:IFNAMSIZ] == name.encode()[: IFNAMSIZ - 1] + b"\x00"
    assert device.fd_num() == r
    device.close()


def test_ioctl_failure_closes_descriptor(pipe_fds):
    r, _w = pipe_fds
    with mock.patch.object(os, "open", return_value=r), mock.patch.object(
        fcntl, "ioctl", side_effect=PermissionError("denied")
    ):
        with pytest.raises(PermissionError):
            TunTapFD("tun144", True)
    with pytest.raises(OSError):
        os.fstat(r)