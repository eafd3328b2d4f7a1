"""Configuration for the TCP endpoints and the descriptor adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from sponge.address import Address


def _check_range(name: str, value: int, limit: int) -> None:
    if not 0 <= value <= limit:
        raise ValueError(f"{name} out of range: {value}")


@dataclass
class TCPConfig:
    """Settings for a TCP sender and receiver."""

    DEFAULT_CAPACITY: ClassVar[int] = 64000
    MAX_PAYLOAD_SIZE: ClassVar[int] = 1000
    TIMEOUT_DFLT: ClassVar[int] = 1000
    MAX_RETX_ATTEMPTS: ClassVar[int] = 8

    rt_timeout: int = 1000  # initial retransmission timeout, in milliseconds
    recv_capacity: int = 64000
    send_capacity: int = 64000
    fixed_isn: Optional[int] = None

    def __post_init__(self) -> None:
        _check_range("rt_timeout", self.rt_timeout, 0xFFFF)
        if self.recv_capacity < 0:
            raise ValueError(f"recv_capacity out of range: {self.recv_capacity}")
        if self.send_capacity < 0:
            raise ValueError(f"send_capacity out of range: {self.send_capacity}")
        if self.fixed_isn is not None:
            _check_range("fixed_isn", self.fixed_isn, 0xFFFFFFFF)


def _any_address() -> Address:
    return Address("0", 0)


@dataclass
class FdAdapterConfig:
    """Addresses and loss rates used by the descriptor adapters.

    Loss rates are out of 65536: the chance that a datagram is dropped.
    """

    source: Address = field(default_factory=_any_address)
    destination: Address = field(default_factory=_any_address)
    loss_rate_dn: int = 0
    loss_rate_up: int = 0

    def __post_init__(self) -> None:
        _check_range("loss_rate_dn", self.loss_rate_dn, 0xFFFF)
        _check_range("loss_rate_up", self.loss_rate_up, 0xFFFF)