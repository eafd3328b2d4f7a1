"""An adapter wrapper that drops reads and writes at random."""

from __future__ import annotations

import random
from typing import Optional

from sponge.tcp_config import FdAdapterConfig
from sponge.util import random_generator


class LossyFdAdapter:
    """Wraps an adapter and drops segments with its configured loss rates.

    The uplink rate applies to writes and the downlink rate to reads; each
    is out of 65536.
    """

    def __init__(self, adapter, rng: Optional[random.Random] = None) -> None:
        self._adapter = adapter
        self._rng = rng if rng is not None else random_generator()

    def _should_drop(self, uplink: bool) -> bool:
        cfg = self._adapter.config
        loss = cfg.loss_rate_up if uplink else cfg.loss_rate_dn
        return loss != 0 and (self._rng.getrandbits(32) & 0xFFFF) < loss

    def read(self):
        """Read from the wrapped adapter; return None if it gave nothing or the read is dropped."""
        segment = self._adapter.read()
        if self._should_drop(False):
            return None
        return segment

    def write(self, seg) -> None:
        """Write through the wrapped adapter unless the write is dropped."""
        if self._should_drop(True):
            return
        self._adapter.write(seg)

    def tick(self, ms_since_last_tick: int) -> None:
        """Pass the passage of time on to the wrapped adapter."""
        self._adapter.tick(ms_since_last_tick)

    @property
    def config(self) -> FdAdapterConfig:
        """The wrapped adapter's configuration."""
        return self._adapter.config

    @config.setter
    def config(self, value: FdAdapterConfig) -> None:
        self._adapter.config = value

    @property
    def listening(self) -> bool:
        """The wrapped adapter's listening flag."""
        return self._adapter.listening

    @listening.setter
    def listening(self, value: bool) -> None:
        self._adapter.listening = value

    def fileno(self) -> int:
        """The wrapped adapter's descriptor number."""
        return self._adapter.fileno()