"""A poll-based event loop that runs callbacks when file descriptors are ready."""

from __future__ import annotations

import enum
import select
from dataclasses import dataclass
from typing import Callable, Optional

from sponge.file_descriptor import FileDescriptor


class Direction(enum.IntEnum):
    """Whether a rule waits for its descriptor to be readable or writable."""

    IN = select.POLLIN
    OUT = select.POLLOUT


class EventResult(enum.Enum):
    """Outcome of one call to :meth:`EventLoop.wait_next_event`."""

    SUCCESS = "success"  # at least one rule was triggered
    TIMEOUT = "timeout"  # nothing became ready before the timeout
    EXIT = "exit"  # every rule was cancelled or uninterested


@dataclass
class _Rule:
    fd: FileDescriptor
    direction: Direction
    callback: Callable[[], None]
    interest: Optional[Callable[[], bool]]
    on_cancel: Optional[Callable[[], None]]

    def service_count(self) -> int:
        if self.direction is Direction.IN:
            return self.fd.read_count()
        return self.fd.write_count()

    def interested(self) -> bool:
        return self.interest is None or bool(self.interest())

    def cancel(self) -> None:
        if self.on_cancel is not None:
            self.on_cancel()


class EventLoop:
    """Holds rules and polls their descriptors, calling back on readiness.

    A rule is polled whenever its ``interest`` returns true. It is cancelled
    (its ``cancel`` is called and it is dropped) once its descriptor is
    closed, reaches EOF for reading, or hangs up. Every callback must read or
    write its descriptor, or its interest must turn false; otherwise a busy
    wait is reported with RuntimeError.
    """

    def __init__(self) -> None:
        self._rules: list[_Rule] = []

    def add_rule(
        self,
        fd: FileDescriptor,
        direction: Direction,
        callback: Callable[[], None],
        interest: Optional[Callable[[], bool]] = None,
        cancel: Optional[Callable[[], None]] = None,
    ) -> None:
        """Call ``callback`` whenever ``fd`` is ready in ``direction``."""
        self._rules.append(
            _Rule(
                fd=fd.duplicate(),
                direction=Direction(direction),
                callback=callback,
                interest=interest,
                on_cancel=cancel,
            )
        )

    def wait_next_event(self, timeout_ms: int) -> EventResult:
        """Poll once, waiting up to ``timeout_ms``, and run ready callbacks."""
        kept: list[_Rule] = []
        masks: list[int] = []
        fd_events: dict[int, int] = {}
        something_to_poll = False

        for rule in self._rules:
            if (rule.direction is Direction.IN and rule.fd.eof()) or rule.fd.closed():
                rule.cancel()
                continue
            mask = 0
            if rule.interested():
                mask = int(rule.direction)
                something_to_poll = True
            kept.append(rule)
            masks.append(mask)
            fd_num = rule.fd.fd_num()
            # A zero mask still registers the descriptor so errors are reported.
            fd_events[fd_num] = fd_events.get(fd_num, 0) | mask
        self._rules = kept

        if not something_to_poll:
            return EventResult.EXIT

        poller = select.poll()
        for fd_num, mask in fd_events.items():
            poller.register(fd_num, mask)
        try:
            ready = poller.poll(timeout_ms)
        except InterruptedError:
            return EventResult.EXIT
        if not ready:
            return EventResult.TIMEOUT

        revents_by_fd = dict(ready)
        survivors: list[_Rule] = []
        for index, (rule, mask) in enumerate(zip(kept, masks)):
            revents = revents_by_fd.get(rule.fd.fd_num(), 0)
            if revents & (select.POLLERR | select.POLLNVAL):
                self._rules = survivors + kept[index:]
                raise RuntimeError("EventLoop: error on polled file descriptor")

            poll_ready = bool(revents & mask)
            poll_hup = bool(revents & select.POLLHUP)
            if poll_hup and mask and not poll_ready:
                rule.cancel()
                continue

            if poll_ready:
                count_before = rule.service_count()
                rule.callback()
                if count_before == rule.service_count() and rule.interested():
                    self._rules = survivors + kept[index:]
                    raise RuntimeError(
                        "EventLoop: busy wait detected: callback did not "
                        "read/write fd and is still interested"
                    )
            survivors.append(rule)

        self._rules = survivors
        return EventResult.SUCCESS