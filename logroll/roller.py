"""Rotation engine: turns size, time, signal and error triggers into rolls.

All state lives on one asyncio event loop. Handlers run to completion, so the
rotation state needs no lock; rolls are serialized by the ``_rolling`` flag.
A roll requested while ``reopen`` is running (a signal or retry delivered
from inside it) is queued and takes the following number. An error reported
by that ``reopen`` only marks the roll as failed and is not queued.
"""

import asyncio
import logging
from datetime import datetime

from logroll.config import RotationConfig
from logroll.destination import Destination, FileDestination
from logroll.errors import DestinationError, ResourceExhaustion
from logroll.frequency import FrequencyDescriptor, parse_frequency
from logroll.naming import build_filename, resolve_start_number
from logroll.retention import enforce_retention, parse_limit
from logroll.signals import loop_signal_subscription
from logroll.sizes import parse_size

logger = logging.getLogger(__name__)


class RollingFile:
    """Owns the destination and decides when it moves to the next numbered file."""

    def __init__(
        self,
        config: RotationConfig,
        destination: Destination,
        number: int = 0,
        max_size: int | None = None,
        frequency: FrequencyDescriptor | None = None,
        limit_count: int | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        time_func=None,
        signal_subscription=loop_signal_subscription,
    ) -> None:
        self._config = config
        self._destination = destination
        self._max_size = max_size
        self._frequency = frequency
        self._limit_count = limit_count
        self._loop = loop or asyncio.get_running_loop()
        self._time_func = time_func or datetime.now

        self._number = number
        self._current_bytes = 0
        self._next_deadline: datetime | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._closed = False
        self._rolling = False
        self._pending: list[str] = []
        self._last_error: DestinationError | None = None

        destination.on_write = self._on_write
        destination.on_error = self._on_error
        destination.on_close = self._shutdown
        destination.retry_eagain = self._on_retry

        if frequency is not None:
            self._next_deadline = frequency.next(self._time_func())
            self._schedule()

        self._signals = signal_subscription(self._loop, self.rotate_now)

    # ── state ────────────────────────────────────────────────────

    @property
    def number(self) -> int:
        return self._number

    @property
    def current_bytes(self) -> int:
        return self._current_bytes

    @property
    def next_deadline(self) -> datetime | None:
        return self._next_deadline

    @property
    def path(self) -> str:
        return self._destination.path

    @property
    def destination(self) -> Destination:
        return self._destination

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def last_error(self) -> DestinationError | None:
        return self._last_error

    # ── write path ───────────────────────────────────────────────

    def write(self, data) -> None:
        self._destination.write(data)

    def rotate_now(self) -> None:
        """Roll immediately, regardless of size or time state."""
        self._roll("signal")

    def close(self) -> None:
        self._shutdown()
        if not self._destination.closed:
            self._destination.close()

    # ── triggers ─────────────────────────────────────────────────

    def _on_write(self, written: int) -> None:
        if self._closed or not self._max_size:
            return
        self._current_bytes += written
        if self._current_bytes >= self._max_size:
            self._current_bytes = 0
            # Let the destination finish the write that crossed the threshold.
            self._loop.call_soon(self._roll, "size")

    def _on_error(self, err: BaseException) -> None:
        if not isinstance(err, DestinationError):
            err = DestinationError(str(err), cause=err)
        self._last_error = err
        logger.error("Destination error on %s: %s", self._destination.path, err)
        if self._rolling:
            # Raised by the reopen of the roll in progress; do not roll again.
            logger.error("Roll to file %d did not complete", self._number)
            return
        if self._config.mkdir:
            self._roll("error")

    def _on_retry(self, err: BaseException, write_buffer_len: int,
                  remaining_buffer_len: int) -> bool:
        self._last_error = ResourceExhaustion(str(err), cause=err)
        logger.warning("Retrying write of %d byte(s) (%d remaining) after %s",
                       write_buffer_len, remaining_buffer_len, err)
        if self._config.mkdir:
            self._roll("retry")
        return True

    def _on_timer(self) -> None:
        if self._closed:
            return
        if self._destination.closed:
            # Closed without an on_close notification.
            self._shutdown()
            return
        self._roll("time")
        # Never re-arm at or before the deadline that just fired.
        now = max(self._time_func(), self._next_deadline)
        self._next_deadline = self._frequency.next(now)
        self._schedule()

    # ── roll ─────────────────────────────────────────────────────

    def _schedule(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._closed or self._next_deadline is None:
            return
        delay = (self._next_deadline - self._time_func()).total_seconds()
        self._timer = self._loop.call_later(max(0.0, delay), self._on_timer)

    def _roll(self, reason: str) -> None:
        if self._closed or self._destination.closed:
            logger.debug("Ignoring %s roll on closed destination", reason)
            return
        if self._rolling:
            # Requested from inside reopen; claims the next number after this roll.
            self._pending.append(reason)
            return

        self._rolling = True
        try:
            self._roll_once(reason)
            while self._pending and not self._closed:
                self._roll_once(self._pending.pop(0))
        finally:
            self._pending.clear()
            self._rolling = False

    def _roll_once(self, reason: str) -> None:
        self._number += 1
        if reason != "size":
            # A size roll already reset the counter when it was scheduled.
            self._current_bytes = 0
        path = build_filename(self._config.file, self._number, self._config.extension,
                              self._config.date_format, when=self._time_func())
        logger.info("Rolling to %s (%s)", path, reason)
        try:
            self._destination.reopen(path)
        except Exception as e:
            self._last_error = DestinationError(f"reopen {path} failed: {e}", cause=e)
            logger.error("Roll to %s failed: %s", path, e)
            return

        if self._limit_count and self._destination.path == path:
            try:
                enforce_retention(self._config.file, self._limit_count, path,
                                  self._config.extension, self._config.date_format)
            except OSError as e:
                logger.error("Retention check failed for %s: %s", self._config.file, e)

    def _shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._signals.cancel()


def open_rolling_file(
    config: RotationConfig,
    destination_factory=FileDestination,
    loop: asyncio.AbstractEventLoop | None = None,
    time_func=None,
    signal_subscription=loop_signal_subscription,
) -> RollingFile:
    """Validate *config*, resume numbering and open the first file.

    Raises InvalidConfiguration or PathUnavailable before anything is opened.
    """
    time_func = time_func or datetime.now
    now = time_func()
    max_size = parse_size(config.size)
    frequency = parse_frequency(config.frequency, now=now)
    limit_count = parse_limit(config.limit_count)

    number = resolve_start_number(config.file, frequency, config.extension,
                                  config.date_format, mkdir=config.mkdir)
    path = build_filename(config.file, number, config.extension, config.date_format, when=now)
    destination = destination_factory(path, **config.options)
    logger.info("Writing to %s (size=%s, frequency=%s)", path, max_size,
                frequency.mode if frequency else None)

    return RollingFile(
        config,
        destination,
        number=number,
        max_size=max_size,
        frequency=frequency,
        limit_count=limit_count,
        loop=loop,
        time_func=time_func,
        signal_subscription=signal_subscription,
    )
