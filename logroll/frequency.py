"""Frequency parsing and rotation deadline arithmetic.

Daily and hourly schedules are aligned to local calendar boundaries, so a
process restarted within the same day (or hour) keeps writing to the same
numbered series. A numeric interval is counted from "now" and never aligned.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from logroll.errors import InvalidConfiguration

DAILY = "daily"
HOURLY = "hourly"
CUSTOM = "custom"

_BUCKET_MS = {
    DAILY: 24 * 60 * 60 * 1000,
    HOURLY: 60 * 60 * 1000,
}


@dataclass(frozen=True)
class FrequencyDescriptor:
    mode: str
    interval_ms: int
    start: datetime | None = None       # current bucket boundary, None for custom
    next_at: datetime | None = field(default=None, compare=False)

    @property
    def resumes(self) -> bool:
        """Whether a restart may continue the numbering of the current bucket."""
        return self.mode != CUSTOM

    def bucket_start(self, at: datetime) -> datetime | None:
        if self.mode == DAILY:
            return at.replace(hour=0, minute=0, second=0, microsecond=0)
        if self.mode == HOURLY:
            return at.replace(minute=0, second=0, microsecond=0)
        return None

    def next(self, from_: datetime) -> datetime:
        """Return the next rotation boundary strictly after *from_*."""
        if self.mode == DAILY:
            return self.bucket_start(from_) + timedelta(days=1)
        if self.mode == HOURLY:
            return self.bucket_start(from_) + timedelta(hours=1)
        return from_ + timedelta(milliseconds=self.interval_ms)


def parse_frequency(spec, now: datetime | None = None) -> FrequencyDescriptor | None:
    """Normalize a frequency spec into a descriptor, or None when unset.

    Accepts ``"daily"``, ``"hourly"`` or a positive number of milliseconds
    (as an int or a digit-only string).
    """
    if spec is None:
        return None
    now = now or datetime.now()

    if isinstance(spec, str):
        key = spec.strip().lower()
        if key in _BUCKET_MS:
            descriptor = FrequencyDescriptor(mode=key, interval_ms=_BUCKET_MS[key])
            return _anchored(descriptor, now)
        if not key.isdigit():
            raise InvalidConfiguration(f"Unknown frequency: {spec!r}")
        spec = int(key)

    if isinstance(spec, bool) or not isinstance(spec, int):
        raise InvalidConfiguration(f"Invalid frequency: {spec!r}")
    if spec <= 0:
        raise InvalidConfiguration(f"Frequency interval must be positive, got {spec!r}")
    return _anchored(FrequencyDescriptor(mode=CUSTOM, interval_ms=spec), now)


def _anchored(descriptor: FrequencyDescriptor, now: datetime) -> FrequencyDescriptor:
    return FrequencyDescriptor(
        mode=descriptor.mode,
        interval_ms=descriptor.interval_ms,
        start=descriptor.bucket_start(now),
        next_at=descriptor.next(now),
    )
