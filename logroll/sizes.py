"""Size threshold parsing: ``"10k"``, ``"5m"``, ``"2g"`` or a plain number of megabytes."""

import re

from logroll.errors import InvalidConfiguration

_UNITS = {
    "k": 1024,
    "m": 1024 ** 2,
    "g": 1024 ** 3,
}

_SIZE_RE = re.compile(r"^(\d+)([kmg])?$", re.IGNORECASE)


def parse_size(spec) -> int | None:
    """Return the byte threshold for *spec*, or None when no limit is set.

    Integers and unsuffixed digit strings are megabytes.
    """
    if spec is None:
        return None
    if isinstance(spec, bool):
        raise InvalidConfiguration(f"Invalid size: {spec!r}")
    if isinstance(spec, int):
        value, unit = spec, "m"
    elif isinstance(spec, str):
        match = _SIZE_RE.match(spec.strip())
        if not match:
            raise InvalidConfiguration(f"Invalid size: {spec!r}")
        value = int(match.group(1))
        unit = (match.group(2) or "m").lower()
    else:
        raise InvalidConfiguration(f"Invalid size: {spec!r}")

    if value <= 0:
        raise InvalidConfiguration(f"Size must be positive, got {spec!r}")
    return value * _UNITS[unit]
