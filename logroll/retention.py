"""Count-based retention for numbered files."""

import logging
import os

from logroll.errors import InvalidConfiguration
from logroll.naming import filename_pattern, list_entries

logger = logging.getLogger(__name__)


def parse_limit(value) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidConfiguration(f"Invalid limit count: {value!r}")
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"Invalid limit count: {value!r}") from None
    if count <= 0:
        raise InvalidConfiguration(f"Limit count must be positive, got {value!r}")
    return count


def get_numbered_files(base: str, extension: str | None = None,
                       date_format: str | None = None) -> list[tuple[int, str]]:
    """Return ``(number, name)`` for every file in the series, oldest first.

    Numbering restarts with each daily or hourly bucket, so age is decided by
    mtime, then the embedded date, and only then by number.
    """
    directory = os.path.dirname(base) or "."
    pattern = filename_pattern(base, extension, date_format)
    found = []
    for name, mtime in list_entries(directory):
        match = pattern.match(name)
        if match:
            date = match.groupdict().get("date") or ""
            found.append((mtime, date, int(match.group("number")), name))
    found.sort()
    return [(number, name) for _, _, number, name in found]


def enforce_retention(base: str, keep: int, current: str, extension: str | None = None,
                      date_format: str | None = None) -> list[str]:
    """Delete the oldest files so at most *keep* remain besides *current*.

    Returns the deleted basenames.
    """
    directory = os.path.dirname(base) or "."
    current_name = os.path.basename(current)
    survivors = [name for _, name in get_numbered_files(base, extension, date_format)
                 if name != current_name]

    deleted = []
    while len(survivors) > keep:
        name = survivors.pop(0)
        try:
            os.remove(os.path.join(directory, name))
        except OSError as e:
            logger.error("Failed to remove old log file %s: %s", name, e)
            continue
        deleted.append(name)
    if deleted:
        logger.info("Purged %d file(s): %s", len(deleted), ", ".join(deleted))
    return deleted
