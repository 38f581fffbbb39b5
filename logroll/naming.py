"""Numbered file naming and restart-time number detection.

Files are named ``<base>[.<date>].<number><extension>``. The same layout is
reverse-parsed by :func:`filename_pattern`, so the builder and the scanner
must stay in step.
"""

import logging
import os
import re
from collections.abc import Iterable
from datetime import datetime

from logroll.errors import PathUnavailable

logger = logging.getLogger(__name__)


def normalize_extension(extension: str | None) -> str:
    if not extension:
        return ""
    return extension if extension.startswith(".") else "." + extension


def build_filename(base: str, number: int, extension: str | None = None,
                   date_format: str | None = None, when: datetime | None = None) -> str:
    """Build the path of file *number* in the series rooted at *base*."""
    parts = [base]
    if date_format:
        parts.append((when or datetime.now()).strftime(date_format))
    parts.append(str(number))
    return ".".join(parts) + normalize_extension(extension)


def filename_pattern(base: str, extension: str | None = None,
                     date_format: str | None = None) -> re.Pattern:
    """Compile a regex matching basenames produced by :func:`build_filename`."""
    prefix = re.escape(os.path.basename(base))
    suffix = re.escape(normalize_extension(extension))
    # Greedy date group: the number is always the last dotted segment.
    date = r"\.(?P<date>.+)" if date_format else ""
    return re.compile(rf"^{prefix}{date}\.(?P<number>\d+){suffix}$")


def scan_numbers(entries: Iterable[tuple[str, float]], base: str,
                 extension: str | None = None, date_format: str | None = None,
                 since: datetime | None = None) -> int | None:
    """Return the highest sequence number among *entries*, or None.

    *entries* are ``(basename, mtime)`` pairs. When *since* is given, files
    last modified before it belong to an earlier bucket and are skipped.
    """
    pattern = filename_pattern(base, extension, date_format)
    cutoff = since.timestamp() if since is not None else None
    highest = None
    for name, mtime in entries:
        match = pattern.match(name)
        if not match:
            continue
        if cutoff is not None and mtime < cutoff:
            continue
        number = int(match.group("number"))
        if highest is None or number > highest:
            highest = number
    return highest


def list_entries(directory: str, mkdir: bool = False) -> list[tuple[str, float]]:
    """List ``(name, mtime)`` for the regular files in *directory*."""
    if mkdir:
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise PathUnavailable(f"Cannot create directory {directory}: {e}") from e
    try:
        with os.scandir(directory) as it:
            return [(entry.name, entry.stat().st_mtime)
                    for entry in it if entry.is_file()]
    except OSError as e:
        raise PathUnavailable(f"Cannot list directory {directory}: {e}") from e


def detect_last_number(base: str, since: datetime | None = None,
                       extension: str | None = None, date_format: str | None = None,
                       mkdir: bool = False) -> int:
    """Return the highest existing number for *base*, or 0 if there is none."""
    directory = os.path.dirname(base) or "."
    entries = list_entries(directory, mkdir=mkdir)
    highest = scan_numbers(entries, base, extension, date_format, since)
    return highest if highest is not None else 0


def resolve_start_number(base: str, frequency=None, extension: str | None = None,
                         date_format: str | None = None, mkdir: bool = False) -> int:
    """Pick the number of the first file to open after startup.

    Daily and hourly schedules (and size-only rotation) resume the highest
    file of the current bucket. A custom interval always opens a new file
    one past the highest existing number.
    """
    directory = os.path.dirname(base) or "."
    entries = list_entries(directory, mkdir=mkdir)

    if frequency is not None and not frequency.resumes:
        highest = scan_numbers(entries, base, extension, date_format)
        number = 0 if highest is None else highest + 1
    else:
        since = frequency.start if frequency is not None else None
        highest = scan_numbers(entries, base, extension, date_format, since)
        number = highest if highest is not None else 0

    logger.debug("Starting %s at number %d (%d entries scanned)", base, number, len(entries))
    return number
