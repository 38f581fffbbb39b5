"""Destination contract consumed by the rotation engine, plus a file adapter.

The engine only relies on :class:`Destination`. :class:`FileDestination` is a
plain blocking implementation used by the CLI and the tests.
"""

import errno
import logging
import os
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

_RETRYABLE_ERRNOS = (errno.EAGAIN, errno.EWOULDBLOCK)


class Destination(Protocol):
    path: str
    closed: bool
    on_write: Callable[[int], None] | None
    on_error: Callable[[BaseException], None] | None
    on_close: Callable[[], None] | None
    retry_eagain: Callable[[BaseException, int, int], bool] | None

    def write(self, data) -> None: ...

    def reopen(self, path: str) -> None: ...

    def close(self) -> None: ...


class FileDestination:
    """Append-only file writer that reports writes, errors and closure."""

    def __init__(self, path: str, mkdir: bool = False, encoding: str = "utf-8", **_options):
        self.path = path
        self.closed = False
        self._mkdir = mkdir
        self._encoding = encoding
        self._file = None
        self.on_write = None
        self.on_error = None
        self.on_close = None
        self.retry_eagain = None
        self._open(path)

    def _open(self, path: str):
        if self._mkdir:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        self._file = open(path, "ab")
        self.path = path

    def _emit_error(self, err: BaseException):
        if self.on_error is not None:
            self.on_error(err)
        else:
            logger.error("Unhandled destination error on %s: %s", self.path, err)

    def write(self, data) -> None:
        """Append *data* (str or bytes). Failures go to ``on_error``, never raise."""
        if self.closed:
            self._emit_error(ValueError(f"write to closed destination {self.path}"))
            return
        if isinstance(data, str):
            data = data.encode(self._encoding)
        try:
            self._write_bytes(data)
        except OSError as e:
            if e.errno in _RETRYABLE_ERRNOS and self.retry_eagain is not None \
                    and self.retry_eagain(e, len(data), len(data)):
                try:
                    self._write_bytes(data)
                except OSError as retry_err:
                    self._emit_error(retry_err)
                return
            self._emit_error(e)

    def _write_bytes(self, data: bytes):
        written = self._file.write(data)
        self._file.flush()
        if self.on_write is not None:
            self.on_write(written)

    def reopen(self, path: str) -> None:
        """Close the current file and redirect future writes to *path*."""
        if self.closed:
            return
        old = self._file
        try:
            self._open(path)
        except OSError as e:
            self._emit_error(e)
            return
        if old is not None:
            old.close()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._file is not None:
            self._file.close()
            self._file = None
        if self.on_close is not None:
            self.on_close()
