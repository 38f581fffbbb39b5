"""Shared pytest fixtures for the logroll test suite."""

from __future__ import annotations

import pytest

from logroll.config import RotationConfig


class FakeDestination:
    """In-memory destination that records reopen calls and lets tests emit events."""

    def __init__(self, path: str, **options):
        self.path = path
        self.options = options
        self.closed = False
        self.reopened: list[str] = []
        self.written: list = []
        self.fail_reopen = False
        self.on_write = None
        self.on_error = None
        self.on_close = None
        self.retry_eagain = None

    def write(self, data):
        self.written.append(data)
        self.on_write(len(data))

    def reopen(self, path: str):
        if self.fail_reopen:
            self.on_error(OSError(f"cannot open {path}"))
            return
        self.reopened.append(path)
        self.path = path

    def close(self):
        self.closed = True
        if self.on_close:
            self.on_close()

    # test helpers
    def emit_write(self, n: int):
        self.on_write(n)

    def emit_error(self, err: BaseException):
        self.on_error(err)


class FakeSignals:
    """Signal subscription stand-in; ``deliver()`` simulates SIGHUP/SIGUSR2."""

    def __init__(self):
        self.callback = None
        self.cancelled = False

    def __call__(self, loop, callback):
        self.callback = callback
        return self

    def deliver(self):
        self.callback()

    def cancel(self):
        self.cancelled = True


@pytest.fixture()
def fake_signals() -> FakeSignals:
    return FakeSignals()


@pytest.fixture()
def base_path(tmp_path) -> str:
    """Base path of a log series inside a fresh temporary directory."""
    return str(tmp_path / "app.log")


@pytest.fixture()
def make_config(base_path):
    def _make(**overrides) -> RotationConfig:
        return RotationConfig(file=overrides.pop("file", base_path), **overrides)
    return _make
