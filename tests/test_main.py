"""Tests for the command-line entry point."""

import io

import pytest

from logroll.config import RotationConfig
from logroll.main import build_cli_parser, main, pump
from logroll.roller import open_rolling_file

from conftest import FakeDestination


def test_cli_parser_flags():
    args = build_cli_parser().parse_args(
        ["--file", "logs/app.log", "--size", "10m", "--frequency", "daily",
         "--date-format", "%Y%m%d", "--extension", "log", "--limit-count", "3", "--mkdir"]
    )
    assert args.file == "logs/app.log"
    assert args.date_format == "%Y%m%d"
    assert args.limit_count == 3
    assert args.mkdir is True


def test_invalid_configuration_exits_2(tmp_path, monkeypatch):
    monkeypatch.delenv("LOGROLL_SIZE", raising=False)
    assert main(["--file", str(tmp_path / "app.log"), "--size", "5x"]) == 2
    assert list(tmp_path.iterdir()) == []


def test_missing_directory_exits_2(tmp_path):
    assert main(["--file", str(tmp_path / "missing" / "app.log")]) == 2


@pytest.mark.asyncio
async def test_pump_copies_lines(tmp_path, fake_signals):
    config = RotationConfig(file=str(tmp_path / "app.log"))
    rolling = open_rolling_file(config, destination_factory=FakeDestination,
                                signal_subscription=fake_signals)
    stream = io.BytesIO(b"one\ntwo\nthree\n")

    assert await pump(stream, rolling) == 3
    assert rolling.destination.written == [b"one\n", b"two\n", b"three\n"]
    rolling.close()
