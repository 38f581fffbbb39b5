#!/usr/bin/env python3
"""logroll — pipe stdin into size/time rotated numbered files."""

import argparse
import asyncio
import logging
import signal
import sys

from logroll.config import load_config, load_yaml_config
from logroll.errors import InvalidConfiguration, PathUnavailable
from logroll.roller import open_rolling_file

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [logroll] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Write stdin to rolling log files")
    parser.add_argument("--file", default=None,
                        help="Base path of the log files; a number is appended")
    parser.add_argument("--size", default=None,
                        help="Maximum file size, e.g. 10k, 5m, 2g (plain numbers are MB)")
    parser.add_argument("--frequency", default=None,
                        help="'daily', 'hourly' or an interval in milliseconds")
    parser.add_argument("--date-format", dest="date_format", default=None,
                        help="strftime pattern inserted before the file number")
    parser.add_argument("--extension", default=None,
                        help="Extension appended after the file number")
    parser.add_argument("--limit-count", dest="limit_count", type=int, default=None,
                        help="Number of old files to keep besides the current one")
    parser.add_argument("--mkdir", action="store_true",
                        help="Create missing directories and roll on write errors")
    parser.add_argument("--config", default=None,
                        help="Path to a YAML config file")
    return parser


async def pump(stream, rolling) -> int:
    """Copy lines from *stream* into *rolling* until EOF. Returns lines written."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    try:
        await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), stream)
        readline = reader.readline
    except ValueError:
        # Regular files cannot be watched by the selector; read them directly.
        async def readline():
            return stream.readline()

    lines = 0
    while True:
        line = await readline()
        if not line:
            return lines
        rolling.write(line)
        lines += 1


async def run(config) -> int:
    rolling = open_rolling_file(config)
    loop = asyncio.get_running_loop()
    task = asyncio.ensure_future(pump(sys.stdin.buffer, rolling))

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, task.cancel)

    try:
        lines = await task
    except asyncio.CancelledError:
        logger.info("Shutdown signal received, stopping...")
        lines = None
    finally:
        rolling.close()

    if lines is not None:
        logger.info("Input closed after %d line(s); last file %s", lines, rolling.path)
    return 0


def main(argv=None) -> int:
    args = build_cli_parser().parse_args(argv)
    try:
        config = load_config(args, load_yaml_config(args.config))
        return asyncio.run(run(config))
    except (InvalidConfiguration, PathUnavailable) as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
