"""Size- and time-based rotation of numbered log files."""

from logroll.config import RotationConfig
from logroll.errors import (
    DestinationError,
    InvalidConfiguration,
    PathUnavailable,
    ResourceExhaustion,
    RotationError,
)
from logroll.roller import RollingFile, open_rolling_file

__all__ = [
    "DestinationError",
    "InvalidConfiguration",
    "PathUnavailable",
    "ResourceExhaustion",
    "RollingFile",
    "RotationConfig",
    "RotationError",
    "open_rolling_file",
]
