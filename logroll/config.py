"""Configuration loading from a YAML file, env vars and CLI args."""

import logging
import os
from dataclasses import dataclass, field

import yaml

from logroll.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

# Config keys accepted in camelCase, mapped to RotationConfig fields.
_ALIASES = {
    "dateFormat": "date_format",
    "limitCount": "limit_count",
}

_ENV_VARS = {
    "file": "LOGROLL_FILE",
    "size": "LOGROLL_SIZE",
    "frequency": "LOGROLL_FREQUENCY",
    "date_format": "LOGROLL_DATE_FORMAT",
    "extension": "LOGROLL_EXTENSION",
    "limit_count": "LOGROLL_LIMIT_COUNT",
}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class RotationConfig:
    file: str
    size: int | str | None = None
    frequency: int | str | None = None
    date_format: str | None = None
    extension: str | None = None
    limit_count: int | None = None
    options: dict = field(default_factory=dict)   # passed through to the destination

    @property
    def mkdir(self) -> bool:
        return bool(self.options.get("mkdir", False))

    @classmethod
    def from_dict(cls, d: dict) -> "RotationConfig":
        data = {_ALIASES.get(k, k): v for k, v in d.items()}
        limit = data.pop("limit", None)
        if isinstance(limit, dict) and "limit_count" not in data:
            data["limit_count"] = limit.get("count")

        file = data.pop("file", None)
        if not file:
            raise InvalidConfiguration("A target 'file' is required")
        known = {name: data.pop(name) for name in
                 ("size", "frequency", "date_format", "extension", "limit_count")
                 if name in data}
        options = dict(data.pop("options", None) or {})
        options.update(data)
        return cls(file=file, options=options, **known)


def load_yaml_config(path: str | None) -> dict:
    """Load rotation settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise InvalidConfiguration(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(cli_args=None, yaml_data: dict | None = None) -> RotationConfig:
    """Build RotationConfig from YAML data, then env vars, then CLI args."""
    merged = {_ALIASES.get(k, k): v for k, v in (yaml_data or {}).items()}

    for name, var in _ENV_VARS.items():
        value = os.environ.get(var)
        if value is not None:
            merged[name] = value
    if os.environ.get("LOGROLL_MKDIR") is not None:
        merged["mkdir"] = _parse_bool(os.environ["LOGROLL_MKDIR"])

    if cli_args is not None:
        for name in _ENV_VARS:
            value = getattr(cli_args, name, None)
            if value is not None:
                merged[name] = value
        if getattr(cli_args, "mkdir", False):
            merged["mkdir"] = True

    return RotationConfig.from_dict(merged)
