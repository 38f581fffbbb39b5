"""Tests for the configuration module."""

import argparse
import unittest

import pytest
import yaml

from logroll.config import RotationConfig, _parse_bool, load_config, load_yaml_config
from logroll.errors import InvalidConfiguration

_ENV_KEYS = ("LOGROLL_FILE", "LOGROLL_SIZE", "LOGROLL_FREQUENCY", "LOGROLL_DATE_FORMAT",
             "LOGROLL_EXTENSION", "LOGROLL_LIMIT_COUNT", "LOGROLL_MKDIR")


def _cli(**overrides):
    values = dict(file=None, size=None, frequency=None, date_format=None,
                  extension=None, limit_count=None, mkdir=False, config=None)
    values.update(overrides)
    return argparse.Namespace(**values)


class TestParseBool(unittest.TestCase):
    def test_values(self):
        for val in ("true", "True", "1", "yes", " YES "):
            self.assertTrue(_parse_bool(val))
        for val in ("false", "0", "no", "", "maybe"):
            self.assertFalse(_parse_bool(val))


class TestRotationConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = RotationConfig(file="logs/app.log")
        self.assertIsNone(cfg.size)
        self.assertIsNone(cfg.frequency)
        self.assertEqual(cfg.options, {})
        self.assertFalse(cfg.mkdir)

    def test_frozen(self):
        cfg = RotationConfig(file="logs/app.log")
        with self.assertRaises(AttributeError):
            cfg.file = "/tmp/other"

    def test_from_dict_camel_case_and_passthrough(self):
        cfg = RotationConfig.from_dict({
            "file": "logs/app",
            "size": "10m",
            "frequency": "daily",
            "dateFormat": "%Y-%m-%d",
            "extension": ".log",
            "limit": {"count": 3},
            "mkdir": True,
            "sync": False,
        })
        self.assertEqual(cfg.date_format, "%Y-%m-%d")
        self.assertEqual(cfg.limit_count, 3)
        self.assertEqual(cfg.options, {"mkdir": True, "sync": False})
        self.assertTrue(cfg.mkdir)

    def test_from_dict_requires_file(self):
        with self.assertRaises(InvalidConfiguration):
            RotationConfig.from_dict({"size": "1m"})


class TestLoadYamlConfig:
    def test_no_path(self):
        assert load_yaml_config(None) == {}

    def test_missing_file(self, tmp_path):
        assert load_yaml_config(str(tmp_path / "nope.yml")) == {}

    def test_loads_mapping(self, tmp_path):
        path = tmp_path / "roll.yml"
        path.write_text(yaml.dump({"file": "logs/app.log", "frequency": "hourly"}))
        assert load_yaml_config(str(path)) == {"file": "logs/app.log", "frequency": "hourly"}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("file: [unclosed\n")
        with pytest.raises(InvalidConfiguration):
            load_yaml_config(str(path))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(InvalidConfiguration):
            load_yaml_config(str(path))


class TestLoadConfig:
    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for key in _ENV_KEYS:
            monkeypatch.delenv(key, raising=False)

    def test_yaml_only(self):
        cfg = load_config(_cli(), {"file": "logs/app.log", "size": "5m", "mkdir": True})
        assert cfg.file == "logs/app.log"
        assert cfg.size == "5m"
        assert cfg.mkdir

    def test_env_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("LOGROLL_SIZE", "10k")
        monkeypatch.setenv("LOGROLL_MKDIR", "yes")
        cfg = load_config(_cli(), {"file": "logs/app.log", "size": "5m"})
        assert cfg.size == "10k"
        assert cfg.mkdir

    def test_cli_overrides_env(self, monkeypatch):
        monkeypatch.setenv("LOGROLL_FILE", "env/app.log")
        monkeypatch.setenv("LOGROLL_FREQUENCY", "hourly")
        cfg = load_config(_cli(file="cli/app.log", frequency="daily", limit_count=4), {})
        assert cfg.file == "cli/app.log"
        assert cfg.frequency == "daily"
        assert cfg.limit_count == 4

    def test_missing_file_everywhere(self):
        with pytest.raises(InvalidConfiguration):
            load_config(_cli(), {})
