"""Tests for YAML configuration loading."""
import logging
import textwrap
from pathlib import Path

import pytest

from mission_control.config import Config, ConfigError
from mission_control.persistence import STORAGE_KEY


class TestConfigLoad:

    def test_missing_file_uses_defaults(self, tmp_path):
        cfg = Config.load(str(tmp_path / "absent.yaml"))
        assert cfg.port == 3000
        assert cfg.host == "127.0.0.1"
        assert cfg.storage_key == STORAGE_KEY
        assert cfg.seed_on_first_run is True

    def test_defaults_expand_home(self, tmp_path):
        cfg = Config.load(str(tmp_path / "absent.yaml"))
        assert "~" not in cfg.db_path
        assert cfg.db_path.startswith(str(Path.home()))

    def test_values_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(textwrap.dedent("""
            db_path: /tmp/mc/board.db
            port: 8080
            log_level: debug
            seed_on_first_run: false
            unknown_key: ignored
        """))
        cfg = Config.load(str(path))
        assert cfg.db_path == "/tmp/mc/board.db"
        assert cfg.port == 8080
        assert cfg.log_level == "DEBUG"
        assert cfg.logging_level == logging.DEBUG
        assert cfg.seed_on_first_run is False

    def test_invalid_yaml_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("port: [unclosed")
        assert Config.load(str(path)).port == 3000

    def test_non_mapping_yaml_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        assert Config.load(str(path)).port == 3000


class TestConfigValidate:

    def test_bad_port(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("port: not-a-number\n")
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_port_out_of_range(self):
        with pytest.raises(ConfigError):
            Config(port=70000).validate()

    def test_bad_log_level(self):
        with pytest.raises(ConfigError):
            Config(log_level="chatty").validate()

    def test_empty_storage_key(self):
        with pytest.raises(ConfigError):
            Config(storage_key="  ").validate()
