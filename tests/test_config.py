"""Tests for epictrack.lib.config and epictrack.lib.envparse modules."""

import pytest
from pathlib import Path
from unittest.mock import patch

from epictrack.lib import envparse
from epictrack.lib.config import (
    DEFAULT_DB_PATH,
    VALID_LOG_LEVELS,
    load_config,
)


class TestParseEnv:
    """Test envparse.parse_env."""

    def test_basic_pairs(self):
        env = envparse.parse_env('DB_PATH=data/db.json\nLOG_LEVEL="INFO"\n')
        assert env == {"DB_PATH": "data/db.json", "LOG_LEVEL": "INFO"}

    def test_skips_comments_and_blanks(self):
        env = envparse.parse_env("# tracker settings\n\nLOG_LEVEL=DEBUG\n")
        assert env == {"LOG_LEVEL": "DEBUG"}

    def test_export_prefix(self):
        assert envparse.parse_env("export DB_PATH='x.json'") == {"DB_PATH": "x.json"}

    def test_missing_equals(self):
        with pytest.raises(ValueError, match="Line 2"):
            envparse.parse_env("A=1\nNOT_A_PAIR\n")

    def test_invalid_key(self):
        with pytest.raises(ValueError, match="invalid key 'db_path'"):
            envparse.parse_env("db_path=x")

    @pytest.mark.parametrize("value", ["$(rm -rf /)", "`id`", "${HOME}/db", "a;b", "a | b", "a && b"])
    def test_unsafe_values(self, value):
        with pytest.raises(ValueError, match="unsafe value"):
            envparse.parse_env(f"DB_PATH={value}")

    def test_load_env_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            envparse.load_env(tmp_path / "nope.env")


class TestLoadConfig:
    """Test load_config."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config.db_path == Path(DEFAULT_DB_PATH)
        assert config.log_level == "WARNING"

    def test_reads_file(self, tmp_path):
        config_file = tmp_path / "tracker.env"
        config_file.write_text("DB_PATH=/srv/tracker/db.json\nLOG_LEVEL=info\n")

        config = load_config(config_file)

        assert config.db_path == Path("/srv/tracker/db.json")
        assert config.log_level == "INFO"

    def test_relative_db_path_resolved_against_config_dir(self, tmp_path):
        config_file = tmp_path / "tracker.env"
        config_file.write_text("DB_PATH=store/db.json\n")
        assert load_config(config_file).db_path == tmp_path / "store" / "db.json"

    def test_missing_explicit_file_warns(self, tmp_path, caplog):
        import logging
        caplog.set_level(logging.WARNING)

        config = load_config(tmp_path / "absent.env")

        assert config.log_level == "WARNING"
        assert "not found, using defaults" in caplog.text

    def test_malformed_file_raises(self, tmp_path):
        config_file = tmp_path / "tracker.env"
        config_file.write_text("garbage line\n")
        with pytest.raises(ValueError):
            load_config(config_file)


class TestLogLevelValidation:
    """Test LOG_LEVEL validation in load_config."""

    @patch("epictrack.lib.config.envparse.load_env")
    def test_valid_level(self, mock_load_env, tmp_path):
        config_file = tmp_path / "tracker.env"
        config_file.write_text("")
        mock_load_env.return_value = {"LOG_LEVEL": "debug"}
        assert load_config(config_file).log_level == "DEBUG"

    @patch("epictrack.lib.config.envparse.load_env")
    def test_invalid_level_defaults_with_warning(self, mock_load_env, tmp_path, caplog):
        config_file = tmp_path / "tracker.env"
        config_file.write_text("")
        mock_load_env.return_value = {"LOG_LEVEL": "verbose"}

        config = load_config(config_file)

        assert config.log_level == "WARNING"
        assert "Unknown LOG_LEVEL 'verbose'" in caplog.text

    def test_contains_expected_levels(self):
        assert "DEBUG" in VALID_LOG_LEVELS
        assert "WARNING" in VALID_LOG_LEVELS
        assert len(VALID_LOG_LEVELS) == 5
