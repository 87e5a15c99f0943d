"""Tests for settings loading and logging setup."""

import os
from datetime import timedelta
from pathlib import Path

import pytest
import structlog

from canteen.infrastructure.config import DEFAULT_DATA_DIR, load_settings
from canteen.infrastructure.logging_config import configure_logging


@pytest.fixture
def env(monkeypatch):
    """A private copy of the environment without any CANTEEN_* keys."""
    clean = {k: v for k, v in os.environ.items() if not k.startswith("CANTEEN_")}
    monkeypatch.setattr(os, "environ", clean)
    return clean


class TestLoadSettings:

    def test_defaults(self, env, tmp_path):
        settings = load_settings(str(tmp_path / "missing.env"))
        assert settings.data_dir == DEFAULT_DATA_DIR
        assert settings.timezone is None
        assert settings.currency == "₹"
        assert settings.urgent_after == timedelta(minutes=15)
        assert settings.log_level == "WARNING"

    def test_reads_environment(self, env, tmp_path):
        env.update({
            "CANTEEN_DATA_DIR": str(tmp_path),
            "CANTEEN_TIMEZONE": "Asia/Kolkata",
            "CANTEEN_URGENT_MINUTES": "10",
            "CANTEEN_LOG_LEVEL": "debug",
            "CANTEEN_LOG_FORMAT": "console",
        })
        settings = load_settings(str(tmp_path / "missing.env"))

        assert settings.data_dir == Path(tmp_path)
        assert settings.urgent_after == timedelta(minutes=10)
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "console"
        assert settings.clock()().utcoffset() == timedelta(hours=5, minutes=30)

    def test_reads_dotenv_file(self, env, tmp_path):
        dotenv = tmp_path / ".env"
        dotenv.write_text("CANTEEN_CURRENCY=Rs\nCANTEEN_URGENT_MINUTES=20\n", encoding="utf-8")

        settings = load_settings(str(dotenv))

        assert settings.currency == "Rs"
        assert settings.urgent_after == timedelta(minutes=20)

    @pytest.mark.parametrize(
        "key, value, message",
        [
            ("CANTEEN_URGENT_MINUTES", "soon", "must be an integer"),
            ("CANTEEN_URGENT_MINUTES", "0", "must be positive"),
            ("CANTEEN_TIMEZONE", "Mars/Olympus", "unknown zone"),
            ("CANTEEN_LOG_FORMAT", "xml", "CANTEEN_LOG_FORMAT"),
            ("CANTEEN_LOG_LEVEL", "LOUD", "CANTEEN_LOG_LEVEL"),
        ],
    )
    def test_invalid_values(self, env, tmp_path, key, value, message):
        env[key] = value
        with pytest.raises(ValueError, match=message):
            load_settings(str(tmp_path / "missing.env"))


class TestConfigureLogging:

    def test_json_lines_on_stderr(self, capsys):
        configure_logging("INFO", "json")
        structlog.get_logger().info("token_assigned", token=101)

        line = capsys.readouterr().err.strip()
        assert '"event": "token_assigned"' in line
        assert '"level": "info"' in line
        assert '"token": 101' in line

    def test_level_filters(self, capsys):
        configure_logging("WARNING", "json")
        structlog.get_logger().info("stock_deducted")
        assert capsys.readouterr().err == ""
