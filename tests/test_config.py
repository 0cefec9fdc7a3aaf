"""Tests for environment settings and logging setup."""

import logging
from pathlib import Path

from questboard.config import Settings, get_settings, load_settings, reset_settings_cache
from questboard.logging_setup import _ConsoleNoiseFilter, setup_logging


def test_defaults(monkeypatch):
    for name in ("DATA_DIR", "LOG_LEVEL", "LOG_FILE", "TICK_SECONDS"):
        monkeypatch.delenv(f"QUESTBOARD_{name}", raising=False)
    settings = load_settings()
    assert settings == Settings()
    assert settings.db_path.name == "questboard.db"
    assert settings.tick_seconds == 1.0


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("QUESTBOARD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("QUESTBOARD_LOG_LEVEL", "debug")
    monkeypatch.setenv("QUESTBOARD_LOG_FILE", "off")
    monkeypatch.setenv("QUESTBOARD_TICK_SECONDS", "0.5")
    settings = load_settings()
    assert settings.data_dir == Path(tmp_path)
    assert settings.db_path == Path(tmp_path) / "questboard.db"
    assert settings.log_level == logging.DEBUG
    assert settings.log_to_file is False
    assert settings.tick_seconds == 0.5


def test_bad_values_fall_back(monkeypatch):
    monkeypatch.setenv("QUESTBOARD_LOG_LEVEL", "LOUD")
    monkeypatch.setenv("QUESTBOARD_TICK_SECONDS", "-1")
    settings = load_settings()
    assert settings.log_level == logging.WARNING
    assert settings.tick_seconds == 1.0


def test_settings_are_cached(monkeypatch, tmp_path):
    monkeypatch.setenv("QUESTBOARD_DATA_DIR", str(tmp_path / "one"))
    reset_settings_cache()
    first = get_settings()
    monkeypatch.setenv("QUESTBOARD_DATA_DIR", str(tmp_path / "two"))
    assert get_settings() is first
    reset_settings_cache()
    assert get_settings().data_dir == tmp_path / "two"
    reset_settings_cache()


def test_console_filter():
    noise = _ConsoleNoiseFilter()

    def record(name, level):
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert noise.filter(record("questboard.core.store", logging.INFO))
    assert noise.filter(record("questboard", logging.DEBUG))
    assert not noise.filter(record("asyncio", logging.WARNING))
    assert noise.filter(record("asyncio", logging.ERROR))


def test_setup_logging_writes_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(log_dir=tmp_path, console_level=logging.CRITICAL)
        logging.getLogger("questboard.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in (tmp_path / "questboard.log").read_text(encoding="utf-8")
    finally:
        for h in root.handlers[:]:
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
