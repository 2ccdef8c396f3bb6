"""Tests for configuration loading and logging setup."""

import logging

import pytest

from face_attendance.config_loader import Settings, load_config
from face_attendance.logger_setup import RejectWarningFilter, setup_logging

CONFIG_TEXT = """
[MongoDB]
uri = mongodb://db:27017/

[Matching]
similarity_threshold = 0.9
ambiguity_margin = 0.02

[Attendance]
cooldown_seconds = 120

[Logging]
level = DEBUG

[Paths]
log_file = {log_file}
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(CONFIG_TEXT.format(log_file=tmp_path / "logs" / "app.log"))
    return path


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.ini"))


def test_load_config_creates_log_dir(config_path, tmp_path) -> None:
    load_config(str(config_path))
    assert (tmp_path / "logs").is_dir()


def test_settings_from_config(config_path) -> None:
    settings = Settings.from_config(load_config(str(config_path)))
    assert settings == Settings(similarity_threshold=0.9, ambiguity_margin=0.02,
                                embedding_dim=128, cooldown_seconds=120.0)


def test_settings_defaults() -> None:
    settings = Settings()
    assert settings.similarity_threshold == 0.95
    assert settings.cooldown_seconds == 60.0


def test_mongo_uri_env_override(config_path, monkeypatch) -> None:
    monkeypatch.setenv("MONGO_URI", "mongodb://override:27017/")
    config = load_config(str(config_path))
    assert config.get('MongoDB', 'uri') == "mongodb://override:27017/"


def test_setup_logging_writes_file(config_path, tmp_path) -> None:
    root = logging.getLogger()
    saved = root.handlers[:]
    try:
        setup_logging(load_config(str(config_path)))
        logging.getLogger("face_attendance.test").info("ATTENDANCE: hello")
        for h in root.handlers:
            h.flush()
        assert "ATTENDANCE: hello" in (tmp_path / "logs" / "app.log").read_text()
    finally:
        for h in root.handlers[:]:
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)


def test_console_filter_hides_rejections() -> None:
    f = RejectWarningFilter()
    rejected = logging.LogRecord("x", logging.WARNING, __file__, 1, "REJECTED no_match", None, None)
    checked_in = logging.LogRecord("x", logging.INFO, __file__, 1, "ATTENDANCE: Alice", None, None)
    assert f.filter(rejected) is False
    assert f.filter(checked_in) is True
