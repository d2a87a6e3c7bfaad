"""Tests for Config environment overrides."""
from pathlib import Path

from quiz_diagnostic import __version__
from quiz_diagnostic.config import Config


def test_defaults(monkeypatch):
    for name in ("STRICT", "WORK_DIR", "LOG_LEVEL", "CONTEXT_WIDTH"):
        monkeypatch.delenv(f"QUIZ_DIAGNOSTIC_{name}", raising=False)

    config = Config.load()

    assert config.strict is False
    assert config.work_dir is None
    assert config.context_width == 50
    assert config.log_level == "INFO"
    assert config.version == __version__


def test_env_overrides(monkeypatch, tmp_path):
    work_dir = tmp_path / "nested" / "work"
    monkeypatch.setenv("QUIZ_DIAGNOSTIC_STRICT", "yes")
    monkeypatch.setenv("QUIZ_DIAGNOSTIC_WORK_DIR", str(work_dir))
    monkeypatch.setenv("QUIZ_DIAGNOSTIC_LOG_LEVEL", "debug")
    monkeypatch.setenv("QUIZ_DIAGNOSTIC_CONTEXT_WIDTH", "80")

    config = Config.load()

    assert config.strict is True
    assert config.work_dir == Path(work_dir)
    assert work_dir.is_dir()
    assert config.log_level == "DEBUG"
    assert config.context_width == 80


def test_bad_context_width_is_ignored(monkeypatch):
    monkeypatch.setenv("QUIZ_DIAGNOSTIC_CONTEXT_WIDTH", "wide")

    assert Config.load().context_width == 50


def test_strict_false_values(monkeypatch):
    monkeypatch.setenv("QUIZ_DIAGNOSTIC_STRICT", "off")

    assert Config.load().strict is False
