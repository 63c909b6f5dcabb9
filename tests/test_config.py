"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from pageoutline.config import Settings, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "PAGEOUTLINE_ENV_FILE",
        "PAGEOUTLINE_MAX_LINES",
        "PAGEOUTLINE_LOG_LEVEL",
        "PAGEOUTLINE_BOOST_LINES",
        "PAGEOUTLINE_MAX_CONCURRENT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    """Settings default to the documented values."""

    settings = load_settings()

    assert settings.max_lines == 100
    assert settings.min_group_size == 3
    assert settings.max_tokens == 20_000
    assert settings.log_level == "INFO"


def test_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """PAGEOUTLINE_* variables override defaults."""

    monkeypatch.setenv("PAGEOUTLINE_MAX_LINES", "40")

    assert load_settings().max_lines == 40


def test_env_file_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """PAGEOUTLINE_ENV_FILE points at a dotenv file."""

    env_file = tmp_path / "custom.env"
    env_file.write_text("PAGEOUTLINE_MAX_LINES=25\nPAGEOUTLINE_LOG_LEVEL=DEBUG\n", encoding="utf-8")
    monkeypatch.setenv("PAGEOUTLINE_ENV_FILE", str(env_file))

    settings = load_settings()

    assert settings.max_lines == 25
    assert settings.log_level == "DEBUG"


def test_cwd_env_file_is_picked_up(tmp_path: Path) -> None:
    """A .env in the working directory is read when no override is set."""

    (tmp_path / ".env").write_text("PAGEOUTLINE_MAX_LINES=60\n", encoding="utf-8")

    assert load_settings().max_lines == 60


def test_outline_options_overrides_ignore_none() -> None:
    """Explicit overrides win; None leaves the configured value."""

    options = Settings(max_lines=70).outline_options(max_lines=None, min_group_size=5)

    assert options.max_lines == 70
    assert options.min_group_size == 5
    assert options.text_limit == 50


def test_invalid_group_size_rejected() -> None:
    """A group size below three is a validation error."""

    with pytest.raises(ValidationError):
        Settings(min_group_size=2)
    with pytest.raises(ValidationError):
        Settings().outline_options(min_group_size=2)


def test_boost_allowance_is_threaded_into_options(monkeypatch: pytest.MonkeyPatch) -> None:
    """The boost allowance and concurrency come from the environment too."""

    monkeypatch.setenv("PAGEOUTLINE_BOOST_LINES", "0")
    monkeypatch.setenv("PAGEOUTLINE_MAX_CONCURRENT", "8")

    settings = load_settings()

    assert settings.outline_options().boost_lines == 0
    assert settings.max_concurrent == 8
