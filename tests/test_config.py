"""Tests for losrs.config."""

import pathlib

import pytest

from losrs.config import (
    _parse_toml_simple, get_config_dir, load_settings, scheduler_config,
)
from losrs.errors import ValidationError
from losrs.scheduler import DEFAULT_CONFIG


def test_parse_toml_simple_basic():
    text = 'seed_interval = 2\nease_floor = 1.5\nname = "x"'
    result = _parse_toml_simple(text)
    assert result == {"seed_interval": 2, "ease_floor": 1.5, "name": "x"}


def test_parse_toml_simple_booleans():
    text = "enabled = true\ndisabled = false"
    result = _parse_toml_simple(text)
    assert result == {"enabled": True, "disabled": False}


def test_parse_toml_simple_comments_and_blanks():
    text = "# comment\n\nkey = 42\n"
    result = _parse_toml_simple(text)
    assert result == {"key": 42}


def test_get_config_dir_from_env(monkeypatch):
    monkeypatch.setenv("LOSRS_DIR", "/tmp/test-losrs")
    assert get_config_dir() == pathlib.Path("/tmp/test-losrs")


def test_get_config_dir_from_config(monkeypatch, tmp_path):
    """Falls back to ~/.config/losrs/config DIR= line."""
    monkeypatch.delenv("LOSRS_DIR", raising=False)
    config_dir = tmp_path / ".config" / "losrs"
    config_dir.mkdir(parents=True)
    (config_dir / "config").write_text("DIR=/my/losrs/dir\n")
    monkeypatch.setattr(pathlib.Path, "home", lambda: tmp_path)
    assert get_config_dir() == pathlib.Path("/my/losrs/dir")


def test_get_config_dir_default(monkeypatch, tmp_path):
    monkeypatch.delenv("LOSRS_DIR", raising=False)
    monkeypatch.setattr(pathlib.Path, "home", lambda: tmp_path)
    assert get_config_dir() == tmp_path / ".config" / "losrs"


def test_load_settings_default(config_dir):
    settings = load_settings(config_dir)
    assert settings["seed_interval"] == 1
    assert settings["ease_floor"] == 1.3
    assert scheduler_config(settings) == DEFAULT_CONFIG


def test_load_settings_with_file(config_dir):
    (config_dir / "settings.toml").write_text("seed_interval = 2\nfail_penalty = 0.3\n")
    settings = load_settings(config_dir)
    config = scheduler_config(settings)
    assert config.seed_interval == 2
    assert config.fail_penalty == 0.3
    assert config.default_ease == 2.5


def test_env_overrides_file(config_dir, monkeypatch):
    (config_dir / "settings.toml").write_text("ease_floor = 1.4\n")
    monkeypatch.setenv("LOSRS__EASE_FLOOR", "1.5")
    assert scheduler_config(load_settings(config_dir)).ease_floor == 1.5


def test_unrelated_settings_ignored():
    config = scheduler_config({"theme": "dark", "seed_interval": 3})
    assert config.seed_interval == 3


def test_bad_setting_type():
    with pytest.raises(ValidationError, match="seed_interval"):
        scheduler_config({"seed_interval": "soon"})
    with pytest.raises(ValidationError):
        scheduler_config({"ease_floor": True})


def test_bad_setting_value():
    with pytest.raises(ValidationError):
        scheduler_config({"ease_floor": 3.0})
