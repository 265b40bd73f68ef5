"""Configuration helpers: config directory discovery, settings, scheduler parameters."""

import dataclasses
import os
import pathlib
import re

from losrs.errors import ValidationError
from losrs.scheduler import SchedulerConfig

ENV_DIR = "LOSRS_DIR"
ENV_PREFIX = "LOSRS__"

DEFAULT_SETTINGS = {
    "seed_interval": 1,
    "default_ease": 2.5,
    "ease_floor": 1.3,
    "min_interval": 1,
    "fail_penalty": 0.2,
    "easy_bonus": 0.15,
    "hard_penalty": 0.15,
}

_FLOAT_RE = re.compile(r'^-?\d+\.\d*$')
_INT_RE = re.compile(r'^-?\d+$')


def get_config_dir() -> pathlib.Path:
    env_dir = os.environ.get(ENV_DIR)
    if env_dir:
        return pathlib.Path(env_dir)
    base = pathlib.Path.home() / ".config" / "losrs"
    config_path = base / "config"
    if config_path.exists():
        for line in config_path.read_text().splitlines():
            line = line.strip()
            if line.startswith("DIR="):
                return pathlib.Path(line[4:].strip())
    return base


def load_settings(config_dir: pathlib.Path) -> dict:
    settings_path = config_dir / "settings.toml"
    settings = dict(DEFAULT_SETTINGS)
    if settings_path.exists():
        settings.update(_parse_toml_simple(settings_path.read_text()))
    settings.update(_env_overrides())
    return settings


def _parse_value(v: str):
    if v.startswith('"') and v.endswith('"') and len(v) >= 2:
        return v[1:-1]
    if _INT_RE.match(v):
        return int(v)
    if _FLOAT_RE.match(v):
        return float(v)
    if v == "true":
        return True
    if v == "false":
        return False
    return v


def _parse_toml_simple(text: str) -> dict:
    """Minimal TOML parser for flat key=value files."""
    result = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            k, v = line.split("=", 1)
            result[k.strip()] = _parse_value(v.strip())
    return result


def _env_overrides() -> dict:
    """LOSRS__EASE_FLOOR=1.5 overrides the ease_floor setting."""
    result = {}
    for name, value in os.environ.items():
        if name.startswith(ENV_PREFIX) and len(name) > len(ENV_PREFIX):
            result[name[len(ENV_PREFIX):].lower()] = _parse_value(value.strip())
    return result


def scheduler_config(settings: dict) -> SchedulerConfig:
    """Build a SchedulerConfig from the scheduler keys present in settings."""
    kwargs = {}
    for f in dataclasses.fields(SchedulerConfig):
        if f.name not in settings:
            continue
        value = settings[f.name]
        convert = int if f.type in (int, "int") else float
        if isinstance(value, bool):
            raise ValidationError(f"setting {f.name} must be a number, got {value!r}")
        try:
            kwargs[f.name] = convert(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"setting {f.name} must be a number, got {value!r}") from e
    return SchedulerConfig(**kwargs)
