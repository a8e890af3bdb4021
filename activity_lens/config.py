"""User settings: a JSON file under ~/.config plus environment overrides.

Override the file location with ACTIVITY_LENS_CONFIG. GITHUB_TOKEN replaces
the stored token and ACTIVITY_LENS_TZ replaces the stored timezone offset.
"""
import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

_log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "activity-lens" / "config.json"
MIN_OFFSET = -12
MAX_OFFSET = 14


class ConfigError(ValueError):
    """Config file or value could not be used."""


class Settings(BaseModel):
    timezone_offset: int = Field(default=0, ge=MIN_OFFSET, le=MAX_OFFSET)
    token: str | None = None
    event_limit: int = Field(default=30, ge=1, le=100)
    repo_limit: int = Field(default=30, ge=1, le=100)
    watchlist: list[str] = []
    api_url: str = "https://api.github.com"


def config_path() -> Path:
    configured = os.getenv("ACTIVITY_LENS_CONFIG")
    return Path(configured) if configured else DEFAULT_CONFIG_PATH


def validate_offset(offset: int) -> int:
    if not MIN_OFFSET <= offset <= MAX_OFFSET:
        raise ConfigError(f"Timezone offset must be between {MIN_OFFSET} and +{MAX_OFFSET}, got {offset}")
    return offset


def _apply_env(settings: Settings) -> Settings:
    updates: dict = {}
    token = os.getenv("GITHUB_TOKEN")
    if token:
        updates["token"] = token.strip()
    tz = os.getenv("ACTIVITY_LENS_TZ")
    if tz:
        try:
            updates["timezone_offset"] = validate_offset(int(tz))
        except ValueError as e:
            raise ConfigError(f"Invalid ACTIVITY_LENS_TZ={tz!r}: {e}") from e
    return settings.model_copy(update=updates) if updates else settings


def load_settings(path: Path | None = None, *, use_env: bool = True) -> Settings:
    """Load settings from disk; a missing file yields defaults."""
    path = path or config_path()
    if path.exists():
        try:
            settings = Settings.model_validate(json.loads(path.read_text()))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e
        _log.debug("loaded settings from %s", path)
    else:
        settings = Settings()
    return _apply_env(settings) if use_env else settings


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(settings.model_dump_json(indent=2))
    _log.debug("saved settings to %s", path)
    return path
