"""
config.py

Typed configuration loading and validation for Pitch Space.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included, so a missing file means "all defaults")
- Support environment variable overrides
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If PITCHSPACE_CONFIG_PATH is set, that file is used (and must exist).
- Otherwise Pitch Space searches these paths in order and uses the first one that exists:
  1) ./pitchspace_config.json (current working directory)
  2) <user config dir>/PitchSpace/pitchspace_config.json
  3) <user config dir>/PitchSpace/config.json
- If none exists, the built-in defaults are used.

Example config file (pitchspace_config.json)
{
  "audio": {
    "device": null,
    "sample_rate": 44100,
    "buffer_size": 2048
  },
  "display": {
    "tick_interval_ms": 16,
    "fullscreen": false
  },
  "storage": {
    "high_score_path": ""
  },
  "logging": {
    "level": "INFO"
  },
  "sentry": {
    "dsn": "",
    "environment": "production"
  }
}

The playfield and difficulty sections exist mainly for tests and tuning. The shipped
values are the tuned game defaults.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

import paths


class PlayfieldConfig(BaseModel):
    width: float = Field(default=800.0, gt=0, description="Game area width in game-space pixels.")
    height: float = Field(default=500.0, gt=0, description="Game area height in game-space pixels.")
    avatar_x: float = Field(default=50.0, ge=0, description="Fixed horizontal position of the spaceship.")
    avatar_width: float = Field(default=60.0, gt=0)
    avatar_height: float = Field(default=30.0, gt=0)
    obstacle_width: float = Field(default=40.0, gt=0)
    obstacle_height: float = Field(default=40.0, gt=0)

    @model_validator(mode="after")
    def validate_sizes_fit(self) -> "PlayfieldConfig":
        if self.avatar_height >= self.height:
            raise ValueError("avatar_height must be smaller than the playfield height")
        if self.obstacle_height >= self.height:
            raise ValueError("obstacle_height must be smaller than the playfield height")
        return self


class DifficultyConfig(BaseModel):
    speed_min: float = Field(default=150.0, ge=0, description="Obstacle base speed at difficulty 0 (px/s).")
    speed_max: float = Field(default=350.0, ge=0, description="Obstacle base speed at difficulty 1 (px/s).")
    interval_min_seconds: float = Field(default=1.0, gt=0, description="Spawn interval at difficulty 1.")
    interval_max_seconds: float = Field(default=2.5, gt=0, description="Spawn interval at difficulty 0.")
    ramp_per_second: float = Field(default=0.05, gt=0, description="Difficulty gained per elapsed second.")
    points_per_second: float = Field(default=10.0, gt=0)
    enemy_ship_threshold: float = Field(default=0.7, ge=0, le=1, description="Draws above this spawn an enemy ship.")

    @model_validator(mode="after")
    def validate_ranges(self) -> "DifficultyConfig":
        if self.speed_max < self.speed_min:
            raise ValueError("speed_max must be >= speed_min")
        if self.interval_max_seconds <= self.interval_min_seconds:
            raise ValueError("interval_max_seconds must be > interval_min_seconds")
        return self


class AudioConfig(BaseModel):
    device: Optional[Union[int, str]] = Field(default=None, description="sounddevice input device index or name.")
    sample_rate: int = Field(default=44100, ge=8000, le=192000)
    buffer_size: int = Field(default=2048, ge=64, le=16384, description="Analysis window, power of two.")

    @field_validator("buffer_size")
    @classmethod
    def validate_power_of_two(cls, value: int) -> int:
        if value & (value - 1):
            raise ValueError("buffer_size must be a power of two")
        return value

    @field_validator("device")
    @classmethod
    def normalize_device(cls, value: Optional[Union[int, str]]) -> Optional[Union[int, str]]:
        if value is None or isinstance(value, int):
            return value
        trimmed = value.strip()
        if not trimmed:
            return None
        if trimmed.isdigit():
            return int(trimmed)
        return trimmed


class DisplayConfig(BaseModel):
    tick_interval_ms: int = Field(default=16, ge=1, le=1000, description="Tick timer period in milliseconds.")
    fullscreen: bool = Field(default=False)


class StorageConfig(BaseModel):
    high_score_path: str = Field(default="", description="High score JSON file. Empty means the per-user data dir.")

    def resolved_high_score_path(self) -> Path:
        text = (self.high_score_path or "").strip()
        if text:
            return Path(text).expanduser()
        return paths.high_score_file_path()


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="DEBUG, INFO, WARNING, ERROR")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        normalized = (value or "").strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError("level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return normalized


class SentryConfig(BaseModel):
    dsn: str = Field(default="", description="Sentry DSN. Empty disables error reporting.")
    environment: str = Field(default="production")
    traces_sample_rate: float = Field(default=0.0, ge=0.0, le=1.0)

    @field_validator("dsn")
    @classmethod
    def strip_dsn(cls, value: str) -> str:
        return (value or "").strip()

    def is_enabled(self) -> bool:
        return bool(self.dsn)


class AppConfig(BaseModel):
    playfield: PlayfieldConfig = Field(default_factory=PlayfieldConfig)
    difficulty: DifficultyConfig = Field(default_factory=DifficultyConfig)
    audio: AudioConfig = Field(default_factory=AudioConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    sentry: SentryConfig = Field(default_factory=SentryConfig)


def _default_config_candidates() -> List[Path]:
    config_directory = paths.user_config_dir_path()
    return [
        Path.cwd() / "pitchspace_config.json",
        config_directory / "pitchspace_config.json",
        config_directory / "config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("PITCHSPACE_CONFIG_PATH", "").strip()
    if explicit_path_text:
        return Path(explicit_path_text)

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exception:
        raise OSError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ValueError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ValueError(f"Config file root must be a JSON object: {config_path}")

    return parsed


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Environment overrides are optional. The config file (or defaults) is the primary source of truth.

    Override variables:
    - PITCHSPACE_AUDIO_DEVICE
    - PITCHSPACE_AUDIO_SAMPLE_RATE
    - PITCHSPACE_AUDIO_BUFFER_SIZE
    - PITCHSPACE_TICK_INTERVAL_MS
    - PITCHSPACE_FULLSCREEN
    - PITCHSPACE_HIGH_SCORE_PATH
    - PITCHSPACE_LOG_LEVEL
    - PITCHSPACE_SENTRY_DSN
    """
    def ensure_nested(config_root: Dict[str, Any], section_name: str) -> Dict[str, Any]:
        section = config_root.get(section_name)
        if isinstance(section, dict):
            return section
        section = {}
        config_root[section_name] = section
        return section

    updated_config = dict(config_dict)

    audio_section = ensure_nested(updated_config, "audio")
    display_section = ensure_nested(updated_config, "display")
    storage_section = ensure_nested(updated_config, "storage")
    logging_section = ensure_nested(updated_config, "logging")
    sentry_section = ensure_nested(updated_config, "sentry")

    def override_string(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "")
        if value_text.strip():
            target_dict[key_name] = value_text.strip()

    def override_int(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = int(value_text)
        except ValueError:
            return

    def override_bool(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip().lower()
        if not value_text:
            return
        truthy = {"1", "true", "yes", "on"}
        falsy = {"0", "false", "no", "off"}
        if value_text in truthy:
            target_dict[key_name] = True
        elif value_text in falsy:
            target_dict[key_name] = False

    override_string("PITCHSPACE_AUDIO_DEVICE", audio_section, "device")
    override_int("PITCHSPACE_AUDIO_SAMPLE_RATE", audio_section, "sample_rate")
    override_int("PITCHSPACE_AUDIO_BUFFER_SIZE", audio_section, "buffer_size")

    override_int("PITCHSPACE_TICK_INTERVAL_MS", display_section, "tick_interval_ms")
    override_bool("PITCHSPACE_FULLSCREEN", display_section, "fullscreen")

    override_string("PITCHSPACE_HIGH_SCORE_PATH", storage_section, "high_score_path")
    override_string("PITCHSPACE_LOG_LEVEL", logging_section, "level")
    override_string("PITCHSPACE_SENTRY_DSN", sentry_section, "dsn")

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict: Dict[str, Any] = {}
    if resolved_path is not None:
        json_dict = _read_json_file_utf8(resolved_path)
    json_dict = _apply_environment_overrides(json_dict)

    try:
        config = AppConfig.model_validate(json_dict)
    except ValidationError as exception:
        source_text = str(resolved_path) if resolved_path is not None else "(defaults)"
        raise ValueError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


@lru_cache(maxsize=1)
def get_config() -> Tuple[AppConfig, Optional[Path]]:
    return load_config()


def to_json(config: AppConfig) -> str:
    return json.dumps(config.model_dump(), ensure_ascii=False, indent=2)


def main() -> int:
    try:
        config, resolved_path = load_config()
    except Exception as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    output_payload = {
        "ok": True,
        "config_path": str(resolved_path) if resolved_path is not None else None,
        "config": json.loads(to_json(config)),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
