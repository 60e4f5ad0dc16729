"""
podium.config - YAML config loading and validation.

Handles loading podium.yaml, merging it over the built-in defaults, and
validating all parameters. The engine receives an immutable EngineConfig
so every analysis run is reproducible from its configuration alone.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from podium.exceptions import ConfigError

CONFIG_FILENAME = "podium.yaml"


class ScoringConfig(BaseModel):
    """Constants for the composite energy, disfluency and cadence scores."""

    model_config = ConfigDict(frozen=True)

    # energy
    energy_reference_wpm: float = Field(default=160.0, gt=0.0)
    energy_reference_pitch_variation: float = Field(default=60.0, gt=0.0)

    # disfluency
    filler_density_weight: float = Field(default=50.0, ge=0.0)
    filler_density_max_penalty: float = Field(default=5.0, ge=0.0)
    repetition_max_penalty: float = Field(default=3.0, ge=0.0)
    sentence_length_min: float = Field(default=5.0, ge=0.0)
    sentence_length_max: float = Field(default=20.0, ge=0.0)
    sentence_length_penalty: float = Field(default=2.0, ge=0.0)

    # cadence
    gap_weight: float = Field(default=3.0, ge=0.0)
    gap_max_penalty: float = Field(default=3.0, ge=0.0)
    gap_variation_weight: float = Field(default=2.0, ge=0.0)
    gap_variation_max_penalty: float = Field(default=2.0, ge=0.0)
    target_wpm: float = Field(default=150.0, gt=0.0)
    wpm_deviation_scale: float = Field(default=50.0, gt=0.0)
    wpm_max_penalty: float = Field(default=3.0, ge=0.0)
    cadence_filler_weight: float = Field(default=10.0, ge=0.0)
    cadence_filler_max_penalty: float = Field(default=2.0, ge=0.0)


class EngineConfig(BaseModel):
    """Resolved, immutable settings for one MetricsEngine."""

    model_config = ConfigDict(frozen=True)

    sample_rate: int = Field(default=44100, gt=0)
    frame_size: int = Field(default=2048, ge=64)

    pitch_backend: str = "yin"
    yin_threshold: float = Field(default=0.1, gt=0.0, lt=1.0)
    pitch_fmin: float = Field(default=50.0, gt=0.0)
    pitch_fmax: float = Field(default=1000.0, gt=0.0)

    ffmpeg_path: str = "ffmpeg"
    decode_timeout_seconds: float | None = Field(default=60.0, gt=0.0)
    max_audio_bytes: int | None = Field(default=200 * 1024 * 1024, gt=0)

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)

    @field_validator("pitch_backend")
    @classmethod
    def validate_pitch_backend(cls, v: str) -> str:
        valid = {"yin", "pyin"}
        if v not in valid:
            raise ValueError(f"pitch_backend must be one of: {valid}")
        return v


class PodiumConfig(BaseModel):
    """Top-level configuration: engine settings plus external services."""

    engine: EngineConfig = Field(default_factory=EngineConfig)

    whisper_backend: str = "faster"
    whisper_model: str = "small"
    whisper_language: str | None = None

    narrate: bool = True
    privacy_mode: str = "local"
    llm_backend: str = "ollama"
    llm_model: str = "llama3.1:8b-instruct-q4_K_M"

    config_path: Path | None = None

    @field_validator("privacy_mode")
    @classmethod
    def validate_privacy_mode(cls, v: str) -> str:
        valid = {"local", "hybrid"}
        if v not in valid:
            raise ValueError(f"privacy_mode must be one of: {valid}")
        return v

    @field_validator("llm_backend")
    @classmethod
    def validate_llm_backend(cls, v: str) -> str:
        valid = {"ollama", "lmstudio", "claude", "openai"}
        if v not in valid:
            raise ValueError(f"llm_backend must be one of: {valid}")
        return v

    @field_validator("whisper_backend")
    @classmethod
    def validate_whisper_backend(cls, v: str) -> str:
        valid = {"faster", "openai"}
        if v not in valid:
            raise ValueError(f"whisper_backend must be one of: {valid}")
        return v


def merge_config(overrides: dict[str, Any], base: dict[str, Any]) -> dict[str, Any]:
    """Merge user config over defaults. Nested dicts are merged key by key."""
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(value, merged[key])
        elif value is not None:
            merged[key] = value
    return merged


def find_config_file(start: Path | None = None) -> Path | None:
    """Find podium.yaml in the given directory or any of its parents."""
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def load_config(path: Path | None = None) -> PodiumConfig:
    """Load and validate configuration.

    Args:
        path: Explicit config file. When None, podium.yaml is searched for
            from the working directory upwards; defaults apply if none exists.

    Returns:
        Validated PodiumConfig

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ConfigError: If the file is not valid YAML or fails validation
    """
    if path is not None and not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    config_file = path or find_config_file()
    if config_file is None:
        return PodiumConfig()

    try:
        with open(config_file, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError(f"{config_file} must contain a mapping at the top level")

    merged = merge_config(raw_config, create_default_config())
    merged["config_path"] = config_file

    try:
        return PodiumConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_file}:\n{e}") from e


def create_default_config() -> dict[str, Any]:
    """Create the default config as a plain dict, ready to be written."""
    return PodiumConfig().model_dump(mode="json", exclude={"config_path"})


def write_config(config: dict[str, Any], path: Path) -> None:
    """Write configuration to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
