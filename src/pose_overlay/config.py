"""Configuration module for pose-overlay.

Load and validate TOML configuration with Pydantic models and environment
overrides. Every section has defaults matching the reference behavior, so an
empty file (or no file) gives a working configuration.

Example config.toml:
--------------------
    [overlay]
    threshold = 0.06
    mirror = true
    show_guide = true

    [style]
    aligned_color = [0, 200, 100, 0.95]

    [logging]
    level = "DEBUG"

Environment overrides use the POSE_OVERLAY_ prefix and double underscores for
nesting: POSE_OVERLAY_OVERLAY__THRESHOLD=0.08
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Tuple

try:
    import tomllib  # Python >= 3.11
except ImportError:
    import tomli as tomllib  # Python < 3.11

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError

__all__ = [
    "OverlayConfig",
    "OverlayStyle",
    "LoggingConfig",
    "Settings",
    "load_settings",
    "ENV_PREFIX",
]

ENV_PREFIX = "POSE_OVERLAY_"

Color = Tuple[int, int, int, float]


# ============================================================================
# Configuration Models
# ============================================================================


class OverlayConfig(BaseModel):
    """Alignment and overlay behavior."""

    model_config = {"extra": "forbid"}

    threshold: float = Field(default=0.06, gt=0, description="Max normalized distance counted as aligned")
    mirror: bool = Field(default=True, description="Mirror the guide horizontally (front-facing view)")
    show_guide: bool = Field(default=True, description="Draw the reference pose overlay")


class OverlayStyle(BaseModel):
    """Colors and sizes used by the frame renderer.

    Colors are (r, g, b, alpha) with 0-255 channels and alpha in [0, 1].
    Sizes scale with the shorter canvas side so markers stay legible from
    phone to desktop canvases.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    guide_color: Color = (0, 255, 100, 0.55)
    guide_stroke: Color = (0, 0, 0, 0.85)
    guide_stroke_width: float = 0.8
    major_guide_color: Color = (0, 255, 100, 0.95)
    major_guide_stroke: Color = (0, 0, 0, 0.95)
    major_guide_stroke_width: float = 2.0
    detected_color: Color = (255, 107, 107, 1.0)
    detected_stroke: Color = (0, 0, 0, 0.9)
    detected_stroke_width: float = 1.0
    landmark_color: Color = (255, 107, 107, 0.6)
    aligned_color: Color = (0, 200, 100, 0.95)
    misaligned_color: Color = (255, 80, 80, 0.95)
    label_color: Color = (0, 0, 0, 1.0)
    line_width: float = 2.0
    size_factor: float = Field(default=0.006, gt=0, description="Marker size as a fraction of the shorter canvas side")
    label_size: float = 12.0
    aligned_glyph: str = "✓"
    misaligned_glyph: str = "✕"

    @field_validator(
        "guide_color",
        "guide_stroke",
        "major_guide_color",
        "major_guide_stroke",
        "detected_color",
        "detected_stroke",
        "landmark_color",
        "aligned_color",
        "misaligned_color",
        "label_color",
    )
    @classmethod
    def validate_color(cls, v: Color) -> Color:
        """Validate channel and alpha ranges."""
        r, g, b, a = v
        if not all(0 <= c <= 255 for c in (r, g, b)):
            raise ValueError(f"color channels must be in [0, 255], got {v}")
        if not 0.0 <= a <= 1.0:
            raise ValueError(f"alpha must be in [0, 1], got {a}")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"extra": "forbid"}

    level: str = Field(default="INFO")
    structured: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got '{v}'")
        return v_upper


class Settings(BaseModel):
    """Complete pose-overlay settings."""

    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    style: OverlayStyle = Field(default_factory=OverlayStyle)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}  # Reject unknown keys


# ============================================================================
# Loading Functions
# ============================================================================


def load_settings(
    toml_path: Path | str | None = None,
    env_prefix: str = ENV_PREFIX,
) -> Settings:
    """Load and validate settings from TOML and environment.

    Args:
        toml_path: Path to TOML configuration file (optional)
        env_prefix: Environment variable prefix (default: POSE_OVERLAY_)

    Returns:
        Validated Settings object

    Raises:
        FileNotFoundError: If toml_path specified but doesn't exist
        ConfigError: If the file is not valid TOML or fails validation
    """
    config_dict: dict[str, Any] = {}

    if toml_path is not None:
        toml_path = Path(toml_path)
        if not toml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {toml_path}")

        with open(toml_path, "rb") as f:
            try:
                config_dict = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError("Invalid TOML in configuration file", {"path": str(toml_path), "error": str(e)}) from e

    config_dict = _apply_env_overrides(config_dict, env_prefix)

    try:
        return Settings(**config_dict)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e.error_count()} error(s)", {"errors": e.errors(include_url=False)}) from e


def _apply_env_overrides(config: dict[str, Any], prefix: str) -> dict[str, Any]:
    """Apply environment variable overrides to config dict.

    Supports nested keys with double underscore notation:
    POSE_OVERLAY_OVERLAY__MIRROR=false
    POSE_OVERLAY_LOGGING__LEVEL=DEBUG

    Args:
        config: Configuration dictionary
        prefix: Environment variable prefix

    Returns:
        Configuration with environment overrides applied
    """
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :].lower()
        parts = config_key.split("__")

        current = config
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[parts[-1]] = _parse_env_value(value)

    return config


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to bool, int, float, or str."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    return value
