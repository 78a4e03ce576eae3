"""Exception hierarchy for pose-overlay.

Error Taxonomy:
---------------
- OverlayError: Base class, carries a message and optional context
- MissingGeometryError: Canvas or video has no usable pixel dimensions.
  Transient at startup (video metadata not loaded yet); the frame is
  skipped and the next frame retries naturally.
- GuideError: Reference pose data is malformed. Surfaced once at load time,
  never per frame.
- ConfigError: Settings file could not be parsed or validated.

Missing landmarks (detector omitted an index, guide lacks a keypoint) are not
exceptions: dependent drawing steps are skipped per landmark.

Example:
--------
>>> try:
...     ctx = build_context(1920, 1080, 0, 480)
... except MissingGeometryError as e:
...     print(e.message, e.context)
"""

from typing import Any, Dict, Optional

__all__ = [
    "OverlayError",
    "MissingGeometryError",
    "GuideError",
    "ConfigError",
]


class OverlayError(Exception):
    """Base exception for pose-overlay errors.

    Attributes:
        message: Human-readable description
        context: Optional structured details (offending values, paths)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class MissingGeometryError(OverlayError):
    """Canvas or video dimensions are missing, zero or non-finite."""

    pass


class GuideError(OverlayError):
    """Pose guide data is missing required fields or is malformed."""

    pass


class ConfigError(OverlayError):
    """Configuration file is invalid."""

    pass
