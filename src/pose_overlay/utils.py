"""Foundation utilities for pose-overlay.

Provides JSON I/O and logging setup. This module must not import any other
project module.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

__all__ = [
    "read_json",
    "write_json",
    "configure_logging",
]


# ============================================================================
# JSON I/O
# ============================================================================


def read_json(path: Path | str) -> Any:
    """Read a JSON file and return the parsed value.

    Args:
        path: Absolute or relative path to JSON file

    Returns:
        Parsed JSON value (usually a dict)

    Raises:
        FileNotFoundError: If file does not exist
        JSONDecodeError: If file contains invalid JSON
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"JSON file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path | str, obj: Any, indent: int = 2) -> Path:
    """Write a value to a JSON file with pretty formatting.

    Parent directories are created as needed. Non-ASCII text (status glyphs)
    is kept as is and the file ends with a newline.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=indent, ensure_ascii=False)
        f.write("\n")
    return path


# ============================================================================
# Logging Configuration
# ============================================================================


def configure_logging(level: str = "INFO", structured: bool = False) -> None:
    """Configure root logger with standardized format.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        structured: Emit one JSON object per line instead of plain text

    Raises:
        ValueError: If level is not a known logging level
    """
    numeric_level = getattr(logging, level.upper(), None)

    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(numeric_level)

    if structured:
        formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"name": "%(name)s", "message": "%(message)s"}'
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
