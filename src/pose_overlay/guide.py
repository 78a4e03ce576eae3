"""Loading and validation of reference pose guides and recorded detections.

Guide JSON Schema:
------------------
    {
        "name": "Warrior II",
        "description": "Arms extended, front knee bent",
        "keypoints": {"left_shoulder": [0.3, 0.4], ...}
    }

Keypoint names must come from the landmark catalog and values are
normalized [x, y] pairs. Malformed guides raise GuideError once, at load
time; the per-frame path never validates guide data again.

Detection JSON Schema:
----------------------
    {"pose_landmarks": [{"x": 0.5, "y": 0.4, "visibility": 0.9}, null, ...]}

``pose_landmarks`` may be null (nobody detected). List position is the
landmark index.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from .exceptions import GuideError
from .models import DetectionResult, NormalizedPoint, PoseGuide
from .utils import read_json

__all__ = ["parse_pose_guide", "load_pose_guide", "load_detection"]

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "description", "keypoints")


def parse_pose_guide(data: Dict[str, Any]) -> PoseGuide:
    """Validate a guide dictionary and build a PoseGuide.

    Args:
        data: Parsed guide JSON

    Returns:
        Immutable PoseGuide

    Raises:
        GuideError: Missing fields, malformed keypoints or unknown names
    """
    if not isinstance(data, dict):
        raise GuideError("Pose guide must be a JSON object", {"type": type(data).__name__})

    missing = [field for field in REQUIRED_FIELDS if field not in data]
    if missing:
        raise GuideError("Pose guide is missing required fields", {"missing": missing})

    raw_keypoints = data["keypoints"]
    if not isinstance(raw_keypoints, dict):
        raise GuideError("Pose guide keypoints must be an object", {"type": type(raw_keypoints).__name__})

    keypoints = {}
    for name, coords in raw_keypoints.items():
        if not isinstance(coords, (list, tuple)) or len(coords) < 2:
            raise GuideError("Keypoint must be an [x, y] pair", {"keypoint": name, "value": coords})
        try:
            keypoints[name] = NormalizedPoint(x=coords[0], y=coords[1])
        except ValidationError as e:
            raise GuideError("Keypoint coordinates must be numbers", {"keypoint": name, "value": coords}) from e

    try:
        guide = PoseGuide(name=data["name"], description=data["description"], keypoints=keypoints)
    except ValidationError as e:
        raise GuideError(f"Invalid pose guide: {e.errors(include_url=False)[0]['msg']}") from e

    logger.debug("Parsed pose guide '%s' with %d keypoints", guide.name, len(guide.keypoints))
    return guide


def load_pose_guide(path: Union[Path, str]) -> PoseGuide:
    """Load a pose guide from a JSON file.

    Raises:
        GuideError: File missing, not valid JSON, or malformed guide
    """
    path = Path(path)
    try:
        data = read_json(path)
    except FileNotFoundError as e:
        raise GuideError("Pose guide file not found", {"path": str(path)}) from e
    except ValueError as e:
        raise GuideError("Pose guide is not valid JSON", {"path": str(path), "error": str(e)}) from e

    guide = parse_pose_guide(data)
    logger.info("Loaded pose guide '%s' from %s", guide.name, path)
    return guide


def load_detection(path: Union[Path, str]) -> DetectionResult:
    """Load one recorded detector result from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON or does not match the schema
    """
    data = read_json(path)
    try:
        return DetectionResult.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid detection file {path}: {e}") from e
