"""Landmark catalog: fixed name/index correspondence for the 33-point body model.

Indices follow the detector's output ordering (BlazePose / MediaPipe Pose),
so a detected landmark's position in the result sequence is its index.

Tables:
-------
- MAJOR_LANDMARKS: Ordered names checked for alignment and labeled
- LANDMARK_INDEX: Total, read-only name -> index mapping (33 entries)
- EXCLUDED_LANDMARKS: Face and finger points left out of the subtle guide
  overlay (never alignment-checked)

All tables are built once at import time and cannot be mutated.
"""

from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

__all__ = [
    "MAJOR_LANDMARKS",
    "LANDMARK_INDEX",
    "LANDMARK_NAMES",
    "EXCLUDED_LANDMARKS",
    "NUM_LANDMARKS",
    "index_of",
    "name_of",
    "is_excluded",
]

LANDMARK_NAMES: Tuple[str, ...] = (
    "nose",
    "left_eye_inner",
    "left_eye",
    "left_eye_outer",
    "right_eye_inner",
    "right_eye",
    "right_eye_outer",
    "left_ear",
    "right_ear",
    "mouth_left",
    "mouth_right",
    "left_shoulder",
    "right_shoulder",
    "left_elbow",
    "right_elbow",
    "left_wrist",
    "right_wrist",
    "left_pinky",
    "right_pinky",
    "left_index",
    "right_index",
    "left_thumb",
    "right_thumb",
    "left_hip",
    "right_hip",
    "left_knee",
    "right_knee",
    "left_ankle",
    "right_ankle",
    "left_heel",
    "right_heel",
    "left_foot_index",
    "right_foot_index",
)

NUM_LANDMARKS = len(LANDMARK_NAMES)

LANDMARK_INDEX: Mapping[str, int] = MappingProxyType({name: idx for idx, name in enumerate(LANDMARK_NAMES)})

MAJOR_LANDMARKS: Tuple[str, ...] = ("left_shoulder", "right_shoulder", "left_hip", "right_hip")

EXCLUDED_LANDMARKS: FrozenSet[str] = frozenset(
    {
        # face
        "nose",
        "left_eye_inner",
        "left_eye",
        "left_eye_outer",
        "right_eye_inner",
        "right_eye",
        "right_eye_outer",
        "left_ear",
        "right_ear",
        "mouth_left",
        "mouth_right",
        # fingers
        "left_pinky",
        "right_pinky",
        "left_index",
        "right_index",
        "left_thumb",
        "right_thumb",
    }
)


def index_of(name: str) -> int:
    """Return the detector index for a landmark name.

    Raises:
        KeyError: If the name is not part of the catalog
    """
    try:
        return LANDMARK_INDEX[name]
    except KeyError:
        raise KeyError(f"Unknown landmark name: {name!r}") from None


def name_of(index: int) -> str:
    """Return the landmark name for a detector index.

    Raises:
        KeyError: If the index is outside [0, 32]
    """
    if not 0 <= index < NUM_LANDMARKS:
        raise KeyError(f"Landmark index out of range: {index}")
    return LANDMARK_NAMES[index]


def is_excluded(name: str) -> bool:
    return name in EXCLUDED_LANDMARKS
