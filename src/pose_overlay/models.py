"""Domain models for pose-overlay.

Model Hierarchy:
---------------
- NormalizedPoint / PixelPoint: 2D positions in normalized or canvas space
- MappingContext: Per-frame video -> canvas transform (pose_overlay.mapping)
- PoseGuide: Static reference pose (name, description, keypoints)
- Landmark / DetectionResult: One detector callback payload
- AlignmentResult / FrameReport: Per-frame evaluation outcome

Key Features:
-------------
- **Immutable**: frozen=True, values are recomputed each frame, never mutated
- **Strict Schema**: extra="forbid" rejects unknown fields
- **No Range Checks on Points**: out-of-range or NaN coordinates propagate
  arithmetically through mapping instead of being rejected

Example:
--------
>>> guide = PoseGuide(
...     name="Warrior II",
...     description="Arms extended, front knee bent",
...     keypoints={"left_shoulder": NormalizedPoint(x=0.3, y=0.4)},
... )
>>> guide.keypoints["left_shoulder"].x
0.3
"""

import math
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .landmarks import LANDMARK_INDEX

__all__ = [
    "NormalizedPoint",
    "PixelPoint",
    "MappingContext",
    "PoseGuide",
    "Landmark",
    "DetectionResult",
    "AlignmentResult",
    "FrameReport",
]


class NormalizedPoint(BaseModel):
    """Position as a fraction of the video frame, origin top-left."""

    model_config = {"frozen": True, "extra": "forbid"}

    x: float = Field(..., description="Horizontal fraction, 0 = left edge")
    y: float = Field(..., description="Vertical fraction, 0 = top edge")


class PixelPoint(BaseModel):
    """Position in canvas pixel space, origin top-left."""

    model_config = {"frozen": True, "extra": "forbid"}

    x: float = Field(..., description="Canvas x in pixels")
    y: float = Field(..., description="Canvas y in pixels")


class MappingContext(BaseModel):
    """Transform from normalized video coordinates to canvas pixels.

    Derived once per frame from the video's intrinsic resolution and the
    canvas pixel size under "contain" fitting: the video is scaled uniformly
    to fit and centered, leaving letterbox bars on the shorter axis.

    Attributes:
        video_width: Intrinsic video width (canvas width when unknown)
        video_height: Intrinsic video height (canvas height when unknown)
        canvas_width: Canvas width in pixels
        canvas_height: Canvas height in pixels
        scale: min(canvas_width / video_width, canvas_height / video_height)
        offset_x: Horizontal letterbox bar width
        offset_y: Vertical letterbox bar height
    """

    model_config = {"frozen": True, "extra": "forbid"}

    video_width: float = Field(..., gt=0)
    video_height: float = Field(..., gt=0)
    canvas_width: float = Field(..., gt=0)
    canvas_height: float = Field(..., gt=0)
    scale: float = Field(..., gt=0)
    offset_x: float
    offset_y: float


class PoseGuide(BaseModel):
    """Static reference pose loaded once at startup.

    Keypoint names must belong to the landmark catalog; coordinates are
    normalized and authored from the camera's point of view.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(..., description="Pose name shown to the user")
    description: str = Field(..., description="Short instructions for the pose")
    keypoints: Dict[str, NormalizedPoint] = Field(..., description="Landmark name -> normalized position")

    @field_validator("keypoints")
    @classmethod
    def validate_keypoints(cls, v: Dict[str, NormalizedPoint]) -> Dict[str, NormalizedPoint]:
        """Reject unknown landmark names and non-finite coordinates."""
        unknown = sorted(name for name in v if name not in LANDMARK_INDEX)
        if unknown:
            raise ValueError(f"unknown landmark names: {unknown}")
        for name, point in v.items():
            if not (math.isfinite(point.x) and math.isfinite(point.y)):
                raise ValueError(f"keypoint '{name}' has non-finite coordinates")
        return v


class Landmark(BaseModel):
    """One detected landmark in normalized video coordinates."""

    model_config = {"frozen": True, "extra": "forbid"}

    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None


class DetectionResult(BaseModel):
    """Payload of one detector callback.

    A landmark's position in ``pose_landmarks`` is its catalog index. The
    whole list is None when no person was detected; individual entries are
    None when the detector omitted that landmark.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    pose_landmarks: Optional[List[Optional[Landmark]]] = None


class AlignmentResult(BaseModel):
    """Alignment outcome for one (detected, reference) landmark pair."""

    model_config = {"frozen": True, "extra": "forbid"}

    aligned: bool
    distance: float = Field(..., description="Euclidean distance in normalized units")
    threshold: float
    name: Optional[str] = None
    index: Optional[int] = None


class FrameReport(BaseModel):
    """What one render pass evaluated."""

    model_config = {"frozen": True, "extra": "forbid"}

    rendered: bool = True
    results: Dict[str, AlignmentResult] = Field(default_factory=dict)

    @property
    def aligned_count(self) -> int:
        return sum(1 for r in self.results.values() if r.aligned)

    @property
    def all_aligned(self) -> bool:
        """True when at least one landmark was evaluated and all are aligned."""
        return bool(self.results) and self.aligned_count == len(self.results)
