"""Alignment evaluation between detected landmarks and a reference pose.

Distances are computed in normalized [0, 1] space, not pixels, so a single
threshold works at every video and canvas resolution.

Mirroring Contract:
-------------------
The reference keypoint's x is replaced by 1 - x before comparing; the
detected landmark is used raw. This matches how the guide is drawn (mirrored)
next to the detection (unmirrored). Mirroring the detection instead gives
different distances.

Example:
--------
>>> result = evaluate_landmark(Landmark(x=0.7, y=0.41), NormalizedPoint(x=0.3, y=0.4))
>>> result.aligned
True
"""

import logging
import math
from typing import Dict, Optional, Sequence

from .landmarks import LANDMARK_INDEX, MAJOR_LANDMARKS
from .models import AlignmentResult, NormalizedPoint, PoseGuide
from .protocols import LandmarkLike

__all__ = [
    "DEFAULT_THRESHOLD",
    "normalized_distance",
    "classify",
    "evaluate_landmark",
    "evaluate_pose",
    "landmark_at",
]

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.06


def normalized_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two normalized points."""
    dx = x1 - x2
    dy = y1 - y2
    return math.sqrt(dx * dx + dy * dy)


def classify(distance: float, threshold: float = DEFAULT_THRESHOLD) -> bool:
    """Return True (aligned) when distance is within threshold, ties included."""
    return bool(distance <= threshold)


def evaluate_landmark(
    detected: LandmarkLike,
    reference: NormalizedPoint,
    threshold: float = DEFAULT_THRESHOLD,
    mirror: bool = True,
    *,
    name: Optional[str] = None,
    index: Optional[int] = None,
) -> AlignmentResult:
    """Compare one detected landmark against its reference keypoint.

    Args:
        detected: Detected landmark, raw normalized coordinates
        reference: Reference keypoint as authored in the guide
        threshold: Maximum normalized distance counted as aligned
        mirror: Mirror the reference x (1 - x) before comparing
        name: Landmark name recorded in the result
        index: Landmark index recorded in the result

    Returns:
        AlignmentResult with distance and aligned flag
    """
    ref_x = 1 - reference.x if mirror else reference.x
    distance = normalized_distance(detected.x, detected.y, ref_x, reference.y)
    return AlignmentResult(
        aligned=classify(distance, threshold),
        distance=distance,
        threshold=threshold,
        name=name,
        index=index,
    )


def landmark_at(landmarks: Optional[Sequence[Optional[LandmarkLike]]], index: int) -> Optional[LandmarkLike]:
    """Return the detected landmark at ``index`` or None if it was not reported."""
    if not landmarks or index >= len(landmarks):
        return None
    return landmarks[index]


def evaluate_pose(
    guide: PoseGuide,
    landmarks: Optional[Sequence[Optional[LandmarkLike]]],
    threshold: float = DEFAULT_THRESHOLD,
    mirror: bool = True,
    names: Sequence[str] = MAJOR_LANDMARKS,
) -> Dict[str, AlignmentResult]:
    """Evaluate alignment for each named landmark present on both sides.

    Landmarks missing from the guide or from the detection are skipped; the
    remaining ones are still evaluated.

    Returns:
        Mapping of landmark name to AlignmentResult, in ``names`` order
    """
    results: Dict[str, AlignmentResult] = {}
    for name in names:
        reference = guide.keypoints.get(name)
        if reference is None:
            logger.debug("Guide '%s' has no keypoint '%s', skipping", guide.name, name)
            continue
        idx = LANDMARK_INDEX[name]
        detected = landmark_at(landmarks, idx)
        if detected is None:
            logger.debug("Landmark %s (%d) not detected, skipping", name, idx)
            continue
        results[name] = evaluate_landmark(detected, reference, threshold, mirror, name=name, index=idx)
    return results
