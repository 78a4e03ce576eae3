"""Pytest configuration and shared fixtures for pose-overlay tests.

Provides:
- Fixture data paths (guides, detections)
- Loaded guide and detection objects
- RecordingSurface: a DrawingSurface fake that records every call
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from pose_overlay.guide import load_detection, load_pose_guide
from pose_overlay.models import DetectionResult, Landmark, PoseGuide

# ============================================================================
# Path Configuration
# ============================================================================


@pytest.fixture(scope="session")
def fixtures_root() -> Path:
    """Root directory containing all test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def guides_root(fixtures_root: Path) -> Path:
    return fixtures_root / "guides"


@pytest.fixture(scope="session")
def detections_root(fixtures_root: Path) -> Path:
    return fixtures_root / "detections"


@pytest.fixture(scope="session")
def warrior_guide_path(guides_root: Path) -> Path:
    return guides_root / "warrior_ii.json"


@pytest.fixture(scope="session")
def aligned_detection_path(detections_root: Path) -> Path:
    return detections_root / "aligned.json"


# ============================================================================
# Loaded Data
# ============================================================================


@pytest.fixture
def warrior_guide(warrior_guide_path: Path) -> PoseGuide:
    return load_pose_guide(warrior_guide_path)


@pytest.fixture
def aligned_detection(aligned_detection_path: Path) -> DetectionResult:
    """Detection whose major landmarks all sit within 0.06 of the mirrored guide."""
    return load_detection(aligned_detection_path)


def make_detection(points: Dict[int, Optional[Tuple[float, float]]], size: int = 33) -> DetectionResult:
    """Build a DetectionResult with landmarks at the given indices, None elsewhere."""
    landmarks: List[Optional[Landmark]] = [None] * size
    for idx, point in points.items():
        landmarks[idx] = Landmark(x=point[0], y=point[1]) if point is not None else None
    return DetectionResult(pose_landmarks=landmarks)


@pytest.fixture
def detection_factory():
    """Factory fixture: detection_factory({11: (0.7, 0.41)}) -> DetectionResult."""
    return make_detection


# ============================================================================
# Drawing Surface Fake
# ============================================================================


@dataclass
class RecordingSurface:
    """DrawingSurface that records calls instead of drawing."""

    calls: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def clear(self) -> None:
        self.calls.append(("clear", {}))

    def draw_circle(self, x, y, radius, fill, stroke=None, line_width=1.0) -> None:
        self.calls.append(("circle", {"x": x, "y": y, "radius": radius, "fill": fill, "stroke": stroke, "line_width": line_width}))

    def draw_label(self, text, x, y, size=12, color=(0, 0, 0, 1.0)) -> None:
        self.calls.append(("label", {"text": text, "x": x, "y": y, "size": size, "color": color}))

    def draw_line(self, x1, y1, x2, y2, color, line_width=1.0) -> None:
        self.calls.append(("line", {"x1": x1, "y1": y1, "x2": x2, "y2": y2, "color": color, "line_width": line_width}))

    def of_kind(self, kind: str) -> List[Dict[str, Any]]:
        return [args for name, args in self.calls if name == kind]


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()
