"""pose-overlay: reference pose overlay and alignment feedback.

Maps normalized pose landmarks from a letterboxed ("object-fit: contain")
video into canvas pixels, mirrors a reference pose for front-facing
comparison, and classifies each major landmark as aligned or misaligned.

Public API:
-----------
    from pose_overlay import (
        build_context, map_detected, map_guide, map_points,   # mapping
        normalized_distance, classify, evaluate_landmark,     # alignment
        evaluate_pose,
        render_frame, FrameRenderer,                          # rendering
        load_pose_guide, parse_pose_guide, load_detection,    # data loading
        load_settings, Settings,                              # configuration
    )

See mapping, alignment, render and guide modules for details.
"""

__version__ = "0.1.0"

from .alignment import DEFAULT_THRESHOLD, classify, evaluate_landmark, evaluate_pose, normalized_distance
from .config import OverlayConfig, OverlayStyle, Settings, load_settings
from .exceptions import ConfigError, GuideError, MissingGeometryError, OverlayError
from .guide import load_detection, load_pose_guide, parse_pose_guide
from .landmarks import EXCLUDED_LANDMARKS, LANDMARK_INDEX, MAJOR_LANDMARKS
from .mapping import build_context, map_detected, map_guide, map_points
from .models import (
    AlignmentResult,
    DetectionResult,
    FrameReport,
    Landmark,
    MappingContext,
    NormalizedPoint,
    PixelPoint,
    PoseGuide,
)
from .render import FrameRenderer, render_frame

__all__ = [
    "__version__",
    # Catalog
    "MAJOR_LANDMARKS",
    "LANDMARK_INDEX",
    "EXCLUDED_LANDMARKS",
    # Models
    "NormalizedPoint",
    "PixelPoint",
    "MappingContext",
    "PoseGuide",
    "Landmark",
    "DetectionResult",
    "AlignmentResult",
    "FrameReport",
    # Mapping
    "build_context",
    "map_detected",
    "map_guide",
    "map_points",
    # Alignment
    "DEFAULT_THRESHOLD",
    "normalized_distance",
    "classify",
    "evaluate_landmark",
    "evaluate_pose",
    # Rendering
    "render_frame",
    "FrameRenderer",
    # Loading
    "load_pose_guide",
    "parse_pose_guide",
    "load_detection",
    # Configuration
    "OverlayConfig",
    "OverlayStyle",
    "Settings",
    "load_settings",
    # Exceptions
    "OverlayError",
    "MissingGeometryError",
    "GuideError",
    "ConfigError",
]
