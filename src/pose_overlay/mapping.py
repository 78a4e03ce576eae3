"""Coordinate mapping from normalized video coordinates to canvas pixels.

The video is shown with "contain" fitting: scaled uniformly until it fits the
canvas, then centered, leaving letterbox bars on the shorter axis. Landmarks
come normalized to the video's intrinsic frame, so they must be scaled by the
same factor and shifted by the bar size to line up with what the user sees.

Key Features:
-------------
- **Letterbox Compensation**: scale = min(cw / vw, ch / vh), centered offsets
- **Metadata Fallback**: Missing or zero video size falls back to the canvas
  size (scale 1, no bars) instead of failing
- **Guide Mirroring**: Reference poses are authored from the camera's point
  of view and flipped horizontally to face the user
- **No Input Validation on Points**: NaN or out-of-range coordinates give
  NaN or out-of-range pixels

Main Functions:
---------------
- build_context: Derive the per-frame MappingContext
- map_detected: Map a detected landmark (never mirrored)
- map_guide: Map a reference keypoint (mirrored by default)
- map_points: Vectorized mapping of an (N, 2) array

Example:
--------
>>> ctx = build_context(1920, 1080, 640, 640)
>>> point = map_detected(ctx, 0.0, 0.0)  # (0, 140): top of the letterboxed video
"""

import logging
import math
from typing import Optional

import numpy as np

from .exceptions import MissingGeometryError
from .models import MappingContext, PixelPoint

__all__ = ["build_context", "map_detected", "map_guide", "map_points"]

logger = logging.getLogger(__name__)


def _canvas_dimension(name: str, value: Optional[float]) -> float:
    if value is None or not math.isfinite(value) or value <= 0:
        raise MissingGeometryError(f"Invalid canvas dimension {name}", {name: value})
    return float(value)


def _video_dimension(name: str, value: Optional[float], fallback: float) -> float:
    # 0 / None means the video metadata has not loaded yet
    if value is None or value == 0:
        return fallback
    if not math.isfinite(value) or value < 0:
        raise MissingGeometryError(f"Invalid video dimension {name}", {name: value})
    return float(value)


def build_context(
    video_width: Optional[float],
    video_height: Optional[float],
    canvas_width: Optional[float],
    canvas_height: Optional[float],
) -> MappingContext:
    """Build the video -> canvas mapping for the current frame.

    Args:
        video_width: Intrinsic video width in pixels (None or 0 if unknown)
        video_height: Intrinsic video height in pixels (None or 0 if unknown)
        canvas_width: Canvas width in pixels
        canvas_height: Canvas height in pixels

    Returns:
        MappingContext with scale and letterbox offsets

    Raises:
        MissingGeometryError: Canvas size missing, zero or non-finite,
            video size negative or non-finite, or a scale that underflows

    Example:
        >>> ctx = build_context(640, 480, 640, 480)
        >>> ctx.scale, ctx.offset_x, ctx.offset_y
        (1.0, 0.0, 0.0)
    """
    cw = _canvas_dimension("canvas_width", canvas_width)
    ch = _canvas_dimension("canvas_height", canvas_height)
    vw = _video_dimension("video_width", video_width, cw)
    vh = _video_dimension("video_height", video_height, ch)

    if not video_width or not video_height:
        logger.debug("Video size unknown, using canvas size %sx%s", cw, ch)

    scale = min(cw / vw, ch / vh)
    if not (math.isfinite(scale) and scale > 0):
        raise MissingGeometryError("Video does not fit the canvas", {"video": (vw, vh), "canvas": (cw, ch)})
    offset_x = (cw - vw * scale) / 2
    offset_y = (ch - vh * scale) / 2

    return MappingContext(
        video_width=vw,
        video_height=vh,
        canvas_width=cw,
        canvas_height=ch,
        scale=scale,
        offset_x=offset_x,
        offset_y=offset_y,
    )


def map_detected(ctx: MappingContext, norm_x: float, norm_y: float) -> PixelPoint:
    """Map a normalized detected landmark to canvas pixels (no mirroring)."""
    x = norm_x * ctx.video_width * ctx.scale + ctx.offset_x
    y = norm_y * ctx.video_height * ctx.scale + ctx.offset_y
    return PixelPoint(x=x, y=y)


def map_guide(ctx: MappingContext, norm_x: float, norm_y: float, mirror: bool = True) -> PixelPoint:
    """Map a normalized reference keypoint to canvas pixels.

    With ``mirror`` the keypoint is flipped horizontally (x -> 1 - x) before
    mapping, turning a pose authored from the camera's view into the
    front-facing mirror view the user sees.
    """
    gx = 1 - norm_x if mirror else norm_x
    return map_detected(ctx, gx, norm_y)


def map_points(ctx: MappingContext, points: np.ndarray, mirror: bool = False) -> np.ndarray:
    """Map an (N, 2) array of normalized points to canvas pixels.

    Args:
        ctx: Mapping context for the current frame
        points: Array of normalized (x, y) rows
        mirror: Flip x before mapping (as map_guide does)

    Returns:
        Float array of shape (N, 2) with canvas pixel coordinates

    Raises:
        ValueError: If points is not shaped (N, 2)
    """
    pts = np.asarray(points, dtype=float)
    if pts.size == 0:
        return np.empty((0, 2), dtype=float)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"points must have shape (N, 2), got {pts.shape}")

    xs = 1.0 - pts[:, 0] if mirror else pts[:, 0]
    out = np.empty_like(pts)
    out[:, 0] = xs * ctx.video_width * ctx.scale + ctx.offset_x
    out[:, 1] = pts[:, 1] * ctx.video_height * ctx.scale + ctx.offset_y
    return out
