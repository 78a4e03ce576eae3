"""Per-frame overlay rendering.

Orchestrates one frame: builds the mapping context, draws the mirrored
reference guide, evaluates alignment for the major landmarks and draws the
detected landmarks, all through a DrawingSurface.

Per-Frame Algorithm:
--------------------
1. Build a MappingContext from the current video and canvas sizes
2. If the guide is shown:
   - every non-excluded guide keypoint -> small mirrored marker
   - every major landmark in the guide -> larger mirrored marker + index
     label; if detected -> detected marker, alignment line colored by
     outcome, status glyph and index label at the detected point
3. Always: every detected landmark -> small translucent marker, unmirrored

Failure Semantics:
------------------
- Missing detected landmark or guide keypoint: only the dependent drawing
  steps are skipped, the rest of the frame renders
- Unusable canvas/video geometry: render_frame raises MissingGeometryError;
  FrameRenderer.on_results logs it and skips the frame

Nothing is kept between frames: every call is a function of its inputs.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from ..alignment import DEFAULT_THRESHOLD, evaluate_landmark, landmark_at
from ..config import OverlayConfig, OverlayStyle
from ..exceptions import MissingGeometryError
from ..landmarks import EXCLUDED_LANDMARKS, LANDMARK_INDEX, MAJOR_LANDMARKS
from ..mapping import build_context, map_detected, map_guide, map_points
from ..models import DetectionResult, FrameReport, PoseGuide
from ..protocols import DrawingSurface, LandmarkLike

__all__ = ["render_frame", "FrameRenderer"]

logger = logging.getLogger(__name__)

LandmarkSeq = Sequence[Optional[LandmarkLike]]


def _landmarks_of(detection: Union[DetectionResult, LandmarkSeq, None]) -> Optional[LandmarkSeq]:
    if detection is None:
        return None
    if isinstance(detection, DetectionResult):
        return detection.pose_landmarks
    return detection


def render_frame(
    surface: DrawingSurface,
    detection: Union[DetectionResult, LandmarkSeq, None],
    guide: Optional[PoseGuide],
    *,
    video_width: Optional[float],
    video_height: Optional[float],
    canvas_width: float,
    canvas_height: float,
    mirror: bool = True,
    show_guide: bool = True,
    threshold: float = DEFAULT_THRESHOLD,
    style: Optional[OverlayStyle] = None,
) -> FrameReport:
    """Render one frame of the pose overlay.

    Args:
        surface: Drawing target in canvas pixel coordinates
        detection: Detector result (or its landmark sequence); None if the
            detector produced nothing this frame
        guide: Reference pose, None to draw detections only
        video_width: Intrinsic video width (None/0 before metadata loads)
        video_height: Intrinsic video height (None/0 before metadata loads)
        canvas_width: Canvas width in pixels
        canvas_height: Canvas height in pixels
        mirror: Mirror the guide horizontally (and its x for alignment)
        show_guide: Draw the guide and alignment feedback
        threshold: Max normalized distance counted as aligned
        style: Colors and sizes (defaults to OverlayStyle())

    Returns:
        FrameReport with the alignment result of each evaluated major landmark

    Raises:
        MissingGeometryError: Canvas or video dimensions are unusable
    """
    ctx = build_context(video_width, video_height, canvas_width, canvas_height)
    style = style or OverlayStyle()
    landmarks = _landmarks_of(detection)

    short_side = min(ctx.canvas_width, ctx.canvas_height)
    guide_size = max(3.0, short_side * style.size_factor)
    label_offset = guide_size + 6
    results = {}

    if show_guide and guide is not None:
        # Subtle full-body guide
        names = [name for name in guide.keypoints if name not in EXCLUDED_LANDMARKS]
        if names:
            coords = np.array([[guide.keypoints[n].x, guide.keypoints[n].y] for n in names])
            for gx, gy in map_points(ctx, coords, mirror=mirror):
                surface.draw_circle(
                    gx,
                    gy,
                    max(2.0, guide_size * 0.8),
                    style.guide_color,
                    style.guide_stroke,
                    style.guide_stroke_width,
                )

        for name in MAJOR_LANDMARKS:
            reference = guide.keypoints.get(name)
            if reference is None:
                logger.debug("Guide '%s' has no keypoint '%s'", guide.name, name)
                continue
            idx = LANDMARK_INDEX[name]
            g = map_guide(ctx, reference.x, reference.y, mirror)

            surface.draw_circle(
                g.x,
                g.y,
                guide_size,
                style.major_guide_color,
                style.major_guide_stroke,
                style.major_guide_stroke_width,
            )
            surface.draw_label(
                str(idx),
                g.x + label_offset,
                g.y - label_offset,
                max(10, round(guide_size * 1.2)),
                style.label_color,
            )

            detected = landmark_at(landmarks, idx)
            if detected is None:
                logger.debug("Landmark %s (%d) not detected this frame", name, idx)
                continue
            d = map_detected(ctx, detected.x, detected.y)

            surface.draw_circle(
                d.x,
                d.y,
                max(3.0, guide_size * 0.9),
                style.detected_color,
                style.detected_stroke,
                style.detected_stroke_width,
            )

            result = evaluate_landmark(detected, reference, threshold, mirror, name=name, index=idx)
            results[name] = result
            color = style.aligned_color if result.aligned else style.misaligned_color

            surface.draw_line(g.x, g.y, d.x, d.y, color, style.line_width)
            surface.draw_label(
                style.aligned_glyph if result.aligned else style.misaligned_glyph,
                d.x + label_offset,
                d.y + label_offset,
                max(12, round(guide_size * 1.5)),
                color,
            )
            surface.draw_label(str(idx), d.x + label_offset, d.y - label_offset, style.label_size, style.label_color)

    if landmarks:
        present = [lm for lm in landmarks if lm is not None]
        if present:
            landmark_size = max(2.0, short_side * style.size_factor)
            coords = np.array([[lm.x, lm.y] for lm in present])
            for x, y in map_points(ctx, coords):
                surface.draw_circle(x, y, landmark_size, style.landmark_color)

    return FrameReport(rendered=True, results=results)


class FrameRenderer:
    """Per-frame callback bound to a surface, a guide and fixed settings.

    Holds only immutable configuration; each on_results call is independent.

    Example:
        >>> renderer = FrameRenderer(surface, guide)
        >>> report = renderer.on_results(result, video_width=1280, video_height=720,
        ...                              canvas_width=640, canvas_height=480)
    """

    def __init__(
        self,
        surface: DrawingSurface,
        guide: Optional[PoseGuide],
        config: Optional[OverlayConfig] = None,
        style: Optional[OverlayStyle] = None,
    ):
        self.surface = surface
        self.guide = guide
        self.config = config or OverlayConfig()
        self.style = style or OverlayStyle()

    def on_results(
        self,
        detection: Union[DetectionResult, LandmarkSeq, None],
        *,
        video_width: Optional[float],
        video_height: Optional[float],
        canvas_width: Optional[float],
        canvas_height: Optional[float],
    ) -> FrameReport:
        """Clear the surface and render one detector result.

        Frames with unusable geometry are skipped with a warning and reported
        as not rendered; the next frame tries again.
        """
        self.surface.clear()
        try:
            return render_frame(
                self.surface,
                detection,
                self.guide,
                video_width=video_width,
                video_height=video_height,
                canvas_width=canvas_width,
                canvas_height=canvas_height,
                mirror=self.config.mirror,
                show_guide=self.config.show_guide,
                threshold=self.config.threshold,
                style=self.style,
            )
        except MissingGeometryError as e:
            logger.warning("Skipping frame: %s", e)
            return FrameReport(rendered=False)
