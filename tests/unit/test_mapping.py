"""Unit tests for coordinate mapping.

Tests contain-fit scaling, letterbox offsets, guide mirroring, the missing
video metadata fallback and geometry errors.
"""

import math

import numpy as np
import pytest

from pose_overlay.exceptions import MissingGeometryError
from pose_overlay.mapping import build_context, map_detected, map_guide, map_points

pytestmark = pytest.mark.unit


class TestBuildContext:
    """Test MappingContext derivation."""

    def test_Should_UseUnitScale_When_VideoMatchesCanvas(self):
        """Same size video and canvas: no scaling, no bars."""
        # Act
        ctx = build_context(640, 480, 640, 480)

        # Assert
        assert ctx.scale == 1.0
        assert ctx.offset_x == 0.0
        assert ctx.offset_y == 0.0

    def test_Should_LetterboxVertically_When_VideoWiderThanCanvas(self):
        """1920x1080 into 640x640: scale 1/3, bars of 140 px above and below."""
        # Act
        ctx = build_context(1920, 1080, 640, 640)

        # Assert
        assert ctx.scale == pytest.approx(1 / 3)
        assert ctx.offset_x == pytest.approx(0.0, abs=1e-9)
        assert ctx.offset_y == pytest.approx(140.0)

    def test_Should_LetterboxHorizontally_When_VideoTallerThanCanvas(self):
        """Portrait video in a landscape canvas gets bars left and right."""
        # Act
        ctx = build_context(480, 640, 640, 480)

        # Assert
        assert ctx.scale == pytest.approx(0.75)
        assert ctx.offset_x == pytest.approx((640 - 480 * 0.75) / 2)
        assert ctx.offset_y == pytest.approx(0.0, abs=1e-9)

    def test_Should_UpscaleVideo_When_CanvasLarger(self):
        # Act
        ctx = build_context(320, 240, 1280, 720)

        # Assert
        assert ctx.scale == pytest.approx(3.0)
        assert ctx.offset_x == pytest.approx((1280 - 960) / 2)
        assert ctx.offset_y == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize("video_w, video_h", [(None, None), (0, 0), (0, 1080), (1920, None)])
    def test_Should_FallBackToCanvasSize_When_VideoSizeUnknown(self, video_w, video_h):
        """Before video metadata loads, each missing side uses the canvas side."""
        # Act
        ctx = build_context(video_w, video_h, 800, 600)

        # Assert
        assert ctx.video_width == (video_w or 800)
        assert ctx.video_height == (video_h or 600)

    def test_Should_UseIdentityTransform_When_BothVideoDimensionsMissing(self):
        # Act
        ctx = build_context(None, None, 800, 600)

        # Assert
        assert ctx.scale == 1.0
        assert (ctx.offset_x, ctx.offset_y) == (0.0, 0.0)

    @pytest.mark.parametrize("canvas_w, canvas_h", [(0, 480), (640, 0), (None, 480), (-1, 480), (math.nan, 480), (640, math.inf)])
    def test_Should_RaiseMissingGeometry_When_CanvasUnusable(self, canvas_w, canvas_h):
        """A canvas without a usable size cannot be drawn on."""
        # Act & Assert
        with pytest.raises(MissingGeometryError):
            build_context(640, 480, canvas_w, canvas_h)

    @pytest.mark.parametrize("video_w, video_h", [(-640, 480), (math.nan, 480), (640, math.inf)])
    def test_Should_RaiseMissingGeometry_When_VideoSizeInvalid(self, video_w, video_h):
        # Act & Assert
        with pytest.raises(MissingGeometryError):
            build_context(video_w, video_h, 640, 480)

    def test_Should_RaiseMissingGeometry_When_ScaleUnderflows(self):
        """A huge video in a tiny canvas gives scale 0.0, which is unusable geometry."""
        # Act & Assert
        with pytest.raises(MissingGeometryError, match="does not fit"):
            build_context(1e300, 1e300, 1e-300, 1e-300)

    def test_Should_IncludeOffendingValue_When_GeometryErrorRaised(self):
        # Act
        with pytest.raises(MissingGeometryError) as exc_info:
            build_context(640, 480, 0, 480)

        # Assert
        assert exc_info.value.context == {"canvas_width": 0}
        assert "canvas_width=0" in str(exc_info.value)


class TestMapDetected:
    """Test detected landmark mapping (never mirrored)."""

    def test_Should_MapCenterToCanvasCenter_When_AspectRatiosMatch(self):
        # Arrange
        ctx = build_context(640, 480, 1280, 960)

        # Act
        p = map_detected(ctx, 0.5, 0.5)

        # Assert
        assert p.x == pytest.approx(640)
        assert p.y == pytest.approx(480)

    def test_Should_MapCornersToLetterboxBoundary_When_AspectRatiosDiffer(self):
        """Video corners land on the edges of the visible video, not the canvas."""
        # Arrange
        ctx = build_context(1920, 1080, 640, 640)

        # Act
        top_left = map_detected(ctx, 0.0, 0.0)
        bottom_right = map_detected(ctx, 1.0, 1.0)

        # Assert
        assert top_left.x == pytest.approx(0.0, abs=1e-9)
        assert top_left.y == pytest.approx(140.0)
        assert bottom_right.x == pytest.approx(640.0)
        assert bottom_right.y == pytest.approx(500.0)

    def test_Should_PropagateNaN_When_CoordinateIsNaN(self):
        # Arrange
        ctx = build_context(640, 480, 640, 480)

        # Act
        p = map_detected(ctx, math.nan, 0.5)

        # Assert
        assert math.isnan(p.x)
        assert p.y == pytest.approx(240)

    def test_Should_MapOutsideCanvas_When_CoordinateOutOfRange(self):
        """Out-of-range input is not clamped."""
        # Arrange
        ctx = build_context(640, 480, 640, 480)

        # Act
        p = map_detected(ctx, 1.5, -0.25)

        # Assert
        assert p.x == pytest.approx(960)
        assert p.y == pytest.approx(-120)


class TestMapGuide:
    """Test reference keypoint mapping with mirroring."""

    def test_Should_FlipHorizontally_When_MirrorEnabled(self):
        # Arrange
        ctx = build_context(640, 480, 640, 480)

        # Act
        p = map_guide(ctx, 0.2, 0.3, mirror=True)

        # Assert
        assert p.x == pytest.approx(0.8 * 640)
        assert p.y == pytest.approx(0.3 * 480)

    def test_Should_MirrorByDefault_When_FlagOmitted(self):
        ctx = build_context(640, 480, 640, 480)

        assert map_guide(ctx, 0.2, 0.3) == map_guide(ctx, 0.2, 0.3, mirror=True)

    def test_Should_MatchDetectedMapping_When_MirrorDisabled(self):
        ctx = build_context(1920, 1080, 640, 640)

        assert map_guide(ctx, 0.2, 0.3, mirror=False) == map_detected(ctx, 0.2, 0.3)

    def test_Should_MirrorWithinVisibleVideo_When_Letterboxed(self):
        """Mirroring flips around the video center, not the canvas center."""
        # Arrange
        ctx = build_context(480, 640, 640, 480)

        # Act
        mirrored = map_guide(ctx, 0.0, 0.5, mirror=True)
        right_edge = map_detected(ctx, 1.0, 0.5)

        # Assert
        assert mirrored.x == pytest.approx(right_edge.x)
        assert mirrored.x < 640


class TestMapPoints:
    """Test vectorized mapping."""

    def test_Should_MatchScalarMapping_When_ArrayGiven(self):
        """Bulk mapping agrees point by point with map_detected."""
        # Arrange
        ctx = build_context(1920, 1080, 640, 640)
        pts = np.array([[0.0, 0.0], [0.25, 0.75], [1.0, 1.0]])

        # Act
        out = map_points(ctx, pts)

        # Assert
        for (nx, ny), (px, py) in zip(pts, out):
            expected = map_detected(ctx, nx, ny)
            assert px == pytest.approx(expected.x)
            assert py == pytest.approx(expected.y)

    def test_Should_MatchGuideMapping_When_MirrorEnabled(self):
        # Arrange
        ctx = build_context(1280, 720, 640, 480)
        pts = np.array([[0.1, 0.2], [0.9, 0.4]])

        # Act
        out = map_points(ctx, pts, mirror=True)

        # Assert
        for (nx, ny), (px, py) in zip(pts, out):
            expected = map_guide(ctx, nx, ny, mirror=True)
            assert px == pytest.approx(expected.x)
            assert py == pytest.approx(expected.y)

    def test_Should_ReturnEmptyArray_When_NoPoints(self):
        # Arrange
        ctx = build_context(640, 480, 640, 480)

        # Act
        out = map_points(ctx, np.empty((0, 2)))

        # Assert
        assert out.shape == (0, 2)

    def test_Should_RaiseValueError_When_ShapeInvalid(self):
        ctx = build_context(640, 480, 640, 480)

        with pytest.raises(ValueError):
            map_points(ctx, np.array([0.1, 0.2, 0.3]))

    def test_Should_NotModifyInput_When_Mirroring(self):
        # Arrange
        ctx = build_context(640, 480, 640, 480)
        pts = np.array([[0.1, 0.2]])

        # Act
        map_points(ctx, pts, mirror=True)

        # Assert
        assert pts[0, 0] == 0.1
