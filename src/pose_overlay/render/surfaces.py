"""Concrete drawing surfaces.

- OpenCVSurface: draws onto a BGR numpy image (live video frames, PNG output)
- MatplotlibSurface: draws onto a matplotlib Axes in canvas pixel coordinates

Both implement the DrawingSurface protocol. Colors arrive as (r, g, b, alpha)
with 0-255 channels and alpha in [0, 1].
"""

import logging
import math
from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Circle
import numpy as np

from ..models import MappingContext
from ..protocols import RGBA

__all__ = ["OpenCVSurface", "MatplotlibSurface", "letterbox_frame"]

logger = logging.getLogger(__name__)

# Hershey fonts only cover ASCII
GLYPH_FALLBACKS = {"✓": "OK", "✕": "X"}

# FONT_HERSHEY_SIMPLEX cap height at fontScale=1 is about 22 px
HERSHEY_PX_PER_SCALE = 22.0

# cv2 takes int32 pixel coordinates; keep headroom for radius and thickness
MAX_PIXEL = 2**30


def _drawable(*values: float) -> bool:
    return all(math.isfinite(v) and abs(v) < MAX_PIXEL for v in values)


def _to_bgr(color: RGBA) -> Tuple[int, int, int]:
    r, g, b, _ = color
    return int(b), int(g), int(r)


def _to_mpl(color: RGBA) -> Tuple[float, float, float, float]:
    r, g, b, a = color
    return r / 255.0, g / 255.0, b / 255.0, float(a)


def _ascii_text(text: str) -> str:
    for glyph, fallback in GLYPH_FALLBACKS.items():
        text = text.replace(glyph, fallback)
    return text.encode("ascii", "replace").decode("ascii")


def letterbox_frame(frame: np.ndarray, ctx: MappingContext, background: Tuple[int, int, int] = (0, 0, 0)) -> np.ndarray:
    """Place a video frame inside a canvas-sized image with contain fitting.

    The frame is resized by ``ctx.scale`` and centered, matching exactly where
    map_detected puts landmarks.

    Args:
        frame: HxWx3 BGR video frame
        ctx: Mapping context built from the frame size and canvas size
        background: BGR color of the letterbox bars

    Returns:
        New uint8 image of shape (canvas_height, canvas_width, 3)
    """
    cw, ch = int(round(ctx.canvas_width)), int(round(ctx.canvas_height))
    canvas = np.zeros((ch, cw, 3), dtype=np.uint8)
    canvas[:] = background

    new_w = max(1, min(cw, int(round(ctx.video_width * ctx.scale))))
    new_h = max(1, min(ch, int(round(ctx.video_height * ctx.scale))))
    resized = cv2.resize(frame, (new_w, new_h), interpolation=cv2.INTER_AREA)

    x0 = max(0, int(round(ctx.offset_x)))
    y0 = max(0, int(round(ctx.offset_y)))
    x1 = min(cw, x0 + new_w)
    y1 = min(ch, y0 + new_h)
    canvas[y0:y1, x0:x1] = resized[: y1 - y0, : x1 - x0]
    return canvas


class OpenCVSurface:
    """Drawing surface backed by a BGR uint8 image.

    The image given at construction (or via set_background) is the backdrop:
    clear() restores it, so the overlay can be redrawn every frame on top of
    the current video frame.
    """

    def __init__(self, image: np.ndarray):
        if image.ndim != 3 or image.shape[2] != 3:
            raise ValueError(f"Expected an HxWx3 image, got shape {image.shape}")
        self._background = image.copy()
        self.image = image.copy()

    @classmethod
    def blank(cls, width: int, height: int, color: Tuple[int, int, int] = (26, 26, 26)) -> "OpenCVSurface":
        image = np.zeros((int(height), int(width), 3), dtype=np.uint8)
        image[:] = color
        return cls(image)

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    def set_background(self, image: np.ndarray) -> None:
        """Replace the backdrop (e.g. the next video frame) and clear."""
        self._background = image.copy()
        self.clear()

    def clear(self) -> None:
        self.image = self._background.copy()

    def _blend(self, color: RGBA, draw) -> None:
        alpha = float(color[3])
        if alpha <= 0.0:
            return
        if alpha >= 1.0:
            draw(self.image, _to_bgr(color))
            return
        overlay = self.image.copy()
        draw(overlay, _to_bgr(color))
        cv2.addWeighted(overlay, alpha, self.image, 1.0 - alpha, 0, dst=self.image)

    def draw_circle(
        self,
        x: float,
        y: float,
        radius: float,
        fill: RGBA,
        stroke: Optional[RGBA] = None,
        line_width: float = 1.0,
    ) -> None:
        if not _drawable(x, y, radius):
            return
        center = (int(round(x)), int(round(y)))
        r = max(1, int(round(radius)))
        self._blend(fill, lambda img, c: cv2.circle(img, center, r, c, thickness=-1, lineType=cv2.LINE_AA))
        if stroke is not None:
            thickness = max(1, int(round(line_width)))
            self._blend(stroke, lambda img, c: cv2.circle(img, center, r, c, thickness=thickness, lineType=cv2.LINE_AA))

    def draw_label(self, text: str, x: float, y: float, size: float = 12, color: RGBA = (0, 0, 0, 1.0)) -> None:
        if not _drawable(x, y):
            return
        origin = (int(round(x)), int(round(y)))
        scale = size / HERSHEY_PX_PER_SCALE
        label = _ascii_text(text)
        self._blend(
            color,
            lambda img, c: cv2.putText(img, label, origin, cv2.FONT_HERSHEY_SIMPLEX, scale, c, 1, cv2.LINE_AA),
        )

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, color: RGBA, line_width: float = 1.0) -> None:
        if not _drawable(x1, y1, x2, y2):
            return
        p1 = (int(round(x1)), int(round(y1)))
        p2 = (int(round(x2)), int(round(y2)))
        thickness = max(1, int(round(line_width)))
        self._blend(color, lambda img, c: cv2.line(img, p1, p2, c, thickness, cv2.LINE_AA))

    def save(self, path: Union[Path, str]) -> Path:
        """Write the current image to disk (format from the file suffix)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        if not cv2.imwrite(str(path), self.image):
            raise OSError(f"Failed to write image: {path}")
        logger.info("Overlay image written to %s", path)
        return path


class MatplotlibSurface:
    """Drawing surface backed by a matplotlib Axes.

    The axes are set up in canvas pixel coordinates with the y axis inverted,
    so (0, 0) is the top-left corner like on a canvas.
    """

    def __init__(self, ax: Axes, width: float, height: float, background: Optional[np.ndarray] = None):
        self.ax = ax
        self.width = width
        self.height = height
        self.background = background
        self._setup_axes()

    @classmethod
    def create(cls, width: float, height: float, dpi: int = 100, background: Optional[np.ndarray] = None) -> "MatplotlibSurface":
        """Create a standalone figure sized to the canvas (one pixel per pixel)."""
        fig = Figure(figsize=(width / dpi, height / dpi), dpi=dpi)
        ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
        return cls(ax, width, height, background=background)

    def _setup_axes(self) -> None:
        ax = self.ax
        if self.background is not None:
            # background is BGR (OpenCV convention), imshow wants RGB
            ax.imshow(self.background[..., ::-1], extent=(0, self.width, self.height, 0), zorder=0)
        ax.set_xlim(0, self.width)
        ax.set_ylim(self.height, 0)
        ax.set_aspect("equal")
        ax.set_axis_off()
        ax.set_facecolor("#1a1a1a")

    def clear(self) -> None:
        self.ax.cla()
        self._setup_axes()

    def draw_circle(
        self,
        x: float,
        y: float,
        radius: float,
        fill: RGBA,
        stroke: Optional[RGBA] = None,
        line_width: float = 1.0,
    ) -> None:
        patch = Circle(
            (x, y),
            radius,
            facecolor=_to_mpl(fill),
            edgecolor=_to_mpl(stroke) if stroke is not None else "none",
            linewidth=line_width if stroke is not None else 0.0,
            zorder=2,
        )
        self.ax.add_patch(patch)

    def draw_label(self, text: str, x: float, y: float, size: float = 12, color: RGBA = (0, 0, 0, 1.0)) -> None:
        self.ax.text(x, y, text, fontsize=size, color=_to_mpl(color), ha="left", va="baseline", zorder=3)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, color: RGBA, line_width: float = 1.0) -> None:
        self.ax.plot([x1, x2], [y1, y2], color=_to_mpl(color), linewidth=line_width, zorder=1)

    def save(self, path: Union[Path, str]) -> Path:
        """Save the figure that owns the axes."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.ax.figure.savefig(path, dpi=self.ax.figure.dpi, facecolor="#1a1a1a")
        logger.info("Overlay figure written to %s", path)
        return path
