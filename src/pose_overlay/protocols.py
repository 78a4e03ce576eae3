"""Protocol definitions for the collaborators of the overlay core.

Protocols provide structural subtyping so the core never imports a concrete
detector or drawing backend. Any object with the right attributes or methods
satisfies them: MediaPipe landmark objects, our own Landmark model, a
matplotlib or OpenCV surface, or a recording fake in tests.
"""

from typing import Optional, Protocol, Tuple

__all__ = ["RGBA", "LandmarkLike", "DrawingSurface"]

# (red, green, blue, alpha) with 0-255 channels and alpha in [0, 1]
RGBA = Tuple[int, int, int, float]


class LandmarkLike(Protocol):
    """Minimal interface of one detected landmark.

    Attributes:
        x: Normalized horizontal position (0 = left edge of the video)
        y: Normalized vertical position (0 = top edge of the video)
    """

    x: float
    y: float


class DrawingSurface(Protocol):
    """Drawing capability the frame renderer needs from a canvas.

    Coordinates are canvas pixels, origin top-left, y increasing downward.
    """

    def clear(self) -> None: ...

    def draw_circle(
        self,
        x: float,
        y: float,
        radius: float,
        fill: RGBA,
        stroke: Optional[RGBA] = None,
        line_width: float = 1.0,
    ) -> None: ...

    def draw_label(self, text: str, x: float, y: float, size: float = 12, color: RGBA = (0, 0, 0, 1.0)) -> None: ...

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, color: RGBA, line_width: float = 1.0) -> None: ...
