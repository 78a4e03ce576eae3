"""Frame rendering for pose-overlay.

Public API:
-----------
    from pose_overlay.render import (
        render_frame,       # one frame, pure except for surface calls
        FrameRenderer,      # per-frame callback bound to surface + settings
        OpenCVSurface,      # BGR numpy image backend
        MatplotlibSurface,  # matplotlib Axes backend
        letterbox_frame,    # contain-fit a video frame into the canvas
    )
"""

from .core import FrameRenderer, render_frame
from .surfaces import MatplotlibSurface, OpenCVSurface, letterbox_frame

__all__ = [
    "render_frame",
    "FrameRenderer",
    "OpenCVSurface",
    "MatplotlibSurface",
    "letterbox_frame",
]
