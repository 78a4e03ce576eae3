"""Command-line interface for pose-overlay.

Commands:
---------
- check: Evaluate a recorded detection against a pose guide and print one
  line per major landmark. Exit code 0 when every evaluated landmark is
  aligned, 1 otherwise. --report also writes the results as JSON.
- render: Render one overlay frame to an image file, optionally on top of a
  letterboxed video frame.

Example:
--------
    pose-overlay check guide.json frame.json --threshold 0.05
    pose-overlay check guide.json frame.json --report alignment.json
    pose-overlay render guide.json frame.json --output overlay.png \\
        --video-size 1920x1080 --canvas-size 640x640
"""

from enum import Enum
import logging
from pathlib import Path
from typing import Optional, Tuple

import cv2
import typer

from .alignment import evaluate_pose
from .config import OverlayConfig, Settings, load_settings
from .exceptions import ConfigError, GuideError, MissingGeometryError
from .guide import load_detection, load_pose_guide
from .landmarks import LANDMARK_INDEX, MAJOR_LANDMARKS
from .mapping import build_context
from .models import DetectionResult, PoseGuide
from .render import FrameRenderer, MatplotlibSurface, OpenCVSurface, letterbox_frame
from .utils import configure_logging, write_json

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="pose-overlay",
    help="Overlay a reference pose on detected landmarks and report alignment.",
    no_args_is_help=True,
)


class Backend(str, Enum):
    opencv = "opencv"
    matplotlib = "matplotlib"


def _parse_size(value: str, option: str) -> Tuple[int, int]:
    """Parse 'WIDTHxHEIGHT' into a pair of ints."""
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise typer.BadParameter(f"expected WIDTHxHEIGHT, got '{value}'", param_hint=option) from None
    return width, height


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _load_settings(config: Optional[Path]) -> Settings:
    try:
        settings = load_settings(config)
    except (FileNotFoundError, ConfigError) as e:
        _fail(str(e))
    configure_logging(settings.logging.level, settings.logging.structured)
    return settings


def _overlay_config(settings: Settings, threshold: Optional[float], mirror: Optional[bool], show_guide: Optional[bool] = None) -> OverlayConfig:
    """Command-line options take precedence over the settings file."""
    updates = {"threshold": threshold, "mirror": mirror, "show_guide": show_guide}
    merged = {**settings.overlay.model_dump(), **{k: v for k, v in updates.items() if v is not None}}
    try:
        return OverlayConfig(**merged)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None


def _load_inputs(guide_path: Path, detection_path: Path) -> Tuple[PoseGuide, DetectionResult]:
    try:
        guide = load_pose_guide(guide_path)
    except GuideError as e:
        _fail(str(e))
    try:
        detection = load_detection(detection_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))
    return guide, detection


@app.command()
def check(
    guide_path: Path = typer.Argument(..., metavar="GUIDE", help="Pose guide JSON"),
    detection_path: Path = typer.Argument(..., metavar="DETECTION", help="Recorded detection JSON"),
    threshold: Optional[float] = typer.Option(None, "--threshold", "-t", help="Alignment threshold (normalized units)"),
    mirror: Optional[bool] = typer.Option(None, "--mirror/--no-mirror", help="Mirror the guide before comparing"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write the alignment results as JSON"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings TOML file"),
) -> None:
    """Report per-landmark alignment for one detection."""
    settings = _load_settings(config)
    overlay = _overlay_config(settings, threshold, mirror)
    guide, detection = _load_inputs(guide_path, detection_path)

    results = evaluate_pose(guide, detection.pose_landmarks, overlay.threshold, overlay.mirror)

    typer.echo(f"{guide.name}: threshold={overlay.threshold:g} mirror={overlay.mirror}")
    for name in MAJOR_LANDMARKS:
        result = results.get(name)
        if result is None:
            typer.echo(f"{name:<15} {LANDMARK_INDEX[name]:>2}  SKIPPED")
            continue
        status = "ALIGNED" if result.aligned else "MISALIGNED"
        typer.echo(f"{name:<15} {result.index:>2}  {status:<10} {result.distance:.4f}")

    aligned = sum(1 for r in results.values() if r.aligned)
    typer.echo(f"{aligned}/{len(results)} aligned")
    if report is not None:
        write_json(
            report,
            {
                "guide": guide.name,
                "threshold": overlay.threshold,
                "mirror": overlay.mirror,
                "aligned": aligned,
                "evaluated": len(results),
                "results": {name: r.model_dump(exclude={"name"}) for name, r in results.items()},
            },
        )
        logger.info("Alignment report written to %s", report)
    if not results or aligned != len(results):
        raise typer.Exit(code=1)


@app.command()
def render(
    guide_path: Path = typer.Argument(..., metavar="GUIDE", help="Pose guide JSON"),
    detection_path: Path = typer.Argument(..., metavar="DETECTION", help="Recorded detection JSON"),
    output: Path = typer.Option(..., "--output", "-o", help="Image file to write (.png, .jpg)"),
    canvas_size: str = typer.Option("640x480", "--canvas-size", help="Canvas size as WIDTHxHEIGHT"),
    video_size: Optional[str] = typer.Option(None, "--video-size", help="Intrinsic video size as WIDTHxHEIGHT"),
    frame: Optional[Path] = typer.Option(None, "--frame", help="Video frame image drawn under the overlay"),
    backend: Backend = typer.Option(Backend.opencv, "--backend", help="Drawing backend"),
    show_guide: Optional[bool] = typer.Option(None, "--show-guide/--hide-guide", help="Draw the reference guide"),
    threshold: Optional[float] = typer.Option(None, "--threshold", "-t", help="Alignment threshold (normalized units)"),
    mirror: Optional[bool] = typer.Option(None, "--mirror/--no-mirror", help="Mirror the guide"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings TOML file"),
) -> None:
    """Render one overlay frame to an image file."""
    settings = _load_settings(config)
    overlay = _overlay_config(settings, threshold, mirror, show_guide)
    canvas_w, canvas_h = _parse_size(canvas_size, "--canvas-size")
    guide, detection = _load_inputs(guide_path, detection_path)

    video_w: Optional[int] = None
    video_h: Optional[int] = None
    image = None
    if frame is not None:
        image = cv2.imread(str(frame))
        if image is None:
            _fail(f"Cannot read frame image: {frame}")
        video_h, video_w = image.shape[:2]
    elif video_size is not None:
        video_w, video_h = _parse_size(video_size, "--video-size")

    try:
        ctx = build_context(video_w, video_h, canvas_w, canvas_h)
    except MissingGeometryError as e:
        _fail(str(e))

    background = letterbox_frame(image, ctx) if image is not None else None
    if backend is Backend.matplotlib:
        surface = MatplotlibSurface.create(canvas_w, canvas_h, background=background)
    elif background is not None:
        surface = OpenCVSurface(background)
    else:
        surface = OpenCVSurface.blank(canvas_w, canvas_h)

    renderer = FrameRenderer(surface, guide, overlay, settings.style)
    report = renderer.on_results(
        detection,
        video_width=video_w,
        video_height=video_h,
        canvas_width=canvas_w,
        canvas_height=canvas_h,
    )
    if not report.rendered:
        _fail("Frame was not rendered (missing geometry)")

    path = surface.save(output)
    typer.echo(f"{report.aligned_count}/{len(report.results)} aligned -> {path}")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
