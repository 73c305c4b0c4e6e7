#!/usr/bin/env python3
import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from PIL import Image, UnidentifiedImageError
from pydantic import ValidationError

from config import PRESETS, DAY1_LARGE, PlotConfig, get_preset, load_config
from constants import FRAME_PREFIX, FRAME_SUFFIX, GIF_DIR, INPUT_DIR, MAGICK_BINARY, OUTPUT_DIR
from frame_renderer import FrameRenderer, clear_generated_frames, frame_count
from gif_assembler import GifAssembler, pending_frames
from gpx_reader import read_gpx
from rich_console import (
    console,
    setup_rich_logging,
    create_progress,
    create_gif_progress,
    print_banner,
    print_config_summary,
    print_phase,
    print_completion_summary,
    print_error,
)
from track_projection import (
    GeoCoordinate,
    PixelPoint,
    ProjectionCalibrator,
    TrackPlotterError,
    MalformedInputError,
    DegenerateGeometryError,
    PrecisionEdgeCaseError,
    GifAssemblyError,
    rectify,
    resample,
)
from track_projection.geo_math import geographic_aspect_ratio

logger = logging.getLogger(__name__)

# Relative difference between image and geographic aspect ratio worth a warning
ASPECT_RATIO_TOLERANCE = 0.1


@dataclass
class PlotResult:
    track_points: int
    dots: List[GeoCoordinate]
    pixel_points: List[PixelPoint]
    frames: List[Path]
    gif_path: Optional[Path] = None


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render animation frames of a GPS track plotted on a calibrated map image."
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", choices=sorted(PRESETS), default=None,
                        help=f"Built-in map/track configuration (default: {DAY1_LARGE.name})")
    source.add_argument("--config", help="JSON file with a custom plot configuration")
    parser.add_argument("--input-dir", default=INPUT_DIR,
                        help="Directory holding the map image and GPX file (default: %(default)s)")
    parser.add_argument("--output-dir", default=OUTPUT_DIR,
                        help="Directory for the PNG frames (default: %(default)s)")
    parser.add_argument("--max-frames", type=int, default=None,
                        help="Render at most this many frames (default: from configuration)")
    parser.add_argument("--all-frames", action="store_true",
                        help="Render one frame per dot, ignoring the configured limit")
    parser.add_argument("--dot-distance", type=float, default=None,
                        help="Minimum distance between dots in meters (default: from configuration)")
    parser.add_argument("--gif", action="store_true",
                        help="Assemble the frames into an animated GIF with ImageMagick")
    parser.add_argument("--resume-gif", action="store_true",
                        help="Skip rendering and continue assembling the GIF from the frames "
                             "already in the output directory")
    parser.add_argument("--gif-dir", default=GIF_DIR,
                        help="Directory for the animated GIF (default: %(default)s)")
    parser.add_argument("--magick", default=MAGICK_BINARY,
                        help="ImageMagick executable (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> PlotConfig:
    """Resolve the preset or config file and apply command-line overrides."""
    config = load_config(args.config) if args.config else get_preset(args.preset or DAY1_LARGE.name)

    overrides = {}
    if args.all_frames:
        overrides["max_frames"] = None
    elif args.max_frames is not None:
        overrides["max_frames"] = args.max_frames
    if args.dot_distance is not None:
        overrides["dot_distance_m"] = args.dot_distance

    if overrides:
        # Re-validate so overrides get the same range checks as the config file
        config = PlotConfig.model_validate({**config.model_dump(), **overrides})
    return config


def load_map_image(path: Path) -> Image.Image:
    try:
        image = Image.open(path)
        image.load()
    except (OSError, UnidentifiedImageError) as e:
        raise MalformedInputError(f"Cannot read map image {path}: {e}") from e
    logger.info(f"Loaded map {path.name} ({image.width}x{image.height})")
    return image


def check_aspect_ratio(config: PlotConfig, image_width: int, image_height: int) -> None:
    """Warn when a north-up map's pixel aspect ratio disagrees with its corners.

    Rotated maps are skipped: their corners may share a latitude, which only
    makes the unrotated rectangle degenerate.
    """
    if config.rotation_angle_deg != 0:
        return

    geo_ratio = geographic_aspect_ratio(config.top_left, config.bottom_right)
    image_ratio = image_width / image_height
    logger.debug(f"Aspect ratio: image {image_ratio:.4f}, geographic {geo_ratio:.4f}")

    if geo_ratio > 0 and abs(image_ratio - geo_ratio) / geo_ratio > ASPECT_RATIO_TOLERANCE:
        logger.warning(
            f"Map image aspect ratio {image_ratio:.3f} differs from the calibration "
            f"corners' {geo_ratio:.3f}; check top_left/bottom_right"
        )


def project_track(track: Sequence[GeoCoordinate], config: PlotConfig, image_width: int,
                  image_height: int) -> Tuple[List[GeoCoordinate], List[PixelPoint]]:
    """
    Run the projection pipeline: resample, project, rectify.

    Returns:
        (dots, pixel_points): the resampled coordinates and their final pixel
        positions, both in travel order
    """
    dots = resample(track, config.dot_distance_m)
    calibrator = ProjectionCalibrator(config.calibration_for(image_width, image_height))
    pixel_points = rectify(calibrator.project_all(dots), config.reference_box)
    return dots, pixel_points


def run(config: PlotConfig, input_dir: Path, output_dir: Path,
        gif_dir: Optional[Path] = None, magick: str = MAGICK_BINARY) -> PlotResult:
    total_phases = 4 if gif_dir else 3
    map_path = input_dir / config.map_file

    print_phase(1, total_phases, "Loading map and track")
    map_image = load_map_image(map_path)
    track = read_gpx(input_dir / config.track_file)
    check_aspect_ratio(config, map_image.width, map_image.height)

    print_phase(2, total_phases, "Projecting track onto map")
    dots, pixel_points = project_track(track, config, map_image.width, map_image.height)
    console.print(f"  [gps]{len(track):,}[/] track points -> [pixel]{len(dots):,}[/] dots")

    print_phase(3, total_phases, "Rendering frames")
    clear_generated_frames(output_dir)
    renderer = FrameRenderer(map_image, dot_size=config.dot_size, dot_color=config.dot_color)
    frame_total = frame_count(len(pixel_points), config.max_frames)
    with create_progress() as progress:
        task = progress.add_task("Rendering", total=frame_total)
        frames = renderer.render_frames(
            pixel_points, output_dir, max_frames=config.max_frames,
            progress_callback=lambda done, total: progress.update(task, completed=done),
        )

    result = PlotResult(track_points=len(track), dots=dots,
                        pixel_points=pixel_points, frames=frames)

    if gif_dir:
        print_phase(4, total_phases, "Assembling GIF")
        result.gif_path = assemble_gif(map_path, output_dir, gif_dir, magick)

    return result


def assemble_gif(map_path: Path, frames_dir: Path, gif_dir: Path,
                 magick: str = MAGICK_BINARY) -> Path:
    assembler = GifAssembler(magick_binary=magick)
    with create_gif_progress() as progress:
        task = progress.add_task("Assembling", total=len(pending_frames(frames_dir)),
                                 status="starting...")
        return assembler.assemble(
            map_path, frames_dir, gif_dir,
            progress_callback=lambda done, total, status: progress.update(
                task, completed=done, total=total, status=status),
        )


def resume_gif(config: PlotConfig, input_dir: Path, output_dir: Path, gif_dir: Path,
               magick: str = MAGICK_BINARY) -> PlotResult:
    """
    Continue an interrupted GIF assembly without re-rendering.

    Frames already appended carry the processed marker and are skipped; the
    existing GIF is extended with the rest.

    Raises:
        MalformedInputError: output_dir holds no frames
    """
    print_phase(1, 1, "Resuming GIF assembly")
    frame_glob = f"{FRAME_PREFIX}*{FRAME_SUFFIX}"
    if not any(output_dir.glob(frame_glob)):
        raise MalformedInputError(
            f"No frames to assemble in {output_dir}; render them first without --resume-gif"
        )
    console.print(f"  [pixel]{len(pending_frames(output_dir)):,}[/] frames left to append")

    gif_path = assemble_gif(input_dir / config.map_file, output_dir, gif_dir, magick)
    return PlotResult(track_points=0, dots=[], pixel_points=[],
                      frames=sorted(output_dir.glob(frame_glob)), gif_path=gif_path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_rich_logging(args.verbose)
    print_banner()

    try:
        config = build_config(args)
    except (ValidationError, ValueError, OSError) as e:
        print_error(f"Configuration error: {e}")
        return 1

    gif_dir = Path(args.gif_dir) if args.gif or args.resume_gif else None
    print_config_summary(
        preset=config.name,
        map_file=str(Path(args.input_dir) / config.map_file),
        track_file=str(Path(args.input_dir) / config.track_file),
        dot_distance_m=config.dot_distance_m,
        dot_size=config.dot_size,
        rotation_angle_deg=config.rotation_angle_deg,
        output_dir=args.output_dir,
        max_frames=config.max_frames,
        gif_dir=str(gif_dir) if gif_dir else None,
    )

    try:
        if args.resume_gif:
            result = resume_gif(config, Path(args.input_dir), Path(args.output_dir),
                                gif_dir, magick=args.magick)
        else:
            result = run(config, Path(args.input_dir), Path(args.output_dir),
                         gif_dir=gif_dir, magick=args.magick)
    except MalformedInputError as e:
        logger.debug("Input error", exc_info=True)
        print_error(str(e), hint="Check the map image and GPX file in the input directory")
        return 1
    except (DegenerateGeometryError, PrecisionEdgeCaseError) as e:
        logger.debug("Geometry error", exc_info=True)
        print_error(str(e), hint="Check the calibration corners and reference box")
        return 1
    except GifAssemblyError as e:
        logger.debug("GIF assembly error", exc_info=True)
        print_error(str(e), hint="Make sure ImageMagick 7 ('magick') is installed and on PATH")
        return 1
    except TrackPlotterError as e:
        logger.debug("Plot error", exc_info=True)
        print_error(str(e))
        return 1
    except OSError as e:
        logger.debug("File error", exc_info=True)
        print_error(str(e), hint="Check that the output and GIF directories are writable")
        return 1

    print_completion_summary(
        output_dir=args.output_dir,
        frame_count=len(result.frames),
        gps_points=result.track_points,
        dot_count=len(result.dots),
        gif_path=str(result.gif_path) if result.gif_path else None,
    )
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
