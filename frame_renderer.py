"""
Animation frame rendering for the track plot.

Frame N shows the map with the first N track dots drawn on it. Frames are
written as zero-padded PNGs (output-00001.png, ...) so that sorting the file
names gives the animation order.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from PIL import Image, ImageDraw

from constants import (
    DEFAULT_DOT_COLOR,
    DEFAULT_DOT_SIZE,
    FRAME_INDEX_WIDTH,
    FRAME_PREFIX,
    FRAME_SUFFIX,
)
from track_projection.data_models import PixelPoint

logger = logging.getLogger(__name__)


def frame_count(point_count: int, max_frames: Optional[int] = None) -> int:
    """Number of frames emitted for point_count points.

    Raises:
        ValueError: max_frames is less than 1
    """
    if max_frames is not None and max_frames < 1:
        raise ValueError(f"max_frames must be at least 1, got {max_frames}")
    return point_count if max_frames is None else min(max_frames, point_count)


def sequence_frames(points: Sequence[PixelPoint],
                    max_frames: Optional[int] = None) -> List[List[PixelPoint]]:
    """
    Split points into cumulative animation frames.

    Frame i contains points[0..i]. Input order is kept.

    Args:
        points: Final pixel positions in travel order
        max_frames: Emit at most this many frames (None = one per point)

    Returns:
        List of frames, each a list of points

    Raises:
        ValueError: max_frames is less than 1
    """
    return [list(points[:i + 1]) for i in range(frame_count(len(points), max_frames))]


def frame_filename(index: int) -> str:
    """File name for 1-based frame index, e.g. output-00001.png."""
    return f"{FRAME_PREFIX}-{index:0{FRAME_INDEX_WIDTH}d}{FRAME_SUFFIX}"


def clear_generated_frames(output_dir: Union[str, Path]) -> int:
    """
    Create output_dir if needed and delete frames left by a previous run.

    Returns:
        Number of files removed
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    removed = 0
    for old in output_dir.glob(f"{FRAME_PREFIX}*{FRAME_SUFFIX}"):
        old.unlink()
        removed += 1
    if removed:
        logger.debug(f"Removed {removed} old frames from {output_dir}")
    return removed


class FrameRenderer:
    """Draws track dots on a map image and writes the animation frames.

    Args:
        map_image: Background map (copied, never modified)
        dot_size: Dot radius in pixels
        dot_color: RGBA fill color
    """

    def __init__(self, map_image: Image.Image, dot_size: int = DEFAULT_DOT_SIZE,
                 dot_color: Tuple[int, int, int, int] = DEFAULT_DOT_COLOR):
        if dot_size < 1:
            raise ValueError(f"dot_size must be at least 1, got {dot_size}")
        self.map_image = map_image.convert("RGBA")
        self.dot_size = dot_size
        self.dot_color = tuple(dot_color)

    def draw_dot(self, image: Image.Image, point: PixelPoint) -> None:
        """Draw one filled circle centered on point."""
        r = self.dot_size
        ImageDraw.Draw(image).ellipse(
            [point.x - r, point.y - r, point.x + r, point.y + r],
            fill=self.dot_color,
        )

    def render(self, frame: Sequence[PixelPoint]) -> Image.Image:
        """Render a single frame: the map with every point of the frame drawn."""
        image = self.map_image.copy()
        for point in frame:
            self.draw_dot(image, point)
        return image

    def render_frames(self, points: Sequence[PixelPoint], output_dir: Union[str, Path],
                      max_frames: Optional[int] = None,
                      progress_callback: Optional[Callable[[int, int], None]] = None) -> List[Path]:
        """
        Write one PNG per frame of sequence_frames(points, max_frames).

        Frames are cumulative, so dots are drawn incrementally on one working
        image instead of redrawing every earlier dot for each frame.

        Args:
            points: Final pixel positions in travel order
            output_dir: Directory for the PNG files (must exist)
            max_frames: Limit on the number of frames
            progress_callback: Optional callable(frames_done, total_frames)

        Returns:
            Paths of the written frames in animation order
        """
        total = frame_count(len(points), max_frames)
        output_dir = Path(output_dir)
        logger.info(f"Creating {total} frames in {output_dir}")

        canvas = self.map_image.copy()
        written = []
        for i in range(total):
            self.draw_dot(canvas, points[i])
            path = output_dir / frame_filename(i + 1)
            canvas.save(path)
            written.append(path)
            logger.debug(f"Frame {path.name} created")
            if progress_callback:
                progress_callback(i + 1, total)

        return written
