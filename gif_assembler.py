"""
Animated GIF assembly via ImageMagick.

Frames are appended one at a time to a growing GIF with ``magick``. Each
processed frame is renamed to ``*-processed.png`` so an interrupted run picks
up where it stopped. The tool is invoked strictly sequentially.
"""

import logging
import shutil
import subprocess
import time
from pathlib import Path
from typing import Callable, List, Optional, Union

from constants import (
    ANIMATED_GIF_NAME,
    ANIMATED_GIF_TMP_NAME,
    FRAME_PREFIX,
    FRAME_SUFFIX,
    GIF_FRAME_DELAY,
    GIF_LOOP,
    MAGICK_BINARY,
    PROCESSED_MARKER,
)
from track_projection.errors import GifAssemblyError

logger = logging.getLogger(__name__)


def format_milliseconds(ms: float) -> str:
    """Format a duration as HH:MM:SS."""
    if ms < 0:
        raise ValueError(f"Duration must be non-negative, got {ms}")
    total_seconds = int(ms // 1000)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def estimate_remaining_ms(frame_ms: float, previous_frame_ms: float,
                          index: int, total: int) -> float:
    """
    Estimate time left for GIF assembly.

    Appending to the GIF rewrites the whole file, so every frame takes a bit
    longer than the one before. Per-frame time is modeled as growing
    linearly by the last observed increase; the first frame has no increase
    to go on and is extrapolated flat.

    Args:
        frame_ms: Duration of the frame just processed
        previous_frame_ms: Duration of the frame before it (ignored for index 0)
        index: 0-based index of the frame just processed
        total: Total number of frames in this run

    Returns:
        Estimated milliseconds left (never negative)
    """
    increase = frame_ms - previous_frame_ms if index > 0 else 0.0
    frames_left = total - index - 1
    estimate = frames_left * frame_ms + increase * frames_left * (frames_left + 1) / 2
    return max(estimate, 0.0)


def pending_frames(frames_dir: Union[str, Path]) -> List[Path]:
    """Unprocessed frame files in frames_dir, in animation (name) order."""
    frames_dir = Path(frames_dir)
    return sorted(
        p for p in frames_dir.glob(f"{FRAME_PREFIX}*{FRAME_SUFFIX}")
        if PROCESSED_MARKER not in p.name
    )


class GifAssembler:
    """Builds an animated GIF from rendered frames with ImageMagick.

    Args:
        magick_binary: ImageMagick executable name or path
        delay: Frame delay in hundredths of a second
        loop: GIF loop count passed to -loop
    """

    def __init__(self, magick_binary: str = MAGICK_BINARY, delay: int = GIF_FRAME_DELAY,
                 loop: int = GIF_LOOP):
        self.magick_binary = magick_binary
        self.delay = delay
        self.loop = loop

    def append_command(self, animated: Path, frame: Path, output: Path) -> List[str]:
        """Command that writes animated + frame into output."""
        return [
            self.magick_binary,
            "-delay", str(self.delay),
            "-loop", str(self.loop),
            str(animated), str(frame), str(output),
        ]

    def _run(self, cmd: List[str]) -> None:
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except (FileNotFoundError, OSError) as e:
            raise GifAssemblyError(
                f"Could not run '{self.magick_binary}': {e}"
            ) from e
        if result.returncode != 0:
            raise GifAssemblyError(
                f"'{' '.join(cmd)}' failed with exit code {result.returncode}: "
                f"{result.stderr.strip()}"
            )

    def assemble(self, map_image_path: Union[str, Path], frames_dir: Union[str, Path],
                 gif_dir: Union[str, Path],
                 progress_callback: Optional[Callable[[int, int, str], None]] = None) -> Path:
        """
        Append every pending frame to gif_dir/animated.gif.

        A fresh run starts the GIF from the map image. When processed frames
        from an interrupted run are present and the GIF exists, appending
        continues on the existing GIF.

        Args:
            map_image_path: Background map image (first GIF frame)
            frames_dir: Directory holding output-*.png frames
            gif_dir: Directory for animated.gif
            progress_callback: Optional callable(frames_done, total, status)

        Returns:
            Path to the animated GIF

        Raises:
            GifAssemblyError: ImageMagick is missing or a command failed
        """
        frames_dir = Path(frames_dir)
        gif_dir = Path(gif_dir)
        gif_dir.mkdir(parents=True, exist_ok=True)
        animated = gif_dir / ANIMATED_GIF_NAME
        tmp = gif_dir / ANIMATED_GIF_TMP_NAME

        already_processed = any(
            PROCESSED_MARKER in p.name
            for p in frames_dir.glob(f"{FRAME_PREFIX}*{FRAME_SUFFIX}")
        )
        if already_processed and animated.exists():
            logger.info(f"Resuming GIF assembly on {animated}")
        else:
            shutil.copyfile(map_image_path, animated)

        frames = pending_frames(frames_dir)
        logger.info(f"Generating animation from {len(frames)} frames")

        previous_ms = 0.0
        for i, frame in enumerate(frames):
            start = time.monotonic()
            logger.debug(f"Processing file: {frame.name}")

            self._run(self.append_command(animated, frame, tmp))
            tmp.replace(animated)
            frame.rename(frame.with_name(frame.stem + PROCESSED_MARKER + frame.suffix))

            frame_ms = (time.monotonic() - start) * 1000
            left = estimate_remaining_ms(frame_ms, previous_ms, i, len(frames))
            status = f"{format_milliseconds(frame_ms)} per frame, ~{format_milliseconds(left)} left"
            logger.debug(f"Processed {frame.name}: {status}")
            if progress_callback:
                progress_callback(i + 1, len(frames), status)
            previous_ms = frame_ms

        logger.info(f"GIF generation completed: {animated}")
        return animated
