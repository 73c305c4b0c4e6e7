"""
Constants for the GPS track plotter.

Centralized definitions for projection constants, calibration factors,
frame naming and GIF assembly settings.
"""

from typing import Tuple
from dataclasses import dataclass


# =============================================================================
# Earth Models
# =============================================================================

WEB_MERCATOR_RADIUS_M = 6378137.0   # WGS84 semi-major axis used by Web Mercator
MEAN_EARTH_RADIUS_M = 6371e3        # Mean radius for haversine distances


# =============================================================================
# Projection Calibration
# =============================================================================

# Empirical scale corrections between the computed projection and the map
# raster. Measured, not derived: keep the exact values.
SCALE_X_FUDGE = 1.03
SCALE_Y_FUDGE = 1.015


# =============================================================================
# Colors (RGBA format for Pillow)
# =============================================================================

@dataclass(frozen=True)
class Colors:
    """Common colors in RGBA format."""
    BLACK: Tuple[int, int, int, int] = (0, 0, 0, 255)
    WHITE: Tuple[int, int, int, int] = (255, 255, 255, 255)
    RED: Tuple[int, int, int, int] = (255, 0, 0, 255)


COLORS = Colors()


# =============================================================================
# Track Dots
# =============================================================================

DEFAULT_DOT_DISTANCE_M = 50.0  # Spacing between consecutive dots
DEFAULT_DOT_SIZE = 5           # Dot radius in pixels
DEFAULT_DOT_COLOR = COLORS.BLACK


# =============================================================================
# Frame Output
# =============================================================================

FRAME_PREFIX = "output"
FRAME_SUFFIX = ".png"
FRAME_INDEX_WIDTH = 5          # output-00001.png
PROCESSED_MARKER = "-processed"


# =============================================================================
# GIF Assembly (ImageMagick)
# =============================================================================

MAGICK_BINARY = "magick"
GIF_FRAME_DELAY = 20           # Hundredths of a second per frame
GIF_LOOP = 1
ANIMATED_GIF_NAME = "animated.gif"
ANIMATED_GIF_TMP_NAME = "animated_tmp.gif"


# =============================================================================
# Default Directories
# =============================================================================

INPUT_DIR = "inputFiles"
OUTPUT_DIR = "outputFiles"
GIF_DIR = "generated-gifs"
