"""
Distance-based resampling of a dense GPS track into evenly spaced dots.
"""

import logging
import math
from typing import List, Sequence

from track_projection.data_models import GeoCoordinate
from track_projection.errors import MalformedInputError
from track_projection.geo_math import haversine_distance_m

logger = logging.getLogger(__name__)


def resample(track: Sequence[GeoCoordinate], min_segment_m: float) -> List[GeoCoordinate]:
    """
    Thin a track so consecutive points are at least min_segment_m apart.

    The first point is always kept. Each following point is kept when its
    great-circle distance to the last kept point reaches the threshold. The
    original last point is always appended, so the final segment may be
    shorter than the threshold (and repeats the last kept point when that
    point already was the track's end).

    Args:
        track: Points in travel order
        min_segment_m: Minimum spacing in meters, must be positive

    Returns:
        New list of points taken from the input, in input order

    Raises:
        MalformedInputError: track has fewer than 2 points
        ValueError: min_segment_m is not a positive finite number
    """
    if len(track) < 2:
        raise MalformedInputError(
            f"Track needs at least 2 points to resample, got {len(track)}"
        )
    if not math.isfinite(min_segment_m) or min_segment_m <= 0:
        raise ValueError(f"min_segment_m must be positive, got {min_segment_m}")

    resampled = [track[0]]
    for point in track[1:]:
        if haversine_distance_m(resampled[-1], point) >= min_segment_m:
            resampled.append(point)
    resampled.append(track[-1])

    logger.debug(
        f"Resampled {len(track)} track points to {len(resampled)} "
        f"(min spacing {min_segment_m:.1f}m)"
    )
    return resampled
