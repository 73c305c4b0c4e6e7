"""
Geodesy helpers: Web Mercator projection, planar rotation and great-circle distance.

All functions are pure and operate on plain floats so they can be reused
per point without any shared state.
"""

import math
from typing import Tuple

from constants import WEB_MERCATOR_RADIUS_M, MEAN_EARTH_RADIUS_M
from track_projection.data_models import GeoCoordinate
from track_projection.errors import DegenerateGeometryError, PrecisionEdgeCaseError


def mercator_project(coord: GeoCoordinate,
                     earth_radius_m: float = WEB_MERCATOR_RADIUS_M) -> Tuple[float, float]:
    """Project a coordinate to Web Mercator meters.

    Args:
        coord: Position to project
        earth_radius_m: Sphere radius used by the projection

    Returns:
        (x, y) in meters, x east and y north

    Raises:
        PrecisionEdgeCaseError: latitude is a pole, out of range or NaN, or the
            result is not finite
    """
    # Written as a negated range check so NaN is rejected too
    if not (-90.0 < coord.lat < 90.0) or not math.isfinite(coord.lon):
        raise PrecisionEdgeCaseError(
            f"Cannot project ({coord.lat}, {coord.lon}) to Web Mercator"
        )

    x = earth_radius_m * math.radians(coord.lon)
    y = earth_radius_m * math.log(math.tan(math.pi / 4 + math.radians(coord.lat) / 2))

    if not (math.isfinite(x) and math.isfinite(y)):
        raise PrecisionEdgeCaseError(
            f"Mercator projection of ({coord.lat}, {coord.lon}) is not finite"
        )
    return x, y


def rotate_point(point: Tuple[float, float], center: Tuple[float, float],
                 theta_rad: float) -> Tuple[float, float]:
    """Rotate a point counter-clockwise by theta around center."""
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    cos_theta = math.cos(theta_rad)
    sin_theta = math.sin(theta_rad)
    return (
        dx * cos_theta - dy * sin_theta + center[0],
        dx * sin_theta + dy * cos_theta + center[1],
    )


def haversine_distance_m(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Great-circle distance in meters between two coordinates."""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = math.radians(b.lat - a.lat)
    d_lon = math.radians(b.lon - a.lon)

    h = (math.sin(d_lat / 2) ** 2
         + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2)
    h = min(h, 1.0)  # rounding near antipodes
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return MEAN_EARTH_RADIUS_M * c


def geographic_aspect_ratio(top_left: GeoCoordinate, bottom_right: GeoCoordinate) -> float:
    """Width over height of a lat/lon rectangle in Mercator terms.

    Comparable with an image width/height ratio for a north-up map.

    Raises:
        DegenerateGeometryError: both corners share a latitude
    """
    y_top = mercator_project(top_left, earth_radius_m=1.0)[1]
    y_bottom = mercator_project(bottom_right, earth_radius_m=1.0)[1]
    delta_y = y_top - y_bottom
    if delta_y == 0:
        raise DegenerateGeometryError("Calibration corners share the same latitude")
    return math.radians(bottom_right.lon - top_left.lon) / delta_y
