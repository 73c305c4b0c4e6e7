"""
Projection of GPS coordinates onto a rotated map raster.

The map image is assumed to show the Mercator rectangle spanned by the
calibration's top-left and bottom-right coordinates, rotated clockwise by
``rotation_angle_deg``. The visible extent of the image is the axis-aligned
box around that rotated rectangle, so points are rotated the same way and
then scaled into the image.
"""

import math
from typing import Iterable, List, Tuple

from track_projection.data_models import GeoCoordinate, MapCalibration, PixelPoint
from track_projection.errors import DegenerateGeometryError
from track_projection.geo_math import mercator_project, rotate_point


class ProjectionCalibrator:
    """Maps coordinates to pixels for one MapCalibration.

    The calibration frame (rotation center, rotated extent and scale) only
    depends on the calibration, so it is computed once in the constructor.

    Args:
        calibration: Geographic corners, image size and rotation of the map

    Raises:
        DegenerateGeometryError: the rotated extent has zero width or height
        PrecisionEdgeCaseError: a calibration corner cannot be projected
    """

    def __init__(self, calibration: MapCalibration):
        self.calibration = calibration

        top_left = mercator_project(calibration.top_left)
        bottom_right = mercator_project(calibration.bottom_right)

        self._center = (
            (top_left[0] + bottom_right[0]) / 2,
            (top_left[1] + bottom_right[1]) / 2,
        )
        # Negative angle: the map is rotated clockwise
        self._theta = math.radians(-calibration.rotation_angle_deg)

        corners = [
            top_left,
            (bottom_right[0], top_left[1]),  # top-right
            (top_left[0], bottom_right[1]),  # bottom-left
            bottom_right,
        ]
        rotated = [rotate_point(c, self._center, self._theta) for c in corners]
        xs = [p[0] for p in rotated]
        ys = [p[1] for p in rotated]
        self._x_min = min(xs)
        self._y_max = max(ys)

        box_width = max(xs) - self._x_min
        box_height = self._y_max - min(ys)
        if box_width == 0 or box_height == 0:
            raise DegenerateGeometryError(
                f"Rotated map extent is {box_width:.3f}m x {box_height:.3f}m; "
                "top-left and bottom-right coordinates must span an area"
            )

        self._scale_x = calibration.image_width / box_width
        self._scale_y = calibration.image_height / box_height

    @property
    def extent(self) -> Tuple[float, float]:
        """Width and height in Mercator meters of the area visible in the image."""
        return (self.calibration.image_width / self._scale_x,
                self.calibration.image_height / self._scale_y)

    def project(self, coord: GeoCoordinate) -> PixelPoint:
        """Project a single coordinate to (unrounded) pixel coordinates."""
        rotated = rotate_point(mercator_project(coord), self._center, self._theta)
        x = (rotated[0] - self._x_min) * self._scale_x * self.calibration.scale_x_fudge
        # Image y grows downward, Mercator y grows northward
        y = (self._y_max - rotated[1]) * self._scale_y * self.calibration.scale_y_fudge
        return PixelPoint(x, y)

    def project_all(self, coords: Iterable[GeoCoordinate]) -> List[PixelPoint]:
        """Project coordinates in order."""
        return [self.project(coord) for coord in coords]


def project(coord: GeoCoordinate, calibration: MapCalibration) -> PixelPoint:
    """Project one coordinate with the given calibration."""
    return ProjectionCalibrator(calibration).project(coord)
