"""
Post-hoc affine correction of projected points against a measured reference box.

The projected route usually lands close to, but not exactly on, the route
drawn on the map image. Stretching the point cloud's bounding box onto the
box measured by hand on the image removes the remaining scale and offset
drift. Only scale and offset are corrected: a wrong rotation or aspect in the
projection is hidden here, not fixed.
"""

import logging
from typing import List, Sequence

import numpy as np

from track_projection.data_models import PixelPoint, ReferenceBoundingBox
from track_projection.errors import DegenerateGeometryError

logger = logging.getLogger(__name__)


def rectify(points: Sequence[PixelPoint], reference_box: ReferenceBoundingBox) -> List[PixelPoint]:
    """
    Scale and shift points so their bounding box matches reference_box.

    x and y are scaled independently, so the point cloud takes the aspect
    ratio of the reference box.

    Args:
        points: Projected points in travel order
        reference_box: Target rectangle in image pixels

    Returns:
        New list of points, same order as the input

    Raises:
        DegenerateGeometryError: no points, or all points share an x or a y value
    """
    if not points:
        raise DegenerateGeometryError("Cannot rectify an empty point set")

    xs = np.array([p.x for p in points], dtype=np.float64)
    ys = np.array([p.y for p in points], dtype=np.float64)
    if not (np.all(np.isfinite(xs)) and np.all(np.isfinite(ys))):
        raise DegenerateGeometryError("Cannot rectify non-finite pixel coordinates")

    x_min, x_max = xs.min(), xs.max()
    y_min, y_max = ys.min(), ys.max()
    box_width = x_max - x_min
    box_height = y_max - y_min
    if box_width == 0 or box_height == 0:
        raise DegenerateGeometryError(
            f"Point cloud bounding box is {box_width:g} x {box_height:g} px; "
            "need at least two distinct x and y values"
        )

    x_scale = reference_box.width / box_width
    y_scale = reference_box.height / box_height
    logger.debug(f"Rectify scale x={x_scale:.4f} y={y_scale:.4f}")

    new_xs = reference_box.top_left_x + (xs - x_min) * x_scale
    new_ys = reference_box.top_left_y + (ys - y_min) * y_scale
    return [PixelPoint(float(x), float(y)) for x, y in zip(new_xs, new_ys)]
