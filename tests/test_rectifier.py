"""
Tests for bounding-box rectification of projected points.
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from track_projection.data_models import PixelPoint, ReferenceBoundingBox
from track_projection.errors import DegenerateGeometryError
from track_projection.rectifier import rectify


@pytest.fixture
def target_box():
    return ReferenceBoundingBox(width=100, height=200, top_left_x=5, top_left_y=5)


class TestRectify:
    """Affine scale + offset into the reference box."""

    def test_corners_map_to_reference_box(self, target_box):
        """(10,10)-(20,30) stretches onto (5,5)-(105,205)."""
        result = rectify([PixelPoint(10, 10), PixelPoint(20, 30)], target_box)
        assert result[0] == PixelPoint(5.0, 5.0)
        assert result[1] == PixelPoint(105.0, 205.0)

    def test_interior_point_scaled(self, target_box):
        result = rectify([PixelPoint(10, 10), PixelPoint(15, 20), PixelPoint(20, 30)], target_box)
        assert result[1] == PixelPoint(55.0, 105.0)

    def test_non_uniform_scaling(self):
        """A wide point cloud takes the tall aspect ratio of the reference box."""
        box = ReferenceBoundingBox(width=370, height=2037, top_left_x=7244, top_left_y=1571)
        points = [PixelPoint(0, 0), PixelPoint(1000, 10), PixelPoint(400, 5)]
        result = rectify(points, box)
        xs = [p.x for p in result]
        ys = [p.y for p in result]
        assert min(xs) == pytest.approx(7244)
        assert max(xs) == pytest.approx(7244 + 370)
        assert min(ys) == pytest.approx(1571)
        assert max(ys) == pytest.approx(1571 + 2037)

    def test_order_and_relative_order_preserved(self, target_box):
        points = [PixelPoint(3, 40), PixelPoint(-7, 12), PixelPoint(25, 13), PixelPoint(8, 90)]
        result = rectify(points, target_box)
        assert len(result) == len(points)

        def ranking(values):
            return sorted(range(len(values)), key=values.__getitem__)

        assert ranking([p.x for p in result]) == ranking([p.x for p in points])
        assert ranking([p.y for p in result]) == ranking([p.y for p in points])

    def test_relative_spacing_preserved(self, target_box):
        """Equal gaps in the input stay equal after rectification."""
        points = [PixelPoint(i, 2 * i) for i in range(5)]
        result = rectify(points, target_box)
        gaps = [b.x - a.x for a, b in zip(result, result[1:])]
        assert gaps == pytest.approx([25.0] * 4)

    def test_returns_python_floats(self, target_box):
        result = rectify([PixelPoint(10, 10), PixelPoint(20, 30)], target_box)
        assert all(type(p.x) is float and type(p.y) is float for p in result)

    def test_input_not_modified(self, target_box):
        points = [PixelPoint(10, 10), PixelPoint(20, 30)]
        rectify(points, target_box)
        assert points == [PixelPoint(10, 10), PixelPoint(20, 30)]


class TestRectifyDegenerate:
    """Zero-size bounding boxes are rejected instead of producing inf/NaN."""

    def test_empty(self, target_box):
        with pytest.raises(DegenerateGeometryError, match="empty"):
            rectify([], target_box)

    def test_single_point(self, target_box):
        with pytest.raises(DegenerateGeometryError):
            rectify([PixelPoint(1, 1)], target_box)

    def test_vertical_line(self, target_box):
        with pytest.raises(DegenerateGeometryError, match="distinct"):
            rectify([PixelPoint(4, 1), PixelPoint(4, 9)], target_box)

    def test_horizontal_line(self, target_box):
        with pytest.raises(DegenerateGeometryError):
            rectify([PixelPoint(1, 4), PixelPoint(9, 4)], target_box)

    def test_non_finite(self, target_box):
        with pytest.raises(DegenerateGeometryError, match="non-finite"):
            rectify([PixelPoint(1, 1), PixelPoint(float("nan"), 4)], target_box)
