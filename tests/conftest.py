"""
Pytest configuration and fixtures for GPS track plotter tests.

Provides reusable calibrations, synthetic tracks, small map images and GPX
documents.
"""

import pytest
from typing import List

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from PIL import Image

from config import PlotConfig
from track_projection.data_models import (
    GeoCoordinate,
    MapCalibration,
    ReferenceBoundingBox,
)


# Corners of the day-1 map, rounded
TOP_LEFT = GeoCoordinate(lat=68.6203, lon=24.0002)
BOTTOM_RIGHT = GeoCoordinate(lat=68.4542, lon=24.8769)


@pytest.fixture
def calibration():
    """1000x1000 north-up calibration with the default fudge factors."""
    return MapCalibration(
        top_left=TOP_LEFT,
        bottom_right=BOTTOM_RIGHT,
        image_width=1000,
        image_height=1000,
        rotation_angle_deg=0.0,
    )


@pytest.fixture
def exact_calibration():
    """1000x1000 north-up calibration without fudge factors."""
    return MapCalibration(
        top_left=TOP_LEFT,
        bottom_right=BOTTOM_RIGHT,
        image_width=1000,
        image_height=1000,
        rotation_angle_deg=0.0,
        scale_x_fudge=1.0,
        scale_y_fudge=1.0,
    )


@pytest.fixture
def northbound_track() -> List[GeoCoordinate]:
    """101 points heading north, about 11.1 m apart (0.0001 degrees of latitude)."""
    return [GeoCoordinate(lat=68.5 + i * 0.0001, lon=24.5) for i in range(101)]


@pytest.fixture
def diagonal_track() -> List[GeoCoordinate]:
    """50 points heading north-east, roughly 31 m apart."""
    return [
        GeoCoordinate(lat=60.0 + i * 0.0002, lon=10.0 + i * 0.0004)
        for i in range(50)
    ]


@pytest.fixture
def reference_box():
    return ReferenceBoundingBox(width=100, height=80, top_left_x=50, top_left_y=40)


@pytest.fixture
def plot_config(reference_box):
    """Small custom configuration matching diagonal_track and map_image."""
    return PlotConfig(
        name="test",
        map_file="map.png",
        track_file="track.gpx",
        top_left=GeoCoordinate(lat=60.02, lon=9.99),
        bottom_right=GeoCoordinate(lat=59.99, lon=10.03),
        rotation_angle_deg=2.0,
        dot_distance_m=50,
        dot_size=3,
        reference_box=reference_box,
        max_frames=10,
    )


@pytest.fixture
def map_image():
    """Plain white 300x200 map."""
    return Image.new("RGB", (300, 200), (255, 255, 255))


def make_gpx(points: List[GeoCoordinate], namespace: bool = True) -> str:
    """Build a single-segment GPX document for the given points."""
    xmlns = ' xmlns="http://www.topografix.com/GPX/1/1"' if namespace else ""
    trkpts = "\n".join(
        f'      <trkpt lat="{p.lat}" lon="{p.lon}"><ele>100.0</ele></trkpt>'
        for p in points
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<gpx version="1.1" creator="test"{xmlns}>\n'
        "  <trk>\n"
        "    <name>Day 1</name>\n"
        "    <trkseg>\n"
        f"{trkpts}\n"
        "    </trkseg>\n"
        "  </trk>\n"
        "</gpx>\n"
    )


@pytest.fixture
def input_dir(tmp_path, map_image, diagonal_track):
    """Input directory holding map.png and track.gpx."""
    directory = tmp_path / "inputFiles"
    directory.mkdir()
    map_image.save(directory / "map.png")
    (directory / "track.gpx").write_text(make_gpx(diagonal_track), encoding="utf-8")
    return directory
