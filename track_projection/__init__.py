"""
Coordinate projection pipeline for plotting a GPS track on a map image.

Turns a dense GPS track into evenly spaced pixel positions on a rotated map
raster: resample, project, then rectify against a measured reference box.
"""

from track_projection.data_models import (
    GeoCoordinate,
    PixelPoint,
    MapCalibration,
    ReferenceBoundingBox,
)
from track_projection.errors import (
    TrackPlotterError,
    MalformedInputError,
    DegenerateGeometryError,
    PrecisionEdgeCaseError,
    GifAssemblyError,
)
from track_projection.calibrator import ProjectionCalibrator, project
from track_projection.rectifier import rectify
from track_projection.resampler import resample

__all__ = [
    "GeoCoordinate",
    "PixelPoint",
    "MapCalibration",
    "ReferenceBoundingBox",
    "TrackPlotterError",
    "MalformedInputError",
    "DegenerateGeometryError",
    "PrecisionEdgeCaseError",
    "GifAssemblyError",
    "ProjectionCalibrator",
    "project",
    "rectify",
    "resample",
]
