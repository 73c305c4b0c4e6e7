"""
Data models for the projection pipeline.

Coordinates and pixels are small frozen dataclasses; the per-map calibration
inputs are pydantic models so they are validated once at startup.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator

from constants import SCALE_X_FUDGE, SCALE_Y_FUDGE


@dataclass(frozen=True)
class GeoCoordinate:
    """WGS84 position in degrees."""
    lat: float
    lon: float


@dataclass(frozen=True)
class PixelPoint:
    """Image-space position in pixels (not rounded; y grows downward)."""
    x: float
    y: float


def check_projectable(coord: GeoCoordinate) -> GeoCoordinate:
    """Reject coordinates Web Mercator cannot represent (poles, out of range, NaN)."""
    if not -90.0 < coord.lat < 90.0:
        raise ValueError(f"latitude {coord.lat} must be strictly between -90 and 90")
    if not -180.0 <= coord.lon <= 180.0:
        raise ValueError(f"longitude {coord.lon} must be between -180 and 180")
    return coord


class MapCalibration(BaseModel):
    """
    How one map raster corresponds to geography.

    The fudge factors are empirical corrections for residual scale mismatch
    between the computed projection and the actual raster; they are measured
    values, not derived ones.
    """
    model_config = ConfigDict(frozen=True)

    top_left: GeoCoordinate = Field(description="Coordinate shown at the map's top-left corner")
    bottom_right: GeoCoordinate = Field(description="Coordinate shown at the map's bottom-right corner")
    image_width: int = Field(gt=0, description="Raster width in pixels")
    image_height: int = Field(gt=0, description="Raster height in pixels")
    rotation_angle_deg: float = Field(default=0.0, allow_inf_nan=False,
                                      description="Clockwise map rotation in degrees")
    scale_x_fudge: float = Field(default=SCALE_X_FUDGE, gt=0, allow_inf_nan=False)
    scale_y_fudge: float = Field(default=SCALE_Y_FUDGE, gt=0, allow_inf_nan=False)

    @field_validator("top_left", "bottom_right")
    @classmethod
    def check_corners(cls, coord: GeoCoordinate) -> GeoCoordinate:
        return check_projectable(coord)


class ReferenceBoundingBox(BaseModel):
    """Pixel rectangle on the map where the correct route is known to appear."""
    model_config = ConfigDict(frozen=True)

    width: float = Field(gt=0, allow_inf_nan=False)
    height: float = Field(gt=0, allow_inf_nan=False)
    top_left_x: float = Field(allow_inf_nan=False)
    top_left_y: float = Field(allow_inf_nan=False)
