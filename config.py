"""
Per-map plot configuration.

Each map image has its own hand-measured calibration (corner coordinates,
rotation, reference box). Configurations are pydantic models validated once
at startup; built-in presets live in PRESETS and custom ones can be loaded
from JSON files with the same field names.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from constants import (
    DEFAULT_DOT_COLOR,
    DEFAULT_DOT_DISTANCE_M,
    DEFAULT_DOT_SIZE,
    SCALE_X_FUDGE,
    SCALE_Y_FUDGE,
)
from track_projection.data_models import (
    GeoCoordinate,
    MapCalibration,
    ReferenceBoundingBox,
    check_projectable,
)

logger = logging.getLogger(__name__)


class PlotConfig(BaseModel):
    """Everything needed to plot one track on one map image."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(default="custom", description="Preset name used in logs")
    map_file: str = Field(description="Map image file name inside the input directory")
    track_file: str = Field(description="GPX file name inside the input directory")
    top_left: GeoCoordinate
    bottom_right: GeoCoordinate
    rotation_angle_deg: float = Field(default=0.0, allow_inf_nan=False,
                                      description="Clockwise map rotation in degrees")
    scale_x_fudge: float = Field(default=SCALE_X_FUDGE, gt=0)
    scale_y_fudge: float = Field(default=SCALE_Y_FUDGE, gt=0)
    dot_distance_m: float = Field(default=DEFAULT_DOT_DISTANCE_M, gt=0, allow_inf_nan=False)
    dot_size: int = Field(default=DEFAULT_DOT_SIZE, ge=1)
    dot_color: Tuple[int, int, int, int] = DEFAULT_DOT_COLOR
    reference_box: ReferenceBoundingBox
    max_frames: Optional[int] = Field(default=None, ge=1,
                                      description="Limit on rendered frames (None = all dots)")

    @field_validator("top_left", "bottom_right")
    @classmethod
    def check_corners(cls, coord: GeoCoordinate) -> GeoCoordinate:
        return check_projectable(coord)

    def calibration_for(self, image_width: int, image_height: int) -> MapCalibration:
        """Build the MapCalibration for a decoded map image of the given size."""
        return MapCalibration(
            top_left=self.top_left,
            bottom_right=self.bottom_right,
            image_width=image_width,
            image_height=image_height,
            rotation_angle_deg=self.rotation_angle_deg,
            scale_x_fudge=self.scale_x_fudge,
            scale_y_fudge=self.scale_y_fudge,
        )


DAY1_LARGE = PlotConfig(
    name="day1large",
    map_file="map-large-with-route.png",
    track_file="track-day1.gpx",
    top_left=GeoCoordinate(lat=68.62030295914282, lon=24.00019949046651),
    bottom_right=GeoCoordinate(lat=68.45416897212543, lon=24.876868951986832),
    rotation_angle_deg=2.38,
    dot_distance_m=50,
    dot_size=5,
    reference_box=ReferenceBoundingBox(
        width=370,
        height=2037,
        top_left_x=7244,
        top_left_y=1571,
    ),
    max_frames=30,
)

PRESETS: Dict[str, PlotConfig] = {
    DAY1_LARGE.name: DAY1_LARGE,
}


def load_config(path: Union[str, Path]) -> PlotConfig:
    """
    Load a PlotConfig from a JSON file.

    Args:
        path: JSON file whose keys match PlotConfig fields

    Returns:
        Validated PlotConfig

    Raises:
        pydantic.ValidationError: a field is missing or out of range
        OSError: the file cannot be read
        json.JSONDecodeError: the file is not valid JSON
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    data.setdefault("name", path.stem)
    config = PlotConfig.model_validate(data)
    logger.info(f"Loaded plot configuration '{config.name}' from {path}")
    return config


def get_preset(name: str) -> PlotConfig:
    """Look up a built-in preset by name."""
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown preset '{name}'. Available: {', '.join(sorted(PRESETS))}"
        ) from None
