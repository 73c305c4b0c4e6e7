"""
GPX track reader.

Reads ``gpx/trk/trkseg/trkpt`` elements into GeoCoordinates, keeping file
order. Namespaced (GPX 1.0/1.1) and bare documents are both accepted.
"""

import logging
import math
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterator, List, Union

from track_projection.data_models import GeoCoordinate
from track_projection.errors import MalformedInputError

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """Strip the '{namespace}' prefix ElementTree puts on tag names."""
    return tag.rsplit("}", 1)[-1]


def _children(elem: ET.Element, name: str) -> Iterator[ET.Element]:
    for child in elem:
        if _local_name(child.tag) == name:
            yield child


def _parse_degrees(trkpt: ET.Element, attr: str, index: int) -> float:
    raw = trkpt.get(attr)
    if raw is None:
        raise MalformedInputError(f"Track point {index} has no '{attr}' attribute")
    try:
        value = float(raw)
    except ValueError:
        raise MalformedInputError(
            f"Track point {index} has non-numeric {attr}={raw!r}"
        ) from None
    if not math.isfinite(value):
        raise MalformedInputError(f"Track point {index} has non-finite {attr}={raw!r}")
    return value


def parse_gpx(xml_text: str) -> List[GeoCoordinate]:
    """
    Parse GPX document text into an ordered list of coordinates.

    Points from all tracks and segments are concatenated in document order.

    Args:
        xml_text: GPX XML content

    Returns:
        List of GeoCoordinate in file order

    Raises:
        MalformedInputError: invalid XML, wrong root element, no track points,
            or a point with a missing or non-numeric lat/lon
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise MalformedInputError(f"Invalid GPX XML: {e}") from e

    if _local_name(root.tag) != "gpx":
        raise MalformedInputError(
            f"Expected <gpx> root element, found <{_local_name(root.tag)}>"
        )

    points = []
    for trk in _children(root, "trk"):
        for trkseg in _children(trk, "trkseg"):
            for trkpt in _children(trkseg, "trkpt"):
                index = len(points)
                lat = _parse_degrees(trkpt, "lat", index)
                lon = _parse_degrees(trkpt, "lon", index)
                points.append(GeoCoordinate(lat=lat, lon=lon))

    if not points:
        raise MalformedInputError("GPX file contains no <trk>/<trkseg>/<trkpt> points")
    return points


def read_gpx(path: Union[str, Path]) -> List[GeoCoordinate]:
    """Read a GPX file from disk. See parse_gpx for errors raised."""
    path = Path(path)
    try:
        xml_text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"Cannot read GPX file {path}: {e}") from e

    points = parse_gpx(xml_text)
    logger.info(f"Read {len(points)} track points from {path.name}")
    return points
