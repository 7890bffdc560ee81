"""Parser for GeoJSON polygon annotations."""

import json
import logging
from typing import Any, List, Optional, Sequence

import numpy as np
from pydantic import ValidationError

from annoview.models.annotations import PolygonAnnotation
from .exceptions import AnnotationParseError

logger = logging.getLogger(__name__)

PIXEL_SPACE_MIN_EXTENT = 10
_LABEL_KEYS = ("class", "name", "label")


def parse_geojson(
    content: str,
    image_width: int,
    image_height: int,
    source_file: Optional[str] = None,
) -> List[PolygonAnnotation]:
    """
    Parse a FeatureCollection (or single Feature) into polygon annotations.

    Polygons use their exterior ring. A MultiPolygon yields one annotation per
    member polygon. Other geometry types are ignored.

    Raises:
        AnnotationParseError: If the content is not valid JSON or a polygon
            has malformed coordinates.
    """
    try:
        geojson = json.loads(content)
    except json.JSONDecodeError as exc:
        raise AnnotationParseError(
            "File is not valid GeoJSON.", log_message=str(exc)
        ) from exc

    if not isinstance(geojson, dict):
        raise AnnotationParseError("GeoJSON root must be an object.")

    if geojson.get("type") == "FeatureCollection":
        features = geojson.get("features") or []
    elif geojson.get("type") == "Feature":
        features = [geojson]
    else:
        features = []

    annotations: List[PolygonAnnotation] = []
    for feature in features:
        geometry = feature.get("geometry") if isinstance(feature, dict) else None
        if not isinstance(geometry, dict):
            continue

        properties = feature.get("properties")
        if not isinstance(properties, dict):
            properties = None
        label = _feature_label(properties)
        geometry_type = geometry.get("type")
        coordinates = geometry.get("coordinates") or []

        if geometry_type == "Polygon":
            polygons = [coordinates]
        elif geometry_type == "MultiPolygon":
            polygons = coordinates
        else:
            logger.debug(f"Skipping unsupported geometry type {geometry_type}")
            continue

        try:
            for polygon in polygons:
                if not polygon:
                    continue
                points = normalize_ring(polygon[0], image_width, image_height)
                annotations.append(
                    PolygonAnnotation(
                        label=label,
                        points=points,
                        properties=properties,
                        source_file=source_file,
                    )
                )
        except (ValueError, TypeError, IndexError, ValidationError) as exc:
            raise AnnotationParseError(
                f"Invalid {geometry_type} coordinates in GeoJSON.", log_message=str(exc)
            ) from exc

    return annotations


def _feature_label(properties: Any) -> Optional[str]:
    if not isinstance(properties, dict):
        return None
    for key in _LABEL_KEYS:
        value = properties.get(key)
        if value:
            return str(value)
    return None


def normalize_ring(
    ring: Sequence[Sequence[float]], image_width: int, image_height: int
) -> List[float]:
    """
    Convert one ring to a flat list of unit coordinates.

    The coordinate space is guessed from the ring's bounding box: already unit
    sized, pixel space (extent above 10 on both axes, divided by the image size),
    or unknown (the bounding box is stretched onto the unit square).
    """
    coords = np.array(
        [point[:2] for point in ring if len(point) >= 2], dtype=np.float64
    ).reshape(-1, 2)
    if coords.size == 0:
        return []

    min_x, min_y = coords.min(axis=0)
    max_x, max_y = coords.max(axis=0)
    width = max_x - min_x
    height = max_y - min_y

    is_normalized = min_x >= 0 and min_y >= 0 and max_x <= 1 and max_y <= 1
    is_pixel_space = width > PIXEL_SPACE_MIN_EXTENT and height > PIXEL_SPACE_MIN_EXTENT

    if is_normalized:
        unit = coords
    elif is_pixel_space:
        unit = coords / np.array([image_width, image_height], dtype=np.float64)
    else:
        extent = np.array([width or 1.0, height or 1.0])
        unit = (coords - np.array([min_x, min_y])) / extent

    logger.debug(
        f"Polygon bounds x=[{min_x}, {max_x}] y=[{min_y}, {max_y}] "
        f"normalized={is_normalized} pixel_space={is_pixel_space}"
    )
    return np.clip(unit, 0.0, 1.0).ravel().tolist()
