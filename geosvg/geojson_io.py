import json
from typing import Any, Dict, List

import numpy as np
import shapely
from shapely.errors import ShapelyError
from shapely.geometry import mapping, shape

from geosvg.errors import ParseError
from geosvg.geometry import Feature, FeatureCollection
from geosvg.logger import logger
from geosvg.transforms import round_geometry

GEOMETRY_TYPES = {
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
}


def parse_geojson(text: str) -> FeatureCollection:
    """Parse GeoJSON text into a FeatureCollection.

    Accepts a FeatureCollection, a single Feature, an object carrying a
    `features` array, or a bare geometry (wrapped in a feature with empty
    properties).

    Raises:
        ParseError: If the text is not JSON or not a recognisable GeoJSON object
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError(f"Invalid GeoJSON (malformed JSON): {e}") from e
    return normalize_geojson(data)


def normalize_geojson(data: Any) -> FeatureCollection:
    if not isinstance(data, dict):
        raise ParseError(f"GeoJSON must be an object, got {type(data).__name__}")

    geojson_type = data.get("type")
    if geojson_type == "FeatureCollection":
        features = data.get("features")
        if not isinstance(features, list):
            raise ParseError("FeatureCollection has no 'features' array")
    elif geojson_type == "Feature":
        features = [data]
    elif geojson_type in GEOMETRY_TYPES:
        logger.debug(f"Wrapping bare {geojson_type} geometry in a feature")
        features = [{"type": "Feature", "geometry": data, "properties": {}}]
    elif isinstance(data.get("features"), list):
        features = data["features"]
    else:
        raise ParseError(f"Unrecognised GeoJSON object (type={geojson_type!r})")

    return FeatureCollection([feature_from_dict(f, i) for i, f in enumerate(features)])


def feature_from_dict(obj: Any, index: int = 0) -> Feature:
    if not isinstance(obj, dict):
        raise ParseError(f"Feature {index} is not an object")

    geometry = obj.get("geometry")
    try:
        parsed = shape(geometry) if geometry is not None else None
    except (ShapelyError, ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
        raise ParseError(f"Feature {index} has an invalid geometry: {e}") from e
    if parsed is not None and not np.isfinite(shapely.get_coordinates(parsed)).all():
        raise ParseError(f"Feature {index} has non-finite coordinates")

    properties = obj.get("properties") or {}
    if not isinstance(properties, dict):
        raise ParseError(f"Feature {index} properties must be an object")

    return Feature(geometry=parsed, properties=dict(properties), id=obj.get("id"))


def feature_to_dict(feature: Feature, precision: int | None = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": "Feature"}
    if feature.id is not None:
        out["id"] = feature.id
    out["properties"] = dict(feature.properties)

    geometry = feature.geometry
    if geometry is None:
        out["geometry"] = None
    else:
        if precision is not None:
            geometry = round_geometry(geometry, precision)
        out["geometry"] = _plain(mapping(geometry), integral=precision == 0)
    return out


def collection_to_dict(fc: FeatureCollection, precision: int | None = None) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [feature_to_dict(f, precision) for f in fc.features],
    }


def dump_geojson(
    fc: FeatureCollection, precision: int | None = None, indent: int | None = 2
) -> str:
    """Serialize a FeatureCollection, rounding coordinates when a precision is given"""
    return json.dumps(collection_to_dict(fc, precision), indent=indent, ensure_ascii=False)


def _plain(value: Any, integral: bool) -> Any:
    """Tuples to lists; whole floats to ints at precision 0 so no decimals are printed"""
    if isinstance(value, dict):
        return {k: _plain(v, integral) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        items: List[Any] = [_plain(v, integral) for v in value]
        return items
    if integral and isinstance(value, float) and value.is_integer():
        return int(value)
    return value
