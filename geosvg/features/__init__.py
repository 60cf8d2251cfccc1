"""OSM tag rules: which closed ways are areas, and how tagged features are styled."""

from typing import Mapping

from geosvg.features.buildings import BUILDING_STYLE, is_building
from geosvg.features.parks import PARK_STYLE, is_park
from geosvg.features.roads import PEDESTRIAN_AREA_STYLE, is_highway_area, road_style
from geosvg.features.water import (
    RIVER_STYLE,
    WATER_STYLE,
    is_water_area,
    is_waterway_line,
)
from geosvg.styles import (
    DEFAULT_LINE_STYLE,
    DEFAULT_POLYGON_STYLE,
    LineStyle,
    PolygonStyle,
)

# Tags that never make an otherwise untagged element worth a feature
UNINTERESTING_TAGS = {
    "source",
    "source_ref",
    "source:ref",
    "history",
    "attribution",
    "created_by",
    "converted_by",
    "fixme",
    "FIXME",
    "odbl",
}
UNINTERESTING_PREFIXES = ("tiger:", "source:")

# Any value of these keys makes a closed way an area
AREA_KEYS = [
    "landuse",
    "amenity",
    "shop",
    "leisure",
    "tourism",
    "historic",
    "office",
    "place",
    "military",
    "ruins",
    "craft",
    "public_transport",
    "boundary",
    "indoor",
    "golf",
    "area:highway",
]

# Keys that are areas except for the listed (linear) values
AREA_KEYS_EXCEPT = {
    "natural": ["coastline", "cliff", "ridge", "arete", "tree_row"],
    "man_made": ["cutline", "embankment", "pipeline"],
    "aeroway": ["taxiway"],
}

# Keys that are areas only for the listed values
AREA_KEYS_ONLY = {
    "barrier": ["city_wall", "ditch", "hedge", "retaining_wall", "spikes"],
    "railway": ["station", "turntable", "roundhouse", "platform"],
    "power": ["plant", "substation", "generator", "transformer"],
}


def is_interesting_tag(key: str) -> bool:
    return key not in UNINTERESTING_TAGS and not key.startswith(UNINTERESTING_PREFIXES)


def has_interesting_tags(tags: Mapping[str, str]) -> bool:
    return any(is_interesting_tag(key) for key in tags)


def is_area(tags: Mapping[str, str]) -> bool:
    """Check if a closed way with these tags should become a polygon"""
    if tags.get("area") == "no":
        return False
    if tags.get("area") == "yes":
        return True
    if is_waterway_line(tags):
        return False
    if (
        is_building(tags)
        or is_water_area(tags)
        or is_park(tags)
        or is_highway_area(tags)
    ):
        return True
    if any(tags.get(key) for key in AREA_KEYS):
        return True
    for key, linear_values in AREA_KEYS_EXCEPT.items():
        if tags.get(key) and tags.get(key) not in linear_values:
            return True
    for key, area_values in AREA_KEYS_ONLY.items():
        if tags.get(key) in area_values:
            return True
    return False


def polygon_style_for(tags: Mapping[str, str]) -> PolygonStyle:
    if is_building(tags):
        return BUILDING_STYLE
    if is_water_area(tags):
        return WATER_STYLE
    if is_park(tags):
        return PARK_STYLE
    if is_highway_area(tags) or tags.get("highway") == "pedestrian":
        return PEDESTRIAN_AREA_STYLE
    return DEFAULT_POLYGON_STYLE


def line_style_for(tags: Mapping[str, str]) -> LineStyle:
    if is_waterway_line(tags):
        return RIVER_STYLE
    return road_style(tags) or DEFAULT_LINE_STYLE
