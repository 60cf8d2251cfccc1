from typing import Mapping

from reportlab.lib.colors import Color

from geosvg.styles import LineStyle, PolygonStyle

WATER_STYLE: PolygonStyle = {
    "fill_color": Color(0.529, 0.808, 0.922),
}

RIVER_STYLE: LineStyle = {
    "stroke_color": Color(0.529, 0.808, 0.922),
    "stroke_width": 2,
}

# Waterways drawn as lines even when the way happens to be closed
LINEAR_WATERWAYS = ["river", "stream", "canal", "drain", "ditch"]
AREA_WATERWAYS = ["riverbank", "dock", "boatyard", "dam"]
WATER_NATURAL = ["water", "wetland", "spring", "lake", "bay"]
WATER_VALUES = ["lake", "pond", "reservoir", "basin", "river", "canal", "stream", "moat"]


def is_waterway_line(tags: Mapping[str, str]) -> bool:
    return tags.get("waterway") in LINEAR_WATERWAYS


def is_water_area(tags: Mapping[str, str]) -> bool:
    """Check if the tags describe a body of water"""
    return (
        tags.get("natural") in WATER_NATURAL
        or tags.get("leisure") in ["swimming_pool"]
        or tags.get("amenity") in ["fountain", "swimming_pool"]
        or tags.get("waterway") in AREA_WATERWAYS
        or tags.get("water") in WATER_VALUES
        or tags.get("landuse") in ["reservoir", "basin"]
        or tags.get("man_made") in ["reservoir_covered", "basin"]
    )
