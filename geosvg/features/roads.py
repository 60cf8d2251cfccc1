from typing import Dict, Mapping

from reportlab.lib.colors import Color

from geosvg.styles import LineStyle, PolygonStyle

BASE_ROAD_WIDTHS = {
    1: 4.0,  # Motorways
    2: 3.5,  # Trunk
    3: 3.0,  # Primary
    4: 2.5,  # Secondary
    5: 2.0,  # Tertiary
    6: 1.5,  # Residential
    7: 1.0,  # Service/Other
    8: 0.5,  # Pedestrian/Footway
}
ROAD_STYLES: Dict[int, LineStyle] = {
    hierarchy: {
        "stroke_width": width,
        "stroke_color": Color(
            0.3 + (hierarchy * 0.05),
            0.3 + (hierarchy * 0.05),
            0.3 + (hierarchy * 0.05),
        ),
        "round_cap": True,
    }
    for hierarchy, width in BASE_ROAD_WIDTHS.items()
}
DEFAULT_ROAD_STYLE_KEY = 7

ROAD_TYPES_HIERARCHY = {
    "motorway": 1,
    "trunk": 2,
    "primary": 3,
    "secondary": 4,
    "tertiary": 5,
    "residential": 6,
    "service": 7,
    "unclassified": 7,
    "motorway_link": 2,
    "trunk_link": 3,
    "primary_link": 4,
    "secondary_link": 5,
    "tertiary_link": 6,
    "living_street": 7,
    "track": 7,
    "road": 7,
    "pedestrian": 8,
    "footway": 8,
    "steps": 8,
    "path": 8,
    "cycleway": 8,
}

# highway=* values that describe an area rather than a line
HIGHWAY_AREAS = ["services", "rest_area", "escape", "elevator"]

PEDESTRIAN_AREA_STYLE: PolygonStyle = {"fill_color": Color(0.866, 0.866, 0.910)}


def get_road_type(tags: Mapping[str, str]) -> str | None:
    if tags.get("highway") in ROAD_TYPES_HIERARCHY:
        return tags.get("highway")
    elif tags.get("highway") == "construction":
        if tags.get("construction") in ROAD_TYPES_HIERARCHY:
            return tags.get("construction")
    return None


def road_style(tags: Mapping[str, str]) -> LineStyle | None:
    """Line style by road importance, or None if the tags are not a road"""
    road_type = get_road_type(tags)
    if road_type is None:
        return None
    return ROAD_STYLES[ROAD_TYPES_HIERARCHY.get(road_type, DEFAULT_ROAD_STYLE_KEY)]


def is_highway_area(tags: Mapping[str, str]) -> bool:
    return (
        tags.get("highway") in HIGHWAY_AREAS
        or bool(tags.get("area:highway"))
        or (tags.get("highway") == "pedestrian" and tags.get("area") == "yes")
    )
