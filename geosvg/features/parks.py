from typing import Mapping

from reportlab.lib.colors import Color

from geosvg.styles import PolygonStyle

PARK_STYLE: PolygonStyle = {
    "fill_color": Color(0.698, 0.792, 0.682),  # Main park green
}

PARK_LEISURE = [
    "park",
    "garden",
    "playground",
    "pitch",
    "sports_centre",
    "golf_course",
]
PARK_LANDUSE = [
    "park",
    "grass",
    "recreation_ground",
    "village_green",
    "meadow",
    "cemetery",
    "forest",
    "wood",
    "orchard",
    "vineyard",
    "farm",
    "farmyard",
]
PARK_NATURAL = ["wood", "forest", "scrub", "heath", "grassland"]


def is_park(tags: Mapping[str, str]) -> bool:
    """Check if the tags describe a park or other green area"""
    return (
        tags.get("leisure") in PARK_LEISURE
        or tags.get("landuse") in PARK_LANDUSE
        or tags.get("natural") in PARK_NATURAL
    )
