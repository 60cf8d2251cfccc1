from typing import Mapping

from reportlab.lib.colors import Color

from geosvg.styles import PolygonStyle

BUILDING_STYLE: PolygonStyle = {
    "fill_color": Color(0.85, 0.85, 0.85),
}

BUILDING_KEYS = ["building", "building:part"]


def is_building(tags: Mapping[str, str]) -> bool:
    """Check if the tags describe a building drawn above ground"""
    has_building_tag = any(
        tags.get(key) not in (None, "", "no", "false") for key in BUILDING_KEYS
    )
    is_not_underground = tags.get("location") not in ["underground"]
    return has_building_tag and is_not_underground
