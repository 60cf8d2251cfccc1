from typing import NotRequired, TypedDict

from reportlab.lib.colors import Color


class PolygonStyle(TypedDict):
    fill_color: Color
    stroke_color: NotRequired[Color]


class LineStyle(TypedDict):
    stroke_color: Color
    stroke_width: float
    round_cap: NotRequired[bool]


class PointStyle(TypedDict):
    fill_color: Color


DEFAULT_POLYGON_STYLE: PolygonStyle = {
    "fill_color": Color(0.698, 0.792, 0.682, alpha=0.6),
    "stroke_color": Color(0.3, 0.3, 0.3),
}

DEFAULT_LINE_STYLE: LineStyle = {
    "stroke_color": Color(0.3, 0.3, 0.3),
    "stroke_width": 1.0,
}

DEFAULT_POINT_STYLE: PointStyle = {
    "fill_color": Color(0.851, 0.325, 0.31),
}
