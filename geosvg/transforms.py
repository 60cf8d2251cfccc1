import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

import numpy as np
import shapely
from shapely.geometry.base import BaseGeometry

from geosvg.project_types import BoundingBox, FitTo, RenderOptions


@dataclass(frozen=True)
class LinearTransform:
    """Axis-aligned linear map: x' = x * scale_x + translate_x (same for y).

    A negative scale_y is an axis flip.
    """

    scale_x: float = 1.0
    scale_y: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    @classmethod
    def identity(cls) -> "LinearTransform":
        return cls()

    @classmethod
    def flip_y(cls) -> "LinearTransform":
        return cls(scale_y=-1.0)

    def then(self, other: "LinearTransform") -> "LinearTransform":
        """Compose: apply self first, then other"""
        return LinearTransform(
            scale_x=self.scale_x * other.scale_x,
            scale_y=self.scale_y * other.scale_y,
            translate_x=self.translate_x * other.scale_x + other.translate_x,
            translate_y=self.translate_y * other.scale_y + other.translate_y,
        )

    def apply(self, points: np.ndarray) -> np.ndarray:
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        out = np.empty_like(points)
        out[:, 0] = points[:, 0] * self.scale_x + self.translate_x
        out[:, 1] = points[:, 1] * self.scale_y + self.translate_y
        return out


def apply_matrix(points: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Apply a 3x3 homogeneous SVG transform matrix to (N, 2) points"""
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    matrix = np.asarray(matrix, dtype=float)
    return points @ matrix[:2, :2].T + matrix[:2, 2]


def build_viewport_transform(
    extent: BoundingBox, options: RenderOptions
) -> LinearTransform:
    """Map `extent` onto the viewport following the fit policy.

    A zero-width or zero-height extent is treated as one unit wide/high so a
    degenerate extent collapses onto the viewport origin instead of dividing
    by zero.
    """
    extent_width = extent.width or 1.0
    extent_height = extent.height or 1.0

    scale_x = options.viewport_width / extent_width
    scale_y = options.viewport_height / extent_height
    if options.fit_to is FitTo.WIDTH:
        scale_y = scale_x
    elif options.fit_to is FitTo.HEIGHT:
        scale_x = scale_y

    if options.flip_y:
        # SVG y grows downward, so the top of the extent lands on y=0
        return LinearTransform(
            scale_x=scale_x,
            scale_y=-scale_y,
            translate_x=-extent.min_x * scale_x,
            translate_y=extent.max_y * scale_y,
        )
    return LinearTransform(
        scale_x=scale_x,
        scale_y=scale_y,
        translate_x=-extent.min_x * scale_x,
        translate_y=-extent.min_y * scale_y,
    )


def round_half_away(value: float, precision: int) -> float:
    """Round to `precision` decimal digits, halves away from zero"""
    if not math.isfinite(value):
        raise ValueError(f"Cannot round non-finite coordinate {value}")
    quantum = Decimal(1).scaleb(-precision)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    # + 0.0 turns -0.0 into 0.0
    return float(rounded) + 0.0


_round_array = np.vectorize(round_half_away, otypes=[float])


def round_points(points: np.ndarray, precision: int) -> np.ndarray:
    points = np.asarray(points, dtype=float)
    if points.size == 0:
        return points.copy()
    return _round_array(points, precision)


def round_geometry(geometry: BaseGeometry, precision: int) -> BaseGeometry:
    return shapely.transform(geometry, lambda coords: round_points(coords, precision))


def format_number(value: float, precision: int) -> str:
    """Format a coordinate with at most `precision` decimals, no trailing zeros"""
    text = f"{round_half_away(value, precision):.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text
