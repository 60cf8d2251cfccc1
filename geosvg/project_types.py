from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Sequence, Tuple

import numpy as np

X = float
Y = float
Point2D = Tuple[X, Y]
Ring = List[Point2D]

# (N, 2) float array of x, y samples along one drawn path
PathSample = np.ndarray

MIN_PRECISION = 0
MAX_PRECISION = 6
MIN_SAMPLE_POINTS = 2
MAX_SAMPLE_POINTS = 2000


class FitTo(str, Enum):
    """Which viewport dimension drives the scale when rendering"""

    WIDTH = "width"
    HEIGHT = "height"
    NONE = "none"


class ExtentSource(str, Enum):
    AUTO = "auto"
    CUSTOM = "custom"


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self):
        if self.min_x > self.max_x:
            raise ValueError(
                f"min_x ({self.min_x}) must be less than or equal to max_x ({self.max_x})"
            )
        if self.min_y > self.max_y:
            raise ValueError(
                f"min_y ({self.min_y}) must be less than or equal to max_y ({self.max_y})"
            )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def is_degenerate(self) -> bool:
        return self.width == 0 or self.height == 0

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def as_list(self) -> List[float]:
        return [self.min_x, self.min_y, self.max_x, self.max_y]

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "BoundingBox":
        """Build a box from `[minX, minY, maxX, maxY]` (GeoJSON bbox order)"""
        if len(values) != 4:
            raise ValueError(f"A bounding box needs 4 values, got {len(values)}")
        return cls(*(float(v) for v in values))


# Extent used when there is nothing to measure but a preview must still render
SENTINEL_EXTENT = BoundingBox(-1.0, -1.0, 1.0, 1.0)


def _validate_precision(precision: int) -> None:
    if not MIN_PRECISION <= precision <= MAX_PRECISION:
        raise ValueError(
            f"precision must be between {MIN_PRECISION} and {MAX_PRECISION}, got {precision}"
        )


class TransformOptions:
    """Options for the SVG -> geometry leg"""

    def __init__(
        self,
        sample_points: int = 250,
        flip_y: bool = True,
        precision: int = 2,
        scale: float = 1.0,
        translate_x: float = 0.0,
        translate_y: float = 0.0,
        closure_tolerance: float = 0.0,
    ):
        if not MIN_SAMPLE_POINTS <= sample_points <= MAX_SAMPLE_POINTS:
            raise ValueError(
                f"sample_points must be between {MIN_SAMPLE_POINTS} and {MAX_SAMPLE_POINTS}, got {sample_points}"
            )
        _validate_precision(precision)
        if scale == 0:
            raise ValueError("scale must not be zero")
        if closure_tolerance < 0:
            raise ValueError("closure_tolerance must not be negative")

        self.sample_points = int(sample_points)
        self.flip_y = bool(flip_y)
        self.precision = int(precision)
        self.scale = float(scale)
        self.translate_x = float(translate_x)
        self.translate_y = float(translate_y)
        self.closure_tolerance = float(closure_tolerance)


class RenderOptions:
    """Options for the geometry -> SVG leg"""

    def __init__(
        self,
        viewport_width: float = 640.0,
        viewport_height: float = 480.0,
        fit_to: FitTo | str = FitTo.WIDTH,
        precision: int = 2,
        point_radius: float = 2.0,
        extent_source: ExtentSource | str = ExtentSource.AUTO,
        custom_extent: BoundingBox | None = None,
        flip_y: bool = True,
    ):
        if viewport_width <= 0 or viewport_height <= 0:
            raise ValueError("viewport_width and viewport_height must be positive")
        _validate_precision(precision)
        if point_radius < 0:
            raise ValueError("point_radius must not be negative")

        extent_source = ExtentSource(extent_source)
        if extent_source is ExtentSource.CUSTOM and custom_extent is None:
            raise ValueError("custom_extent is required when extent_source is 'custom'")

        self.viewport_width = float(viewport_width)
        self.viewport_height = float(viewport_height)
        self.fit_to = FitTo(fit_to)
        self.precision = int(precision)
        self.point_radius = float(point_radius)
        self.extent_source = extent_source
        self.custom_extent = custom_extent
        self.flip_y = bool(flip_y)

    @property
    def extent_override(self) -> BoundingBox | None:
        """The caller-declared extent, if it should win over the data bounds"""
        if self.extent_source is ExtentSource.CUSTOM:
            return self.custom_extent
        return None


class VectorConversionMetadata(NamedTuple):
    path_count: int
    feature_count: int
    sample_points: int


class RenderMetadata(NamedTuple):
    element_count: int
    bbox: BoundingBox | None


class ConverterConfig:
    def __init__(
        self,
        transform: TransformOptions,
        render: RenderOptions,
        output_dir: str = "converted",
        log_level: str = "INFO",
    ):
        if transform is None or render is None:
            raise ValueError("transform and render options are required")
        if not output_dir:
            raise ValueError("output_dir is required")

        self.transform = transform
        self.render = render
        self.output_dir = output_dir
        self.log_level = log_level
