from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Literal, Sequence

import numpy as np
import shapely
from shapely.geometry import LineString, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry

from geosvg.project_types import Point2D, Ring

GeometryKind = Literal["Point", "LineString", "Polygon"]


@dataclass
class Feature:
    geometry: BaseGeometry | None
    properties: Dict[str, Any] = field(default_factory=dict)
    id: str | int | None = None

    @property
    def geometry_type(self) -> str | None:
        return self.geometry.geom_type if self.geometry is not None else None

    def coordinates(self) -> np.ndarray:
        """All x, y coordinates of this feature as an (N, 2) array"""
        if self.geometry is None or self.geometry.is_empty:
            return np.empty((0, 2))
        return shapely.get_coordinates(self.geometry)


@dataclass
class FeatureCollection:
    features: List[Feature] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def coordinates(self) -> np.ndarray:
        """Every coordinate of every feature, in feature order"""
        arrays = [feature.coordinates() for feature in self.features]
        if not arrays:
            return np.empty((0, 2))
        return np.concatenate(arrays, axis=0)


def close_ring(ring: Sequence[Point2D]) -> Ring:
    """Returns a copy of the ring whose last point equals its first"""
    coords = [(float(x), float(y)) for x, y in ring]
    if coords and coords[0] != coords[-1]:
        coords.append(coords[0])
    return coords


def make_geometry(kind: GeometryKind, rings: Sequence[Sequence[Point2D]]) -> BaseGeometry:
    """Build a Point, LineString or Polygon, enforcing its shape invariants.

    Args:
        kind: Geometry type to build
        rings: For a Polygon the outer ring followed by any holes, otherwise a
            single coordinate sequence

    Raises:
        ValueError: If the coordinates cannot form the requested geometry
    """
    if not rings:
        raise ValueError(f"{kind} needs at least one coordinate sequence")

    if kind == "Point":
        if len(rings[0]) != 1:
            raise ValueError(f"Point needs exactly 1 coordinate, got {len(rings[0])}")
        x, y = rings[0][0]
        return Point(float(x), float(y))

    if kind == "LineString":
        if len(rings[0]) < 2:
            raise ValueError(
                f"LineString needs at least 2 coordinates, got {len(rings[0])}"
            )
        return LineString([(float(x), float(y)) for x, y in rings[0]])

    if kind == "Polygon":
        closed = [close_ring(ring) for ring in rings]
        for ring in closed:
            # 3 distinct points + closing point
            if len(ring) < 4:
                raise ValueError(
                    f"Polygon rings need at least 4 coordinates after closing, got {len(ring)}"
                )
        return Polygon(closed[0], closed[1:])

    raise ValueError(f"Unsupported geometry kind: {kind}")


def polygons_to_geometry(
    rings_and_holes: Sequence[tuple],
) -> Polygon | MultiPolygon | None:
    """Turn (outer ring, holes) pairs into a Polygon, or a MultiPolygon if several"""
    polygons = [make_geometry("Polygon", [ring, *holes]) for ring, holes in rings_and_holes]
    if not polygons:
        return None
    if len(polygons) == 1:
        return polygons[0]
    return MultiPolygon(polygons)
