from typing import Dict, Iterable, List, NamedTuple, Tuple

from shapely.errors import ShapelyError
from shapely.geometry import LinearRing, Polygon

from geosvg.logger import logger
from geosvg.project_types import Point2D

Line = List[Point2D]
RingWithHoles = Tuple[Line, List[Line]]


class OsmMember(NamedTuple):
    type: str  # "n", "w" or "r"
    ref: int
    role: str


def join_segments(segments: List[Line]) -> List[Line]:
    """Join way segments that share endpoints into longer lines.

    Segments may be reversed to connect. Input lists are not modified.
    """
    remaining = [list(segment) for segment in segments]
    joined: List[Line] = []

    while remaining:
        current = remaining.pop(0)
        modified = True

        while modified:
            modified = False
            i = 0
            while i < len(remaining):
                other = remaining[i]
                if current[-1] == other[0]:
                    current.extend(other[1:])
                    remaining.pop(i)
                    modified = True
                elif current[-1] == other[-1]:
                    current.extend(other[-2::-1])
                    remaining.pop(i)
                    modified = True
                elif current[0] == other[-1]:
                    current = other + current[1:]
                    remaining.pop(i)
                    modified = True
                elif current[0] == other[0]:
                    current = other[::-1] + current[1:]
                    remaining.pop(i)
                    modified = True
                else:
                    i += 1

        joined.append(current)

    return joined


def close_rings(lines: List[Line]) -> List[Line]:
    rings = []
    for line in lines:
        if line[0] != line[-1]:
            line = line + [line[0]]
        rings.append(line)
    return rings


def assemble_multipolygon(
    members: Iterable[OsmMember], way_coords: Dict[int, Line]
) -> List[RingWithHoles]:
    """Build (outer ring, holes) pairs from the way members of a multipolygon relation"""
    outer_segments: List[Line] = []
    inner_segments: List[Line] = []

    for member in members:
        if member.type != "w":
            continue
        if member.ref not in way_coords:
            logger.debug(f"Member way {member.ref} has no coordinates, skipping")
            continue
        coords = way_coords[member.ref]
        # An empty role is treated as outer, as most editors do
        if member.role in ("outer", ""):
            outer_segments.append(coords)
        elif member.role == "inner":
            inner_segments.append(coords)

    output: List[RingWithHoles] = []
    if not outer_segments:
        return output

    inner_rings = [
        ring for ring in close_rings(join_segments(inner_segments)) if len(ring) >= 4
    ]

    for ring in close_rings(join_segments(outer_segments)):
        # Need at least 4 points for a valid polygon (3 unique + closing point)
        if len(ring) < 4:
            continue

        holes: List[Line] = []
        for inner in inner_rings:
            try:
                outer_poly = Polygon(LinearRing(ring))
                inner_poly = Polygon(LinearRing(inner))
                if outer_poly.contains(inner_poly):
                    holes.append(inner)
            except (ValueError, ShapelyError) as e:
                logger.warning(f"Failed to process inner ring: {e}")

        output.append((ring, holes))

    return output
