import json
import math
from typing import Callable, Dict, List, NamedTuple, Set

import osmium
from osmium import osm
from shapely.geometry import MultiLineString

from geosvg.errors import UnsupportedFormatError
from geosvg.features import has_interesting_tags, is_area
from geosvg.geometry import Feature, FeatureCollection, make_geometry, polygons_to_geometry
from geosvg.logger import logger
from geosvg.osm_rings import Line, OsmMember, assemble_multipolygon
from geosvg.project_types import Point2D

MULTIPOLYGON_TYPES = ["multipolygon", "boundary"]
LINEAR_RELATION_TYPES = ["route", "waterway"]
MEMBER_TYPES = {"node": "n", "way": "w", "relation": "r"}


class OsmWay(NamedTuple):
    id: int
    tags: Dict[str, str]
    refs: List[int]


class OsmRelation(NamedTuple):
    id: int
    tags: Dict[str, str]
    members: List[OsmMember]


class OsmData:
    """Plain copy of the nodes, ways and relations of one OSM document"""

    def __init__(self):
        self.nodes: Dict[int, Point2D] = {}  # id -> (lon, lat)
        self.node_tags: Dict[int, Dict[str, str]] = {}
        self.ways: List[OsmWay] = []
        self.relations: List[OsmRelation] = []

    def add_node(self, node_id: int, coord: Point2D, tags: Dict[str, str]) -> None:
        self.nodes[node_id] = coord
        self.node_tags[node_id] = tags

    def way_coords(self, way: OsmWay) -> Line:
        return [self.nodes[ref] for ref in way.refs if ref in self.nodes]


class OsmXmlHandler(osmium.SimpleHandler):
    "Copies every element of an OSM XML document into an OsmData"

    def __init__(self):
        super().__init__()
        self.data = OsmData()

    def node(self, n: osm.Node):
        if n.location.valid():
            self.data.add_node(
                n.id, (n.location.lon, n.location.lat), {t.k: t.v for t in n.tags}
            )

    def way(self, w: osm.Way):
        self.data.ways.append(
            OsmWay(w.id, {t.k: t.v for t in w.tags}, [node.ref for node in w.nodes])
        )

    def relation(self, r: osm.Relation):
        self.data.relations.append(
            OsmRelation(
                r.id,
                {t.k: t.v for t in r.tags},
                [OsmMember(m.type, m.ref, m.role) for m in r.members],
            )
        )


def read_osm_xml(raw_text: str) -> OsmData:
    """Parse a standard .osm XML document

    Raises:
        ValueError: If osmium cannot read the document
    """
    handler = OsmXmlHandler()
    try:
        handler.apply_buffer(raw_text.strip().encode("utf-8"), "osm")
    except RuntimeError as e:
        raise ValueError(f"Not OSM XML: {e}") from e
    return handler.data


def read_overpass_json(raw_text: str) -> OsmData:
    """Parse an Overpass API JSON response (`{"elements": [...]}`)

    Raises:
        ValueError: If the text is not Overpass-style JSON
    """
    document = json.loads(raw_text)
    if not isinstance(document, dict) or not isinstance(document.get("elements"), list):
        raise ValueError("JSON has no 'elements' array")

    data = OsmData()
    try:
        for element in document["elements"]:
            element_type = element.get("type")
            tags = dict(element.get("tags") or {})
            if element_type == "node":
                if "lat" in element and "lon" in element:
                    data.add_node(element["id"], _lon_lat(element), tags)
            elif element_type == "way":
                refs = list(element.get("nodes") or [])
                # "out geom" responses carry the node coordinates inline
                for ref, point in zip(refs, element.get("geometry") or []):
                    if ref not in data.nodes and point:
                        data.nodes[ref] = _lon_lat(point)
                data.ways.append(OsmWay(element["id"], tags, refs))
            elif element_type == "relation":
                members = [
                    OsmMember(
                        MEMBER_TYPES.get(m["type"], m["type"]), m["ref"], m.get("role", "")
                    )
                    for m in element.get("members") or []
                ]
                data.relations.append(OsmRelation(element["id"], tags, members))
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed Overpass element: {e}") from e
    return data


def _lon_lat(obj) -> Point2D:
    lon, lat = float(obj["lon"]), float(obj["lat"])
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise ValueError(f"Coordinate out of range: lon={obj['lon']}, lat={obj['lat']}")
    return (lon, lat)


class OsmAdapter:
    def adapt(self, raw_text: str) -> FeatureCollection:
        """Convert OSM XML or Overpass JSON text into a FeatureCollection

        Raises:
            UnsupportedFormatError: If the text is neither format
        """
        return self.build_features(self.read(raw_text))

    def read(self, raw_text: str) -> OsmData:
        if raw_text is None or not raw_text.strip():
            raise UnsupportedFormatError("OSM input is empty")

        readers: List[Callable[[str], OsmData]] = [read_osm_xml, read_overpass_json]
        if raw_text.lstrip().startswith("{"):
            readers.reverse()

        errors = []
        for reader in readers:
            try:
                return reader(raw_text)
            except ValueError as e:
                logger.debug(f"{reader.__name__} failed: {e}")
                errors.append(str(e))

        raise UnsupportedFormatError(
            "Input is neither OSM XML nor Overpass JSON: " + "; ".join(errors)
        )

    def build_features(self, data: OsmData) -> FeatureCollection:
        """Nodes, then ways, then relations, each in document order"""
        features: List[Feature] = []

        nodes_in_ways: Set[int] = {ref for way in data.ways for ref in way.refs}
        multipolygon_ways: Set[int] = {
            member.ref
            for relation in data.relations
            if relation.tags.get("type") in MULTIPOLYGON_TYPES
            for member in relation.members
            if member.type == "w"
        }

        for node_id, coord in data.nodes.items():
            tags = data.node_tags.get(node_id)
            if tags is None:
                # coordinates only known from a way's inline geometry
                continue
            if has_interesting_tags(tags) or node_id not in nodes_in_ways:
                features.append(
                    _feature("node", node_id, tags, make_geometry("Point", [[coord]]))
                )

        way_coords: Dict[int, Line] = {}
        for way in data.ways:
            coords = data.way_coords(way)
            if len(coords) < 2:
                logger.warning(f"Skipping way {way.id}: fewer than 2 known nodes")
                continue
            way_coords[way.id] = coords

            if way.id in multipolygon_ways and not has_interesting_tags(way.tags):
                continue

            closed = coords[0] == coords[-1]
            if closed and len(coords) >= 4 and is_area(way.tags):
                geometry = make_geometry("Polygon", [coords])
            else:
                geometry = make_geometry("LineString", [coords])
            features.append(_feature("way", way.id, way.tags, geometry))

        for relation in data.relations:
            relation_type = relation.tags.get("type")
            if relation_type in MULTIPOLYGON_TYPES:
                geometry = polygons_to_geometry(
                    assemble_multipolygon(relation.members, way_coords)
                )
                if geometry is None:
                    logger.warning(
                        f"Skipping relation {relation.id}: no closed outer ring"
                    )
                    continue
            elif relation_type in LINEAR_RELATION_TYPES:
                lines = [
                    way_coords[m.ref]
                    for m in relation.members
                    if m.type == "w" and m.ref in way_coords
                ]
                if not lines:
                    logger.warning(f"Skipping relation {relation.id}: no member ways")
                    continue
                geometry = MultiLineString(lines)
            else:
                logger.debug(
                    f"Skipping relation {relation.id} of unsupported type {relation_type!r}"
                )
                continue
            features.append(_feature("relation", relation.id, relation.tags, geometry))

        logger.info(
            f"OSM data: {len(data.nodes)} nodes, {len(data.ways)} ways, "
            f"{len(data.relations)} relations -> {len(features)} features"
        )
        return FeatureCollection(features)


def _feature(osm_type: str, osm_id: int, tags: Dict[str, str], geometry) -> Feature:
    feature_id = f"{osm_type}/{osm_id}"
    return Feature(geometry=geometry, properties={"@id": feature_id, **tags}, id=feature_id)
