from typing import Dict, Iterator, List, NamedTuple, Tuple

import numpy as np
from lxml import etree
from shapely.geometry.base import BaseGeometry
from svgpathtools.parser import parse_transform

from geosvg.errors import EmptyDocumentError, ParseError
from geosvg.geometry import Feature, FeatureCollection, make_geometry
from geosvg.logger import logger
from geosvg.path_sampler import PathSampler
from geosvg.project_types import (
    PathSample,
    TransformOptions,
    VectorConversionMetadata,
)
from geosvg.transforms import LinearTransform, apply_matrix, round_points

# Containers whose children are never drawn directly
NON_RENDERED_TAGS = {"defs", "clipPath", "mask", "pattern", "symbol", "marker"}
SKIPPED_ATTRIBUTES = {"d", "transform"}


class DrawablePath(NamedTuple):
    d: str
    matrix: np.ndarray  # local-to-world 3x3 transform
    attributes: Dict[str, str]


class VectorConversionResult(NamedTuple):
    collection: FeatureCollection
    metadata: VectorConversionMetadata


def strip_namespace(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


class VectorToGeometryConverter:
    def __init__(self, sampler: PathSampler | None = None):
        self.sampler = sampler or PathSampler()

    def convert(
        self, document: str, options: TransformOptions | None = None
    ) -> VectorConversionResult:
        """Convert every path of an SVG document into one GeoJSON-style feature.

        A document without paths is a normal, empty result rather than an error.

        Raises:
            ParseError: If the document is not well-formed SVG
            InvalidPathError: If a path's `d` attribute is malformed
        """
        options = options or TransformOptions()

        try:
            paths = self.collect_paths(document)
        except EmptyDocumentError as e:
            logger.info(f"No paths to convert: {e}")
            return VectorConversionResult(
                FeatureCollection([]),
                VectorConversionMetadata(0, 0, options.sample_points),
            )

        global_transform = self.global_transform(options)
        features: List[Feature] = []
        for path in paths:
            if not self.sampler.has_commands(path.d):
                logger.warning(
                    f"Skipping path {path.attributes.get('id', '<no id>')}: no drawing commands"
                )
                continue

            samples = self.sampler.sample(path.d, options.sample_points)
            points = apply_matrix(samples, path.matrix)
            points = global_transform.apply(points)
            points = round_points(points, options.precision)

            features.append(
                Feature(
                    geometry=self.classify(points, options.closure_tolerance),
                    properties=dict(path.attributes),
                )
            )

        metadata = VectorConversionMetadata(
            path_count=len(paths),
            feature_count=len(features),
            sample_points=options.sample_points,
        )
        logger.info(
            f"Converted {metadata.path_count} paths into {metadata.feature_count} features"
        )
        return VectorConversionResult(FeatureCollection(features), metadata)

    def collect_paths(self, document: str) -> List[DrawablePath]:
        """Find every drawable path with its composed local-to-world transform

        Raises:
            ParseError: If the document is not well-formed SVG
            EmptyDocumentError: If the document has no path elements
        """
        root = parse_svg_document(document)
        paths = list(self._walk(root, np.identity(3)))
        if not paths:
            raise EmptyDocumentError("SVG document contains no path elements")
        return paths

    def global_transform(self, options: TransformOptions) -> LinearTransform:
        transform = LinearTransform(
            scale_x=options.scale,
            scale_y=options.scale,
            translate_x=options.translate_x,
            translate_y=options.translate_y,
        )
        if options.flip_y:
            transform = transform.then(LinearTransform.flip_y())
        return transform

    def classify(self, points: PathSample, closure_tolerance: float = 0.0) -> BaseGeometry:
        """Point when all samples coincide, Polygon when closed with area, else LineString"""
        first, last = points[0], points[-1]
        if np.all(points == first):
            return make_geometry("Point", [[tuple(first)]])

        ring = [(float(x), float(y)) for x, y in points]
        if is_closed(first, last, closure_tolerance) and len(ring) >= 4:
            ring[-1] = ring[0]
            polygon = make_geometry("Polygon", [ring])
            if polygon.area > 0:
                return polygon
        return make_geometry("LineString", [ring])

    def _walk(self, element, matrix: np.ndarray) -> Iterator[DrawablePath]:
        for child in element:
            # comments and processing instructions
            if not isinstance(child.tag, str):
                continue

            tag = strip_namespace(child.tag)
            if tag in NON_RENDERED_TAGS:
                continue

            child_matrix = matrix
            transform = child.get("transform")
            if transform:
                try:
                    child_matrix = matrix @ parse_transform(transform)
                except (ValueError, IndexError) as e:
                    raise ParseError(f"Invalid transform {transform!r}: {e}") from e

            if tag == "path":
                yield DrawablePath(
                    d=child.get("d", ""),
                    matrix=child_matrix,
                    attributes=path_attributes(child),
                )
            else:
                yield from self._walk(child, child_matrix)


def parse_svg_document(document: str):
    """Parse SVG text into an lxml root element

    Raises:
        ParseError: If the text is not XML or its root is not <svg>
    """
    if document is None or not document.strip():
        raise ParseError("SVG document is empty")

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(document.strip().encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        raise ParseError(f"Invalid SVG (malformed XML): {e}") from e

    if strip_namespace(root.tag) != "svg":
        raise ParseError(f"Document root is not <svg> (root={root.tag!r})")
    return root


def path_attributes(element) -> Dict[str, str]:
    return {
        strip_namespace(key): str(value)
        for key, value in element.attrib.items()
        if strip_namespace(key) not in SKIPPED_ATTRIBUTES
    }


def is_closed(
    first: Tuple[float, float], last: Tuple[float, float], tolerance: float = 0.0
) -> bool:
    """Closedness of a (rounded) sample ring.

    With tolerance 0 the endpoints must be equal; otherwise they may be up to
    `tolerance` apart.
    """
    if tolerance == 0:
        return bool(first[0] == last[0] and first[1] == last[1])
    return float(np.hypot(first[0] - last[0], first[1] - last[1])) <= tolerance
