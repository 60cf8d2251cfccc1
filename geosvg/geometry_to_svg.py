from typing import Dict, List, NamedTuple

import numpy as np
from lxml import etree
from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from shapely.geometry.base import BaseGeometry

from geosvg.errors import EmptyFeatureCollectionError
from geosvg.extent import GeometryExtentResolver
from geosvg.geometry import Feature, FeatureCollection
from geosvg.logger import logger
from geosvg.project_types import MAX_PRECISION, BoundingBox, RenderMetadata, RenderOptions
from geosvg.transforms import (
    LinearTransform,
    build_viewport_transform,
    format_number,
    round_points,
)

SVG_NS = "http://www.w3.org/2000/svg"

POLYGON_STYLE: Dict[str, str] = {
    "fill": "#b2caae",
    "fill-opacity": "0.6",
    "fill-rule": "evenodd",
    "stroke": "#4d4d4d",
    "stroke-width": "1",
}
LINE_STYLE: Dict[str, str] = {
    "fill": "none",
    "stroke": "#4d4d4d",
    "stroke-width": "1",
}
POINT_STYLE: Dict[str, str] = {
    "fill": "#d9534f",
    "stroke": "none",
}


class RenderResult(NamedTuple):
    document: str
    metadata: RenderMetadata


def _svg(tag: str) -> str:
    return f"{{{SVG_NS}}}{tag}"


class GeometryToVectorConverter:
    def __init__(self, extent_resolver: GeometryExtentResolver | None = None):
        self.extent_resolver = extent_resolver or GeometryExtentResolver()

    def render(
        self, fc: FeatureCollection, options: RenderOptions | None = None
    ) -> RenderResult:
        """Render a feature collection into an SVG document sized to the viewport.

        Feature order is preserved; each rendered feature becomes exactly one
        top-level element. An empty collection renders as an empty <svg>.
        """
        options = options or RenderOptions()
        root = self._root(options)

        try:
            self._require_features(fc)
        except EmptyFeatureCollectionError as e:
            logger.info(f"Nothing to draw: {e}")
            return RenderResult(_serialize(root), RenderMetadata(0, None))

        extent = self.extent_resolver.resolve_or_sentinel(fc, options.extent_override)
        transform = build_viewport_transform(extent, options)
        logger.debug(f"Viewport transform for extent {extent.as_list()}: {transform}")

        element_count = 0
        for feature in fc.features:
            if self.render_feature(root, feature, transform, options) is not None:
                element_count += 1

        logger.info(f"Rendered {element_count} of {len(fc)} features")
        return RenderResult(_serialize(root), RenderMetadata(element_count, extent))

    def render_feature(
        self,
        parent: etree._Element,
        feature: Feature,
        transform: LinearTransform,
        options: RenderOptions,
    ) -> etree._Element | None:
        """One SVG element for the feature, or None if it has nothing to draw"""
        if feature.geometry is None or feature.geometry.is_empty:
            logger.warning(f"Skipping feature {feature.id!r}: empty geometry")
            return None

        element = self._render_geometry(parent, feature.geometry, transform, options)
        if feature.id is not None:
            element.set("id", str(feature.id))
        return element

    def _render_geometry(
        self,
        parent: etree._Element,
        geometry: BaseGeometry,
        transform: LinearTransform,
        options: RenderOptions,
    ) -> etree._Element:
        if isinstance(geometry, Point):
            return self._circle(parent, geometry, transform, options)

        if isinstance(geometry, (LineString, MultiLineString)):
            lines = [geometry] if isinstance(geometry, LineString) else geometry.geoms
            d = " ".join(
                self._subpath(line.coords, transform, options.precision, closed=False)
                for line in lines
            )
            return _sub_element(parent, "path", LINE_STYLE, d=d)

        if isinstance(geometry, (Polygon, MultiPolygon)):
            polygons = [geometry] if isinstance(geometry, Polygon) else geometry.geoms
            subpaths: List[str] = []
            for polygon in polygons:
                for ring in (polygon.exterior, *polygon.interiors):
                    subpaths.append(
                        self._subpath(ring.coords, transform, options.precision, closed=True)
                    )
            return _sub_element(parent, "path", POLYGON_STYLE, d=" ".join(subpaths))

        if isinstance(geometry, (MultiPoint, GeometryCollection)):
            group = _sub_element(parent, "g", {})
            for part in geometry.geoms:
                if not part.is_empty:
                    self._render_geometry(group, part, transform, options)
            return group

        raise ValueError(f"Unsupported geometry type: {geometry.geom_type}")

    def _circle(
        self,
        parent: etree._Element,
        point: Point,
        transform: LinearTransform,
        options: RenderOptions,
    ) -> etree._Element:
        x, y = round_points(transform.apply([(point.x, point.y)]), options.precision)[0]
        return _sub_element(
            parent,
            "circle",
            POINT_STYLE,
            cx=format_number(x, options.precision),
            cy=format_number(y, options.precision),
            r=format_number(options.point_radius, MAX_PRECISION),
        )

    def _subpath(
        self, coords, transform: LinearTransform, precision: int, closed: bool
    ) -> str:
        points = np.asarray(coords, dtype=float)[:, :2]
        if closed and len(points) > 1 and np.array_equal(points[0], points[-1]):
            # the Z command closes the ring
            points = points[:-1]
        points = round_points(transform.apply(points), precision)

        parts = [
            f"{format_number(x, precision)},{format_number(y, precision)}"
            for x, y in points
        ]
        d = "M" + parts[0]
        if len(parts) > 1:
            d += " L" + " ".join(parts[1:])
        if closed:
            d += " Z"
        return d

    def _root(self, options: RenderOptions) -> etree._Element:
        # sizes are not coordinates, so the coordinate precision does not apply
        width = format_number(options.viewport_width, MAX_PRECISION)
        height = format_number(options.viewport_height, MAX_PRECISION)
        return etree.Element(
            _svg("svg"),
            nsmap={None: SVG_NS},
            width=width,
            height=height,
            viewBox=f"0 0 {width} {height}",
        )

    def _require_features(self, fc: FeatureCollection) -> None:
        if not fc.features:
            raise EmptyFeatureCollectionError("Feature collection has no features")


def _sub_element(
    parent: etree._Element, tag: str, style: Dict[str, str], **attributes: str
) -> etree._Element:
    element = etree.SubElement(parent, _svg(tag))
    for key, value in attributes.items():
        element.set(key, value)
    for key, value in style.items():
        element.set(key, value)
    return element


def _serialize(root: etree._Element) -> str:
    return etree.tostring(root, encoding="unicode", pretty_print=True)


def bbox_label(bbox: BoundingBox | None) -> str:
    """Human readable bounds, as shown next to a rendered preview"""
    if bbox is None:
        return "Bounds: n/a"
    return (
        f"Bounds: [{bbox.min_x:.2f}, {bbox.min_y:.2f}] → [{bbox.max_x:.2f}, {bbox.max_y:.2f}]"
    )
