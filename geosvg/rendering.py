import io

from reportlab.pdfgen import canvas, pathobject
from reportlab.pdfgen.canvas import FILL_EVEN_ODD
from shapely.errors import ShapelyError
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

from geosvg.extent import GeometryExtentResolver
from geosvg.features import line_style_for, polygon_style_for
from geosvg.geometry import Feature, FeatureCollection
from geosvg.logger import logger
from geosvg.project_types import RenderOptions
from geosvg.styles import DEFAULT_POINT_STYLE, LineStyle, PolygonStyle
from geosvg.transforms import LinearTransform, build_viewport_transform


class PdfPreviewRenderer:
    """Draws a feature collection onto a PDF page sized to the viewport.

    Uses the same extent and fit policy as the SVG renderer. PDF y grows
    upward, so the SVG screen coordinates are mirrored onto the page.
    """

    def __init__(self, extent_resolver: GeometryExtentResolver | None = None):
        self.extent_resolver = extent_resolver or GeometryExtentResolver()

    def render(self, fc: FeatureCollection, options: RenderOptions | None = None) -> bytes:
        options = options or RenderOptions()
        buffer = io.BytesIO()
        c = canvas.Canvas(
            buffer, pagesize=(options.viewport_width, options.viewport_height)
        )

        if fc.features:
            extent = self.extent_resolver.resolve_or_sentinel(fc, options.extent_override)
            page_transform = build_viewport_transform(extent, options).then(
                LinearTransform(scale_y=-1.0, translate_y=options.viewport_height)
            )
            FeatureRenderer(c, page_transform, options.point_radius).render_features(fc)
        else:
            logger.info("Nothing to draw, writing an empty page")

        c.showPage()
        c.save()
        return buffer.getvalue()


class FeatureRenderer:
    def __init__(
        self,
        canvas: canvas.Canvas,
        transform: LinearTransform,
        point_radius: float = 2.0,
    ):
        self.canvas = canvas
        self.transform = transform
        self.point_radius = point_radius

    def transform_coords(self, x: float, y: float):
        px, py = self.transform.apply([(x, y)])[0]
        return float(px), float(py)

    def render_features(self, fc: FeatureCollection) -> int:
        """Render every feature, skipping the ones that fail to draw"""
        drawn = 0
        for feature in fc.features:
            if feature.geometry is None or feature.geometry.is_empty:
                continue
            try:
                self._render_feature(feature)
                drawn += 1
            except (ValueError, ShapelyError) as e:
                logger.warning(f"Failed to render feature {feature.id!r}: {e}")
        return drawn

    def _render_feature(self, feature: Feature) -> None:
        self._render_geometry(feature.geometry, feature.properties)

    def _render_geometry(self, geometry: BaseGeometry, tags: dict) -> None:
        if isinstance(geometry, Point):
            self._draw_point(geometry)
        elif isinstance(geometry, (LineString, MultiLineString)):
            self._draw_lines(geometry, line_style_for(tags))
        elif isinstance(geometry, (Polygon, MultiPolygon)):
            self._draw_polygon(geometry, polygon_style_for(tags))
        elif isinstance(geometry, (MultiPoint, GeometryCollection)):
            for part in geometry.geoms:
                if not part.is_empty:
                    self._render_geometry(part, tags)
        else:
            raise ValueError(f"Unsupported geometry type: {geometry.geom_type}")

    def _draw_point(self, point: Point) -> None:
        x, y = self.transform_coords(point.x, point.y)
        self.canvas.setFillColor(DEFAULT_POINT_STYLE["fill_color"])
        self.canvas.circle(x, y, self.point_radius, stroke=0, fill=1)

    def _draw_lines(self, geometry: LineString | MultiLineString, style: LineStyle) -> None:
        lines = [geometry] if isinstance(geometry, LineString) else geometry.geoms
        p = self.canvas.beginPath()
        for line in lines:
            coords = list(line.coords)
            if len(coords) < 2:
                continue
            x, y = self.transform_coords(*coords[0][:2])
            p.moveTo(x, y)
            for coord in coords[1:]:
                x, y = self.transform_coords(*coord[:2])
                p.lineTo(x, y)

        self.canvas.setStrokeColor(style["stroke_color"])
        self.canvas.setLineWidth(style["stroke_width"])
        if style.get("round_cap", False):
            self.canvas.setLineCap(1)
            self.canvas.setLineJoin(1)

        self.canvas.drawPath(p, fill=0, stroke=1)

    def _draw_polygon(self, polygon: Polygon | MultiPolygon, style: PolygonStyle) -> None:
        p = self.canvas.beginPath()
        self._draw_polygon_to_path(p, polygon)

        self.canvas.setFillColor(style["fill_color"])
        stroke = 0
        if "stroke_color" in style:
            self.canvas.setStrokeColor(style["stroke_color"])
            self.canvas.setLineWidth(0.5)
            stroke = 1
        self.canvas.drawPath(p, fill=1, stroke=stroke, fillMode=FILL_EVEN_ODD)

    def _draw_polygon_to_path(
        self,
        p: pathobject.PDFPathObject,
        polygon: Polygon | MultiPolygon,
    ) -> None:
        """Draw a polygon to a ReportLab path object"""
        if isinstance(polygon, MultiPolygon):
            for geom in polygon.geoms:
                self._draw_polygon_to_path(p, geom)
            return

        for ring in (polygon.exterior, *polygon.interiors):
            coords = list(ring.coords)
            x, y = self.transform_coords(*coords[0][:2])
            p.moveTo(x, y)
            for coord in coords[1:]:
                x, y = self.transform_coords(*coord[:2])
                p.lineTo(x, y)
            p.close()
