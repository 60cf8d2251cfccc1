"""One conversion run: input text -> FeatureCollection -> output document.

This is the host-side glue: it picks which leg to run from the chosen input
and output kinds and formats the summary line shown next to the result.
"""

from enum import Enum
from typing import NamedTuple, Tuple

from geosvg.geojson_io import dump_geojson, parse_geojson
from geosvg.geometry import FeatureCollection
from geosvg.geometry_to_svg import GeometryToVectorConverter, bbox_label
from geosvg.logger import logger
from geosvg.osm_handler import OsmAdapter
from geosvg.project_types import (
    RenderMetadata,
    RenderOptions,
    TransformOptions,
    VectorConversionMetadata,
)
from geosvg.rendering import PdfPreviewRenderer
from geosvg.svg_to_geometry import VectorToGeometryConverter


class InputKind(str, Enum):
    SVG = "svg"
    GEOJSON = "geojson"
    OSM = "osm"


class OutputKind(str, Enum):
    GEOJSON = "geojson"
    SVG = "svg"
    PDF = "pdf"


class ConversionResult(NamedTuple):
    output: str | bytes
    message: str | None
    collection: FeatureCollection | None


def format_svg_metadata(metadata: VectorConversionMetadata) -> str:
    return (
        f"Paths: {metadata.path_count} · Features: {metadata.feature_count} · "
        f"Samples per path: {metadata.sample_points}"
    )


def format_render_metadata(metadata: RenderMetadata) -> str:
    return f"SVG elements: {metadata.element_count} · {bbox_label(metadata.bbox)}"


def load_collection(
    text: str, input_kind: InputKind, transform_options: TransformOptions
) -> Tuple[FeatureCollection, str]:
    """Turn input text into a FeatureCollection plus a summary message"""
    input_kind = InputKind(input_kind)
    if input_kind is InputKind.SVG:
        collection, metadata = VectorToGeometryConverter().convert(text, transform_options)
        return collection, format_svg_metadata(metadata)
    if input_kind is InputKind.OSM:
        collection = OsmAdapter().adapt(text)
        return collection, f"OSM Features: {len(collection)}"
    collection = parse_geojson(text)
    return collection, f"Features: {len(collection)}"


def run_conversion(
    text: str,
    input_kind: InputKind | str,
    output_kind: OutputKind | str,
    transform_options: TransformOptions | None = None,
    render_options: RenderOptions | None = None,
) -> ConversionResult:
    """Run one conversion. Blank input gives an empty result, not an error.

    Raises:
        GeoSvgError: For malformed input (parse, path or format errors)
    """
    output_kind = OutputKind(output_kind)
    transform_options = transform_options or TransformOptions()
    render_options = render_options or RenderOptions()

    if text is None or not text.strip():
        logger.debug("Blank input, nothing to convert")
        return ConversionResult(b"" if output_kind is OutputKind.PDF else "", None, None)

    collection, message = load_collection(text, InputKind(input_kind), transform_options)

    if output_kind is OutputKind.GEOJSON:
        return ConversionResult(dump_geojson(collection), message, collection)

    if output_kind is OutputKind.PDF:
        pdf = PdfPreviewRenderer().render(collection, render_options)
        return ConversionResult(pdf, message, collection)

    document, metadata = GeometryToVectorConverter().render(collection, render_options)
    return ConversionResult(document, format_render_metadata(metadata), collection)
