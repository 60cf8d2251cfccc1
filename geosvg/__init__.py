"""Convert drawings between SVG paths, GeoJSON feature collections and OSM data."""

from geosvg.errors import (
    EmptyDocumentError,
    EmptyFeatureCollectionError,
    EmptyGeometryError,
    GeoSvgError,
    InvalidPathError,
    ParseError,
    UnsupportedFormatError,
)
from geosvg.extent import GeometryExtentResolver
from geosvg.geometry import Feature, FeatureCollection
from geosvg.geometry_to_svg import GeometryToVectorConverter
from geosvg.osm_handler import OsmAdapter
from geosvg.path_sampler import PathSampler
from geosvg.project_types import (
    BoundingBox,
    ExtentSource,
    FitTo,
    RenderOptions,
    TransformOptions,
)
from geosvg.svg_to_geometry import VectorToGeometryConverter

__version__ = "0.1.0"

__all__ = [
    "BoundingBox",
    "EmptyDocumentError",
    "EmptyFeatureCollectionError",
    "EmptyGeometryError",
    "ExtentSource",
    "Feature",
    "FeatureCollection",
    "FitTo",
    "GeoSvgError",
    "GeometryExtentResolver",
    "GeometryToVectorConverter",
    "InvalidPathError",
    "OsmAdapter",
    "ParseError",
    "PathSampler",
    "RenderOptions",
    "TransformOptions",
    "UnsupportedFormatError",
    "VectorToGeometryConverter",
]
