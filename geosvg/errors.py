class GeoSvgError(Exception):
    """Base error for every conversion failure."""


class ParseError(GeoSvgError):
    """The input document (SVG or GeoJSON) is malformed."""


class InvalidPathError(ParseError):
    """A path `d` attribute is syntactically invalid."""


class EmptyInputError(GeoSvgError):
    """Structurally valid input with nothing in it.

    These are recoverable: the public converters absorb them and return an
    empty but well-formed result.
    """


class EmptyDocumentError(EmptyInputError):
    """An SVG document contains no path elements."""


class EmptyGeometryError(EmptyInputError):
    """A feature collection has no coordinates to derive an extent from."""


class EmptyFeatureCollectionError(EmptyInputError):
    """A feature collection has no features to render."""


class UnsupportedFormatError(GeoSvgError):
    """OSM input is neither parseable XML nor Overpass JSON."""
