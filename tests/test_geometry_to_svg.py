import re

import pytest
from lxml import etree
from shapely.geometry import MultiPoint, MultiPolygon, Polygon

from geosvg.geometry import Feature, FeatureCollection, make_geometry
from geosvg.geometry_to_svg import SVG_NS, GeometryToVectorConverter, bbox_label
from geosvg.project_types import BoundingBox, ExtentSource, FitTo, RenderOptions

NS = {"svg": SVG_NS}
NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


@pytest.fixture
def converter() -> GeometryToVectorConverter:
    return GeometryToVectorConverter()


def parse(document: str) -> etree._Element:
    return etree.fromstring(document.encode("utf-8"))


def point(x, y, feature_id=None) -> Feature:
    return Feature(make_geometry("Point", [[(x, y)]]), id=feature_id)


def test_point_lands_at_viewport_center(converter):
    options = RenderOptions(
        viewport_width=100,
        viewport_height=100,
        fit_to=FitTo.WIDTH,
        extent_source=ExtentSource.CUSTOM,
        custom_extent=BoundingBox(0, 0, 10, 10),
    )
    document, metadata = converter.render(FeatureCollection([point(5, 5)]), options)
    circle = parse(document).find("svg:circle", NS)
    assert (circle.get("cx"), circle.get("cy")) == ("50", "50")
    assert circle.get("r") == "2"
    assert metadata.element_count == 1
    assert metadata.bbox == BoundingBox(0, 0, 10, 10)


def test_degenerate_extent_maps_everything_to_origin(converter):
    fc = FeatureCollection([point(3, 3), point(3, 3)])
    document, metadata = converter.render(fc, RenderOptions(200, 200))
    circles = parse(document).findall("svg:circle", NS)
    assert len(circles) == 2
    for circle in circles:
        assert (circle.get("cx"), circle.get("cy")) == ("0", "0")
    assert metadata.bbox.is_degenerate
    assert "nan" not in document.lower()


def test_empty_collection_renders_empty_svg(converter):
    document, metadata = converter.render(FeatureCollection([]))
    root = parse(document)
    assert root.tag == f"{{{SVG_NS}}}svg"
    assert len(root) == 0
    assert root.get("viewBox") == "0 0 640 480"
    assert metadata.element_count == 0
    assert metadata.bbox is None


def test_collection_without_coordinates_uses_sentinel_extent(converter):
    document, metadata = converter.render(FeatureCollection([Feature(None)]))
    assert metadata.element_count == 0
    assert metadata.bbox == BoundingBox(-1, -1, 1, 1)
    assert len(parse(document)) == 0


def test_one_top_level_element_per_feature_in_order(converter, mixed_collection):
    document, metadata = converter.render(mixed_collection)
    children = list(parse(document))
    assert metadata.element_count == 3
    assert [child.get("id") for child in children] == ["a", "b", "c"]
    assert [etree.QName(child).localname for child in children] == [
        "circle",
        "path",
        "path",
    ]


def test_linestring_is_open_and_polygon_is_closed(converter, mixed_collection):
    root = parse(converter.render(mixed_collection)[0])
    line, polygon = root.findall("svg:path", NS)
    assert not line.get("d").endswith("Z")
    assert line.get("fill") == "none"
    assert polygon.get("d").endswith("Z")
    assert polygon.get("fill-rule") == "evenodd"


def test_fit_width_spans_viewport_width(converter):
    fc = FeatureCollection([Feature(make_geometry("LineString", [[(0, 0), (20, 5)]]))])
    document, _ = converter.render(fc, RenderOptions(100, 100, FitTo.WIDTH))
    d = parse(document).find("svg:path", NS).get("d")
    assert d == "M0,25 L100,0"


def test_fit_height_spans_viewport_height(converter):
    fc = FeatureCollection([Feature(make_geometry("LineString", [[(0, 0), (20, 5)]]))])
    document, _ = converter.render(fc, RenderOptions(100, 100, FitTo.HEIGHT))
    assert parse(document).find("svg:path", NS).get("d") == "M0,100 L400,0"


def test_fit_none_stretches_both_axes(converter):
    fc = FeatureCollection([Feature(make_geometry("LineString", [[(0, 0), (20, 5)]]))])
    document, _ = converter.render(fc, RenderOptions(100, 100, FitTo.NONE))
    assert parse(document).find("svg:path", NS).get("d") == "M0,100 L100,0"


def test_without_flip_y_grows_downward(converter):
    fc = FeatureCollection([Feature(make_geometry("LineString", [[(0, 0), (20, 5)]]))])
    document, _ = converter.render(fc, RenderOptions(100, 100, FitTo.NONE, flip_y=False))
    assert parse(document).find("svg:path", NS).get("d") == "M0,0 L100,100"


@pytest.mark.parametrize("precision", range(0, 7))
def test_emitted_numbers_respect_precision(converter, precision):
    fc = FeatureCollection(
        [
            Feature(
                make_geometry(
                    "LineString", [[(0.1234567, 3.3333333), (7.7777777, 1.0101010)]]
                )
            ),
            point(2.2222222, 9.8765432),
        ]
    )
    document, _ = converter.render(
        fc, RenderOptions(333.3333, 77.7777, FitTo.NONE, precision=precision)
    )
    root = parse(document)
    values = [root.find("svg:path", NS).get("d")]
    circle = root.find("svg:circle", NS)
    values += [circle.get("cx"), circle.get("cy")]
    for number in NUMBER.findall(" ".join(values)):
        decimals = number.split(".")[1] if "." in number else ""
        assert len(decimals) <= precision


def test_polygon_holes_become_subpaths(converter):
    polygon = Polygon(
        [(0, 0), (10, 0), (10, 10), (0, 10)], [[(2, 2), (4, 2), (4, 4), (2, 4)]]
    )
    document, _ = converter.render(FeatureCollection([Feature(polygon)]))
    d = parse(document).find("svg:path", NS).get("d")
    assert d.count("M") == 2
    assert d.count("Z") == 2


def test_multipolygon_is_a_single_path(converter):
    multi = MultiPolygon(
        [
            Polygon([(0, 0), (1, 0), (1, 1)]),
            Polygon([(5, 5), (6, 5), (6, 6)]),
        ]
    )
    document, metadata = converter.render(FeatureCollection([Feature(multi)]))
    root = parse(document)
    assert len(root) == 1
    assert root[0].get("d").count("Z") == 2
    assert metadata.element_count == 1


def test_multipoint_becomes_group_of_circles(converter):
    document, _ = converter.render(
        FeatureCollection([Feature(MultiPoint([(0, 0), (1, 1), (2, 0)]))])
    )
    root = parse(document)
    assert len(root) == 1
    group = root.find("svg:g", NS)
    assert len(group.findall("svg:circle", NS)) == 3


def test_features_without_geometry_are_skipped(converter):
    fc = FeatureCollection([Feature(None, id="empty"), point(1, 1, "p"), point(2, 2, "q")])
    document, metadata = converter.render(fc)
    assert metadata.element_count == 2
    assert [child.get("id") for child in parse(document)] == ["p", "q"]


def test_bbox_label():
    assert bbox_label(None) == "Bounds: n/a"
    assert bbox_label(BoundingBox(0, -1.5, 2, 3)) == "Bounds: [0.00, -1.50] → [2.00, 3.00]"


def test_sizes_are_not_rounded_to_coordinate_precision(converter):
    options = RenderOptions(200.5, 100.25, precision=0, point_radius=2.5)
    document, _ = converter.render(FeatureCollection([point(1, 1)]), options)
    root = parse(document)
    assert (root.get("width"), root.get("height")) == ("200.5", "100.25")
    assert root.get("viewBox") == "0 0 200.5 100.25"
    assert root.find("svg:circle", NS).get("r") == "2.5"
