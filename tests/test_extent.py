import pytest

from geosvg.errors import EmptyGeometryError
from geosvg.extent import GeometryExtentResolver
from geosvg.geometry import Feature, FeatureCollection, make_geometry
from geosvg.project_types import SENTINEL_EXTENT, BoundingBox


@pytest.fixture
def resolver() -> GeometryExtentResolver:
    return GeometryExtentResolver()


def test_extent_covers_every_coordinate(resolver, mixed_collection):
    extent = resolver.resolve(mixed_collection)
    assert extent.as_list() == [0.0, 0.0, 20.0, 5.0]
    for x, y in mixed_collection.coordinates():
        assert extent.contains(x, y)


def test_override_is_returned_unchanged(resolver, mixed_collection):
    override = BoundingBox(-180, -90, 180, 90)
    assert resolver.resolve(mixed_collection, override) is override


def test_override_wins_even_for_empty_collections(resolver):
    override = BoundingBox(0, 0, 1, 1)
    assert resolver.resolve(FeatureCollection([]), override) is override


def test_single_point_gives_degenerate_extent(resolver):
    fc = FeatureCollection([Feature(make_geometry("Point", [[(3, 4)]]))])
    extent = resolver.resolve(fc)
    assert extent.as_list() == [3.0, 4.0, 3.0, 4.0]
    assert extent.is_degenerate


def test_features_without_geometry_are_ignored(resolver):
    fc = FeatureCollection(
        [Feature(None), Feature(make_geometry("LineString", [[(1, 2), (3, -4)]]))]
    )
    assert resolver.resolve(fc).as_list() == [1.0, -4.0, 3.0, 2.0]


@pytest.mark.parametrize(
    "fc", [FeatureCollection([]), FeatureCollection([Feature(None)])]
)
def test_no_coordinates_raises(resolver, fc):
    with pytest.raises(EmptyGeometryError):
        resolver.resolve(fc)


def test_sentinel_fallback(resolver):
    assert resolver.resolve_or_sentinel(FeatureCollection([])) == SENTINEL_EXTENT
    assert SENTINEL_EXTENT.as_list() == [-1.0, -1.0, 1.0, 1.0]


def test_bounding_box_must_be_well_formed():
    with pytest.raises(ValueError):
        BoundingBox(1, 0, 0, 1)
    with pytest.raises(ValueError):
        BoundingBox.from_sequence([0, 0, 1])
    assert BoundingBox.from_sequence(["0", 1, 2, 3]).as_list() == [0.0, 1.0, 2.0, 3.0]
