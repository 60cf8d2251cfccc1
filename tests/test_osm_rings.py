from geosvg.osm_rings import OsmMember, assemble_multipolygon, close_rings, join_segments


def test_join_segments_reverses_when_needed():
    a = [(0, 0), (1, 0)]
    b = [(1, 1), (1, 0)]  # reversed relative to a
    c = [(1, 1), (0, 0)]
    joined = join_segments([a, b, c])
    assert joined == [[(0, 0), (1, 0), (1, 1), (0, 0)]]


def test_join_segments_leaves_inputs_untouched():
    a = [(0, 0), (1, 0)]
    b = [(1, 0), (2, 0)]
    join_segments([a, b])
    assert a == [(0, 0), (1, 0)]
    assert b == [(1, 0), (2, 0)]


def test_disconnected_segments_stay_apart():
    assert len(join_segments([[(0, 0), (1, 0)], [(5, 5), (6, 5)]])) == 2


def test_close_rings():
    assert close_rings([[(0, 0), (1, 0), (1, 1)]]) == [[(0, 0), (1, 0), (1, 1), (0, 0)]]


def test_assemble_multipolygon_treats_empty_role_as_outer():
    way_coords = {
        1: [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)],
        2: [(2, 2), (4, 2), (4, 4), (2, 4), (2, 2)],
        3: [(20, 20), (30, 20), (30, 30), (20, 20)],
    }
    members = [
        OsmMember("w", 1, ""),
        OsmMember("w", 2, "inner"),
        OsmMember("w", 3, "outer"),
        OsmMember("w", 99, "outer"),
        OsmMember("n", 5, ""),
    ]
    polygons = assemble_multipolygon(members, way_coords)
    assert len(polygons) == 2
    (first, first_holes), (second, second_holes) = polygons
    assert first_holes == [way_coords[2]]
    assert second_holes == []


def test_assemble_multipolygon_without_outer_ring():
    assert assemble_multipolygon([OsmMember("w", 1, "inner")], {1: [(0, 0), (1, 1)]}) == []
