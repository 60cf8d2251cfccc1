import pytest

from geosvg.geometry import Feature, FeatureCollection, make_geometry

OSM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="geosvg-tests">
  <node id="1" lat="0" lon="0"/>
  <node id="2" lat="0" lon="10"/>
  <node id="3" lat="10" lon="10"/>
  <node id="4" lat="10" lon="0"/>
  <node id="5" lat="2" lon="2"/>
  <node id="6" lat="2" lon="4"/>
  <node id="7" lat="4" lon="4"/>
  <node id="8" lat="4" lon="2"/>
  <node id="9" lat="5" lon="5">
    <tag k="amenity" v="cafe"/>
    <tag k="name" v="Corner Cafe"/>
  </node>
  <node id="20" lat="7" lon="7"/>
  <node id="21" lat="20" lon="20"/>
  <node id="22" lat="20" lon="21"/>
  <node id="23" lat="21" lon="21"/>
  <node id="24" lat="21" lon="20"/>
  <node id="25" lat="30" lon="30"/>
  <node id="26" lat="31" lon="32"/>
  <node id="27" lat="40" lon="40"/>
  <node id="28" lat="40" lon="41"/>
  <node id="29" lat="41" lon="41"/>
  <way id="10">
    <nd ref="1"/>
    <nd ref="2"/>
    <nd ref="3"/>
  </way>
  <way id="11">
    <nd ref="3"/>
    <nd ref="4"/>
    <nd ref="1"/>
  </way>
  <way id="12">
    <nd ref="5"/>
    <nd ref="6"/>
    <nd ref="7"/>
    <nd ref="8"/>
    <nd ref="5"/>
  </way>
  <way id="30">
    <nd ref="21"/>
    <nd ref="22"/>
    <nd ref="23"/>
    <nd ref="24"/>
    <nd ref="21"/>
    <tag k="building" v="yes"/>
  </way>
  <way id="31">
    <nd ref="25"/>
    <nd ref="26"/>
    <tag k="highway" v="residential"/>
  </way>
  <way id="32">
    <nd ref="27"/>
    <nd ref="28"/>
    <nd ref="29"/>
    <nd ref="27"/>
    <tag k="highway" v="residential"/>
  </way>
  <relation id="40">
    <member type="way" ref="10" role="outer"/>
    <member type="way" ref="11" role="outer"/>
    <member type="way" ref="12" role="inner"/>
    <tag k="type" v="multipolygon"/>
    <tag k="landuse" v="grass"/>
  </relation>
</osm>
"""

OVERPASS_JSON = """
{
  "version": 0.6,
  "generator": "Overpass API",
  "elements": [
    {"type": "node", "id": 1, "lat": 0, "lon": 0},
    {"type": "node", "id": 2, "lat": 0, "lon": 10},
    {"type": "node", "id": 3, "lat": 10, "lon": 10},
    {"type": "node", "id": 4, "lat": 10, "lon": 0},
    {"type": "node", "id": 9, "lat": 5, "lon": 5, "tags": {"amenity": "cafe"}},
    {"type": "way", "id": 30, "nodes": [1, 2, 3, 4, 1], "tags": {"building": "yes"}},
    {
      "type": "way",
      "id": 31,
      "nodes": [101, 102],
      "geometry": [{"lat": 50, "lon": 50}, {"lat": 51, "lon": 52}],
      "tags": {"highway": "primary"}
    },
    {
      "type": "relation",
      "id": 50,
      "members": [{"type": "way", "ref": 31, "role": ""}],
      "tags": {"type": "route", "route": "bus"}
    }
  ]
}
"""

SQUARE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="20" height="20">'
    '<path id="square" style="fill:red" d="M0,0 L10,0 L10,10 L0,10 Z"/>'
    "</svg>"
)


@pytest.fixture
def osm_xml() -> str:
    return OSM_XML


@pytest.fixture
def overpass_json() -> str:
    return OVERPASS_JSON


@pytest.fixture
def square_svg() -> str:
    return SQUARE_SVG


@pytest.fixture
def mixed_collection() -> FeatureCollection:
    return FeatureCollection(
        [
            Feature(make_geometry("Point", [[(5, 5)]]), {"name": "a"}, id="a"),
            Feature(
                make_geometry("LineString", [[(0, 0), (20, 5)]]), {"name": "b"}, id="b"
            ),
            Feature(
                make_geometry("Polygon", [[(2, 1), (8, 1), (8, 4), (2, 4)]]),
                {"name": "c"},
                id="c",
            ),
        ]
    )
