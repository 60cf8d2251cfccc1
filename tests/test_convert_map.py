import json

import pytest

from convert_map import build_parser, guess_input_kind, main, options_from_args
from geosvg.pipeline import InputKind
from geosvg.project_types import ExtentSource, FitTo


def test_defaults_come_from_config():
    args = build_parser().parse_args(["map.svg"])
    transform, render = options_from_args(args)
    assert (transform.sample_points, transform.flip_y, transform.precision) == (250, True, 2)
    assert (render.viewport_width, render.viewport_height) == (640, 480)
    assert render.fit_to is FitTo.WIDTH
    assert render.extent_source is ExtentSource.AUTO


def test_custom_extent_and_flags():
    args = build_parser().parse_args(
        ["map.geojson", "--extent", "-180", "-90", "180", "90", "--fit", "none", "--no-flip-y"]
    )
    transform, render = options_from_args(args)
    assert not transform.flip_y
    assert render.extent_override.as_list() == [-180, -90, 180, 90]
    assert render.fit_to is FitTo.NONE


@pytest.mark.parametrize("argv", [["--sample-points", "10"], ["--precision", "7"]])
def test_out_of_range_values_are_rejected(argv):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["map.svg", *argv])


def test_guess_input_kind(tmp_path):
    assert guess_input_kind(tmp_path / "a.SVG") is InputKind.SVG
    assert guess_input_kind(tmp_path / "a.geojson") is InputKind.GEOJSON
    assert guess_input_kind(tmp_path / "a.osm") is InputKind.OSM
    with pytest.raises(ValueError):
        guess_input_kind(tmp_path / "a.txt")


def test_main_writes_output(tmp_path, square_svg):
    source = tmp_path / "square.svg"
    source.write_text(square_svg, encoding="utf-8")
    out_dir = tmp_path / "out"

    assert main([str(source), "--to", "geojson", "--out-dir", str(out_dir)]) == 0

    written = list(out_dir.glob("square_*.geojson"))
    assert len(written) == 1
    data = json.loads(written[0].read_text(encoding="utf-8"))
    assert data["features"][0]["geometry"]["type"] == "Polygon"


def test_main_reports_failures(tmp_path, square_svg):
    good = tmp_path / "good.svg"
    good.write_text(square_svg, encoding="utf-8")
    bad = tmp_path / "bad.svg"
    bad.write_text("<svg><path></svg>", encoding="utf-8")
    out_dir = tmp_path / "out"

    assert main([str(good), str(bad), "--to", "pdf", "--out-dir", str(out_dir)]) == 1
    assert len(list(out_dir.glob("good_*.pdf"))) == 1
    assert not list(out_dir.glob("bad_*"))
