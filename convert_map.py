import argparse
import os
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import List

from tqdm import tqdm

from config import CONFIG
from geosvg.errors import GeoSvgError
from geosvg.logger import configure_logging, logger
from geosvg.pipeline import InputKind, OutputKind, run_conversion
from geosvg.project_types import (
    MAX_PRECISION,
    MIN_PRECISION,
    BoundingBox,
    ExtentSource,
    FitTo,
    RenderOptions,
    TransformOptions,
)

# The sample count accepted on the command line; the library accepts down to 2
CLI_MIN_SAMPLE_POINTS = 50
CLI_MAX_SAMPLE_POINTS = 2000

EXTENSION_KINDS = {
    ".svg": InputKind.SVG,
    ".json": InputKind.GEOJSON,
    ".geojson": InputKind.GEOJSON,
    ".osm": InputKind.OSM,
    ".xml": InputKind.OSM,
}
OUTPUT_EXTENSIONS = {
    OutputKind.GEOJSON: "geojson",
    OutputKind.SVG: "svg",
    OutputKind.PDF: "pdf",
}


def _bounded_int(low: int, high: int):
    def parse(value: str) -> int:
        number = int(value)
        if not low <= number <= high:
            raise argparse.ArgumentTypeError(f"must be between {low} and {high}")
        return number

    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert between SVG, GeoJSON and OSM, rendering SVG/PDF previews.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("inputs", nargs="+", help="Input files (.svg, .geojson, .osm)")
    parser.add_argument(
        "--from",
        dest="input_kind",
        choices=[k.value for k in InputKind],
        help="Input kind (guessed from the file extension when omitted)",
    )
    parser.add_argument(
        "--to",
        dest="output_kind",
        choices=[k.value for k in OutputKind],
        default=OutputKind.GEOJSON.value,
    )
    parser.add_argument("--out-dir", default=CONFIG.output_dir)

    svg_input = parser.add_argument_group("SVG input")
    svg_input.add_argument(
        "--sample-points",
        type=_bounded_int(CLI_MIN_SAMPLE_POINTS, CLI_MAX_SAMPLE_POINTS),
        default=CONFIG.transform.sample_points,
    )
    svg_input.add_argument(
        "--no-flip-y",
        dest="flip_y",
        action="store_false",
        help="Keep SVG's downward y axis",
    )
    svg_input.add_argument(
        "--svg-precision",
        type=_bounded_int(MIN_PRECISION, MAX_PRECISION),
        default=CONFIG.transform.precision,
    )

    svg_output = parser.add_argument_group("SVG/PDF output")
    svg_output.add_argument("--width", type=float, default=CONFIG.render.viewport_width)
    svg_output.add_argument("--height", type=float, default=CONFIG.render.viewport_height)
    svg_output.add_argument(
        "--fit", choices=[f.value for f in FitTo], default=CONFIG.render.fit_to.value
    )
    svg_output.add_argument(
        "--precision",
        type=_bounded_int(MIN_PRECISION, MAX_PRECISION),
        default=CONFIG.render.precision,
    )
    svg_output.add_argument(
        "--point-radius", type=float, default=CONFIG.render.point_radius
    )
    svg_output.add_argument(
        "--extent",
        nargs=4,
        type=float,
        metavar=("LEFT", "BOTTOM", "RIGHT", "TOP"),
        help="Fixed map extent instead of the data bounds",
    )

    parser.add_argument("--log-level", default=CONFIG.log_level)
    parser.set_defaults(flip_y=CONFIG.transform.flip_y)
    return parser


def guess_input_kind(path: Path) -> InputKind:
    kind = EXTENSION_KINDS.get(path.suffix.lower())
    if kind is None:
        raise ValueError(f"Cannot guess the input kind of {path}, use --from")
    return kind


def options_from_args(args: argparse.Namespace):
    transform = TransformOptions(
        sample_points=args.sample_points,
        flip_y=args.flip_y,
        precision=args.svg_precision,
    )
    render = RenderOptions(
        viewport_width=args.width,
        viewport_height=args.height,
        fit_to=args.fit,
        precision=args.precision,
        point_radius=args.point_radius,
        extent_source=ExtentSource.CUSTOM if args.extent else ExtentSource.AUTO,
        custom_extent=BoundingBox.from_sequence(args.extent) if args.extent else None,
    )
    return transform, render


def main(argv: List[str] | None = None) -> int:
    start_time = time.time()

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        transform_options, render_options = options_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    output_kind = OutputKind(args.output_kind)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    os.makedirs(args.out_dir, exist_ok=True)

    failures = 0
    for name in tqdm(args.inputs, desc="Converting", disable=len(args.inputs) < 2):
        path = Path(name)
        try:
            input_kind = (
                InputKind(args.input_kind) if args.input_kind else guess_input_kind(path)
            )
            text = path.read_text(encoding="utf-8-sig")
            result = run_conversion(
                text, input_kind, output_kind, transform_options, render_options
            )
        except (GeoSvgError, ValueError, OSError) as e:
            logger.error(f"Failed to convert {path}: {e}")
            failures += 1
            continue

        output_path = Path(args.out_dir) / (
            f"{path.stem}_{timestamp}.{OUTPUT_EXTENSIONS[output_kind]}"
        )
        if isinstance(result.output, bytes):
            output_path.write_bytes(result.output)
        else:
            output_path.write_text(result.output, encoding="utf-8")

        if result.message:
            logger.info(f"{path.name}: {result.message}")
        logger.info(f"Wrote {output_path}")

    execution_time = time.time() - start_time
    minutes = int(execution_time // 60)
    seconds = execution_time % 60
    logger.info(f"Total execution time: {minutes} minutes and {seconds:.2f} seconds")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
