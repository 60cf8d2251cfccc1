"""Sampling of SVG path data into fixed-size point sequences.

Samples are spaced uniformly in arc length: sample i sits at distance
i * L / (n - 1) along the drawn segments, so the first sample is the path
start and the last sample is the path end. Jumps between subpaths (move
commands) add no length.

Curve lengths come from a dense polyline over each segment's parameter
range; sample distances are mapped back to curve parameters by linear
interpolation along that polyline, all at once per segment.
"""

import math
import re
from typing import Iterator, List, Tuple

import numpy as np
from svgpathtools import Arc, Line, parse_path, Path as SvgPath

from geosvg.errors import InvalidPathError
from geosvg.logger import logger
from geosvg.project_types import MIN_SAMPLE_POINTS, PathSample

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_ALLOWED_PATH_CHARS = re.compile(r"^[MmZzLlHhVvCcSsQqTtAa0-9eE.,+\-\s]*$")
_FIRST_COMMAND = re.compile(r"[A-Za-z]")
_COMMAND = re.compile(r"[\s,]*([MmZzLlHhVvCcSsQqTtAa])")
_ARGUMENT = re.compile(rf"[\s,]*({_NUMBER})")
# arc flags are single digits and may be written without separators
_FLAG = re.compile(r"[\s,]*([01])")

ARGUMENT_COUNTS = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}
ARC_FLAG_POSITIONS = (3, 4)

# polyline vertices per curved segment used to measure and invert its length
CURVE_RESOLUTION = 1024

Command = Tuple[str, List[float]]


class PathSampler:
    def sample(self, d: str, num_points: int) -> PathSample:
        """Sample the path described by `d` into exactly `num_points` points.

        A path with no drawable length yields `num_points` copies of its
        anchor point (the first move command, or the origin when there is
        none).

        Raises:
            InvalidPathError: If `d` is not valid SVG path data
            ValueError: If `num_points` is less than 2
        """
        if num_points < MIN_SAMPLE_POINTS:
            raise ValueError(f"num_points must be at least 2, got {num_points}")

        path = self.parse(d)
        tables = []
        for segment in path:
            ts, cumulative = self._length_table(segment)
            if cumulative[-1] > 0:
                tables.append((segment, ts, cumulative))

        if not tables:
            anchor = self.anchor(d, path)
            logger.debug(f"Path has no length, repeating anchor {anchor}")
            return np.tile(np.array(anchor, dtype=float), (num_points, 1))

        lengths = np.array([cumulative[-1] for _, _, cumulative in tables])
        offsets = np.concatenate(([0.0], np.cumsum(lengths)))
        targets = np.linspace(0.0, offsets[-1], num_points)
        indices = np.clip(
            np.searchsorted(offsets, targets, side="right") - 1, 0, len(tables) - 1
        )

        points = np.empty(num_points, dtype=complex)
        for index, (segment, ts, cumulative) in enumerate(tables):
            mask = indices == index
            if not mask.any():
                continue
            local = np.clip(targets[mask] - offsets[index], 0.0, lengths[index])
            points[mask] = self._points_at(segment, np.interp(local, cumulative, ts))

        # linspace's last target can miss the end by a rounding error
        points[-1] = tables[-1][0].end
        return np.column_stack((points.real, points.imag))

    def parse(self, d: str) -> SvgPath:
        """Parse path data, reporting any syntax problem as InvalidPathError"""
        if d is None:
            raise InvalidPathError("Path has no d attribute")
        if not _ALLOWED_PATH_CHARS.match(d):
            raise InvalidPathError(f"Path data contains invalid characters: {d!r}")

        first_command = _FIRST_COMMAND.search(d)
        if first_command and first_command.group() not in ("M", "m"):
            raise InvalidPathError(
                f"Path data must start with a move command, got {first_command.group()!r}"
            )
        if first_command is None and d.strip():
            raise InvalidPathError(f"Path data has numbers but no commands: {d!r}")

        normalized = join_commands(absolute_commands(split_commands(d)))
        try:
            return parse_path(normalized)
        except (
            ValueError,
            IndexError,
            TypeError,
            ZeroDivisionError,
            OverflowError,
            AssertionError,
        ) as e:
            raise InvalidPathError(f"Malformed path data {d!r}: {e}") from e

    def anchor(self, d: str, path: SvgPath | None = None) -> tuple[float, float]:
        """The single point a zero-length path collapses to"""
        if path is not None and len(path) > 0:
            return (path.start.real, path.start.imag)
        for command, args in split_commands(d or ""):
            if command in ("M", "m"):
                return (args[0], args[1])
        return (0.0, 0.0)

    def has_commands(self, d: str | None) -> bool:
        return bool(d and _FIRST_COMMAND.search(d))

    def _length_table(self, segment) -> Tuple[np.ndarray, np.ndarray]:
        """Curve parameters and the path length travelled up to each of them"""
        if isinstance(segment, Line):
            return np.array([0.0, 1.0]), np.array([0.0, abs(segment.end - segment.start)])
        ts = np.linspace(0.0, 1.0, CURVE_RESOLUTION)
        chords = np.abs(np.diff(self._points_at(segment, ts)))
        return ts, np.concatenate(([0.0], np.cumsum(chords)))

    def _points_at(self, segment, ts: np.ndarray) -> np.ndarray:
        if isinstance(segment, Line):
            return segment.start + (segment.end - segment.start) * ts
        if isinstance(segment, Arc):
            return np.array([segment.point(float(t)) for t in ts], dtype=complex)
        return np.asarray(segment.poly()(ts), dtype=complex)


def split_commands(d: str) -> Iterator[Command]:
    """Yield (command, arguments) pairs, expanding implicitly repeated commands.

    Raises:
        InvalidPathError: On a missing or non-finite argument, or arguments
            without a command
    """
    position = 0
    command = None
    while True:
        match = _COMMAND.match(d, position)
        if match:
            command = match.group(1)
            position = match.end()
        elif not d[position:].strip(" \t\r\n,"):
            return
        elif command is None or command in "Zz":
            raise InvalidPathError(f"Unexpected data at offset {position} in {d!r}")

        args: List[float] = []
        for i in range(ARGUMENT_COUNTS[command.upper()]):
            pattern = _FLAG if command in "Aa" and i in ARC_FLAG_POSITIONS else _ARGUMENT
            argument = pattern.match(d, position)
            if argument is None:
                raise InvalidPathError(
                    f"Command {command!r} is missing an argument at offset {position} in {d!r}"
                )
            value = float(argument.group(1))
            if not math.isfinite(value):
                raise InvalidPathError(f"Path coordinate {argument.group(1)!r} is out of range")
            args.append(value)
            position = argument.end()
        yield command, args

        # extra coordinate pairs after a move are line-tos
        if command == "M":
            command = "L"
        elif command == "m":
            command = "l"


def absolute_commands(commands: Iterator[Command]) -> Iterator[Command]:
    """Rewrite commands with absolute coordinates.

    Arcs that end where they start are omitted and arcs with a zero radius
    become straight lines, as SVG renderers draw them.
    """
    x = y = 0.0
    start_x = start_y = 0.0
    for command, args in commands:
        kind = command.upper()
        relative = command != kind

        if kind == "Z":
            x, y = start_x, start_y
            yield "Z", []
            continue

        if kind == "H":
            x = args[0] + (x if relative else 0.0)
            yield "H", [x]
            continue
        if kind == "V":
            y = args[0] + (y if relative else 0.0)
            yield "V", [y]
            continue

        if relative and kind == "A":
            args = [*args[:5], args[5] + x, args[6] + y]
        elif relative:
            args = [value + (x if i % 2 == 0 else y) for i, value in enumerate(args)]
        end_x, end_y = args[-2], args[-1]

        if kind == "A":
            rx, ry, rotation, large_arc, sweep = args[:5]
            if (end_x, end_y) == (x, y):
                logger.debug(f"Dropping arc that ends where it starts at {(x, y)}")
                continue
            if rx == 0 or ry == 0:
                yield "L", [end_x, end_y]
            else:
                yield "A", [abs(rx), abs(ry), rotation, large_arc, sweep, end_x, end_y]
        else:
            yield kind, args

        x, y = end_x, end_y
        if kind == "M":
            start_x, start_y = x, y


def join_commands(commands: Iterator[Command]) -> str:
    parts = []
    for command, args in commands:
        values = [
            str(int(value)) if command == "A" and i in ARC_FLAG_POSITIONS else repr(value)
            for i, value in enumerate(args)
        ]
        parts.append(" ".join([command, *values]))
    return " ".join(parts)
