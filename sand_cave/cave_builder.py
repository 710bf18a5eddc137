import logging
import re

import numpy as np

from sand_cave.cave import CaveBoundsError, CaveGrid, Cell

logger = logging.getLogger(__name__)

_VERTEX = re.compile(r"^\s*(\d+)\s*,\s*(\d+)\s*$")


class CaveParseError(ValueError):
    """Raised for malformed path text or a segment that is not axis-aligned."""


class EmptyCaveError(ValueError):
    """Raised when a floor is requested for a cave with no rock in it."""


def parse_paths(text):
    """
    Parse rock paths of the form "x1,y1 -> x2,y2 -> ...", one per line.
    Returns a list of paths, each a list of (x, y) integer vertices.
    """
    paths = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        path = []
        for token in line.split("->"):
            match = _VERTEX.match(token)
            if match is None:
                raise CaveParseError(f"Line {line_no}: invalid vertex {token.strip()!r}")
            path.append((int(match.group(1)), int(match.group(2))))
        if len(path) < 2:
            raise CaveParseError(f"Line {line_no}: a path needs at least two vertices")
        paths.append(path)
    logger.info("Parsed %d rock paths", len(paths))
    return paths


def build_cave(paths, dims=(200, 200), source=(500, 0), offset=(-400, 0)):
    """
    Rasterise rock paths into a new cave grid.

    Args:
        paths: Lists of (x, y) vertices as returned by parse_paths
        dims: (rows, columns) of the grid
        source: (x, y) of the sand source in input coordinates
        offset: (dx, dy) added to every input coordinate

    Returns:
        CaveGrid with rock along every segment and the source marker placed.
    """
    rows, columns = dims
    dx, dy = offset
    cave = CaveGrid(rows, columns)
    cave.place_source(source[0] + dx, source[1] + dy)

    for path in paths:
        for (x0, y0), (x1, y1) in zip(path, path[1:]):
            if y0 == y1:
                cave.fill_row(y0 + dy, x0 + dx, x1 + dx)
            elif x0 == x1:
                cave.fill_column(x0 + dx, y0 + dy, y1 + dy)
            else:
                raise CaveParseError(
                    f"Segment {x0},{y0} -> {x1},{y1} is neither horizontal nor vertical"
                )

    column, row = cave.source
    if cave.get(row, column) != Cell.SOURCE:
        raise CaveParseError(f"Rock covers the sand source at {source[0]},{source[1]}")
    return cave


def load_cave(filename, dims=(200, 200), source=(500, 0), offset=(-400, 0), floor=False):
    """Read a path file and build its cave, optionally with a synthesised floor."""
    with open(filename, encoding="utf-8") as handle:
        text = handle.read()
    cave = build_cave(parse_paths(text), dims=dims, source=source, offset=offset)
    if floor:
        cave = add_floor(cave)
    return cave


def add_floor(cave):
    """
    Return a copy of the cave trimmed to two rows below its lowest rock, widened
    to at least twice its height, with a full rock floor appended.
    """
    lowest = cave.lowest_row_with(Cell.ROCK)
    if lowest is None:
        raise EmptyCaveError("No rock structures in cave, cannot place a floor")

    cells = cave.cells[: lowest + 2]
    if cells.shape[0] < lowest + 2:
        # Rock on the last row: add the empty row the floor sits below.
        cells = np.vstack([cells, np.zeros((1, cells.shape[1]), dtype=np.int8)])
    height = cells.shape[0]
    width = cells.shape[1]
    required_width = 2 * height

    pad = 0
    if width < required_width:
        pad = (required_width - width + 2) // 2
        cells = np.pad(cells, ((0, 0), (pad, pad)), constant_values=Cell.EMPTY)
        logger.info("Widened cave from %d to %d columns", width, cells.shape[1])

    floor_row = np.full((1, cells.shape[1]), Cell.ROCK, dtype=np.int8)
    cells = np.vstack([cells, floor_row])

    source = None
    if cave.source is not None:
        column, row = cave.source
        if row >= height:
            raise CaveBoundsError(f"Source row {row} lies below the synthesised floor")
        source = (column + pad, row)

    logger.info("Added floor at row %d", cells.shape[0] - 1)
    return CaveGrid.from_array(cells, source)
