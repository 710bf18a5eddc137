import numpy as np
from matplotlib.colors import BoundaryNorm, ListedColormap

from sand_cave.cave import Cell


def view_window(cave, margin=2):
    """
    Row and column slices covering every non-empty cell plus a margin, so a
    small cave in a large grid is still visible.
    """
    # A synthesised floor spans the whole width, so it does not count.
    cells = cave.cells[:-1] if cave.has_floor() else cave.cells
    occupied = np.argwhere(cells != Cell.EMPTY)
    if occupied.size == 0:
        return slice(0, cave.rows), slice(0, cave.columns)
    (row_min, col_min), (row_max, col_max) = occupied.min(axis=0), occupied.max(axis=0)
    col_min, col_max = col_min - margin, col_max + margin
    # Leave room for the diagonal spread of the sand pile below the source.
    if cave.source is not None:
        spread = row_max + margin - cave.source[1]
        col_min = min(col_min, cave.source[0] - spread)
        col_max = max(col_max, cave.source[0] + spread)
    return (
        slice(0, min(cave.rows, int(row_max) + margin + 1)),
        slice(max(0, int(col_min)), min(cave.columns, int(col_max) + 1)),
    )


def draw_cave(ax, model, view):
    """Draw rock, source and settled sand from the grid, then the falling grains."""
    rows, cols = view_window(model.cave)
    cmap = ListedColormap(view.cell_colours())
    norm = BoundaryNorm([-0.5, 0.5, 1.5, 2.5, 3.5], cmap.N)
    ax.imshow(
        model.cave.cells[rows, cols],
        cmap=cmap,
        norm=norm,
        interpolation="nearest",
        extent=[cols.start - 0.5, cols.stop - 0.5, rows.stop - 0.5, rows.start - 0.5],
    )

    positions = model.grain_positions()
    if positions:
        grain_cols, grain_rows = zip(*positions)
        ax.scatter(grain_cols, grain_rows, c=view.falling, marker="s", s=6, linewidths=0)

    status = "source blocked" if model.source_blocked else f"tick {model.tick}"
    ax.set_title(f"Settled: {model.settled_count}  Falling: {len(positions)}  ({status})")
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
