import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from sand_cave.cave import CaveGrid  # noqa: E402
from sand_cave.config import ViewConfig  # noqa: E402
from sand_cave.model import SandCaveModel  # noqa: E402
from sand_cave.plotting import draw_cave, view_window  # noqa: E402


def test_view_window_covers_the_reference_cave():
    model = SandCaveModel(floor=False)
    rows, cols = view_window(model.cave)
    assert rows == slice(0, 12)
    assert cols.start <= 94 and cols.stop > 103


def test_view_window_of_empty_cave():
    cave = CaveGrid(4, 5)
    assert view_window(cave) == (slice(0, 4), slice(0, 5))


def test_view_window_includes_floor():
    model = SandCaveModel()
    rows, _ = view_window(model.cave)
    assert rows.stop == model.cave.rows


def test_draw_cave():
    model = SandCaveModel()
    model.run(max_ticks=20)
    fig, ax = plt.subplots()
    draw_cave(ax, model, ViewConfig())
    assert ax.get_title().startswith("Settled: ")
    assert len(ax.images) == 1
    plt.close(fig)
