import pytest

from sand_cave.cave import CaveGrid, Cell
from sand_cave.model import REFERENCE_CAVE


@pytest.fixture
def reference_text():
    return REFERENCE_CAVE


@pytest.fixture
def reference_file(tmp_path, reference_text):
    path = tmp_path / "cave.txt"
    path.write_text(reference_text, encoding="utf-8")
    return path


@pytest.fixture
def small_cave():
    """A 5x5 floorless cave with one rock directly below the source."""
    cave = CaveGrid(5, 5, source=(2, 0))
    cave.set(2, 2, Cell.ROCK)
    return cave
