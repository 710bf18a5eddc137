import numpy as np
import pytest

from sand_cave.cave import CaveBoundsError, CaveGrid, Cell, CellOverwriteError


def test_new_grid_is_empty():
    cave = CaveGrid(4, 6)
    assert cave.shape == (4, 6)
    assert cave.count(Cell.EMPTY) == 24
    assert cave.source is None


@pytest.mark.parametrize("row, column", [(-1, 0), (0, -1), (4, 0), (0, 6), (10, 10)])
def test_out_of_bounds_access_raises(row, column):
    cave = CaveGrid(4, 6)
    with pytest.raises(CaveBoundsError):
        cave.get(row, column)
    with pytest.raises(CaveBoundsError):
        cave.set(row, column, Cell.ROCK)


def test_bounds_error_is_an_index_error():
    cave = CaveGrid(2, 2)
    with pytest.raises(IndexError):
        cave.get(-1, -1)


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        CaveGrid(0, 5)


def test_rock_is_idempotent():
    cave = CaveGrid(3, 3)
    cave.set(1, 1, Cell.ROCK)
    cave.set(1, 1, Cell.ROCK)
    assert cave.count(Cell.ROCK) == 1


@pytest.mark.parametrize("first, second", [
    (Cell.ROCK, Cell.SAND),
    (Cell.SAND, Cell.ROCK),
    (Cell.SAND, Cell.EMPTY),
    (Cell.ROCK, Cell.EMPTY),
])
def test_rock_and_sand_are_write_once(first, second):
    cave = CaveGrid(3, 3)
    cave.set(0, 0, first)
    with pytest.raises(CellOverwriteError):
        cave.set(0, 0, second)
    assert cave.get(0, 0) == first


def test_source_is_not_an_obstacle():
    cave = CaveGrid(3, 3, source=(1, 0))
    assert cave.get(0, 1) == Cell.SOURCE
    assert not cave.is_blocked(0, 1)
    cave.set(0, 1, Cell.SAND)
    assert cave.is_blocked(0, 1)


def test_moving_the_source_clears_the_old_marker():
    cave = CaveGrid(3, 3, source=(1, 0))
    cave.place_source(2, 0)
    assert cave.get(0, 1) == Cell.EMPTY
    assert cave.get(0, 2) == Cell.SOURCE
    assert cave.source == (2, 0)


def test_fill_row_and_column_are_inclusive():
    cave = CaveGrid(6, 6)
    cave.fill_row(2, 4, 1)
    cave.fill_column(5, 3, 0)
    assert [c for c in range(6) if cave.get(2, c) == Cell.ROCK] == [1, 2, 3, 4, 5]
    assert [r for r in range(6) if cave.get(r, 5) == Cell.ROCK] == [0, 1, 2, 3]
    assert cave.count(Cell.ROCK) == 7


def test_lowest_row_with():
    cave = CaveGrid(5, 5)
    assert cave.lowest_row_with(Cell.ROCK) is None
    cave.set(1, 0, Cell.ROCK)
    cave.set(3, 4, Cell.ROCK)
    assert cave.lowest_row_with(Cell.ROCK) == 3


def test_has_floor():
    cave = CaveGrid(3, 4)
    assert not cave.has_floor()
    cave.fill_row(2, 0, 3)
    assert cave.has_floor()



def test_from_array_checks_source():
    cells = np.zeros((2, 2), dtype=np.int8)
    with pytest.raises(CaveBoundsError):
        CaveGrid.from_array(cells, source=(5, 0))


def test_render():
    cave = CaveGrid(3, 4, source=(1, 0))
    cave.fill_row(2, 0, 3)
    cave.set(1, 3, Cell.SAND)
    assert cave.render(grains=[(2, 1)]) == ".+..\n..~o\n####"
