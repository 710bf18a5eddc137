from sand_cave.cave import CaveBoundsError, CaveGrid, Cell, CellOverwriteError
from sand_cave.cave_builder import CaveParseError, EmptyCaveError, add_floor, build_cave, load_cave, parse_paths
from sand_cave.model import SandCaveModel

__version__ = "0.1.0"
