"""
Simulation and viewer settings.

SimulationConfig carries everything the model and the runners need.
ViewConfig is only read by the viewer; the model never sees it.
"""
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class SimulationConfig:
    rows: int = 200
    columns: int = 200
    source: Tuple[int, int] = (500, 0)
    offset: Tuple[int, int] = (-400, 0)
    floor: bool = True
    spawn_interval: int = 3  # ticks between grains
    ticks_per_second: float = 120.0
    steps_per_frame: int = 1
    max_ticks: Optional[int] = None
    halt_on_void: bool = False

    def __post_init__(self):
        if self.rows <= 0 or self.columns <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.rows}x{self.columns}")
        if self.spawn_interval < 1:
            raise ValueError(f"spawn_interval must be at least 1, got {self.spawn_interval}")
        if self.ticks_per_second <= 0:
            raise ValueError(f"ticks_per_second must be positive, got {self.ticks_per_second}")
        if self.steps_per_frame < 1:
            raise ValueError(f"steps_per_frame must be at least 1, got {self.steps_per_frame}")
        if self.max_ticks is not None and self.max_ticks < 0:
            raise ValueError(f"max_ticks cannot be negative, got {self.max_ticks}")
        self.source = tuple(self.source)
        self.offset = tuple(self.offset)

    def model_kwargs(self):
        """Keyword arguments accepted by SandCaveModel."""
        return {
            "rows": self.rows,
            "columns": self.columns,
            "source": self.source,
            "offset": self.offset,
            "floor": self.floor,
            "spawn_interval": self.spawn_interval,
            "halt_on_void": self.halt_on_void,
        }


@dataclass
class ViewConfig:
    background: str = "#08080f"
    rock: str = "#8c4517"
    source: str = "#ffd700"
    sand: str = "#fafad1"
    falling: str = "#e0c060"
    figure_size: Tuple[float, float] = (6.0, 6.0)

    def cell_colours(self):
        """Colours indexed by Cell value (EMPTY, ROCK, SOURCE, SAND)."""
        return [self.background, self.rock, self.source, self.sand]
