import logging
from enum import Enum

from mesa import Agent

from sand_cave.cave import Cell

logger = logging.getLogger(__name__)

# Candidate moves in order of preference: down, down-left, down-right.
FALL_OFFSETS = ((0, 1), (-1, 1), (1, 1))


class GrainStatus(Enum):
    FALLING = "falling"
    SETTLED = "settled"
    REMOVED = "removed"


class Outcome(Enum):
    """What happened to a grain during one step."""
    MOVED = "moved"
    SETTLED = "settled"
    LOST = "lost"
    ABSORBED = "absorbed"


class GrainAgent(Agent):
    """
    One grain of sand. Falls one row per step, sliding diagonally (left first)
    when blocked, and settles when no move is possible.
    """
    def __init__(self, model, position):
        """
        Initialize a grain at the given (column, row) position.

        Args:
            model: The model instance, owner of the cave grid
            position: Starting (column, row), normally the source
        """
        super().__init__(model)
        self.pos = tuple(position)
        self.status = GrainStatus.FALLING

    @property
    def cave(self):
        return self.model.cave

    def _next_position(self):
        """First free cell among down, down-left, down-right, or None."""
        column, row = self.pos
        for d_col, d_row in FALL_OFFSETS:
            target = (column + d_col, row + d_row)
            if not self.cave.is_blocked(target[1], target[0]):
                return target
        return None

    def step(self):
        """
        Execute one step of the grain's fall.

        Returns:
            Outcome: MOVED, SETTLED, LOST (fell out of a floorless cave) or
            ABSORBED (its cell was already settled sand).
        """
        if self.status is not GrainStatus.FALLING:
            raise RuntimeError(f"Grain {self.unique_id} is {self.status.value} and cannot step")

        column, row = self.pos
        if self.cave.get(row, column) == Cell.SAND:
            logger.warning("Grain %s found its cell %s already settled", self.unique_id, self.pos)
            self.status = GrainStatus.REMOVED
            return Outcome.ABSORBED

        if row + 1 == self.cave.rows:
            self.status = GrainStatus.REMOVED
            return Outcome.LOST

        target = self._next_position()
        if target is None:
            self.cave.set(row, column, Cell.SAND)
            self.status = GrainStatus.SETTLED
            return Outcome.SETTLED

        self.pos = target
        return Outcome.MOVED
