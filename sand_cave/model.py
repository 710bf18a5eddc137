import logging

from mesa import Model
from mesa.datacollection import DataCollector

from sand_cave.agents import GrainAgent, Outcome
from sand_cave.cave_builder import add_floor, build_cave, parse_paths
from sand_cave.events import EventDispatcher, TickReport

logger = logging.getLogger(__name__)

# The small cave used as the default layout.
REFERENCE_CAVE = """498,4 -> 498,6 -> 496,6
503,4 -> 502,4 -> 502,9 -> 494,9
"""


class SandCaveModel(Model):
    """
    A cave of rock into which grains of sand fall from a fixed source, one
    cell per tick, until the source is blocked.
    """
    def __init__(
        self,
        cave_text=REFERENCE_CAVE,
        rows=200,
        columns=200,
        source=(500, 0),
        offset=(-400, 0),
        floor=True,
        spawn_interval=3,
        halt_on_void=False,
        cave=None,
        seed=None,
    ):
        """
        Build the cave and an empty set of grains.

        Args:
            cave_text: Rock paths, one "x,y -> x,y ..." path per line
            rows, columns: Grid dimensions before any floor synthesis
            source: (x, y) of the sand source in input coordinates
            offset: (dx, dy) added to every input coordinate
            floor: Whether to synthesise a rock floor below the lowest rock
            spawn_interval: A grain spawns on every tick divisible by this
            halt_on_void: Stop the model when the first grain is lost
            cave: A ready-made CaveGrid; overrides the text, layout and floor arguments
        """
        super().__init__(seed=seed)

        if int(spawn_interval) < 1:
            raise ValueError(f"spawn_interval must be at least 1, got {spawn_interval}")
        self.spawn_interval = int(spawn_interval)
        self.halt_on_void = halt_on_void

        if cave is None:
            cave = build_cave(
                parse_paths(cave_text),
                dims=(int(rows), int(columns)),
                source=tuple(source),
                offset=tuple(offset),
            )
            if floor:
                cave = add_floor(cave)
        if cave.source is None:
            raise ValueError("The cave has no source cell")

        self.cave = cave
        self.floor = cave.has_floor()
        self.source = cave.source

        self.tick = 0
        self.active_grains = {}  # unique_id -> GrainAgent, in spawn order
        self.spawned_count = 0
        self.settled_count = 0
        self.lost_count = 0
        self.source_blocked = False
        self.last_report = None

        self.events = EventDispatcher()
        self.datacollector = DataCollector(
            model_reporters={
                "Settled": lambda m: m.settled_count,
                "Falling": lambda m: len(m.active_grains),
                "Lost": lambda m: m.lost_count,
            }
        )

        self.running = True

    def grain_positions(self):
        """(column, row) of every in-flight grain, in spawn order."""
        return [grain.pos for grain in self.active_grains.values()]

    def _spawn_grain(self):
        column, row = self.source
        if self.cave.is_blocked(row, column):
            return None
        grain = GrainAgent(self, self.source)
        self.active_grains[grain.unique_id] = grain
        self.spawned_count += 1
        logger.debug("Spawned grain %s at %s", grain.unique_id, self.source)
        return grain

    def _remove_grains(self, grain_ids):
        for grain_id in grain_ids:
            grain = self.active_grains.pop(grain_id)
            grain.remove()

    def run_tick(self):
        """
        Advance the simulation by one tick: spawn on the cadence, then move every
        in-flight grain once, oldest first.

        Returns:
            TickReport for the tick, or None once the model has stopped.
        """
        if not self.running:
            return None

        report = TickReport(self.tick)
        if self.tick % self.spawn_interval == 0:
            grain = self._spawn_grain()
            if grain is None:
                self.source_blocked = True
            else:
                report.spawned = grain.unique_id

        finished = []
        for grain_id, grain in self.active_grains.items():
            outcome = grain.step()
            if outcome is Outcome.MOVED:
                report.moved.append(self.events.create_event("moved", grain_id, grain.pos, self.tick))
                continue

            finished.append(grain_id)
            if outcome is Outcome.SETTLED:
                self.settled_count += 1
                report.settled.append(self.events.create_event("settled", grain_id, grain.pos, self.tick))
                logger.debug("Grain %s settled at %s", grain_id, grain.pos)
                if grain.pos == self.source:
                    self.source_blocked = True
            elif outcome is Outcome.LOST:
                self.lost_count += 1
                report.lost.append(self.events.create_event("lost", grain_id, grain.pos, self.tick))
                if self.lost_count == 1:
                    logger.info(
                        "Grain %s fell into the void after %d grains settled", grain_id, self.settled_count
                    )
                else:
                    logger.debug("Grain %s fell into the void", grain_id)

        self._remove_grains(finished)

        report.source_blocked = self.source_blocked
        self.events.dispatch_report(report)
        if self.source_blocked:
            self.running = False
            blocker = report.settled[-1].grain_id if report.settled else None
            logger.info("Source blocked at tick %d after %d grains settled", self.tick, self.settled_count)
            self.events.dispatch(self.events.create_event("blocked", blocker, self.source, self.tick))
        elif self.halt_on_void and report.lost:
            self.running = False

        self.datacollector.collect(self)
        self.last_report = report
        self.tick += 1
        return report

    def step(self):
        """Advance the model by one tick. The report is kept in last_report."""
        self.run_tick()

    def run(self, max_ticks=None):
        """
        Step until the model stops or max_ticks further ticks have run.

        Returns:
            List of TickReports, one per tick run.
        """
        if max_ticks is None and not (self.floor or self.halt_on_void):
            raise ValueError("A floorless cave never blocks its source; give max_ticks or halt_on_void")
        reports = []
        while self.running and (max_ticks is None or len(reports) < max_ticks):
            self.step()
            reports.append(self.last_report)
        return reports

    def summary(self):
        return {
            "Ticks": self.tick,
            "Spawned": self.spawned_count,
            "Settled": self.settled_count,
            "Falling": len(self.active_grains),
            "Lost": self.lost_count,
            "SourceBlocked": self.source_blocked,
        }
