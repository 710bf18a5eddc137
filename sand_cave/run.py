import argparse
import logging
import sys
import time

from sand_cave.cave import CaveBoundsError
from sand_cave.cave_builder import CaveParseError, EmptyCaveError, load_cave
from sand_cave.config import SimulationConfig
from sand_cave.model import SandCaveModel

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description="Drop sand into a rock cave until the source is blocked.")
    parser.add_argument("input", help="File of rock paths, one 'x,y -> x,y ...' path per line")
    parser.add_argument("--rows", type=int, default=200, help="Grid rows")
    parser.add_argument("--columns", type=int, default=200, help="Grid columns")
    parser.add_argument("--source", type=int, nargs=2, default=(500, 0), metavar=("X", "Y"),
                        help="Sand source in input coordinates")
    parser.add_argument("--offset", type=int, nargs=2, default=(-400, 0), metavar=("DX", "DY"),
                        help="Offset added to every input coordinate")
    parser.add_argument("--no-floor", dest="floor", action="store_false",
                        help="Leave the bottom of the cave open")
    parser.add_argument("--spawn-interval", type=int, default=3, help="Ticks between new grains")
    parser.add_argument("--ticks-per-second", type=float, default=120.0,
                        help="Simulation rate when showing frames")
    parser.add_argument("--steps-per-frame", type=int, default=1, help="Ticks between shown frames")
    parser.add_argument("--max-ticks", type=int, default=None, help="Stop after this many ticks")
    parser.add_argument("--halt-on-void", action="store_true",
                        help="Stop when the first grain falls out of a floorless cave")
    parser.add_argument("--frames", action="store_true", help="Print the cave as it fills")
    parser.add_argument("--render", action="store_true", help="Print the final cave")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")
    return parser


def config_from_args(args):
    return SimulationConfig(
        rows=args.rows,
        columns=args.columns,
        source=tuple(args.source),
        offset=tuple(args.offset),
        floor=args.floor,
        spawn_interval=args.spawn_interval,
        ticks_per_second=args.ticks_per_second,
        steps_per_frame=args.steps_per_frame,
        max_ticks=args.max_ticks,
        halt_on_void=args.halt_on_void,
    )


def simulate(model, config, show_frames=False, out=sys.stdout):
    """
    Step the model until it stops or config.max_ticks is reached. With
    show_frames, print the cave every steps_per_frame ticks, paced to
    ticks_per_second.
    """
    frame_delay = config.steps_per_frame / config.ticks_per_second
    ticks = 0
    while model.running and (config.max_ticks is None or ticks < config.max_ticks):
        model.step()
        ticks += 1
        if show_frames and ticks % config.steps_per_frame == 0:
            print(model.cave.render(model.grain_positions()), file=out)
            print(file=out)
            time.sleep(frame_delay)
    return ticks


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = config_from_args(args)
        cave = load_cave(
            args.input,
            dims=(config.rows, config.columns),
            source=config.source,
            offset=config.offset,
            floor=config.floor,
        )
    except (OSError, CaveParseError, EmptyCaveError, CaveBoundsError, ValueError) as e:
        logger.error("Cannot start simulation: %s", e)
        return 1

    if config.max_ticks is None and not (config.floor or config.halt_on_void):
        logger.error("A floorless cave never fills; pass --max-ticks or --halt-on-void")
        return 1

    model = SandCaveModel(cave=cave, spawn_interval=config.spawn_interval, halt_on_void=config.halt_on_void)
    logger.info("Cave %dx%d, source at %s", cave.rows, cave.columns, model.source)

    simulate(model, config, show_frames=args.frames)

    if args.render:
        print(model.cave.render(model.grain_positions()))
    for key, value in model.summary().items():
        print(f"{key}: {value}")
    if model.source_blocked:
        logger.info("Source blocked after %d settled grains", model.settled_count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
