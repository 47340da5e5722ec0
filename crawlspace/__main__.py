"""Generate a level, print it, and run a headless pursuit on it.

Usage:
    python -m crawlspace --seed 42
    python -m crawlspace --seed 42 --map-only
"""

import argparse
import logging

from crawlspace import config
from crawlspace.environment.generators import LevelSettings
from crawlspace.simulation import Encounter, render_layout
from crawlspace.util import rng
from crawlspace.util.live_vars import live_variable_registry


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="crawlspace",
        description="Generate a dungeon and let the pursuer hunt a waiting player.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Fixed level seed. Omit for a random layout.",
    )
    parser.add_argument(
        "--length",
        type=int,
        default=config.LEVEL_MAIN_PATH_LENGTH,
        help="Main path length in rooms (default: %(default)s)",
    )
    parser.add_argument(
        "--rooms",
        type=int,
        default=config.LEVEL_MAX_TOTAL_ROOMS,
        help="Maximum total rooms (default: %(default)s)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=config.SIMULATION_DEFAULT_TICKS,
        help="Simulation ticks to run (default: %(default)s)",
    )
    parser.add_argument(
        "--map-only",
        action="store_true",
        help="Print the layout and exit without simulating.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Debug logging, and print live variables after the run.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    rng.init(args.seed if args.seed is not None else config.RANDOM_SEED)
    settings = LevelSettings(
        main_path_length=args.length,
        max_total_rooms=args.rooms,
        use_random_seed=args.seed is None,
        fixed_seed=args.seed if args.seed is not None else config.LEVEL_FIXED_SEED,
    )

    encounter = Encounter(settings)
    try:
        graph = encounter.graph
        print(f"Seed {graph.seed}, {len(graph)} rooms")
        print(render_layout(graph))
        if args.map_only:
            return

        ticks = encounter.run(args.ticks)
        print()
        for change in encounter.history:
            print(f"tick {change.tick:>5}: {change.state:<7} {change.notes}")
        outcome = "caught" if encounter.resolved else "still hiding"
        seconds = ticks * config.SIMULATION_FIXED_TIMESTEP
        print(f"After {ticks} ticks ({seconds:.1f}s) the player is {outcome}.")

        if args.verbose:
            print()
            for var in live_variable_registry.get_all_variables():
                print(f"{var.name:<28} {var.format_value()}")
    finally:
        encounter.close()


if __name__ == "__main__":
    main()
