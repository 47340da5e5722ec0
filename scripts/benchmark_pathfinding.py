#!/usr/bin/env python3
"""Benchmark level generation, room-graph A* and occlusion queries.

Generates layouts of increasing size, times each stage and prints a table,
followed by correctness checks on the generated graphs.

Usage:
    python scripts/benchmark_pathfinding.py
"""

# ruff: noqa: E402  # Allow path setup before importing project modules

from __future__ import annotations

import sys
import timeit
from pathlib import Path

# Add the project root to Python path so running as a script works.
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from crawlspace.environment.generators import LevelGenerator, LevelSettings
from crawlspace.environment.occlusion import GridOcclusion
from crawlspace.environment.room_graph import RoomGraph
from crawlspace.game.pathfinding import find_path

# ---------------------------------------------------------------------------
# Layouts
# ---------------------------------------------------------------------------


def _make_level(main_path_length: int, max_total_rooms: int, seed: int) -> RoomGraph:
    settings = LevelSettings(
        main_path_length=main_path_length,
        max_total_rooms=max_total_rooms,
        use_random_seed=False,
        fixed_seed=seed,
        branch_chance_per_room=0.8,
        max_branches=max_total_rooms,
        max_branch_length=6,
    )
    return LevelGenerator(settings).generate()


def _bench(fn: object, *args: object) -> float:
    """Time *fn(*args)* and return average ms per call."""
    # Warm up
    fn(*args)  # type: ignore[operator]
    timer = timeit.Timer(lambda: fn(*args))  # type: ignore[operator]
    number, total = timer.autorange()
    return (total / number) * 1000


def _path_end_to_end(graph: RoomGraph) -> None:
    rooms = graph.all_rooms()
    find_path(rooms[0], rooms[-1])


def _occlusion_sweep(occlusion: GridOcclusion, graph: RoomGraph) -> None:
    rooms = graph.all_rooms()
    origin = graph.world_position(rooms[0])
    for room in rooms[1:]:
        occlusion.is_blocked(origin, graph.world_position(room))


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    scenarios: list[tuple[str, int, int]] = [
        ("Default (10 / 40)", 10, 40),
        ("Long (40 / 120)", 40, 120),
        ("Sprawl (100 / 400)", 100, 400),
    ]

    print("Level benchmark: generation, A* and occlusion")
    print("=" * 78)
    print(
        f"{'Scenario':<22} {'rooms':>6} {'generate':>11} {'A* far':>11} "
        f"{'raster':>11} {'LOS sweep':>11}"
    )
    print("-" * 78)

    for name, length, budget in scenarios:
        graph = _make_level(length, budget, seed=42)
        gen_ms = _bench(_make_level, length, budget, 42)
        path_ms = _bench(_path_end_to_end, graph)
        raster_ms = _bench(GridOcclusion, graph)
        occlusion = GridOcclusion(graph)
        los_ms = _bench(_occlusion_sweep, occlusion, graph)
        print(
            f"{name:<22} {len(graph):>6} {gen_ms:>9.3f}ms {path_ms:>9.3f}ms "
            f"{raster_ms:>9.3f}ms {los_ms:>9.3f}ms"
        )

    print("-" * 78)
    print()

    # ------------------------------------------------------------------
    # Correctness checks
    # ------------------------------------------------------------------
    print("Correctness checks...")
    graph = _make_level(40, 120, seed=7)

    if graph.is_connected():
        print(f"  Connectivity: all {len(graph)} rooms reachable. OK!")
    else:
        print("  Connectivity FAIL: some rooms are unreachable from the entrance")

    rooms = graph.all_rooms()
    broken = 0
    for room in rooms:
        path = find_path(rooms[0], room)
        if path is None or path[0] is not rooms[0] or path[-1] is not room:
            broken += 1
            continue
        for a, b in zip(path, path[1:], strict=False):
            if not a.is_neighbor(b):
                broken += 1
                break
    if broken == 0:
        print("  Paths: every room reachable by a chain of neighbors. OK!")
    else:
        print(f"  Paths FAIL: {broken} broken routes")

    again = _make_level(40, 120, seed=7)
    same = [r.grid_pos for r in graph] == [r.grid_pos for r in again]
    verdict = "identical layouts. OK!" if same else "layouts differ FAIL"
    print(f"  Determinism: {verdict}")


if __name__ == "__main__":
    main()
