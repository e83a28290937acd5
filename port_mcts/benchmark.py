#!/usr/bin/env python
"""
Benchmarks for the port MCTS engine.

Measures search time by simulation budget and by number of ships, plus the
cost of a single tree expansion and a single UCB1 selection.

Example usage:
    # Run every benchmark with the default number of repetitions
    port-mcts-bench

    # Only the search benchmarks, 20 repetitions each, fixed seed
    port-mcts-bench --only search --repeats 20 --seed 42
"""
import argparse
import logging
import time
from typing import Callable, Dict, List

import numpy as np
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from port_mcts.core.entities import Ship
from port_mcts.core.port import PortState, create_port
from port_mcts.mcts.config import MCTSConfig
from port_mcts.mcts.search import MCTSEngine
from port_mcts.mcts.tree import MCTSTree

logger = logging.getLogger("port_mcts.benchmark")

SIMULATION_COUNTS = [10, 50, 100, 500, 1000]
SHIP_COUNTS = [1, 3, 5, 10]


def parse_args():
    """Parse command-line arguments for the benchmark run."""
    parser = argparse.ArgumentParser(description="Benchmark the port MCTS engine")
    parser.add_argument("--repeats", type=int, default=5,
                        help="Timed repetitions per benchmark case")
    parser.add_argument("--only", type=str, default="all",
                        choices=["all", "search", "ships", "tree"],
                        help="Which benchmark group to run")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.repeats <= 0:
        parser.error("--repeats must be positive")

    return args


def create_test_port() -> PortState:
    """Two berths, two cranes and two waiting ships."""
    return create_port(2, 2, ships=[
        Ship(id=1, containers=30, arrival_time=0.0),
        Ship(id=2, containers=40, arrival_time=0.0),
    ])


def create_port_with_ships(num_ships: int) -> PortState:
    """Three berths and three cranes with `num_ships` ships of growing size."""
    ships = [
        Ship(id=i, containers=20 + i * 10, arrival_time=float(i))
        for i in range(num_ships)
    ]
    return create_port(3, 3, ships=ships)


def time_call(fn: Callable[[], object], repeats: int, desc: str) -> Dict[str, float]:
    """
    Time `fn` over several repetitions.

    Returns:
        Mean, min and max duration in milliseconds
    """
    durations = []
    for _ in tqdm(range(repeats), desc=desc, leave=False):
        start = time.perf_counter()
        fn()
        durations.append((time.perf_counter() - start) * 1000.0)

    values = np.array(durations)
    return {"mean": float(values.mean()), "min": float(values.min()), "max": float(values.max())}


def benchmark_search(repeats: int, seed) -> List[Dict]:
    results = []
    for num_sims in SIMULATION_COUNTS:
        config = MCTSConfig(num_simulations=num_sims, max_depth=20, seed=seed)
        engine = MCTSEngine(config)
        port = create_test_port()
        timing = time_call(lambda: engine.search(port), repeats, f"search/{num_sims}")
        results.append({"name": f"mcts_search/{num_sims}", **timing,
                        "nodes": engine.get_statistics().total_nodes})
    return results


def benchmark_ships(repeats: int, seed) -> List[Dict]:
    results = []
    for num_ships in SHIP_COUNTS:
        config = MCTSConfig(num_simulations=100, max_depth=20, seed=seed)
        engine = MCTSEngine(config)
        port = create_port_with_ships(num_ships)
        timing = time_call(lambda: engine.search(port), repeats, f"ships/{num_ships}")
        results.append({"name": f"mcts_with_ships/{num_ships}", **timing,
                        "nodes": engine.get_statistics().total_nodes})
    return results


def benchmark_tree(repeats: int) -> List[Dict]:
    results = []

    def expand_once():
        tree = MCTSTree()
        tree.init_root(create_test_port())
        tree.expand(0, 20)

    results.append({"name": "tree_expansion", **time_call(expand_once, repeats, "expand"), "nodes": 0})

    tree = MCTSTree()
    tree.init_root(create_test_port())
    tree.expand(0, 20)
    results.append({"name": "ucb1_calculation",
                    **time_call(lambda: tree.select_ucb1(1.41), repeats, "ucb1"),
                    "nodes": tree.node_count()})
    return results


def main():
    """Run the selected benchmarks and print a summary table."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler()],
    )

    console = Console()
    results: List[Dict] = []

    if args.only in ("all", "search"):
        results.extend(benchmark_search(args.repeats, args.seed))
    if args.only in ("all", "ships"):
        results.extend(benchmark_ships(args.repeats, args.seed))
    if args.only in ("all", "tree"):
        results.extend(benchmark_tree(args.repeats))

    table = Table(title=f"MCTS benchmarks ({args.repeats} repeats)")
    table.add_column("Benchmark")
    table.add_column("Mean (ms)", justify="right")
    table.add_column("Min (ms)", justify="right")
    table.add_column("Max (ms)", justify="right")
    table.add_column("Nodes", justify="right")

    for row in results:
        table.add_row(row["name"], f"{row['mean']:.3f}", f"{row['min']:.3f}",
                      f"{row['max']:.3f}", str(row["nodes"]))

    console.print(table)
    logger.debug("Benchmarks finished: %d cases", len(results))


if __name__ == "__main__":
    main()
