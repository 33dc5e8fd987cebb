"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

Benchmark command for Merkle tree operations.

Times the four core operations on a uniform tree:
- construct: MerkleTree.from_depth(depth, leaf)
- update: overwrite one leaf and re-hash its path
- proof: generate a proof for a leaf digest
- verify: replay a proof against the root
"""

import sys
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import click
from rich.console import Console
from rich.table import Table

from merkle_tree.cli.context import CLIContext, pass_context
from merkle_tree.config.settings import MAX_BENCH_DEPTH
from merkle_tree.exceptions import MerkleTreeError
from merkle_tree.hashing import DEFAULT_ENGINE, HashEngine
from merkle_tree.logging_config import get_logger
from merkle_tree.tree import MerkleTree

logger = get_logger(__name__)

# Construction allocates the whole tree, so it is timed fewer times
MAX_CONSTRUCT_RUNS = 10


@dataclass
class BenchResult:
    """
    Timing of one benchmarked operation.

    Attributes:
        operation: Operation name
        runs: Number of timed runs
        total_ms: Total time across runs in milliseconds
    """
    operation: str
    runs: int
    total_ms: float

    @property
    def mean_us(self) -> float:
        return self.total_ms * 1000 / self.runs


def _time(operation: str, runs: int, func: Callable[[], object]) -> BenchResult:
    start = time.perf_counter()
    for _ in range(runs):
        func()
    return BenchResult(operation, runs, (time.perf_counter() - start) * 1000)


def run_benchmarks(depth: int, iterations: int, engine: Optional[HashEngine] = None) -> List[BenchResult]:
    """
    Benchmark construct, update, proof and verify on a tree of 2 ** depth leaves.

    Args:
        depth: Tree depth
        iterations: Timed runs for update, proof and verify
        engine: Hash engine (default engine if None)

    Returns:
        One BenchResult per operation
    """
    tree_engine = engine or DEFAULT_ENGINE
    initial_leaf = tree_engine.hash(b"\x00")
    new_leaf = tree_engine.hash(b"\x01")

    results = [
        _time(
            "construct",
            min(iterations, MAX_CONSTRUCT_RUNS),
            lambda: MerkleTree.from_depth(depth, initial_leaf, tree_engine),
        )
    ]

    tree = MerkleTree.from_depth(depth, initial_leaf, tree_engine)
    offset = min(3, tree.leaf_count - 1)
    results.append(_time("update", iterations, lambda: tree.update(offset, new_leaf)))

    results.append(_time("proof", iterations, lambda: tree.proof(new_leaf)))

    proof = tree.proof(new_leaf)
    results.append(_time("verify", iterations, lambda: tree.verify(proof, new_leaf)))

    return results


@click.command()
@click.option('--depth', '-d', type=click.IntRange(min=0, max=MAX_BENCH_DEPTH), default=None,
              help='Tree depth (default from configuration)')
@click.option('--iterations', '-n', type=click.IntRange(min=1), default=None,
              help='Timed runs per operation (default from configuration)')
@pass_context
def bench(ctx: CLIContext, depth: Optional[int], iterations: Optional[int]):
    """
    Benchmark tree construction, update, proof and verification.

    Examples:

        merkle-tree bench --depth 20 --iterations 1000
    """
    config = ctx.get_config()
    depth = config.bench.depth if depth is None else depth
    iterations = config.bench.iterations if iterations is None else iterations

    try:
        engine = ctx.create_engine()
        results = run_benchmarks(depth, iterations, engine)
    except MerkleTreeError as e:
        click.echo(f"Error: {e}", err=True)
        logger.error(f"Benchmark failed: {e}", exc_info=True)
        sys.exit(1)

    logger.info(
        "merkle_benchmark",
        depth=depth,
        iterations=iterations,
        algorithm=engine.name,
        results={r.operation: round(r.mean_us, 3) for r in results},
    )

    console = Console()
    table = Table(
        title=f"Merkle tree benchmark (depth {depth}, {1 << depth} leaves, {engine.name})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Operation")
    table.add_column("Runs", justify="right")
    table.add_column("Total (ms)", justify="right")
    table.add_column("Mean (µs)", justify="right")

    for result in results:
        table.add_row(
            result.operation,
            str(result.runs),
            f"{result.total_ms:.3f}",
            f"{result.mean_us:.3f}",
        )

    console.print(table)
