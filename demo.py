"""
Demonstration of the tile placement engine.

Fills a 12x8 grid with the 96-tile reference catalog, runs the edge matching
pass and shows every traversal pattern on a small grid.

Usage: python demo.py [seed]
"""

import logging
import random
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ascii_render import render_grid, render_sequence
from edge_matching import optimize
from grid_analysis import edge_stats, find_mirror_pairs
from grid_fill import clear, fill_all
from tile_catalog import build_catalog
from tile_types import Grid
from traversal import PATTERNS, generate_sequence

DEFAULT_WIDTH = 12
DEFAULT_HEIGHT = 8

# Base edge codes (S, W, N, E) of the 24 reference shapes
REFERENCE_CODES = [
    "RRGG", "RGRG", "RGGB", "RBBY", "GGYY", "GYGY", "GBYR", "BYRG",
    "YRBG", "BBRR", "BRBR", "YYGG", "RYRY", "GRBY", "BGYR", "YBGR",
    "RRBY", "GGRB", "BBYG", "YYRB", "RGYB", "GBRY", "BYGR", "YRGB",
]


def stats_row(stage: str, grid: Grid) -> tuple[str, str, str, str]:
    stats = edge_stats(grid)
    return (
        stage,
        f"{stats.matching}/{stats.total}",
        f"{stats.ratio:.0%}",
        str(len(find_mirror_pairs(grid))),
    )


def demo(seed: int | None = None) -> None:
    """Run the fill / optimize / traversal walkthrough."""
    console = Console()
    rng = random.Random(seed)

    catalog = build_catalog(REFERENCE_CODES)
    grid = Grid.empty(DEFAULT_WIDTH, DEFAULT_HEIGHT)

    filled = fill_all(grid, catalog, rng)
    optimized = optimize(filled, catalog)
    second_pass = optimize(optimized, catalog)

    table = Table(title=f"Edge matching on {DEFAULT_WIDTH}x{DEFAULT_HEIGHT} (seed={seed})")
    table.add_column("Stage", style="bold")
    table.add_column("Matching edges", justify="right")
    table.add_column("Ratio", justify="right")
    table.add_column("Mirror pairs", justify="right")
    for row in (
        stats_row("Shuffled", filled),
        stats_row("Optimized", optimized),
        stats_row("Second pass", second_pass),
    ):
        table.add_row(*row)
    console.print(table)

    console.print(
        Panel(Text.from_ansi(render_grid(optimized)), title="Optimized grid", border_style="green")
    )

    cleared = clear(optimized)
    console.print(f"Cleared grid holds {len(cleared.placed_tiles())} tiles")

    for pattern in PATTERNS:
        sequence = generate_sequence(pattern, 6, 4, rng)
        console.print(
            Panel(Text.from_ansi(render_sequence(sequence, 6, 4)), title=pattern, width=40)
        )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    demo(int(sys.argv[1]) if len(sys.argv) > 1 else None)
