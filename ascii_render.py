"""
ASCII rendering for tile grids.

Provides two views:
1. Tile view - each cell drawn as a 3-line block with its effective edge labels
2. Sequence view - visiting order of a traversal pattern as step numbers
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from tile_catalog import effective_edges
from tile_types import Grid, GridCell

__all__ = ["render_grid", "render_sequence"]

logger = logging.getLogger(__name__)

EMPTY_MARK = "·"

_PALETTE: list[Callable[[str], str]] = [
    chalk.red,
    chalk.green,
    chalk.yellow,
    chalk.blue,
    chalk.magenta,
    chalk.cyan,
    chalk.redBright,
    chalk.greenBright,
    chalk.yellowBright,
    chalk.blueBright,
]


def _label_colors(grid: Grid) -> dict[str, Callable[[str], str]]:
    labels: set[str] = set()
    for cell in grid.cells:
        if cell.tile is not None:
            labels.update(cell.tile.edges)
    return {label: _PALETTE[i % len(_PALETTE)] for i, label in enumerate(sorted(labels))}


def _render_cell(
    cell: GridCell,
    cell_width: int,
    colors: dict[str, Callable[[str], str]],
    highlight: bool,
) -> list[str]:
    """Three fixed-width lines for one cell."""
    if cell.tile is None:
        return [" " * cell_width, EMPTY_MARK.center(cell_width), " " * cell_width]

    edges = effective_edges(cell.tile, cell.rotation)

    def paint(label: str) -> str:
        return colors.get(label, lambda s: s)(label)

    # Padding is computed on plain text; colour codes are added afterwards
    inner = cell_width - 2
    tile_id = cell.tile.id[:inner]
    if highlight:
        label = chalk.bgWhite.black(tile_id.center(inner))
    else:
        label = chalk.white(tile_id.center(inner))

    left_pad = (cell_width - 1) // 2
    right_pad = cell_width - 1 - left_pad
    top = " " * left_pad + paint(edges.N) + " " * right_pad
    middle = paint(edges.W) + label + paint(edges.E)
    bottom = " " * left_pad + paint(edges.S) + " " * right_pad
    return [top, middle, bottom]


def render_grid(grid: Grid, cell_width: int = 7, highlight_index: int | None = None) -> str:
    """
    Render a grid as blocks of edge labels around each tile id.

    Args:
        grid: The grid to render
        cell_width: Characters per cell (at least 3)
        highlight_index: Optional flat index to highlight

    Returns:
        Multi-line string, three lines per grid row
    """
    cell_width = max(cell_width, 3)
    colors = _label_colors(grid)
    logger.debug("render_grid: %d rows x %d cols, %d labels", grid.rows, grid.width, len(colors))

    lines: list[str] = []
    for row in range(grid.rows):
        blocks = []
        for col in range(grid.width):
            cell = grid.cell_at(row, col)
            if cell is None:
                blocks.append([" " * cell_width] * 3)
                continue
            index = grid.index_of(row, col)
            blocks.append(_render_cell(cell, cell_width, colors, index == highlight_index))
        for line_parts in zip(*blocks):
            lines.append(" ".join(line_parts).rstrip())

    return "\n".join(lines)


def render_sequence(sequence: list[int], width: int, height: int) -> str:
    """
    Render a traversal order as a grid of step numbers.

    The first step is highlighted. Cells the sequence never visits show '.'.
    """
    if width <= 0 or height <= 0:
        return ""

    steps: dict[int, int] = {index: step for step, index in enumerate(sequence)}
    cell_width = len(str(max(len(sequence) - 1, 0)))

    lines: list[str] = []
    for row in range(height):
        parts = []
        for col in range(width):
            step = steps.get(row * width + col)
            if step is None:
                parts.append(".".rjust(cell_width))
            elif step == 0:
                parts.append(chalk.bgWhite.black(str(step).rjust(cell_width)))
            else:
                parts.append(str(step).rjust(cell_width))
        lines.append(" ".join(parts))

    return "\n".join(lines)
