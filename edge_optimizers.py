"""
Alternative optimizers built on the edge-matching scorer.

- maximize_edge_matching: swap hill climbing on the whole-grid count of
  matching edges, repeated until a full sweep finds nothing better.
- quick_optimize: one sweep that turns each placed tile to its best rotation.
- optimize_with_order: the greedy placement pass, visiting cells in any
  traversal order and scoring candidates with adjustable weights.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import AbstractSet

from edge_matching import (
    EDGE_MATCH_WEIGHT,
    MIRROR_BONUS,
    ROTATION_BONUS,
    ScoreBreakdown,
    count_matching_edges,
    score_breakdown,
)
from grid_analysis import edge_stats
from grid_fill import fill_all
from tile_catalog import TileCatalog
from tile_types import ROTATIONS, Grid, GridCell
from traversal import TraversalPattern, generate_sequence

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_WEIGHTS",
    "PRESETS",
    "OptimizationResult",
    "OptimizationWeights",
    "best_rotation",
    "best_swap",
    "maximize_edge_matching",
    "neighbor_matches",
    "optimize_with_order",
    "quick_optimize",
    "score_heatmap",
    "total_matches",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 50


@dataclass(frozen=True)
class OptimizationWeights:
    """Multipliers for the three terms of a candidate score."""

    mirror: int = MIRROR_BONUS
    rotation: int = ROTATION_BONUS
    edge: int = EDGE_MATCH_WEIGHT

    def total(self, breakdown: ScoreBreakdown) -> int:
        return (
            (self.mirror if breakdown.mirror else 0)
            + (self.rotation if breakdown.rotation else 0)
            + breakdown.edge_matches * self.edge
        )


DEFAULT_WEIGHTS = OptimizationWeights()

PRESETS: dict[str, OptimizationWeights] = {
    "classic": DEFAULT_WEIGHTS,
    "edge-focused": OptimizationWeights(mirror=20, rotation=10, edge=100),
    "mirror-heavy": OptimizationWeights(mirror=500, rotation=25, edge=5),
}


@dataclass(frozen=True)
class OptimizationResult:
    """Outcome of a hill climb."""

    grid: Grid
    score: int
    iterations: int
    history: tuple[int, ...]  # matching edges before the first sweep and after each


# =============================================================================
# Measurements
# =============================================================================


def total_matches(grid: Grid) -> int:
    """Number of adjacent tile pairs whose touching edges agree."""
    return edge_stats(grid).matching


def neighbor_matches(grid: Grid, index: int) -> int:
    """Edges of the tile at index that agree with their neighbors (0-4)."""
    cell = grid[index]
    if cell.tile is None:
        return 0
    row, col = grid.position_of(index)
    return count_matching_edges(cell.tile, grid, row, col, cell.rotation)


def score_heatmap(grid: Grid) -> list[int]:
    """Per-cell neighbor matches in flat index order, 0 for empty cells."""
    return [neighbor_matches(grid, index) for index in range(len(grid))]


# =============================================================================
# Local Moves
# =============================================================================


def _swapped(cells: list[GridCell], a: int, b: int) -> list[GridCell]:
    """Copy of cells with the placements at a and b exchanged."""
    result = list(cells)
    result[a] = replace(cells[a], tile=cells[b].tile, rotation=cells[b].rotation)
    result[b] = replace(cells[b], tile=cells[a].tile, rotation=cells[a].rotation)
    return result


def best_swap(grid: Grid, index: int) -> int | None:
    """
    Find the placed tile whose exchange with index raises total_matches most.

    Returns:
        Index of the swap partner, or None if no exchange is a strict improvement
    """
    if grid[index].tile is None:
        return None

    cells = list(grid.cells)
    best_score = total_matches(grid)
    best_index: int | None = None

    for other, cell in enumerate(cells):
        if other == index or cell.tile is None:
            continue
        candidate_score = total_matches(grid.replace_cells(_swapped(cells, index, other)))
        if candidate_score > best_score:
            best_score = candidate_score
            best_index = other

    return best_index


def best_rotation(grid: Grid, index: int) -> int:
    """Rotation giving the tile at index the most agreeing edges; current one on ties."""
    cell = grid[index]
    if cell.tile is None:
        return cell.rotation

    row, col = grid.position_of(index)
    best = cell.rotation
    best_score = count_matching_edges(cell.tile, grid, row, col, cell.rotation)
    for rotation in ROTATIONS:
        rotation_score = count_matching_edges(cell.tile, grid, row, col, rotation)
        if rotation_score > best_score:
            best = rotation
            best_score = rotation_score
    return best


def quick_optimize(grid: Grid) -> Grid:
    """
    Turn each placed tile, in row-major order, to its best rotation.

    Tiles never move. A turn only changes the edges around its own cell, so
    total_matches never goes down.
    """
    cells = list(grid.cells)
    turned = 0

    for index, cell in enumerate(cells):
        rotation = best_rotation(grid.replace_cells(cells), index)
        if rotation != cell.rotation:
            cells[index] = replace(cell, rotation=rotation)
            turned += 1

    logger.info("Rotation sweep turned %d tiles", turned)
    return grid.replace_cells(cells)


# =============================================================================
# Hill Climbing
# =============================================================================


def maximize_edge_matching(
    grid: Grid,
    catalog: TileCatalog,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    rng: random.Random | None = None,
) -> OptimizationResult:
    """
    Rearrange tiles by repeated swap sweeps until no swap adds a matching edge.

    Each sweep visits every placed tile in row-major order and applies its
    best_swap, if any. Sweeps stop after the first one that changes nothing
    or after max_iterations. Rotations are left as they are.

    Args:
        grid: Starting grid (not modified). A grid with no tiles is first
            filled from the catalog with fill_all.
        catalog: Tiles for the initial fill
        max_iterations: Upper bound on sweeps
        rng: Random source for the initial fill

    Returns:
        OptimizationResult with the final grid and score history
    """
    if not grid.placed_tiles():
        logger.info("Grid has no tiles, starting from a random fill")
        grid = fill_all(grid, catalog, rng)

    current = total_matches(grid)
    history = [current]
    iterations = 0
    logger.info("Starting hill climb at %d matching edges", current)

    while iterations < max_iterations:
        iterations += 1
        improved = False

        for index in range(len(grid)):
            other = best_swap(grid, index)
            if other is not None:
                grid = grid.replace_cells(_swapped(list(grid.cells), index, other))
                improved = True
                logger.debug("Swapped position %d with %d", index, other)

        current = total_matches(grid)
        history.append(current)
        logger.info("Sweep %d: %d matching edges", iterations, current)

        if not improved:
            break

    stats = edge_stats(grid)
    logger.info(
        "Hill climb complete: %d of %d edges match (%.1f%%) after %d sweeps",
        stats.matching,
        stats.total,
        stats.ratio * 100,
        iterations,
    )
    return OptimizationResult(grid, current, iterations, tuple(history))


# =============================================================================
# Ordered Greedy Pass
# =============================================================================


def _best_weighted(
    grid: Grid,
    catalog: TileCatalog,
    row: int,
    col: int,
    used: AbstractSet[int],
    weights: OptimizationWeights,
) -> int | None:
    best_score: int | None = None
    best_index: int | None = None

    for i, tile in enumerate(catalog):
        if i in used:
            continue
        tile_score = weights.total(score_breakdown(tile, grid, row, col))
        if best_score is None or tile_score > best_score:
            best_score = tile_score
            best_index = i

    return best_index


def optimize_with_order(
    grid: Grid,
    catalog: TileCatalog,
    pattern: TraversalPattern | str = TraversalPattern.ROW_MAJOR,
    weights: OptimizationWeights = DEFAULT_WEIGHTS,
    rng: random.Random | None = None,
) -> Grid:
    """
    Greedy placement pass visiting cells in a traversal order.

    Works like edge_matching.optimize, except that positions come from
    generate_sequence and candidate scores use the given weights. A candidate
    is swapped in from any position the pass has not visited yet. With
    row-major order and the default weights the result equals optimize.

    Args:
        grid: Starting grid (not modified)
        catalog: Tiles eligible for placement, in scan order
        pattern: Traversal pattern or its name
        weights: Multipliers for the mirror, rotation and edge terms
        rng: Random source for random-walk

    Returns:
        New grid with the rearranged tiles
    """
    if len(catalog) == 0 or len(grid) == 0:
        logger.info(
            "Skipping optimization: catalog has %d tiles, grid has %d cells",
            len(catalog),
            len(grid),
        )
        return grid

    order = [i for i in generate_sequence(pattern, grid.width, grid.rows, rng) if i < len(grid)]
    pattern_name = pattern.value if isinstance(pattern, TraversalPattern) else pattern
    logger.info("Starting %s optimization over %d cells", pattern_name, len(order))

    cells = list(grid.cells)
    used: set[int] = set()
    visited: set[int] = set()
    swaps = 0

    for position in order:
        row, col = grid.position_of(position)
        best_index = _best_weighted(grid.replace_cells(cells), catalog, row, col, used, weights)

        if best_index is not None:
            tile_id = catalog[best_index].id
            source = next(
                (i for i, cell in enumerate(cells) if i not in visited and cell.tile_id == tile_id),
                None,
            )
            if source is not None and source != position:
                cells = _swapped(cells, position, source)
                swaps += 1

        visited.add(position)
        placed = catalog.index_of(cells[position].tile_id)
        if placed is not None:
            used.add(placed)

    logger.info("Ordered optimization complete: %d swaps", swaps)
    return grid.replace_cells(cells)
