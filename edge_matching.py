"""
Edge matching: candidate scoring and the greedy placement pass.

Scoring is order-sensitive. Mirror and rotation-family bonuses look only at
the left and top neighbors (the cells a left-to-right, top-to-bottom fill has
already settled), while the edge-match count looks at all four neighbors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import AbstractSet

from tile_catalog import TileCatalog, effective_edges, same_rotation_family
from tile_types import Direction, Grid, GridCell, TileDefinition

__all__ = [
    "EDGE_MATCH_WEIGHT",
    "MIRROR_BONUS",
    "ROTATION_BONUS",
    "ScoreBreakdown",
    "count_matching_edges",
    "find_best_tile",
    "is_mirror_match",
    "is_rotation_match",
    "optimize",
    "score",
    "score_breakdown",
]

logger = logging.getLogger(__name__)

MIRROR_BONUS = 100
ROTATION_BONUS = 50
EDGE_MATCH_WEIGHT = 10

# (row offset, col offset) of each neighbor
_OFFSETS = {
    Direction.W: (0, -1),
    Direction.N: (-1, 0),
    Direction.E: (0, 1),
    Direction.S: (1, 0),
}


@dataclass(frozen=True)
class ScoreBreakdown:
    """The three additive terms of a candidate score."""

    mirror: bool
    rotation: bool
    edge_matches: int

    @property
    def total(self) -> int:
        return (
            (MIRROR_BONUS if self.mirror else 0)
            + (ROTATION_BONUS if self.rotation else 0)
            + self.edge_matches * EDGE_MATCH_WEIGHT
        )


# =============================================================================
# Scoring
# =============================================================================


def is_mirror_match(candidate: TileDefinition, grid: Grid, row: int, col: int) -> bool:
    """Left neighbor's horizontal mirror or top neighbor's vertical mirror is the candidate."""
    left = grid.tile_at(row, col - 1)
    if left is not None and left.mirror_h and left.mirror_h == candidate.id:
        return True

    top = grid.tile_at(row - 1, col)
    if top is not None and top.mirror_v and top.mirror_v == candidate.id:
        return True

    return False


def is_rotation_match(candidate: TileDefinition, grid: Grid, row: int, col: int) -> bool:
    """Candidate shares a rotation family member with the left or top neighbor."""
    for neighbor in (grid.tile_at(row, col - 1), grid.tile_at(row - 1, col)):
        if neighbor is not None and same_rotation_family(candidate, neighbor):
            return True
    return False


def count_matching_edges(
    candidate: TileDefinition, grid: Grid, row: int, col: int, rotation: int = 0
) -> int:
    """
    Count neighbors whose touching edge label equals the candidate's.

    Args:
        candidate: Tile being considered for (row, col)
        grid: Current grid state
        row: Target row
        col: Target column
        rotation: Rotation the candidate would be placed with

    Returns:
        Number of agreeing edges (0-4)
    """
    edges = effective_edges(candidate, rotation)
    matches = 0

    for direction, (dr, dc) in _OFFSETS.items():
        cell = grid.cell_at(row + dr, col + dc)
        if cell is None or cell.tile is None:
            continue
        neighbor_edges = effective_edges(cell.tile, cell.rotation)
        if neighbor_edges.get(direction.opposite) == edges.get(direction):
            matches += 1

    return matches


def score_breakdown(
    candidate: TileDefinition, grid: Grid, row: int, col: int, rotation: int = 0
) -> ScoreBreakdown:
    return ScoreBreakdown(
        mirror=is_mirror_match(candidate, grid, row, col),
        rotation=is_rotation_match(candidate, grid, row, col),
        edge_matches=count_matching_edges(candidate, grid, row, col, rotation),
    )


def score(candidate: TileDefinition, grid: Grid, row: int, col: int, rotation: int = 0) -> int:
    """Compatibility score of a candidate at (row, col) against the placed neighbors."""
    return score_breakdown(candidate, grid, row, col, rotation).total


def find_best_tile(
    grid: Grid,
    catalog: TileCatalog,
    row: int,
    col: int,
    used: AbstractSet[int],
) -> int | None:
    """
    Find the highest-scoring unused catalog entry for (row, col).

    The catalog is scanned once in its given order; a later tile must score
    strictly higher to replace the current best, so ties go to the earliest.

    Args:
        grid: Current grid state
        catalog: Candidate tiles
        row: Target row
        col: Target column
        used: Catalog indices that may not be chosen

    Returns:
        Catalog index of the best tile, or None if every tile is used
    """
    best_score: int | None = None
    best_index: int | None = None

    for i, tile in enumerate(catalog):
        if i in used:
            continue
        tile_score = score(tile, grid, row, col)
        if best_score is None or tile_score > best_score:
            best_score = tile_score
            best_index = i

    return best_index


# =============================================================================
# Placement Optimizer
# =============================================================================


def _locate(cells: list[GridCell], tile_id: str, start: int) -> int | None:
    """Index of the first cell at or after start holding tile_id."""
    for index in range(start, len(cells)):
        if cells[index].tile_id == tile_id:
            return index
    return None


def optimize(grid: Grid, catalog: TileCatalog) -> Grid:
    """
    Rearrange tiles with a single greedy pass to improve local compatibility.

    Positions are visited in row-major order. At each position the best unused
    catalog tile is chosen against the grid as modified so far and swapped in
    from wherever it sits further along the grid. Tiles only ever swap places,
    so the grid keeps exactly the tiles it started with. Positions whose best
    candidate is not on the grid are left as they are. When the catalog is
    larger than the grid, the best candidates are often not on the grid, so
    most positions stay unchanged.

    Args:
        grid: Starting grid (not modified)
        catalog: Tiles eligible for placement, in scan order

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

    logger.info("Starting edge matching optimization over %d cells", len(grid))

    cells = list(grid.cells)
    used: set[int] = set()
    swaps = 0

    for position in range(len(cells)):
        row, col = grid.position_of(position)
        current = grid.replace_cells(cells)
        best_index = find_best_tile(current, catalog, row, col, used)

        if best_index is not None:
            candidate = catalog[best_index]
            source = _locate(cells, candidate.id, position)
            if source is not None and source != position:
                target_cell, source_cell = cells[position], cells[source]
                cells[position] = replace(
                    target_cell, tile=source_cell.tile, rotation=source_cell.rotation
                )
                cells[source] = replace(
                    source_cell, tile=target_cell.tile, rotation=target_cell.rotation
                )
                swaps += 1

        placed = catalog.index_of(cells[position].tile_id)
        if placed is not None:
            used.add(placed)

    logger.info("Edge matching optimization complete: %d swaps", swaps)
    return grid.replace_cells(cells)
