"""
Whole-grid measurements used to compare arrangements.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Literal

from tile_catalog import effective_edges
from tile_types import Grid

__all__ = ["EdgeStats", "MirrorPair", "duplicate_tile_ids", "edge_stats", "find_mirror_pairs"]


@dataclass(frozen=True)
class EdgeStats:
    """Counts over every pair of horizontally or vertically adjacent tiles."""

    matching: int
    total: int

    @property
    def ratio(self) -> float:
        return self.matching / self.total if self.total else 0.0


@dataclass(frozen=True)
class MirrorPair:
    """Two placed tiles that are mirror partners of each other."""

    pos1: int
    pos2: int
    axis: Literal["horizontal", "vertical"]
    distance: int  # Manhattan distance in cells


def edge_stats(grid: Grid) -> EdgeStats:
    """Count adjacent tile pairs and how many of them share an edge label."""
    matching = 0
    total = 0

    for index, cell in enumerate(grid.cells):
        if cell.tile is None:
            continue
        row, col = grid.position_of(index)
        edges = effective_edges(cell.tile, cell.rotation)

        right = grid.cell_at(row, col + 1)
        if right is not None and right.tile is not None:
            total += 1
            if effective_edges(right.tile, right.rotation).W == edges.E:
                matching += 1

        below = grid.cell_at(row + 1, col)
        if below is not None and below.tile is not None:
            total += 1
            if effective_edges(below.tile, below.rotation).N == edges.S:
                matching += 1

    return EdgeStats(matching, total)


def find_mirror_pairs(grid: Grid) -> list[MirrorPair]:
    """
    Find every pair of placed tiles where one is the other's mirror partner.

    Each pair is reported once, from the lower index, in index order.
    """
    positions: dict[str, list[int]] = defaultdict(list)
    for index, cell in enumerate(grid.cells):
        if cell.tile_id is not None:
            positions[cell.tile_id].append(index)

    pairs: list[MirrorPair] = []
    for i, cell in enumerate(grid.cells):
        if cell.tile is None:
            continue
        row1, col1 = grid.position_of(i)
        for axis, partner_id in (("horizontal", cell.tile.mirror_h), ("vertical", cell.tile.mirror_v)):
            if not partner_id:
                continue
            for j in positions.get(partner_id, []):
                if j <= i:
                    continue
                row2, col2 = grid.position_of(j)
                pairs.append(MirrorPair(i, j, axis, abs(row1 - row2) + abs(col1 - col2)))  # type: ignore[arg-type]

    return pairs


def duplicate_tile_ids(grid: Grid) -> dict[str, int]:
    """Tile ids placed more than once, with their counts."""
    counts = Counter(cell.tile_id for cell in grid.cells if cell.tile_id is not None)
    return {tile_id: count for tile_id, count in counts.items() if count > 1}
