"""
Whole-grid operations that do not use scoring: shuffle fill, gap fill and clear.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace

from tile_catalog import EXPECTED_CATALOG_SIZE, TileCatalog
from tile_types import Grid

__all__ = ["clear", "fill_all", "fill_empty"]

logger = logging.getLogger(__name__)


def fill_all(grid: Grid, catalog: TileCatalog, rng: random.Random | None = None) -> Grid:
    """
    Place the catalog on the grid in random order, one tile per cell.

    Positions beyond min(len(catalog), len(grid)) keep their current content.
    A catalog size other than EXPECTED_CATALOG_SIZE is logged, not rejected.

    Args:
        grid: Grid to fill (not modified)
        catalog: Tiles to place
        rng: Random source for the shuffle (a fresh unseeded one if None)

    Returns:
        New grid with the shuffled tiles
    """
    if len(catalog) != EXPECTED_CATALOG_SIZE:
        logger.warning("Expected %d tiles, got %d", EXPECTED_CATALOG_SIZE, len(catalog))

    if len(catalog) == 0:
        return grid

    shuffled = list(catalog)
    (rng if rng is not None else random.Random()).shuffle(shuffled)

    cells = list(grid.cells)
    count = min(len(shuffled), len(cells))
    for i in range(count):
        cells[i] = replace(cells[i], tile=shuffled[i])

    logger.info("Filled %d of %d cells with shuffled tiles", count, len(cells))
    return grid.replace_cells(cells)


def fill_empty(grid: Grid, catalog: TileCatalog) -> Grid:
    """
    Fill only the empty cells, in order, with catalog tiles not yet on the grid.

    Already placed tiles stay where they are, so no tile id appears twice.
    """
    placed_ids = {cell.tile_id for cell in grid.cells if cell.tile is not None}
    unused = iter([tile for tile in catalog if tile.id not in placed_ids])

    cells = list(grid.cells)
    filled = 0
    for i, cell in enumerate(cells):
        if cell.tile is not None:
            continue
        tile = next(unused, None)
        if tile is None:
            break
        cells[i] = replace(cell, tile=tile)
        filled += 1

    logger.info("Filled %d empty cells", filled)
    return grid.replace_cells(cells)


def clear(grid: Grid) -> Grid:
    """Remove every tile; coordinates and rotations are kept."""
    logger.info("Clearing %d cells", len(grid))
    return grid.replace_cells([replace(cell, tile=None) for cell in grid.cells])
