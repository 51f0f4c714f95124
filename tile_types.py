"""
Shared type definitions for the tile placement engine.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from math import ceil
from typing import Iterator

ROTATIONS = (0, 90, 180, 270)


class Direction(Enum):
    """Cardinal direction of a tile edge or a neighbor."""

    N = "N"  # Up (decreasing row)
    E = "E"  # Right (increasing col)
    S = "S"  # Down (increasing row)
    W = "W"  # Left (decreasing col)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
}


# =============================================================================
# Tile Definition Types
# =============================================================================


@dataclass(frozen=True)
class Edges:
    """Edge labels of a tile as seen on the grid."""

    N: str
    E: str
    S: str
    W: str

    def get(self, direction: Direction) -> str:
        return getattr(self, direction.value)

    def rotated_90(self) -> Edges:
        """Edges after turning the tile 90° clockwise."""
        return Edges(N=self.W, E=self.N, S=self.E, W=self.S)

    def mirrored_h(self) -> Edges:
        """Edges after flipping left to right."""
        return Edges(N=self.N, E=self.W, S=self.S, W=self.E)

    def mirrored_v(self) -> Edges:
        """Edges after flipping top to bottom."""
        return Edges(N=self.S, E=self.E, S=self.N, W=self.W)

    def as_code(self) -> str:
        """Four-character code in storage order (S, W, N, E)."""
        return f"{self.S}{self.W}{self.N}{self.E}"


@dataclass(frozen=True)
class TileDefinition:
    """
    A catalog entry.

    Edge labels are stored South, West, North, East. The mirror and rotation
    fields are ids of other catalog entries; they are references only.
    """

    id: str
    edges: tuple[str, str, str, str]
    shape: int = 0
    mirror_h: str | None = None
    mirror_v: str | None = None
    rotation0: str | None = None
    rotation90: str | None = None
    rotation180: str | None = None
    rotation270: str | None = None

    @property
    def base_edges(self) -> Edges:
        south, west, north, east = self.edges
        return Edges(N=north, E=east, S=south, W=west)

    @property
    def rotation_ids(self) -> tuple[str | None, ...]:
        return (self.rotation0, self.rotation90, self.rotation180, self.rotation270)

    @property
    def family_ids(self) -> frozenset[str]:
        """Own id plus every declared rotation variant id."""
        return frozenset([self.id, *(r for r in self.rotation_ids if r)])


# =============================================================================
# Grid Types
# =============================================================================


@dataclass(frozen=True)
class GridCell:
    """A grid position, optionally holding a tile with an applied rotation."""

    x: int  # column
    y: int  # row
    tile: TileDefinition | None = None
    rotation: int = 0

    def __post_init__(self) -> None:
        if self.rotation not in ROTATIONS:
            raise ValueError(
                f"Invalid rotation {self.rotation!r} for cell ({self.x}, {self.y})\n"
                f"  Valid rotations: {', '.join(str(r) for r in ROTATIONS)}"
            )

    @property
    def is_empty(self) -> bool:
        return self.tile is None

    @property
    def tile_id(self) -> str | None:
        return self.tile.id if self.tile is not None else None


@dataclass(frozen=True)
class Grid:
    """A flat row-major collection of cells with a fixed column count."""

    cells: tuple[GridCell, ...]
    width: int

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError(f"Grid width must be positive, got {self.width}")

    @classmethod
    def empty(cls, width: int, height: int) -> Grid:
        cells = tuple(
            GridCell(x=col, y=row) for row in range(max(height, 0)) for col in range(width)
        )
        return cls(cells, width)

    @property
    def rows(self) -> int:
        return ceil(len(self.cells) / self.width)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[GridCell]:
        return iter(self.cells)

    def __getitem__(self, index: int) -> GridCell:
        return self.cells[index]

    def index_of(self, row: int, col: int) -> int:
        return row * self.width + col

    def position_of(self, index: int) -> tuple[int, int]:
        """Return (row, col) for a flat index."""
        return divmod(index, self.width)

    def cell_at(self, row: int, col: int) -> GridCell | None:
        """Cell at (row, col), or None when outside the grid."""
        if row < 0 or col < 0 or col >= self.width:
            return None
        index = self.index_of(row, col)
        if index >= len(self.cells):
            return None
        return self.cells[index]

    def tile_at(self, row: int, col: int) -> TileDefinition | None:
        cell = self.cell_at(row, col)
        return cell.tile if cell is not None else None

    def tile_ids(self) -> list[str | None]:
        return [cell.tile_id for cell in self.cells]

    def placed_tiles(self) -> list[TileDefinition]:
        return [cell.tile for cell in self.cells if cell.tile is not None]

    def replace_cells(self, cells: list[GridCell] | tuple[GridCell, ...]) -> Grid:
        """New grid of the same width holding the given cells."""
        return Grid(tuple(cells), self.width)

    def with_tile(self, index: int, tile: TileDefinition | None, rotation: int | None = None) -> Grid:
        cells = list(self.cells)
        cell = cells[index]
        cells[index] = replace(
            cell, tile=tile, rotation=cell.rotation if rotation is None else rotation
        )
        return self.replace_cells(cells)
