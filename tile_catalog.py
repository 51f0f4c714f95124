"""
Tile catalog access.

The engine only needs a narrow view of the catalog: effective edges under a
rotation, rotation-family membership and mirror partners. TileCatalog adds
the lookups callers use to browse a loaded catalog (by id, by shape, one
tile per rotation family).
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Sequence

from tile_types import ROTATIONS, Direction, Edges, TileDefinition

__all__ = [
    "EXPECTED_CATALOG_SIZE",
    "TileCatalog",
    "build_catalog",
    "effective_edges",
    "rotation_family_ids",
    "same_rotation_family",
]

logger = logging.getLogger(__name__)

# Size of the catalog in the reference deployment (24 shapes x 4 rotations)
EXPECTED_CATALOG_SIZE = 96


def effective_edges(tile: TileDefinition, rotation: int = 0) -> Edges:
    """
    Resolve a tile's stored edges plus an applied rotation into compass edges.

    Args:
        tile: The tile definition
        rotation: Clockwise rotation in degrees (0, 90, 180 or 270)

    Returns:
        Edges as they appear on the grid

    Raises:
        ValueError: If rotation is not a quarter turn
    """
    if rotation not in ROTATIONS:
        raise ValueError(f"Invalid rotation {rotation!r} for tile '{tile.id}'")

    edges = tile.base_edges
    for _ in range(rotation // 90):
        edges = edges.rotated_90()
    return edges


def rotation_family_ids(tile: TileDefinition) -> frozenset[str]:
    return tile.family_ids


def same_rotation_family(a: TileDefinition, b: TileDefinition) -> bool:
    """True if the rotation families of the two tiles overlap."""
    return not a.family_ids.isdisjoint(b.family_ids)


class TileCatalog:
    """An ordered, read-only collection of tile definitions."""

    def __init__(self, tiles: Iterable[TileDefinition]) -> None:
        self._tiles: tuple[TileDefinition, ...] = tuple(tiles)
        self._index_by_id: dict[str, int] = {}
        self._by_shape: dict[int, list[TileDefinition]] = {}

        for i, tile in enumerate(self._tiles):
            if tile.id in self._index_by_id:
                logger.warning("Duplicate tile id '%s' at catalog index %d", tile.id, i)
                continue
            self._index_by_id[tile.id] = i
            self._by_shape.setdefault(tile.shape, []).append(tile)

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[TileDefinition]:
        return iter(self._tiles)

    def __getitem__(self, index: int) -> TileDefinition:
        return self._tiles[index]

    def __repr__(self) -> str:
        return f"TileCatalog({len(self._tiles)} tiles)"

    @property
    def tiles(self) -> tuple[TileDefinition, ...]:
        return self._tiles

    def by_id(self, tile_id: str | None) -> TileDefinition | None:
        if not tile_id:
            return None
        index = self._index_by_id.get(tile_id)
        return self._tiles[index] if index is not None else None

    def index_of(self, tile_id: str | None) -> int | None:
        if not tile_id:
            return None
        return self._index_by_id.get(tile_id)

    def by_shape(self, shape: int) -> list[TileDefinition]:
        return list(self._by_shape.get(shape, []))

    def shapes(self) -> list[int]:
        return sorted(self._by_shape)

    def rotation_family(self, tile: TileDefinition) -> list[TileDefinition]:
        """Catalog entries named by the tile's rotation ids, in rotation order."""
        family: list[TileDefinition] = []
        for rotation_id in tile.rotation_ids:
            member = self.by_id(rotation_id)
            if member is not None and member not in family:
                family.append(member)
        return family

    def unique_tiles(self) -> list[TileDefinition]:
        """First tile of each rotation family, in catalog order."""
        seen: set[str] = set()
        unique: list[TileDefinition] = []
        for tile in self._tiles:
            if tile.family_ids.isdisjoint(seen):
                seen.update(tile.family_ids)
                unique.append(tile)
        logger.debug(
            "Found %d unique tile families from %d tiles", len(unique), len(self._tiles)
        )
        return unique

    def mirror_partner(self, tile: TileDefinition, direction: Direction) -> TileDefinition | None:
        """
        Resolve a mirror relation.

        Direction.E / Direction.W follow the horizontal mirror (left-right flip),
        Direction.N / Direction.S the vertical one.
        """
        if direction in (Direction.E, Direction.W):
            return self.by_id(tile.mirror_h)
        return self.by_id(tile.mirror_v)


def build_catalog(base_codes: Sequence[str], id_format: str = "{shape:02d}-{rotation}") -> TileCatalog:
    """
    Build a complete catalog from base edge codes.

    Each code is four edge labels in storage order (S, W, N, E). Every code
    becomes one shape with four rotation variants; mirror partners are the
    first catalog entries whose edges equal the flipped edges.

    Args:
        base_codes: One four-character code per shape
        id_format: Format string for tile ids, given shape and rotation

    Returns:
        TileCatalog with len(base_codes) * 4 tiles

    Raises:
        ValueError: If a code is not exactly four characters
    """
    variants: list[tuple[str, int, Edges, tuple[str, ...]]] = []

    for shape, code in enumerate(base_codes):
        if len(code) != 4:
            raise ValueError(
                f"Invalid edge code '{code}' for shape {shape}\n"
                f"  Expected four labels in S, W, N, E order"
            )
        ids = tuple(id_format.format(shape=shape, rotation=r) for r in ROTATIONS)
        edges = Edges(N=code[2], E=code[3], S=code[0], W=code[1])
        for tile_id in ids:
            variants.append((tile_id, shape, edges, ids))
            edges = edges.rotated_90()

    def first_with_edges(target: Edges) -> str | None:
        for tile_id, _, edges, _ in variants:
            if edges == target:
                return tile_id
        return None

    tiles = [
        TileDefinition(
            id=tile_id,
            edges=(edges.S, edges.W, edges.N, edges.E),
            shape=shape,
            mirror_h=first_with_edges(edges.mirrored_h()),
            mirror_v=first_with_edges(edges.mirrored_v()),
            rotation0=ids[0],
            rotation90=ids[1],
            rotation180=ids[2],
            rotation270=ids[3],
        )
        for tile_id, shape, edges, ids in variants
    ]

    logger.info("Built catalog with %d tiles from %d shapes", len(tiles), len(base_codes))
    return TileCatalog(tiles)
