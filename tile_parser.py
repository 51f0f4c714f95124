"""
Compact string notation for tile catalogs and grids.

Catalog entries are written as an edge code followed by optional attributes:

    {
        "a": "RGBY",                     # edges S=R, W=G, N=B, E=Y
        "b": "RYBG shape=1 h=a v=_",     # horizontal mirror partner is 'a'
        "c": "RRRR rot=c,d,_,_",         # rotation0..rotation270 ids
    }

Grids are rows separated by | and cells separated by spaces:

    "a b@90 _|c a b"

A cell is a tile id, optionally followed by @ and a rotation in degrees.
'_' or an empty string (from adjacent spaces) is an empty cell.
"""

from __future__ import annotations

from tile_catalog import TileCatalog
from tile_types import ROTATIONS, Grid, GridCell, TileDefinition

__all__ = ["format_grid", "parse_catalog", "parse_grid"]

_ROTATION_KEYS = ("rotation0", "rotation90", "rotation180", "rotation270")


def _optional_id(value: str) -> str | None:
    return None if value in ("", "_") else value


def parse_catalog(definitions: dict[str, str]) -> TileCatalog:
    """
    Parse tile definitions from compact strings.

    Attributes after the edge code:
    - shape=<int>: shape group (default 0)
    - h=<id>, v=<id>: horizontal / vertical mirror partner ('_' for none)
    - rot=<id>,<id>,<id>,<id>: rotation0..rotation270 ids ('_' for none)

    Args:
        definitions: Dict mapping tile id to its definition, in catalog order

    Returns:
        TileCatalog in the dict's order

    Raises:
        ValueError: If a code or attribute is malformed
    """
    tiles: list[TileDefinition] = []

    for tile_id, definition in definitions.items():
        tokens = definition.split()
        if not tokens or len(tokens[0]) != 4:
            raise ValueError(
                f"Invalid tile definition for '{tile_id}': \"{definition}\"\n"
                f"  Expected a four-character edge code in S, W, N, E order,\n"
                f"  optionally followed by shape=, h=, v= and rot= attributes"
            )

        code = tokens[0]
        fields: dict[str, object] = {}

        for token in tokens[1:]:
            key, sep, value = token.partition("=")
            if not sep:
                raise ValueError(
                    f"Invalid attribute '{token}' in tile '{tile_id}'\n"
                    f"  Attributes are written key=value"
                )
            if key == "shape":
                try:
                    fields["shape"] = int(value)
                except ValueError:
                    raise ValueError(
                        f"Invalid shape '{value}' in tile '{tile_id}'\n"
                        f"  Shape must be an integer"
                    ) from None
            elif key == "h":
                fields["mirror_h"] = _optional_id(value)
            elif key == "v":
                fields["mirror_v"] = _optional_id(value)
            elif key == "rot":
                ids = value.split(",")
                if len(ids) != 4:
                    raise ValueError(
                        f"Invalid rotation list '{value}' in tile '{tile_id}'\n"
                        f"  Expected four comma-separated ids (use _ for none)"
                    )
                for name, rotation_id in zip(_ROTATION_KEYS, ids):
                    fields[name] = _optional_id(rotation_id)
            else:
                raise ValueError(
                    f"Unknown attribute '{key}' in tile '{tile_id}'\n"
                    f"  Valid attributes: shape, h, v, rot"
                )

        tiles.append(
            TileDefinition(id=tile_id, edges=(code[0], code[1], code[2], code[3]), **fields)  # type: ignore[arg-type]
        )

    return TileCatalog(tiles)


def parse_grid(definition: str, catalog: TileCatalog) -> Grid:
    """
    Parse a grid from the compact row notation.

    Args:
        definition: Rows separated by |, cells separated by single spaces
        catalog: Catalog used to resolve tile ids

    Returns:
        Grid whose width is the number of cells per row

    Raises:
        ValueError: On unknown tile ids, bad rotations or ragged rows
    """
    row_strings = definition.split("|")
    rows: list[list[GridCell]] = []

    for row_idx, row_str in enumerate(row_strings):
        cells: list[GridCell] = []

        for col_idx, cell_str in enumerate(row_str.strip().split(" ")):
            if cell_str in ("", "_"):
                cells.append(GridCell(x=col_idx, y=row_idx))
                continue

            tile_id, _, rotation_str = cell_str.partition("@")
            tile = catalog.by_id(tile_id)
            if tile is None:
                raise ValueError(
                    f"Unknown tile id '{tile_id}'\n"
                    f"  Row {row_idx}: \"{row_str}\"\n"
                    f"  Position: column {col_idx}\n"
                    f"  Known ids: {', '.join(t.id for t in catalog)}"
                )

            rotation = 0
            if rotation_str:
                if not rotation_str.isdigit() or int(rotation_str) not in ROTATIONS:
                    raise ValueError(
                        f"Invalid rotation '{rotation_str}' for tile '{tile_id}'\n"
                        f"  Row {row_idx}, column {col_idx}\n"
                        f"  Valid rotations: {', '.join(str(r) for r in ROTATIONS)}"
                    )
                rotation = int(rotation_str)

            cells.append(GridCell(x=col_idx, y=row_idx, tile=tile, rotation=rotation))

        rows.append(cells)

    width = len(rows[0])
    mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != width]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths\n"
            f"  Expected: {width} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx]}\"\n"
        error_msg += "  All rows must have the same number of cells"
        raise ValueError(error_msg)

    return Grid(tuple(cell for row in rows for cell in row), width)


def format_grid(grid: Grid) -> str:
    """Write a grid back in the compact row notation."""
    tokens = []
    for cell in grid.cells:
        if cell.tile is None:
            tokens.append("_")
        elif cell.rotation:
            tokens.append(f"{cell.tile.id}@{cell.rotation}")
        else:
            tokens.append(cell.tile.id)

    return "|".join(
        " ".join(tokens[row * grid.width : (row + 1) * grid.width]) for row in range(grid.rows)
    )
