"""
Traversal orders over the cells of a rectangular grid.

Every pattern yields a permutation of range(width * height) using flat
row-major indices (row * width + col). All patterns except random-walk are
deterministic.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Callable

__all__ = ["PATTERNS", "TraversalPattern", "generate_sequence", "sequence_positions"]

logger = logging.getLogger(__name__)


class TraversalPattern(str, Enum):
    """Named strategy for ordering visits to all cells of a grid."""

    ROW_MAJOR = "row-major"
    COLUMN_MAJOR = "column-major"
    SPIRAL_CLOCKWISE = "spiral-clockwise"
    SPIRAL_COUNTER = "spiral-counter"
    DIAGONAL = "diagonal"
    BLOCK_2X2 = "block-2x2"
    CHECKERBOARD = "checkerboard"
    RANDOM_WALK = "random-walk"


PATTERNS: tuple[str, ...] = tuple(p.value for p in TraversalPattern)


# =============================================================================
# Pattern Generators
# =============================================================================


def _row_major(width: int, height: int, rng: random.Random) -> list[int]:
    return [row * width + col for row in range(height) for col in range(width)]


def _column_major(width: int, height: int, rng: random.Random) -> list[int]:
    return [row * width + col for col in range(width) for row in range(height)]


def _spiral_clockwise(width: int, height: int, rng: random.Random) -> list[int]:
    """Peel rings: top row →, right column ↓, bottom row ←, left column ↑."""
    sequence: list[int] = []
    top, bottom, left, right = 0, height - 1, 0, width - 1

    while top <= bottom and left <= right:
        for col in range(left, right + 1):
            sequence.append(top * width + col)
        top += 1

        for row in range(top, bottom + 1):
            sequence.append(row * width + right)
        right -= 1

        # Single remaining row was already emitted by the top leg
        if top <= bottom:
            for col in range(right, left - 1, -1):
                sequence.append(bottom * width + col)
            bottom -= 1

        # Single remaining column was already emitted by the right leg
        if left <= right:
            for row in range(bottom, top - 1, -1):
                sequence.append(row * width + left)
            left += 1

    return sequence


def _spiral_counter(width: int, height: int, rng: random.Random) -> list[int]:
    """Peel rings: left column ↓, bottom row →, right column ↑, top row ←."""
    sequence: list[int] = []
    top, bottom, left, right = 0, height - 1, 0, width - 1

    while top <= bottom and left <= right:
        for row in range(top, bottom + 1):
            sequence.append(row * width + left)
        left += 1

        if top <= bottom:
            for col in range(left, right + 1):
                sequence.append(bottom * width + col)
            bottom -= 1

        if left <= right:
            for row in range(bottom, top - 1, -1):
                sequence.append(row * width + right)
            right -= 1

        if top <= bottom:
            for col in range(right, left - 1, -1):
                sequence.append(top * width + col)
            top += 1

    return sequence


def _diagonal(width: int, height: int, rng: random.Random) -> list[int]:
    """Anti-diagonals d = row + col, rows ascending within each diagonal."""
    sequence: list[int] = []
    for d in range(height + width - 1):
        for row in range(height):
            col = d - row
            if 0 <= col < width:
                sequence.append(row * width + col)
    return sequence


def _block_2x2(width: int, height: int, rng: random.Random) -> list[int]:
    """
    Non-overlapping 2x2 blocks in row-major block order.

    Within a block: top-left, bottom-left, bottom-right, top-right. Blocks cut
    off by the grid edge emit only the cells that exist.
    """
    sequence: list[int] = []
    for block_row in range(0, height, 2):
        for block_col in range(0, width, 2):
            has_row_below = block_row + 1 < height
            has_col_right = block_col + 1 < width

            sequence.append(block_row * width + block_col)
            if has_row_below:
                sequence.append((block_row + 1) * width + block_col)
            if has_row_below and has_col_right:
                sequence.append((block_row + 1) * width + block_col + 1)
            if has_col_right:
                sequence.append(block_row * width + block_col + 1)
    return sequence


def _checkerboard(width: int, height: int, rng: random.Random) -> list[int]:
    """Even (row + col) cells first, then odd ones, row-major within each pass."""
    sequence: list[int] = []
    for parity in (0, 1):
        for row in range(height):
            for col in range(width):
                if (row + col) % 2 == parity:
                    sequence.append(row * width + col)
    return sequence


def _random_walk(width: int, height: int, rng: random.Random) -> list[int]:
    positions = list(range(width * height))
    rng.shuffle(positions)
    return positions


_GENERATORS: dict[TraversalPattern, Callable[[int, int, random.Random], list[int]]] = {
    TraversalPattern.ROW_MAJOR: _row_major,
    TraversalPattern.COLUMN_MAJOR: _column_major,
    TraversalPattern.SPIRAL_CLOCKWISE: _spiral_clockwise,
    TraversalPattern.SPIRAL_COUNTER: _spiral_counter,
    TraversalPattern.DIAGONAL: _diagonal,
    TraversalPattern.BLOCK_2X2: _block_2x2,
    TraversalPattern.CHECKERBOARD: _checkerboard,
    TraversalPattern.RANDOM_WALK: _random_walk,
}


# =============================================================================
# Public API
# =============================================================================


def generate_sequence(
    pattern: TraversalPattern | str,
    width: int,
    height: int,
    rng: random.Random | None = None,
) -> list[int]:
    """
    Generate the visiting order of a width x height grid.

    Args:
        pattern: Pattern enum member or its name (e.g. "spiral-clockwise").
            Unknown names fall back to row-major.
        width: Number of columns
        height: Number of rows
        rng: Random source for random-walk (a fresh unseeded one if None)

    Returns:
        Flat cell indices in visiting order; empty if either dimension <= 0
    """
    if width <= 0 or height <= 0:
        return []

    try:
        resolved = TraversalPattern(pattern)
    except ValueError:
        logger.debug("Unknown traversal pattern %r, using row-major", pattern)
        resolved = TraversalPattern.ROW_MAJOR

    return _GENERATORS[resolved](width, height, rng if rng is not None else random.Random())


def sequence_positions(sequence: list[int], width: int) -> list[tuple[int, int]]:
    """Convert flat indices to (row, col) pairs."""
    return [divmod(index, width) for index in sequence]
