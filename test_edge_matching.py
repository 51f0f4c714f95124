"""
Tests for candidate scoring and the greedy placement pass.

Edge codes are written S, W, N, E (see tile_parser).
"""

import random
from collections import Counter
from itertools import product

import pytest

from edge_matching import (
    EDGE_MATCH_WEIGHT,
    MIRROR_BONUS,
    ROTATION_BONUS,
    count_matching_edges,
    find_best_tile,
    is_mirror_match,
    is_rotation_match,
    optimize,
    score,
    score_breakdown,
)
from grid_fill import fill_all
from tile_catalog import TileCatalog, build_catalog
from tile_parser import format_grid, parse_catalog, parse_grid
from tile_types import Grid


@pytest.fixture
def plain_catalog() -> TileCatalog:
    """Tiles whose edges never match each other."""
    return parse_catalog({"a": "ABCD", "b": "EFGH", "c": "IJKL"})


# =============================================================================
# Scoring
# =============================================================================


class TestEdgeMatchCount:
    """Edge agreement over all four neighbors."""

    def test_left_neighbor_match(self) -> None:
        catalog = parse_catalog({"a": "RGBY", "c": "RYBG"})
        grid = parse_grid("a _", catalog)
        # a.E == Y, c.W == Y
        assert count_matching_edges(catalog.by_id("c"), grid, 0, 1) == 1

    def test_top_neighbor_match(self) -> None:
        catalog = parse_catalog({"t": "QxxX", "c": "xxQx"})
        grid = parse_grid("t|_", catalog)
        # t.S == Q, c.N == Q
        assert count_matching_edges(catalog.by_id("c"), grid, 1, 0) == 1

    def test_right_and_bottom_neighbors_count(self) -> None:
        catalog = parse_catalog({"r": "xPxx", "d": "xxMx", "c": "MxxP"})
        grid = parse_grid("_ r|d _", catalog)
        # r.W == P == c.E, d.N == M == c.S
        assert count_matching_edges(catalog.by_id("c"), grid, 0, 0) == 2

    def test_all_four_neighbors(self) -> None:
        catalog = parse_catalog({"n": "1xxx", "w": "xxx2", "e": "x3xx", "s": "xx4x", "c": "4213"})
        grid = parse_grid("_ n _|w _ e|_ s _", catalog)
        assert count_matching_edges(catalog.by_id("c"), grid, 1, 1) == 4
        assert score(catalog.by_id("c"), grid, 1, 1) == 4 * EDGE_MATCH_WEIGHT

    def test_empty_neighbors_contribute_nothing(self) -> None:
        catalog = parse_catalog({"c": "AAAA"})
        grid = parse_grid("_ _|_ _", catalog)
        assert count_matching_edges(catalog.by_id("c"), grid, 0, 0) == 0
        assert score(catalog.by_id("c"), grid, 0, 0) == 0

    def test_neighbor_rotation_is_applied(self) -> None:
        """a@90 shows its old North on the East side."""
        catalog = parse_catalog({"a": "RGBY", "c": "xBxx", "d": "xYxx"})
        grid = parse_grid("a@90 _", catalog)
        assert count_matching_edges(catalog.by_id("c"), grid, 0, 1) == 1
        assert count_matching_edges(catalog.by_id("d"), grid, 0, 1) == 0

    def test_candidate_rotation(self) -> None:
        catalog = parse_catalog({"a": "RGBY", "c": "Yxxx"})
        grid = parse_grid("a _", catalog)
        # c turned 90° shows its old South on the West side
        assert count_matching_edges(catalog.by_id("c"), grid, 0, 1) == 0
        assert count_matching_edges(catalog.by_id("c"), grid, 0, 1, rotation=90) == 1


class TestMirrorBonus:
    """Mirror bonus looks at the left and top neighbors only."""

    def test_left_horizontal_mirror(self) -> None:
        catalog = parse_catalog({"a": "ABCD h=c", "c": "IJKL"})
        grid = parse_grid("a _", catalog)
        assert is_mirror_match(catalog.by_id("c"), grid, 0, 1)
        assert score(catalog.by_id("c"), grid, 0, 1) == MIRROR_BONUS

    def test_top_vertical_mirror(self) -> None:
        catalog = parse_catalog({"a": "ABCD v=c", "c": "IJKL"})
        grid = parse_grid("a|_", catalog)
        assert is_mirror_match(catalog.by_id("c"), grid, 1, 0)
        assert score(catalog.by_id("c"), grid, 1, 0) == MIRROR_BONUS

    def test_left_vertical_mirror_does_not_count(self) -> None:
        catalog = parse_catalog({"a": "ABCD v=c", "c": "IJKL"})
        grid = parse_grid("a _", catalog)
        assert not is_mirror_match(catalog.by_id("c"), grid, 0, 1)

    def test_right_neighbor_mirror_ignored(self) -> None:
        """A mirror partner to the right earns nothing, but its edge still counts."""
        catalog = parse_catalog({"a": "ABCD h=c", "c": "IJKB"})
        grid = parse_grid("_ a", catalog)
        breakdown = score_breakdown(catalog.by_id("c"), grid, 0, 0)
        assert not breakdown.mirror
        assert breakdown.edge_matches == 1
        assert breakdown.total == EDGE_MATCH_WEIGHT

    def test_bonus_added_once(self) -> None:
        catalog = parse_catalog({"l": "ABCD h=c", "t": "EFGH v=c", "c": "IJKL"})
        grid = parse_grid("_ t|l _", catalog)
        assert score(catalog.by_id("c"), grid, 1, 1) == MIRROR_BONUS

    def test_missing_mirror_id(self) -> None:
        catalog = parse_catalog({"a": "ABCD h=_", "c": "IJKL"})
        grid = parse_grid("a _", catalog)
        assert not is_mirror_match(catalog.by_id("c"), grid, 0, 1)


class TestRotationBonus:
    """Rotation-family overlap with the left or top neighbor."""

    def test_shared_rotation_member(self) -> None:
        catalog = parse_catalog({"a": "ABCD rot=a,x,_,_", "c": "IJKL rot=x,_,_,_"})
        grid = parse_grid("a _", catalog)
        assert is_rotation_match(catalog.by_id("c"), grid, 0, 1)
        assert score(catalog.by_id("c"), grid, 0, 1) == ROTATION_BONUS

    def test_own_id_counts_as_family_member(self) -> None:
        catalog = parse_catalog({"a": "ABCD rot=_,c,_,_", "c": "IJKL"})
        grid = parse_grid("a|_", catalog)
        assert is_rotation_match(catalog.by_id("c"), grid, 1, 0)

    def test_unrelated_tiles(self, plain_catalog: TileCatalog) -> None:
        grid = parse_grid("a _", plain_catalog)
        assert not is_rotation_match(plain_catalog.by_id("b"), grid, 0, 1)

    def test_bottom_neighbor_family_ignored(self) -> None:
        catalog = parse_catalog({"a": "ABCD rot=a,c,_,_", "c": "IJKL rot=a,c,_,_"})
        grid = parse_grid("_|a", catalog)
        assert not is_rotation_match(catalog.by_id("c"), grid, 0, 0)

    def test_all_terms_add_up(self) -> None:
        catalog = parse_catalog({"a": "RGBY h=c rot=a,c,_,_", "c": "RYBG rot=a,c,_,_"})
        grid = parse_grid("a _", catalog)
        breakdown = score_breakdown(catalog.by_id("c"), grid, 0, 1)
        assert breakdown.mirror and breakdown.rotation
        assert breakdown.edge_matches == 1
        assert breakdown.total == MIRROR_BONUS + ROTATION_BONUS + EDGE_MATCH_WEIGHT


class TestFindBestTile:
    """Selection over the catalog."""

    def test_highest_score_wins(self) -> None:
        catalog = parse_catalog({"a": "ABCD h=c", "b": "EFGH", "c": "IJKL"})
        grid = parse_grid("a _", catalog)
        assert find_best_tile(grid, catalog, 0, 1, set()) == 2

    def test_tie_keeps_first_scanned(self, plain_catalog: TileCatalog) -> None:
        grid = parse_grid("_ _", plain_catalog)
        assert find_best_tile(grid, plain_catalog, 0, 0, set()) == 0

    def test_used_tiles_skipped(self, plain_catalog: TileCatalog) -> None:
        grid = parse_grid("_ _", plain_catalog)
        assert find_best_tile(grid, plain_catalog, 0, 0, {0}) == 1
        assert find_best_tile(grid, plain_catalog, 0, 0, {0, 1}) == 2

    def test_all_used(self, plain_catalog: TileCatalog) -> None:
        grid = parse_grid("_ _", plain_catalog)
        assert find_best_tile(grid, plain_catalog, 0, 0, {0, 1, 2}) is None

    def test_empty_catalog(self) -> None:
        assert find_best_tile(Grid.empty(2, 2), TileCatalog([]), 0, 0, set()) is None


# =============================================================================
# Optimizer
# =============================================================================


class TestOptimizeScenarios:
    """Hand-traced optimization passes."""

    def test_edge_driven_swap(self) -> None:
        catalog = parse_catalog({"a": "RGBY", "b": "RYBG", "c": "RRBR"})
        grid = parse_grid("c a b", catalog)
        # Position 0: b scores 10 against a's West edge, swaps in from the end
        # Position 1: a and c tie at 10, a is scanned first and already in place
        assert format_grid(optimize(grid, catalog)) == "b a c"

    def test_mirror_partner_pulled_next_to_tile(self, plain_catalog: TileCatalog) -> None:
        catalog = parse_catalog({"a": "ABCD h=b", "b": "EFGH", "c": "IJKL"})
        grid = parse_grid("a c b", catalog)
        assert format_grid(optimize(grid, catalog)) == "a b c"

    def test_rotation_family_pulled_next_to_tile(self) -> None:
        catalog = parse_catalog({"a": "ABCD rot=a,x,_,_", "b": "EFGH", "c": "IJKL rot=x,_,_,_"})
        grid = parse_grid("a b c", catalog)
        assert format_grid(optimize(grid, catalog)) == "a c b"

    def test_vertical_mirror_in_second_row(self) -> None:
        catalog = parse_catalog({"a": "ABCD v=d", "b": "EFGH", "c": "IJKL", "d": "MNOP"})
        grid = parse_grid("a b|c d", catalog)
        assert format_grid(optimize(grid, catalog)) == "a b|d c"

    def test_rotation_travels_with_tile(self) -> None:
        catalog = parse_catalog({"a": "ABCD", "b": "EFGH"})
        grid = parse_grid("b a@90", catalog)
        assert format_grid(optimize(grid, catalog)) == "a@90 b"

    def test_candidate_not_on_grid_is_skipped(self, plain_catalog: TileCatalog) -> None:
        grid = parse_grid("c", plain_catalog)
        assert format_grid(optimize(grid, plain_catalog)) == "c"

    def test_catalog_smaller_than_grid(self) -> None:
        full = parse_catalog({"a": "ABCD", "b": "EFGH"})
        grid = parse_grid("b a", full)
        only_a = TileCatalog([full.by_id("a")])
        assert format_grid(optimize(grid, only_a)) == "a b"

    def test_empty_cells_move_with_swaps(self) -> None:
        catalog = parse_catalog({"a": "ABCD"})
        grid = parse_grid("_ a", catalog)
        assert format_grid(optimize(grid, catalog)) == "a _"

    def test_later_rows_see_earlier_placements(self) -> None:
        """The pass scores against the grid as rearranged so far."""
        catalog = parse_catalog({"a": "ABCD h=b v=c", "b": "EFGH", "c": "IJKL", "d": "MNOP"})
        grid = parse_grid("d c|b a", catalog)
        # Position 0 keeps the first tile in scan order (a), pulling it from the end
        assert format_grid(optimize(grid, catalog)) == "a b|c d"


class TestOptimizeInvariants:
    """Properties of a full pass."""

    @pytest.fixture
    def catalog(self) -> TileCatalog:
        return build_catalog(["RRGG", "RGRG", "RGGB", "RBBY", "GGYY", "GYGY"])

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_tile_multiset_preserved(self, catalog: TileCatalog, seed: int) -> None:
        grid = fill_all(Grid.empty(6, 4), catalog, random.Random(seed))
        result = optimize(grid, catalog)
        assert Counter(result.tile_ids()) == Counter(grid.tile_ids())

    def test_multiset_preserved_with_gaps(self, catalog: TileCatalog) -> None:
        grid = fill_all(Grid.empty(6, 5), catalog, random.Random(9))
        result = optimize(grid, catalog)
        assert Counter(result.tile_ids()) == Counter(grid.tile_ids())
        assert result.tile_ids().count(None) == 6

    def test_input_grid_untouched(self, catalog: TileCatalog) -> None:
        grid = fill_all(Grid.empty(6, 4), catalog, random.Random(5))
        before = grid.tile_ids()
        result = optimize(grid, catalog)
        assert grid.tile_ids() == before
        assert result is not grid

    def test_cell_coordinates_kept(self, catalog: TileCatalog) -> None:
        grid = fill_all(Grid.empty(6, 4), catalog, random.Random(6))
        result = optimize(grid, catalog)
        assert [(c.x, c.y) for c in result] == [(c.x, c.y) for c in grid]
        assert result.width == grid.width

    def test_second_pass_keeps_tiles(self, catalog: TileCatalog) -> None:
        """A second pass may rearrange further; only the tile multiset is guaranteed."""
        grid = fill_all(Grid.empty(6, 4), catalog, random.Random(7))
        once = optimize(grid, catalog)
        twice = optimize(once, catalog)
        assert Counter(twice.tile_ids()) == Counter(grid.tile_ids())

    def test_second_pass_can_rearrange(self, catalog: TileCatalog) -> None:
        grid = fill_all(Grid.empty(6, 4), catalog, random.Random(7))
        once = optimize(grid, catalog)
        twice = optimize(once, catalog)
        assert once.tile_ids() != twice.tile_ids()

    def test_empty_catalog_returns_grid(self, catalog: TileCatalog) -> None:
        grid = fill_all(Grid.empty(6, 4), catalog, random.Random(8))
        assert optimize(grid, TileCatalog([])) is grid

    def test_empty_grid_cells(self, catalog: TileCatalog) -> None:
        grid = Grid.empty(3, 3)
        assert optimize(grid, catalog).tile_ids() == [None] * 9

    def test_logs_progress(self, catalog: TileCatalog, caplog: pytest.LogCaptureFixture) -> None:
        grid = fill_all(Grid.empty(6, 4), catalog, random.Random(1))
        with caplog.at_level("INFO", logger="edge_matching"):
            optimize(grid, catalog)
        assert "optimization complete" in caplog.text


class TestOptimizePartialFill:
    """A catalog much larger than the grid leaves most positions alone."""

    @pytest.fixture
    def reference_catalog(self) -> TileCatalog:
        codes = ["".join(p) for p in product("RGBY", repeat=4)][:24]
        return build_catalog(codes)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_most_positions_unchanged(self, reference_catalog: TileCatalog, seed: int) -> None:
        grid = fill_all(Grid.empty(4, 4), reference_catalog, random.Random(seed))
        result = optimize(grid, reference_catalog)
        unchanged = sum(a == b for a, b in zip(grid.tile_ids(), result.tile_ids()))
        assert unchanged >= len(grid) // 2
        assert Counter(result.tile_ids()) == Counter(grid.tile_ids())
