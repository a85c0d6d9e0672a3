import random

import pytest

from utils.errors import ConfigurationError, InvalidSampleSize
from utils.game_config import DEFAULT_WEIGHTS, REEL_COUNT, ROW_COUNT, SYMBOLS, WILD, WILD_REELS
from utils.game_utils import BoardGenerator, WeightedSampler, board_column, validate_weights


class FixedRandom(random.Random):
    """random() always returns the same value."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def test_pick_returns_distinct_symbols(rng):
    sampler = WeightedSampler(rng)
    for _ in range(200):
        picks = sampler.pick(SYMBOLS, DEFAULT_WEIGHTS, 3)
        assert len(picks) == 3
        assert len(set(picks)) == 3


def test_pick_walks_cumulative_weights():
    # 0.3 * (1 + 3) = 1.2 lands past "a" (1) and inside "b" (3)
    sampler = WeightedSampler(FixedRandom(0.3))
    assert sampler.pick(["a", "b"], {"a": 1, "b": 3}, 1) == ["b"]

    sampler = WeightedSampler(FixedRandom(0.1))
    assert sampler.pick(["a", "b"], {"a": 1, "b": 3}, 1) == ["a"]


def test_pick_removes_drawn_symbol_from_pool():
    sampler = WeightedSampler(FixedRandom(0.0))
    assert sampler.pick(["a", "b", "c"], {"a": 5, "b": 1, "c": 1}, 3) == ["a", "b", "c"]


def test_pick_more_than_pool_raises(rng):
    with pytest.raises(InvalidSampleSize) as exc_info:
        WeightedSampler(rng).pick(["a", "b"], {"a": 1, "b": 1}, 3)
    assert exc_info.value.requested == 3
    assert exc_info.value.available == 2


def test_pick_exhausts_pool_exactly(rng):
    picks = WeightedSampler(rng).pick(["a", "b", "c"], {"a": 1, "b": 2, "c": 3}, 3)
    assert sorted(picks) == ["a", "b", "c"]


@pytest.mark.parametrize("weights", [
    {},
    {"dog": 0, "a": 1, "k": 1},
    {"dog": -3, "a": 1, "k": 1},
    {"dog": 1.5, "a": 1, "k": 1},
    {"dog": True, "a": 1, "k": 1},
    {"dog": 1, "a": 1},
])
def test_validate_weights_rejects_unusable_tables(weights):
    with pytest.raises(ConfigurationError):
        validate_weights(weights)


def test_validate_weights_accepts_defaults():
    validate_weights(DEFAULT_WEIGHTS)


def test_board_shape_and_distinct_columns(rng):
    generator = BoardGenerator(rng)
    for _ in range(100):
        board, wild_grid = generator.generate(DEFAULT_WEIGHTS)
        assert len(board) == ROW_COUNT
        assert all(len(row) == REEL_COUNT for row in board)
        for col in range(REEL_COUNT):
            column = board_column(board, col)
            assert len(set(column)) == ROW_COUNT


def test_wild_only_lands_on_wild_reels(rng):
    # Weight WILD heavily so it shows up often wherever it is allowed.
    weights = dict(DEFAULT_WEIGHTS, **{WILD: 500})
    generator = BoardGenerator(rng)
    seen_columns = set()
    for _ in range(200):
        board, _ = generator.generate(weights)
        for row in board:
            for col, symbol in enumerate(row):
                if symbol == WILD:
                    seen_columns.add(col)
    assert seen_columns == set(WILD_REELS)


def test_wild_reels_none_allows_every_reel(rng):
    weights = dict(DEFAULT_WEIGHTS, **{WILD: 500})
    generator = BoardGenerator(rng, wild_reels=None)
    seen_columns = set()
    for _ in range(200):
        board, _ = generator.generate(weights)
        for row in board:
            seen_columns.update(col for col, symbol in enumerate(row) if symbol == WILD)
    assert seen_columns == set(range(REEL_COUNT))


def test_wild_grid_matches_board(rng):
    weights = dict(DEFAULT_WEIGHTS, **{WILD: 500})
    generator = BoardGenerator(rng)
    multipliers = set()
    for _ in range(200):
        board, wild_grid = generator.generate(weights)
        for r in range(ROW_COUNT):
            for c in range(REEL_COUNT):
                if board[r][c] == WILD:
                    assert wild_grid[r][c] in (2, 3)
                    multipliers.add(wild_grid[r][c])
                else:
                    assert wild_grid[r][c] is None
    assert multipliers == {2, 3}


def test_same_seed_same_board():
    first = BoardGenerator(random.Random(99)).generate(DEFAULT_WEIGHTS)
    second = BoardGenerator(random.Random(99)).generate(DEFAULT_WEIGHTS)
    assert first == second


def test_board_column():
    board = (("a", "b"), ("c", "d"), ("e", "f"))
    assert board_column(board, 1) == ("b", "d", "f")


def test_validate_weights_counts_wild_only_on_its_reels():
    # Reels 1 and 5 never draw WILD, so two symbols plus WILD cannot fill them.
    weights = {"a": 1, "k": 1, WILD: 1}
    with pytest.raises(ConfigurationError, match="Reel 1"):
        validate_weights(weights)
    validate_weights(weights, wild_reels=None)
    assert 0 not in WILD_REELS
