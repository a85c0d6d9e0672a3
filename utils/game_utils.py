"""
Board generation for the payline slot game.
Includes the weighted symbol sampler and the 3x5 board generator.
"""
import logging
import random
from typing import Optional

from utils.errors import ConfigurationError, InvalidSampleSize
from utils.game_config import (
    REEL_COUNT, ROW_COUNT, SYMBOLS, WILD, WILD_MULTIPLIER_WEIGHTS, WILD_REELS
)

logger = logging.getLogger(__name__)

Board = tuple[tuple[str, ...], ...]
WildGrid = tuple[tuple[Optional[int], ...], ...]


def validate_weights(weights: dict, symbols=SYMBOLS, per_column: int = ROW_COUNT,
                     wild_reels=WILD_REELS):
    """
    Checks a weight table once at startup.
    Raises ConfigurationError if any column could not be drawn from it. WILD
    only counts towards the columns in wild_reels (None means every reel).
    """
    if not weights:
        raise ConfigurationError("Weight table is empty.")
    for symbol, weight in weights.items():
        if not isinstance(weight, int) or isinstance(weight, bool) or weight <= 0:
            raise ConfigurationError(
                f"Weight for {symbol!r} must be a positive integer, got {weight!r}."
            )
    reels = range(REEL_COUNT) if wild_reels is None else wild_reels
    for col in range(REEL_COUNT):
        drawable = [
            s for s in symbols
            if s in weights and (s != WILD or col in reels)
        ]
        if len(drawable) < per_column:
            raise ConfigurationError(
                f"Reel {col + 1} needs at least {per_column} weighted symbols, "
                f"found {len(drawable)}."
            )


class WeightedSampler:
    """Draws distinct symbols for one reel column."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def pick(self, symbols, weights: dict, k: int) -> list[str]:
        """
        Draws k distinct symbols, each with probability proportional to its
        weight among the symbols still in the pool.
        """
        pool = list(symbols)
        if k > len(pool):
            raise InvalidSampleSize(k, len(pool))

        pool_weights = [weights.get(s, 1) for s in pool]
        picks = []
        for _ in range(k):
            total = sum(pool_weights)
            r = self.rng.random() * total
            idx = 0
            for idx, weight in enumerate(pool_weights):
                r -= weight
                if r < 0:
                    break
            picks.append(pool.pop(idx))
            pool_weights.pop(idx)
        return picks


class BoardGenerator:
    """Builds a full board and its wild multiplier grid for one spin."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        symbols=SYMBOLS,
        wild_reels=WILD_REELS,
        wild_multiplier_weights=None,
    ):
        self.rng = rng or random.Random()
        self.sampler = WeightedSampler(self.rng)
        self.symbols = list(symbols)
        self.wild_reels = set(range(REEL_COUNT)) if wild_reels is None else set(wild_reels)
        self.wild_multiplier_weights = wild_multiplier_weights or WILD_MULTIPLIER_WEIGHTS

    def _column_symbols(self, col: int, weights: dict) -> list[str]:
        """The symbols a column may draw from."""
        return [
            s for s in self.symbols
            if s in weights and (s != WILD or col in self.wild_reels)
        ]

    def draw_column(self, col: int, weights: dict) -> list[str]:
        """Draws one column top to bottom."""
        picks = self.sampler.pick(self._column_symbols(col, weights), weights, ROW_COUNT)
        # Weighting decides what lands, not which row it lands on.
        self.rng.shuffle(picks)
        return picks

    def draw_wild_multiplier(self) -> int:
        """Draws a multiplier for a landed WILD."""
        values = list(self.wild_multiplier_weights)
        weights = [self.wild_multiplier_weights[v] for v in values]
        return self.rng.choices(values, weights=weights, k=1)[0]

    def generate(self, weights: dict) -> tuple[Board, WildGrid]:
        """Generates a board [row][col] and the parallel wild multiplier grid."""
        columns = [self.draw_column(col, weights) for col in range(REEL_COUNT)]
        board = tuple(
            tuple(columns[col][row] for col in range(REEL_COUNT))
            for row in range(ROW_COUNT)
        )
        wild_grid = tuple(
            tuple(
                self.draw_wild_multiplier() if board[row][col] == WILD else None
                for col in range(REEL_COUNT)
            )
            for row in range(ROW_COUNT)
        )
        return board, wild_grid


def board_column(board, col: int) -> tuple:
    """Returns one column of a [row][col] grid, top to bottom."""
    return tuple(row[col] for row in board)
