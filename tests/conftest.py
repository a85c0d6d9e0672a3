import random

import pytest

from utils.game_config import WILD
from utils.scheduler import ManualScheduler

# Top and bottom rows that share no symbol with each other.
QUIET_TOP = ("a", "k", "q", "j", "ten")
QUIET_BOTTOM = ("bone", "collar", "taxa", "pug", "milu")


def make_board(middle, top=QUIET_TOP, bottom=QUIET_BOTTOM):
    """A [row][col] board built from three rows."""
    return (tuple(top), tuple(middle), tuple(bottom))


def make_wilds(board, multipliers=None):
    """
    A wild grid for board. multipliers maps (row, col) -> value; every other
    WILD defaults to 2.
    """
    multipliers = multipliers or {}
    return tuple(
        tuple(
            multipliers.get((r, c), 2) if symbol == WILD else None
            for c, symbol in enumerate(row)
        )
        for r, row in enumerate(board)
    )


class FixedGenerator:
    """Stands in for BoardGenerator and always deals the same boards in turn."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    def generate(self, _weights):
        result = self.results[min(self.calls, len(self.results) - 1)]
        self.calls += 1
        return result


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def dog_line_board():
    """Five dogs across the middle payline and nothing else paying."""
    board = make_board(["dog"] * 5)
    return board, make_wilds(board)


@pytest.fixture
def losing_board():
    board = make_board(["j", "a", "bone", "k", "q"], top=["q", "j", "a", "ten", "k"])
    return board, make_wilds(board)
