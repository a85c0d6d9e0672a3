"""
Immutable round state and the pure transitions between its stages.

The controller never mutates a RoundState; each step returns a new one.
"""
from dataclasses import dataclass, replace
from typing import Optional

from utils.game_config import REEL_COUNT, ROW_COUNT
from utils.paylines import RoundSummary

BOARD_IDLE = "idle"
BOARD_SPINNING = "spinning"


def _empty_grid():
    return tuple(tuple(None for _ in range(REEL_COUNT)) for _ in range(ROW_COUNT))


@dataclass(frozen=True)
class RoundState:
    """
    Snapshot of the current (or last) round.
    board/wild_grid hold only the columns revealed so far; the final result is
    kept in pending_board/pending_wilds from the moment the round starts.
    """
    round_id: int = 0
    board_state: str = BOARD_IDLE
    wager: float = 0.0
    turbo: bool = False
    board: tuple = _empty_grid()
    wild_grid: tuple = _empty_grid()
    pending_board: Optional[tuple] = None
    pending_wilds: Optional[tuple] = None
    revealed_columns: int = 0
    summary: Optional[RoundSummary] = None

    @property
    def in_progress(self) -> bool:
        return self.board_state == BOARD_SPINNING


def begin_round(state: RoundState, wager: float, board, wild_grid, turbo: bool = False) -> RoundState:
    """A new spin: the whole result is known, nothing is shown yet."""
    return replace(
        state,
        round_id=state.round_id + 1,
        board_state=BOARD_SPINNING,
        wager=wager,
        turbo=turbo,
        board=_empty_grid(),
        wild_grid=_empty_grid(),
        pending_board=board,
        pending_wilds=wild_grid,
        revealed_columns=0,
        summary=None,
    )


def _with_column(grid, source, col: int):
    return tuple(
        tuple(source[r][c] if c == col else grid[r][c] for c in range(REEL_COUNT))
        for r in range(ROW_COUNT)
    )


def stop_column(state: RoundState, col: int) -> RoundState:
    """Reveals one reel. Reels stop strictly left to right."""
    if col != state.revealed_columns:
        raise ValueError(
            f"Column {col} cannot stop before column {state.revealed_columns}."
        )
    return replace(
        state,
        board=_with_column(state.board, state.pending_board, col),
        wild_grid=_with_column(state.wild_grid, state.pending_wilds, col),
        revealed_columns=col + 1,
    )


def resolve_round(state: RoundState, summary: RoundSummary) -> RoundState:
    """All reels stopped and the wins are known."""
    return replace(state, board_state=BOARD_IDLE, summary=summary)
