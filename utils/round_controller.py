"""
Runs one spin end to end: debit, board generation, staggered reel stops,
win evaluation, credit and the reveal loop.
"""
import logging
import math
import random
from dataclasses import dataclass
from typing import Callable, Optional

from utils.errors import (
    InsufficientBalance, InvalidWager, RoundAlreadyInProgress, RoundRejected
)
from utils.game_config import DEFAULT_WEIGHTS, PAYLINES, PAYOUT_TABLE, REEL_COUNT
from utils.game_utils import BoardGenerator, board_column, validate_weights
from utils.paylines import RoundSummary, aggregate, evaluate, summarize
from utils.reveal import RevealEvent, RevealSequencer
from utils.round_state import (
    BOARD_IDLE, BOARD_SPINNING, RoundState, begin_round, resolve_round, stop_column
)

logger = logging.getLogger(__name__)


class Wallet:
    """In-memory balance holder. on_change(delta, balance) fires after every change."""

    def __init__(self, balance: float = 0.0, on_change: Optional[Callable] = None):
        self.balance = balance
        self.on_change = on_change

    def debit(self, amount: float):
        self.balance -= amount
        if self.on_change:
            self.on_change(-amount, self.balance)

    def credit(self, amount: float):
        self.balance += amount
        if self.on_change:
            self.on_change(amount, self.balance)


@dataclass(frozen=True)
class ReelTiming:
    """Reel stop schedule and reveal pacing, in seconds."""
    base_delay: float = 0.6
    column_delay: float = 0.3
    min_delay: float = 0.1
    turbo_speed: float = 3.0
    reveal_visible: float = 2.0
    reveal_gap: float = 0.4

    def column_stop_times(self, turbo: bool = False) -> list[float]:
        """When each reel stops, measured from the start of the spin."""
        speed = self.turbo_speed if turbo else 1.0
        return [
            max(self.min_delay, (self.base_delay + col * self.column_delay) / speed)
            for col in range(REEL_COUNT)
        ]


class RoundController:
    """Orchestrates rounds for one player. Only one round is ever in flight."""

    def __init__(
        self,
        wallet,
        scheduler,
        rng: Optional[random.Random] = None,
        weights: Optional[dict] = None,
        payout_table: Optional[dict] = None,
        paylines=PAYLINES,
        timing: Optional[ReelTiming] = None,
        on_board_state_change: Optional[Callable[[str], None]] = None,
        on_column_stop: Optional[Callable] = None,
        on_round_resolved: Optional[Callable[[RoundSummary], None]] = None,
        on_reveal_event: Optional[Callable[[RevealEvent], None]] = None,
        **generator_options,
    ):
        self.weights = DEFAULT_WEIGHTS if weights is None else weights
        self.generator = BoardGenerator(rng or random.Random(), **generator_options)
        validate_weights(
            self.weights, self.generator.symbols, wild_reels=self.generator.wild_reels
        )
        self.wallet = wallet
        self.scheduler = scheduler
        self.payout_table = PAYOUT_TABLE if payout_table is None else payout_table
        self.paylines = paylines
        self.timing = timing or ReelTiming()

        self.on_board_state_change = on_board_state_change
        self.on_column_stop = on_column_stop
        self.on_round_resolved = on_round_resolved

        self.reveal = RevealSequencer(
            scheduler,
            on_event=on_reveal_event,
            visible_duration=self.timing.reveal_visible,
            gap_duration=self.timing.reveal_gap,
        )
        self.state = RoundState()
        self.last_rejection: Optional[RoundRejected] = None
        self._stop_handles = []

    @property
    def in_progress(self) -> bool:
        return self.state.in_progress

    def _check_can_start(self, wager):
        if self.state.in_progress:
            raise RoundAlreadyInProgress()
        if isinstance(wager, bool) or not isinstance(wager, (int, float)):
            raise InvalidWager(wager)
        if not math.isfinite(wager) or wager <= 0:
            raise InvalidWager(wager)
        if self.wallet.balance < wager:
            raise InsufficientBalance(wager, self.wallet.balance)

    def start_round(self, wager: float, turbo: bool = False) -> bool:
        """
        Starts a spin. Returns False (and changes nothing) when the round is
        rejected; results arrive through the callbacks.
        """
        try:
            self._check_can_start(wager)
        except RoundRejected as e:
            self.last_rejection = e
            logger.info("Round rejected (%s): %s", e.reason, e)
            return False
        self.last_rejection = None

        board, wild_grid = self.generator.generate(self.weights)
        # The previous round's reveal must be gone before anything spins.
        self.reveal.reset()
        self.wallet.debit(wager)

        self.state = begin_round(self.state, wager, board, wild_grid, turbo=turbo)
        logger.info(
            "Round %d started: wager=%s turbo=%s balance=%s",
            self.state.round_id, wager, turbo, self.wallet.balance
        )
        self._notify_board_state(BOARD_SPINNING)

        round_id = self.state.round_id
        self._stop_handles = [
            self.scheduler.call_later(delay, self._on_column_stop, round_id, col)
            for col, delay in enumerate(self.timing.column_stop_times(turbo))
        ]
        return True

    def cancel(self):
        """
        Silences the controller, e.g. when the presentation goes away.
        A round still spinning is settled on the spot: its remaining reels
        stop and any win is credited, but no callback or reveal event fires.
        """
        for handle in self._stop_handles:
            handle.cancel()
        self._stop_handles = []
        self.reveal.cancel()
        if not self.state.in_progress:
            return

        state = self.state
        for col in range(state.revealed_columns, REEL_COUNT):
            state = stop_column(state, col)
        summary, _ = self._settle(state)
        logger.info("Round %d settled on cancel: total=%s", state.round_id, summary.total)

    def _on_column_stop(self, round_id: int, col: int):
        if round_id != self.state.round_id or not self.state.in_progress:
            return
        self.state = stop_column(self.state, col)
        logger.debug("Round %d: reel %d stopped.", round_id, col)
        if self.on_column_stop:
            self.on_column_stop(
                col,
                board_column(self.state.board, col),
                board_column(self.state.wild_grid, col),
            )
        if self.state.revealed_columns == REEL_COUNT:
            self._stop_handles = []
            self._resolve()

    def _settle(self, state: RoundState):
        """Evaluates a fully stopped board, credits the win and closes the round."""
        line_wins = evaluate(
            state.board, state.wild_grid, self.payout_table, state.wager, self.paylines
        )
        win_aggregate = aggregate(line_wins)
        summary = summarize(win_aggregate)
        if summary.total > 0:
            self.wallet.credit(summary.total)
        self.state = resolve_round(state, summary)
        return summary, win_aggregate

    def _resolve(self):
        summary, win_aggregate = self._settle(self.state)
        logger.info(
            "Round %d resolved: %d winning line(s), total=%s balance=%s",
            self.state.round_id, len(win_aggregate.line_wins), summary.total, self.wallet.balance
        )
        if self.on_round_resolved:
            self.on_round_resolved(summary)
        self._notify_board_state(BOARD_IDLE)
        self.reveal.start(win_aggregate)

    def _notify_board_state(self, board_state: str):
        if self.on_board_state_change:
            self.on_board_state_change(board_state)
