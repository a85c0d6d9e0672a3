"""
Timed reveal of a round's winning lines.

The sequencer shows every win at once (ALL), then each winning symbol group in
turn (ONE), and loops back to ALL until it is cancelled by the next spin. It owns
a single timer handle; scheduling a new step always replaces the previous one.
"""
import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from utils.paylines import WinAggregate

logger = logging.getLogger(__name__)

PHASE_NONE = "none"
PHASE_ALL = "all"
PHASE_ONE = "one"


@dataclass(frozen=True)
class SymbolDetail:
    """What is shown while one symbol group is highlighted."""
    symbol: str
    cells: tuple[tuple[int, int], ...]
    wild_multipliers: tuple[int, ...]
    count: int
    amount: float

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "cells": [list(cell) for cell in self.cells],
            "wild_multipliers": list(self.wild_multipliers),
            "count": self.count,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class RevealEvent:
    """A display-phase event for the presentation layer."""
    phase: str
    visible: bool
    active_symbol: Optional[str] = None
    detail: Optional[SymbolDetail] = None
    cells: Optional[tuple[tuple[int, int], ...]] = None
    round_total: Optional[float] = None
    is_first_pass: Optional[bool] = None
    replay: int = 0

    def to_dict(self) -> dict:
        data = {"phase": self.phase, "visible": self.visible, "replay": self.replay}
        if self.active_symbol is not None:
            data["active_symbol"] = self.active_symbol
        if self.detail is not None:
            data["detail"] = self.detail.to_dict()
        if self.cells is not None:
            data["cells"] = [list(cell) for cell in self.cells]
        if self.round_total is not None:
            data["round_total"] = self.round_total
        if self.is_first_pass is not None:
            data["is_first_pass"] = self.is_first_pass
        return data


@dataclass(frozen=True)
class RevealState:
    """
    Current phase of the sequencer.
    all_replay and one_replay only ever grow, so two identical consecutive
    events can still be told apart by the renderer.
    """
    phase: str = PHASE_NONE
    active_symbol: Optional[str] = None
    visible: bool = False
    index: int = -1
    passes: int = 0
    all_replay: int = 0
    one_replay: int = 0


class RevealSequencer:
    """Finite-state machine driving the win reveal loop."""

    def __init__(
        self,
        scheduler,
        on_event: Optional[Callable[[RevealEvent], None]] = None,
        visible_duration: float = 2.0,
        gap_duration: float = 0.4,
    ):
        self.scheduler = scheduler
        self.on_event = on_event
        self.visible_duration = visible_duration
        self.gap_duration = gap_duration
        self.state = RevealState()
        self._aggregate: Optional[WinAggregate] = None
        self._timer = None
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._aggregate is not None

    def start(self, win_aggregate: WinAggregate):
        """Starts the loop for a freshly resolved round."""
        self._stop_timer()
        if not win_aggregate.has_wins:
            self._aggregate = None
            self._force_idle()
            return

        self._aggregate = win_aggregate
        self.state = replace(self.state, passes=0)
        logger.debug(
            "Reveal started for %d symbol group(s).", len(win_aggregate.ordered_symbol_keys)
        )
        self._enter_all()

    def reset(self):
        """Cancels the loop and tells the presentation layer to hide everything."""
        was_idle = self.state.phase == PHASE_NONE and not self.state.visible
        self.cancel()
        if not was_idle:
            self._emit(RevealEvent(phase=PHASE_NONE, visible=False))

    def cancel(self):
        """Stops every pending step. No further events are emitted."""
        self._stop_timer()
        self._aggregate = None
        self.state = replace(
            self.state, phase=PHASE_NONE, active_symbol=None, visible=False, index=-1
        )

    # --- Transitions ---
    def _force_idle(self):
        self.state = replace(
            self.state, phase=PHASE_NONE, active_symbol=None, visible=False, index=-1
        )
        self._emit(RevealEvent(phase=PHASE_NONE, visible=False))

    def _enter_all(self):
        self.state = replace(
            self.state,
            phase=PHASE_ALL,
            active_symbol=None,
            visible=True,
            index=-1,
            passes=self.state.passes + 1,
            all_replay=self.state.all_replay + 1,
        )
        self._emit(RevealEvent(
            phase=PHASE_ALL,
            visible=True,
            cells=self._all_cells(),
            round_total=self._aggregate.round_total,
            is_first_pass=self.state.passes == 1,
            replay=self.state.all_replay,
        ))
        self._schedule(self.visible_duration, self._hide)

    def _enter_one(self, index: int):
        symbol = self._aggregate.ordered_symbol_keys[index]
        detail = self._detail_for(symbol)
        self.state = replace(
            self.state,
            phase=PHASE_ONE,
            active_symbol=symbol,
            visible=True,
            index=index,
            one_replay=self.state.one_replay + 1,
        )
        self._emit(RevealEvent(
            phase=PHASE_ONE,
            visible=True,
            active_symbol=symbol,
            detail=detail,
            cells=detail.cells,
            replay=self.state.one_replay,
        ))
        self._schedule(self.visible_duration, self._hide)

    def _hide(self):
        self.state = replace(self.state, visible=False)
        replay = self.state.all_replay if self.state.phase == PHASE_ALL else self.state.one_replay
        self._emit(RevealEvent(
            phase=self.state.phase,
            visible=False,
            active_symbol=self.state.active_symbol,
            replay=replay,
        ))
        self._schedule(self.gap_duration, self._advance)

    def _advance(self):
        next_index = self.state.index + 1
        if next_index >= len(self._aggregate.ordered_symbol_keys):
            self._enter_all()
        else:
            self._enter_one(next_index)

    # --- Helpers ---
    def _all_cells(self) -> tuple:
        cells = set()
        for symbol_cells in self._aggregate.win_cells_by_symbol.values():
            cells.update(symbol_cells)
        return tuple(sorted(cells))

    def _detail_for(self, symbol: str) -> SymbolDetail:
        best = self._aggregate.best_win_by_symbol[symbol]
        return SymbolDetail(
            symbol=symbol,
            cells=tuple(sorted(self._aggregate.win_cells_by_symbol[symbol])),
            wild_multipliers=best.wild_multipliers,
            count=best.count,
            amount=best.amount,
        )

    def _schedule(self, delay: float, step):
        self._stop_timer()
        generation = self._generation
        self._timer = self.scheduler.call_later(delay, self._fire, generation, step)

    def _fire(self, generation: int, step):
        if generation != self._generation or self._aggregate is None:
            return
        self._timer = None
        step()

    def _stop_timer(self):
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _emit(self, event: RevealEvent):
        logger.debug("Reveal event: %s", event.to_dict())
        if self.on_event:
            self.on_event(event)
