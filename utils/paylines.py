"""
Payline evaluation and win aggregation for a finished board.

Both functions are pure: evaluating the same board twice gives the same records,
and no randomness is consumed here.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from utils.game_config import MIN_LINE_MATCH, PAYLINES, PAYOUT_TABLE, WILD

logger = logging.getLogger(__name__)

Cell = tuple[int, int]  # (row, col)


@dataclass(frozen=True)
class LineWinRecord:
    """A single winning payline."""
    line_index: int
    symbol: str
    count: int
    base_amount: float
    wild_multipliers: tuple[int, ...]
    wild_factor: int
    amount: float
    cells: tuple[Cell, ...]

    def to_item(self) -> dict:
        return {"symbol": self.symbol, "count": self.count, "amount": self.amount}


@dataclass(frozen=True)
class WinAggregate:
    """Line wins grouped by base symbol, ready to be revealed."""
    round_total: float
    win_cells_by_symbol: dict[str, frozenset] = field(default_factory=dict)
    best_win_by_symbol: dict[str, LineWinRecord] = field(default_factory=dict)
    ordered_symbol_keys: tuple[str, ...] = ()
    line_wins: tuple[LineWinRecord, ...] = ()

    @property
    def has_wins(self) -> bool:
        return bool(self.line_wins)


@dataclass(frozen=True)
class RoundSummary:
    """What a round paid, for the balance holder and compact displays."""
    total: float
    items: tuple[dict, ...] = ()

    @property
    def best(self) -> Optional[dict]:
        return self.items[0] if self.items else None

    def to_dict(self) -> dict:
        return {"total": self.total, "items": [dict(item) for item in self.items]}


def _base_symbol(sequence) -> Optional[str]:
    """The first non-wild symbol on a line, or None for an all-wild line."""
    for symbol in sequence:
        if symbol != WILD:
            return symbol
    return None


def evaluate_line(line_index, line, board, wild_grid, payout_table, wager) -> Optional[LineWinRecord]:
    """Evaluates one payline. Returns None when the line does not pay."""
    sequence = [board[row][col] for col, row in enumerate(line)]
    symbol = _base_symbol(sequence)
    if symbol is None:
        return None

    count = 0
    for cell_symbol in sequence:
        if cell_symbol != symbol and cell_symbol != WILD:
            break
        count += 1
    if count < MIN_LINE_MATCH:
        return None

    multiplier = payout_table.get(symbol, {}).get(count)
    if multiplier is None:
        # Exact tier lookup: no credit from a shorter tier.
        logger.debug("No %s-tier payout for %s on line %s.", count, symbol, line_index)
        return None

    cells = tuple((line[col], col) for col in range(count))
    wild_multipliers = tuple(
        wild_grid[row][col] for row, col in cells
        if board[row][col] == WILD and wild_grid[row][col]
    )
    wild_factor = sum(wild_multipliers) if wild_multipliers else 1
    base_amount = multiplier * wager
    return LineWinRecord(
        line_index=line_index,
        symbol=symbol,
        count=count,
        base_amount=base_amount,
        wild_multipliers=wild_multipliers,
        wild_factor=wild_factor,
        amount=base_amount * wild_factor,
        cells=cells,
    )


def evaluate(board, wild_grid, payout_table=PAYOUT_TABLE, wager: float = 1.0,
             paylines=PAYLINES) -> list[LineWinRecord]:
    """Evaluates every payline independently. Overlapping lines all pay."""
    wins = []
    for line_index, line in enumerate(paylines):
        record = evaluate_line(line_index, line, board, wild_grid, payout_table, wager)
        if record is not None:
            wins.append(record)
    return wins


def aggregate(line_wins) -> WinAggregate:
    """Groups line wins by base symbol."""
    cells_by_symbol: dict[str, set] = {}
    best_by_symbol: dict[str, LineWinRecord] = {}
    total = 0.0
    for win in line_wins:
        total += win.amount
        cells_by_symbol.setdefault(win.symbol, set()).update(win.cells)
        best = best_by_symbol.get(win.symbol)
        if best is None or win.amount > best.amount:
            best_by_symbol[win.symbol] = win

    return WinAggregate(
        round_total=total,
        win_cells_by_symbol={s: frozenset(c) for s, c in cells_by_symbol.items()},
        best_win_by_symbol=best_by_symbol,
        ordered_symbol_keys=tuple(sorted(cells_by_symbol)),
        line_wins=tuple(line_wins),
    )


def summarize(win_aggregate: WinAggregate) -> RoundSummary:
    """Builds the round summary. Items are every line win, biggest first."""
    items = sorted(
        (win.to_item() for win in win_aggregate.line_wins),
        key=lambda item: item["amount"],
        reverse=True,
    )
    return RoundSummary(total=win_aggregate.round_total, items=tuple(items))
