"""
What the slots message says: banner, subline and highlighted cells, updated
from RoundController callbacks. Kept free of Discord objects so it can run on
a virtual clock.
"""
from typing import Optional

from utils.embed_utils import format_currency
from utils.game_config import SYMBOL_EMOJIS
from utils.paylines import RoundSummary
from utils.reveal import PHASE_ALL, PHASE_NONE, PHASE_ONE, RevealEvent
from utils.round_state import BOARD_SPINNING

# What the caller should do after a reveal event.
RENDER = "render"
FREEZE = "freeze"
SKIP = "skip"


def item_line(item: dict) -> str:
    emoji = SYMBOL_EMOJIS.get(item["symbol"], item["symbol"])
    return f"{item['count']}x {emoji} PAYS {format_currency(item['amount'])}"


class SlotDisplay:
    """Text and highlight state for one machine."""

    def __init__(self, max_reveal_cycles: int):
        self.max_reveal_cycles = max_reveal_cycles
        self.banner = "PLACE YOUR BET!"
        self.subline = ""
        self.highlight: Optional[set] = None
        self.last_summary: Optional[RoundSummary] = None
        self.reveal_passes = 0

    @property
    def won(self) -> bool:
        return self.last_summary is not None and self.last_summary.total > 0

    def board_state_changed(self, board_state: str):
        if board_state != BOARD_SPINNING:
            return
        self.banner = "GOOD LUCK!"
        self.subline = ""
        self.highlight = None
        self.last_summary = None
        self.reveal_passes = 0

    def round_resolved(self, summary: RoundSummary):
        self.last_summary = summary
        if summary.total > 0:
            self.banner = f"WIN {format_currency(summary.total)}"
            self.subline = item_line(summary.items[0]) if len(summary.items) == 1 else "WINNER"
        else:
            self.banner = "NO WIN"
            self.subline = "Spin again!"

    def reveal_event(self, event: RevealEvent) -> str:
        """
        Applies a reveal event. Returns RENDER when the message should be
        edited, SKIP when nothing visible changed, and FREEZE once the loop has
        run max_reveal_cycles full passes: the caller should stop the reveal,
        which is left on the full win picture.
        """
        if event.phase == PHASE_NONE:
            self.highlight = None
            return SKIP
        if not event.visible:
            return SKIP

        if event.phase == PHASE_ALL:
            self.reveal_passes += 1
            if self.reveal_passes > self.max_reveal_cycles:
                self.highlight = set(event.cells)
                return FREEZE
            if not event.is_first_pass:
                self.subline = f"round pays {format_currency(event.round_total)}"
        elif event.phase == PHASE_ONE:
            detail = event.detail
            self.subline = item_line(
                {"symbol": detail.symbol, "count": detail.count, "amount": detail.amount}
            )
            if detail.wild_multipliers:
                self.subline += " (WILD " + " + ".join(f"x{m}" for m in detail.wild_multipliers) + ")"
        self.highlight = set(event.cells or ())
        return RENDER
