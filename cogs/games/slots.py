"""
A cog for The Doghouse: a 5x3 video slot played in a single, live-edited embed.
"""
import asyncio
import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from config import Config
from utils.bet_utils import is_valid_bet, max_bet, min_bet, step_bet
from utils.embed_utils import create_embed, create_error_embed, format_currency, render_board
from utils.paylines import RoundSummary
from utils.reveal import RevealEvent
from utils.round_controller import ReelTiming, RoundController, Wallet
from utils.slot_display import FREEZE, SKIP, SlotDisplay

logger = logging.getLogger(__name__)

SESSION_TIMEOUT = 180  # seconds without a button press

REJECTION_MESSAGES = {
    "insufficient_balance": "You don't have enough to cover that bet. Try /daily.",
    "round_in_progress": "Your reels are still spinning!",
    "invalid_wager": "That bet is not allowed.",
}


class PersistentWallet(Wallet):
    """A Wallet whose every change is written through to the database."""

    def __init__(self, db, user_id: int, balance: float):
        super().__init__(balance, on_change=self._persist)
        self.db = db
        self.user_id = user_id
        self._pending: set[asyncio.Task] = set()

    def _persist(self, delta: float, _balance: float):
        task = asyncio.get_running_loop().create_task(self.db.update_balance(self.user_id, delta))
        self._pending.add(task)
        task.add_done_callback(self._on_persisted)

    def _on_persisted(self, task: asyncio.Task):
        self._pending.discard(task)
        if task.cancelled():
            return
        if task.exception():
            logger.error("Balance write for user %d failed: %s", self.user_id, task.exception())
        elif not task.result():
            logger.error("Balance write for user %d was refused.", self.user_id)

    async def sync(self):
        """Waits for outstanding writes, then reloads the stored balance."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        self.balance = await self.db.get_user_balance(self.user_id)


class SlotsView(discord.ui.View):
    """Spin, Turbo and bet controls for a slot session."""

    def __init__(self, session):
        super().__init__(timeout=SESSION_TIMEOUT)
        self.session = session
        self.refresh()

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        """Ensures only the session's player can press the buttons."""
        if interaction.user.id == self.session.player.id:
            return True
        await interaction.response.send_message(
            "This isn't your machine! Start your own with /slots.", ephemeral=True
        )
        return False

    async def on_timeout(self):
        await self.session.close()

    def refresh(self):
        """Syncs button states with the session."""
        spinning = self.session.controller.in_progress
        self.spin_button.disabled = spinning
        self.bet_down_button.disabled = spinning or self.session.total_bet <= min_bet()
        self.bet_up_button.disabled = spinning or self.session.total_bet >= max_bet()
        self.turbo_button.style = (
            discord.ButtonStyle.green if self.session.turbo else discord.ButtonStyle.grey
        )

    def disable_all(self):
        for item in self.children:
            item.disabled = True
        self.stop()

    @discord.ui.button(label="−", style=discord.ButtonStyle.grey)
    async def bet_down_button(self, interaction: discord.Interaction, _: discord.ui.Button):
        """Lowers the bet one rung."""
        await interaction.response.defer()
        await self.session.change_bet(-1)

    @discord.ui.button(label="Spin", style=discord.ButtonStyle.green, emoji="🎰")
    async def spin_button(self, interaction: discord.Interaction, _: discord.ui.Button):
        """Starts a spin with the current bet."""
        await interaction.response.defer()
        await self.session.spin(interaction)

    @discord.ui.button(label="+", style=discord.ButtonStyle.grey)
    async def bet_up_button(self, interaction: discord.Interaction, _: discord.ui.Button):
        """Raises the bet one rung."""
        await interaction.response.defer()
        await self.session.change_bet(1)

    @discord.ui.button(label="Turbo", style=discord.ButtonStyle.grey, emoji="⚡")
    async def turbo_button(self, interaction: discord.Interaction, _: discord.ui.Button):
        """Toggles turbo reel stops."""
        await interaction.response.defer()
        await self.session.toggle_turbo()


class SlotSession:
    """
    One player's machine. Owns a RoundController driven by the event loop and
    turns its callbacks into edits of a single message.
    """

    def __init__(self, player: discord.abc.User, wallet: PersistentWallet, total_bet: float, turbo: bool = False):
        self.player = player
        self.wallet = wallet
        self.total_bet = total_bet
        self.turbo = turbo
        self.message: Optional[discord.Message] = None
        self.closed = False

        self.controller = RoundController(
            wallet,
            scheduler=asyncio.get_running_loop(),
            timing=ReelTiming(
                base_delay=Config.REEL_BASE_DELAY,
                column_delay=Config.REEL_COLUMN_DELAY,
                min_delay=Config.REEL_MIN_DELAY,
                turbo_speed=Config.TURBO_SPEED,
                reveal_visible=Config.REVEAL_VISIBLE_DURATION,
                reveal_gap=Config.REVEAL_GAP_DURATION,
            ),
            on_board_state_change=self.on_board_state_change,
            on_column_stop=self.on_column_stop,
            on_round_resolved=self.on_round_resolved,
            on_reveal_event=self.on_reveal_event,
        )
        self.view = SlotsView(self)

        self.display = SlotDisplay(max_reveal_cycles=Config.REVEAL_MAX_CYCLES)
        self._render_task: Optional[asyncio.Task] = None
        self._dirty = False
        self._spin_lock = asyncio.Lock()

    # --- Player actions ---
    async def spin(self, interaction: Optional[discord.Interaction] = None) -> bool:
        """Starts a round, reporting a rejection to the player."""
        async with self._spin_lock:
            if self.closed:
                return False
            if not self.controller.in_progress:
                await self.wallet.sync()
            if self.controller.start_round(self.total_bet, turbo=self.turbo):
                return True
            rejection = self.controller.last_rejection

        message = REJECTION_MESSAGES.get(rejection.reason, str(rejection))
        if interaction is not None:
            await interaction.followup.send(embed=create_error_embed(message), ephemeral=True)
        return False

    async def change_bet(self, direction: int):
        if self.controller.in_progress:
            return
        self.total_bet = step_bet(self.total_bet, direction)
        self.request_render()

    async def toggle_turbo(self):
        self.turbo = not self.turbo
        self.request_render()

    async def close(self):
        """Stops the reveal loop and freezes the message, settling any spin."""
        if self.closed:
            return
        self.closed = True
        spinning = self.controller.in_progress
        self.controller.cancel()
        if spinning:
            self.display.round_resolved(self.controller.state.summary)
        self.display.highlight = None
        self.view.disable_all()
        self.request_render()
        logger.info("Slot session for %s closed.", self.player)

    # --- Controller callbacks ---
    def on_board_state_change(self, board_state: str):
        self.display.board_state_changed(board_state)
        self.request_render()

    def on_column_stop(self, _col: int, _symbols, _multipliers):
        self.request_render()

    def on_round_resolved(self, summary: RoundSummary):
        self.display.round_resolved(summary)

    def on_reveal_event(self, event: RevealEvent):
        action = self.display.reveal_event(event)
        if action == FREEZE:
            self.controller.cancel()
        if action != SKIP:
            self.request_render()

    # --- Rendering ---
    def build_embed(self) -> discord.Embed:
        state = self.controller.state
        description = f"**{self.display.banner}**"
        if self.display.subline:
            description += f"\n{self.display.subline}"
        description += "\n\n" + render_board(state.board, state.wild_grid, self.display.highlight)

        embed = create_embed(
            title="🏠 The Doghouse 🏠",
            description=description,
            color=Config.COLOR_SUCCESS if self.display.won else Config.COLOR_PRIMARY,
        )
        embed.add_field(name="Bet", value=format_currency(self.total_bet), inline=True)
        embed.add_field(name="Balance", value=format_currency(self.wallet.balance), inline=True)
        embed.add_field(name="Turbo", value="On" if self.turbo else "Off", inline=True)
        embed.set_author(name=self.player.display_name, icon_url=self.player.display_avatar.url)
        return embed

    def request_render(self):
        """Schedules a message edit, coalescing bursts into the latest state."""
        if self.message is None:
            return
        if self._render_task is not None and not self._render_task.done():
            self._dirty = True
            return
        self._render_task = asyncio.get_running_loop().create_task(self._render())

    async def _render(self):
        while True:
            self._dirty = False
            if not self.closed:
                self.view.refresh()
            try:
                await self.message.edit(embed=self.build_embed(), view=self.view)
            except discord.HTTPException as e:
                logger.warning("Failed to update slots message for %s: %s", self.player, e)
                return
            if not self._dirty:
                return


class SlotsCog(commands.Cog, name="Slots"):
    """Cog for the slots game command."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.db = bot.db
        self.sessions: dict[int, SlotSession] = {}

    async def cog_unload(self):
        for session in list(self.sessions.values()):
            await session.close()
        self.sessions.clear()

    @app_commands.command(name="slots", description="Spin The Doghouse reels.")
    @app_commands.describe(
        total_bet="Total bet per spin (bet level x coin value x 20 lines).",
        turbo="Stop the reels three times faster."
    )
    async def slots(
        self, interaction: discord.Interaction,
        total_bet: Optional[float] = None, turbo: bool = False
    ):
        """Opens a slot machine for the player and spins once."""
        amount = Config.DEFAULT_BET if total_bet is None else round(total_bet, 2)
        if not is_valid_bet(amount):
            await interaction.response.send_message(
                embed=create_error_embed(
                    f"Pick a bet on the ladder between {format_currency(min_bet())} "
                    f"and {format_currency(max_bet())}."
                ),
                ephemeral=True
            )
            return

        user = interaction.user
        previous = self.sessions.get(user.id)
        if previous is not None and previous.controller.in_progress:
            await interaction.response.send_message(
                embed=create_error_embed(REJECTION_MESSAGES["round_in_progress"]), ephemeral=True
            )
            return

        await interaction.response.defer()
        if previous is not None:
            await previous.close()

        await self.db.add_or_update_user(user)
        balance = await self.db.get_user_balance(user.id)
        wallet = PersistentWallet(self.db, user.id, balance)
        session = SlotSession(user, wallet, amount, turbo=turbo)
        session.message = await interaction.followup.send(
            embed=session.build_embed(), view=session.view, wait=True
        )
        self.sessions[user.id] = session
        await session.spin(interaction)

    @slots.error
    async def slots_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Handles errors for the slots command."""
        logger.error("An unexpected error occurred in slots command: %s", error, exc_info=True)
        if not interaction.response.is_done():
            await interaction.response.send_message(
                embed=create_error_embed("Something went wrong."), ephemeral=True
            )


async def setup(bot: commands.Bot):
    """Sets up the cog."""
    await bot.add_cog(SlotsCog(bot))
