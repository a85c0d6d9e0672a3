"""
The slot wallet's credit source: a daily allowance of bone coins with a streak
bonus, and a balance check.
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

import aiosqlite
import discord
from discord import app_commands
from discord.ext import commands

from config import Config
from utils.embed_utils import create_embed, create_error_embed, create_success_embed, format_currency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyReward:
    streak: int
    base: float
    bonus: float

    @property
    def total(self) -> float:
        return self.base + self.bonus


def next_streak(claim_info: Optional[tuple], today: date) -> Optional[int]:
    """
    The streak a claim made today would land on, or None if the player has
    already claimed today. claim_info is the stored (last_claim_date, streak).
    """
    if not claim_info:
        return 1
    last_claim, streak = claim_info
    last_claim = date.fromisoformat(str(last_claim))
    if last_claim >= today:
        return None
    if last_claim == today - timedelta(days=1):
        return streak + 1
    return 1


def daily_reward(streak: int) -> DailyReward:
    """Each consecutive day adds a tenth of the base, up to MAX_STREAK_MULTIPLIER tenths."""
    base = Config.DAILY_REWARD
    steps = min(streak - 1, Config.MAX_STREAK_MULTIPLIER)
    return DailyReward(streak=streak, base=base, bonus=steps * base / 10)


def spins_left(balance: float) -> int:
    """How many spins at the default bet a balance still covers."""
    return int(balance // Config.DEFAULT_BET)


class Economy(commands.Cog):
    """Tops up and reports the balance the slots play from."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.db = bot.db

    @app_commands.command(name="daily", description=f"Collect today's {Config.CURRENCY_NAME} allowance.")
    async def daily(self, interaction: discord.Interaction):
        await interaction.response.defer(ephemeral=True)
        player = interaction.user
        await self.db.add_or_update_user(player)

        today = date.today()
        try:
            streak = next_streak(await self.db.get_daily_claim_info(player.id), today)
            if streak is None:
                await interaction.followup.send(
                    embed=create_error_embed("Today's allowance is already in your wallet. Back tomorrow!")
                )
                return

            reward = daily_reward(streak)
            if not await self.db.update_balance(player.id, reward.total):
                await interaction.followup.send(
                    embed=create_error_embed("Your allowance could not be paid in. Try again shortly.")
                )
                return
            await self.db.update_daily_claim(player.id, today.isoformat(), streak)
            logger.info("User %d collected %s (streak %d).", player.id, reward.total, streak)
        except (discord.HTTPException, aiosqlite.Error) as e:
            logger.error("/daily failed for user %d: %s", player.id, e)
            await interaction.followup.send(
                embed=create_error_embed("Something went wrong. Please try again later.")
            )
            return

        embed = create_success_embed(f"**{format_currency(reward.total)}** added to your wallet.")
        if reward.bonus > 0:
            embed.add_field(name="Streak Bonus", value=format_currency(reward.bonus), inline=True)
        embed.add_field(name="Streak", value=f"🐾 {streak} day(s)", inline=True)
        await interaction.followup.send(embed=embed)

    @app_commands.command(name="balance", description="Show a wallet balance.")
    @app_commands.describe(user="Whose wallet to show (defaults to yours).")
    async def balance(self, interaction: discord.Interaction, user: Optional[discord.Member] = None):
        await interaction.response.defer(ephemeral=True)
        owner = user or interaction.user
        await self.db.add_or_update_user(owner)
        amount = await self.db.get_user_balance(owner.id)

        embed = create_embed(
            title=f"🦴 {owner.display_name}'s wallet",
            description=f"**{format_currency(amount)}**"
        )
        embed.add_field(
            name="Spins left",
            value=f"{spins_left(amount)} at {format_currency(Config.DEFAULT_BET)}",
            inline=True
        )
        await interaction.followup.send(embed=embed)


async def setup(bot: commands.Bot):
    await bot.add_cog(Economy(bot))
