"""Main module for Doghouse Bot, a Discord video slot machine."""

import logging
import logging.config
import os
from typing import Literal, Optional

import discord
from discord import app_commands
from discord.ext import commands

from config import Config
from database.database_manager import DatabaseManager
from utils.embed_utils import create_error_embed

# --- Logging Setup ---
logging.config.dictConfig({
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '[%(asctime)s] [%(levelname)-5s] [%(name)-20s] --- %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'default',
            'level': 'INFO',
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'default',
            'level': 'INFO',
            'filename': Config.LOG_FILE,
            'maxBytes': 1024*1024*5, # 5 MB
            'backupCount': 5,
            'encoding': 'utf-8',
        },
    },
    'root': {
        'handlers': ['console', 'file'],
        'level': 'INFO',
    }
})
logger = logging.getLogger(__name__)

# --- Bot Initialization ---
class DoghouseBot(commands.Bot):
    """
    Main bot class: owns the balance database and loads the cogs.
    """
    def __init__(self):
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(command_prefix="!", intents=intents)
        self.db = DatabaseManager(Config.DATABASE_PATH)

    async def setup_hook(self):
        """
        Connects the database, loads every cog and syncs dev guild commands.
        """
        logger.info("--- Starting Bot Setup ---")

        db_dir = os.path.dirname(Config.DATABASE_PATH)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        await self.db.initialize()
        logger.info("Successfully connected to the database.")

        # Load cogs recursively
        cogs_loaded = 0
        cogs_path = "cogs"
        for root, _, files in os.walk(cogs_path):
            for filename in files:
                if filename.endswith(".py") and not filename.startswith("__"):
                    # Construct the full cog path like 'cogs.games.slots'
                    relative_path = os.path.relpath(root, start=os.getcwd())
                    module_path = os.path.join(relative_path, filename[:-3]).replace(os.sep, '.')

                    try:
                        await self.load_extension(module_path)
                        logger.info("Successfully loaded cog: %s", module_path)
                        cogs_loaded += 1
                    except commands.ExtensionError as e:
                        logger.error("Failed to load cog %s: %s", module_path, e, exc_info=True)

        logger.info("--- Loaded %s cogs ---", cogs_loaded)

        for guild_id in Config.DEV_GUILD_IDS:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            try:
                synced = await self.tree.sync(guild=guild)
                logger.info("Synced %d commands to dev guild %s.", len(synced), guild_id)
            except discord.HTTPException as e:
                logger.error("Failed to sync commands to dev guild %s: %s", guild_id, e)

        logger.info("--- Bot Setup Complete ---")

    async def on_ready(self):
        """
        Called once the bot is connected to Discord.
        """
        await self.change_presence(activity=discord.Game(name=Config.ACTIVITY_NAME))
        logger.info('Logged in as %s (ID: %s)', self.user, self.user.id)
        logger.info('%s v%s is ready and online!', Config.BOT_NAME, Config.BOT_VERSION)

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Fallback error handler for every slash command."""
        command_name = interaction.command.name if interaction.command else "unknown"
        logger.error(
            "Error in command '%s': %s", command_name, error, exc_info=True
        )

        user_error_message = "Something unexpected went wrong. Please try again later."

        if isinstance(error, app_commands.errors.CommandOnCooldown):
            user_error_message = (
                f"This command is on cooldown. "
                f"Try again in {error.retry_after:.1f} seconds."
            )
        elif isinstance(error, app_commands.errors.MissingPermissions):
            user_error_message = "You don't have permission to use this command."
        elif isinstance(error, app_commands.errors.CheckFailure):
            user_error_message = "You can't use this command right now."

        embed = create_error_embed(user_error_message)

        try:
            # Use followup if the initial response has already been sent
            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except discord.HTTPException as e:
            logger.error("Failed to send error message to interaction: %s", e)

    async def close(self):
        """
        Releases resources before the connection closes.
        """
        logger.info("Closing bot connection...")
        await self.db.close()
        await super().close()

bot = DoghouseBot()
bot.tree.on_error = bot.on_app_command_error

@bot.command()
@commands.guild_only()
@commands.is_owner()
async def sync(
    ctx: commands.Context,
    guilds: commands.Greedy[discord.Object],
    spec: Optional[Literal["~", "*", "^"]] = None
) -> None:
    """
    Syncs application (slash) commands with Discord. Owner only.

    Usage:
    - `!sync`: sync global commands.
    - `!sync ~`: sync commands to the current guild.
    - `!sync *`: copy global commands to the current guild and sync.
    - `!sync ^`: clear the current guild's commands and sync.
    - `!sync <guild_id_1> <guild_id_2>`: sync the given guilds.
    """
    if not guilds:
        if spec == "~":
            synced = await ctx.bot.tree.sync(guild=ctx.guild)
            await ctx.send(f"Synced {len(synced)} commands to the current guild.")
        elif spec == "*":
            ctx.bot.tree.copy_global_to(guild=ctx.guild)
            synced = await ctx.bot.tree.sync(guild=ctx.guild)
            await ctx.send(
                f"Copied and synced {len(synced)} commands to the current guild."
            )
        elif spec == "^":
            ctx.bot.tree.clear_commands(guild=ctx.guild)
            await ctx.bot.tree.sync(guild=ctx.guild)
            await ctx.send("Cleared all commands from the current guild.")
        else:
            synced = await ctx.bot.tree.sync()
            await ctx.send(f"Synced {len(synced)} commands globally.")
        return

    synced_count = 0
    for guild in guilds:
        try:
            await ctx.bot.tree.sync(guild=guild)
            logger.info("Synced commands for guild %s.", guild.id)
            synced_count += 1
        except discord.HTTPException as e:
            logger.error("Failed to sync commands to guild %s: %s", guild.id, e)

    await ctx.send(f"Synced commands for {synced_count}/{len(guilds)} specified guilds.")


if __name__ == "__main__":
    if Config.DISCORD_TOKEN is None:
        raise ValueError("DISCORD_TOKEN environment variable not set.")
    bot.run(Config.DISCORD_TOKEN)
