"""
Central configuration for Doghouse Bot.

Loads environment variables from the .env file and defines the configuration
constants used throughout the application.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _float_list(name, default):
    return [float(x.strip()) for x in os.getenv(name, default).split(',') if x.strip()]


# pylint: disable=too-few-public-methods
class Config:
    """
    Configuration class holding every setting and constant for the bot.
    """
    # Discord Settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    # A comma-separated list of guild IDs for instant command syncing
    DEV_GUILD_IDS = [
        int(x.strip()) for x in os.getenv('DEV_GUILD_IDS', '').split(',') if x.strip()
    ]

    # Currency Settings
    CURRENCY_NAME = os.getenv('CURRENCY_NAME', 'Bone Coin')
    CURRENCY_SYMBOL = os.getenv('CURRENCY_SYMBOL', '$')
    DAILY_REWARD = float(os.getenv('DAILY_REWARD', '100'))
    MAX_STREAK_MULTIPLIER = int(os.getenv('MAX_STREAK_MULTIPLIER', '5'))

    # Database Settings
    DATABASE_PATH = os.getenv('DATABASE_PATH', './data/doghouse_bot.db')

    # Bot Settings
    BOT_NAME = 'Doghouse Bot'
    BOT_VERSION = '1.0.0'
    ACTIVITY_NAME = os.getenv('ACTIVITY_NAME', '/slots to spin')
    LOG_FILE = os.getenv('LOG_FILE', 'doghouse_bot.log')

    # Betting Settings
    # total bet = bet level x coin value x lines
    COIN_VALUES = _float_list('COIN_VALUES', '0.01,0.02,0.05,0.10,0.20,0.50')
    BET_LEVELS = list(range(1, 11))
    LINES = int(os.getenv('LINES', '20'))
    DEFAULT_BET = float(os.getenv('DEFAULT_BET', '2.0'))

    # Spin & Reveal Timing (seconds)
    REEL_BASE_DELAY = float(os.getenv('REEL_BASE_DELAY', '0.6'))
    REEL_COLUMN_DELAY = float(os.getenv('REEL_COLUMN_DELAY', '0.3'))
    REEL_MIN_DELAY = float(os.getenv('REEL_MIN_DELAY', '0.1'))
    TURBO_SPEED = float(os.getenv('TURBO_SPEED', '3'))
    REVEAL_VISIBLE_DURATION = float(os.getenv('REVEAL_VISIBLE_DURATION', '2.5'))
    REVEAL_GAP_DURATION = float(os.getenv('REVEAL_GAP_DURATION', '0.5'))
    # Discord rate limits: stop re-rendering reveals after this many full passes
    REVEAL_MAX_CYCLES = int(os.getenv('REVEAL_MAX_CYCLES', '3'))

    # Colors for embeds
    COLOR_SUCCESS = 0x00ff00
    COLOR_ERROR = 0xff0000
    COLOR_PRIMARY = 0xc8a165  # Doghouse tan

# Create a singleton instance of the config
Config = Config()
