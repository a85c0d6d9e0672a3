"""
Utility functions for creating standardized Discord embeds.
"""
import discord
from config import Config
from utils.game_config import SYMBOL_EMOJIS, WILD

HIDDEN_CELL = "⬛"
DIMMED_CELL = "▫️"
MULTIPLIER_BADGES = {2: "2️⃣", 3: "3️⃣"}


def create_embed(title, description, color=Config.COLOR_PRIMARY, **kwargs):
    """Creates a standard Discord embed."""
    embed = discord.Embed(title=title, description=description, color=color, **kwargs)
    embed.set_footer(text=f"{Config.BOT_NAME} v{Config.BOT_VERSION}")
    return embed

def create_error_embed(description):
    """Creates a standard error embed."""
    return create_embed("Error", description, color=Config.COLOR_ERROR)

def create_success_embed(description):
    """Creates a standard success embed."""
    return create_embed("Success", description, color=Config.COLOR_SUCCESS)

def format_currency(amount):
    """Formats a number into a currency string."""
    return f"{Config.CURRENCY_SYMBOL}{amount:,.2f}"

def render_board(board, wild_grid=None, highlight=None):
    """
    Renders a [row][col] board as an emoji grid.
    Unrevealed cells (None) are blank; when highlight is a set of (row, col)
    cells, everything else is dimmed. WILD multipliers follow each row.
    """
    lines = []
    for r, row in enumerate(board):
        cells = []
        badges = []
        for c, symbol in enumerate(row):
            if symbol is None:
                cells.append(HIDDEN_CELL)
                continue
            if highlight is not None and (r, c) not in highlight:
                cells.append(DIMMED_CELL)
            else:
                cells.append(SYMBOL_EMOJIS.get(symbol, symbol))
            if symbol == WILD and wild_grid and wild_grid[r][c]:
                badges.append(MULTIPLIER_BADGES.get(wild_grid[r][c], f"x{wild_grid[r][c]}"))
        line = " ".join(cells)
        if badges:
            line += "  " + " ".join(badges)
        lines.append(line)
    return "\n".join(lines)
