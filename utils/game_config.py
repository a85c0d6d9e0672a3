"""
Configuration constants for the 5x3 payline slot game.
This includes grid size, symbols, weights, paylines and the payout table.
"""

# --- Game Constants ---
REEL_COUNT, ROW_COUNT = 5, 3
MIN_LINE_MATCH = 3

# --- Symbols & Weights (Rarity) ---
WILD = "doghouse"

PREMIUM_SYMBOLS = ["dog", "milu", "pug", "taxa", "collar", "bone"]
ROYAL_SYMBOLS = ["a", "k", "q", "j", "ten"]
SYMBOLS = PREMIUM_SYMBOLS + ROYAL_SYMBOLS + [WILD]

# Small weights (rarer) -> big weights (more common).
DEFAULT_WEIGHTS = {
    "dog": 1,
    "milu": 2,
    "pug": 3,
    "taxa": 4,
    "collar": 6,
    "bone": 8,
    "a": 10,
    "k": 12,
    "q": 14,
    "j": 16,
    "ten": 18,
    WILD: 2,
}

# Every WILD that lands carries a 2x (70%) or 3x (30%) multiplier.
WILD_MULTIPLIER_WEIGHTS = {2: 70, 3: 30}

# WILD only lands on reels 2, 3 and 4 (zero-based columns).
WILD_REELS = (1, 2, 3)

# --- Paylines ---
# One row index (0 = top, 2 = bottom) per reel.
PAYLINES = (
    (0, 0, 0, 0, 0),
    (1, 1, 1, 1, 1),
    (2, 2, 2, 2, 2),
    (0, 1, 2, 1, 0),
    (2, 1, 0, 1, 2),
    (1, 0, 0, 0, 1),
    (1, 2, 2, 2, 1),
    (0, 0, 1, 2, 2),
    (2, 2, 1, 0, 0),
    (1, 2, 1, 0, 1),
    (1, 0, 1, 2, 1),
    (0, 1, 1, 1, 0),
    (2, 1, 1, 1, 2),
    (0, 1, 0, 1, 0),
    (2, 1, 2, 1, 2),
    (1, 1, 0, 1, 1),
    (1, 1, 2, 1, 1),
    (0, 0, 2, 0, 0),
    (2, 2, 0, 2, 2),
    (0, 2, 2, 2, 0),
    (2, 0, 0, 0, 2),
)

# --- Pay Table (Multiplier x TOTAL bet) ---
# The key is the symbol, then the exact number of matched reels.
PAYOUT_TABLE = {
    # Premium symbols
    "dog": {5: 37.5, 4: 7.5, 3: 2.5},
    "milu": {5: 25.0, 4: 5.0, 3: 1.75},
    "pug": {5: 15.0, 4: 3.0, 3: 1.25},
    "taxa": {5: 10.0, 4: 2.0, 3: 1.0},
    "collar": {5: 7.5, 4: 1.25, 3: 0.6},
    "bone": {5: 5.0, 4: 1.0, 3: 0.4},
    # Royals
    "a": {5: 2.5, 4: 0.5, 3: 0.25},
    "k": {5: 2.5, 4: 0.5, 3: 0.25},
    "q": {5: 1.25, 4: 0.25, 3: 0.1},
    "j": {5: 1.25, 4: 0.25, 3: 0.1},
    "ten": {5: 1.25, 4: 0.25, 3: 0.1},
}

# --- Presentation ---
SYMBOL_EMOJIS = {
    "dog": "🐕",
    "milu": "🐩",
    "pug": "🐶",
    "taxa": "🌭",
    "collar": "📿",
    "bone": "🦴",
    "a": "🅰️",
    "k": "👑",
    "q": "👸",
    "j": "🃏",
    "ten": "🔟",
    WILD: "🏠",
}
