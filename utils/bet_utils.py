"""
The bet ladder: total bet = bet level x coin value x lines.
"""
from config import Config


def total_bet(bet: int, coin_index: int, coin_values=None, lines=None) -> float:
    """Total wager for one bet level and coin value."""
    coin_values = coin_values or Config.COIN_VALUES
    lines = lines or Config.LINES
    return round(bet * coin_values[coin_index] * lines, 2)


def bet_ladder(coin_values=None, bet_levels=None, lines=None) -> list[dict]:
    """Every (bet, coin) combination, sorted by total bet."""
    coin_values = coin_values or Config.COIN_VALUES
    bet_levels = bet_levels or Config.BET_LEVELS
    combos = [
        {
            "bet": bet,
            "coin_index": coin_index,
            "total_bet": total_bet(bet, coin_index, coin_values, lines),
        }
        for coin_index in range(len(coin_values))
        for bet in bet_levels
    ]
    return sorted(combos, key=lambda c: (c["total_bet"], c["coin_index"]))


def ladder_totals(**kwargs) -> list[float]:
    """Distinct total bets available, ascending."""
    return sorted({c["total_bet"] for c in bet_ladder(**kwargs)})


def is_valid_bet(amount: float, **kwargs) -> bool:
    return round(amount, 2) in ladder_totals(**kwargs)


def step_bet(amount: float, direction: int, **kwargs) -> float:
    """
    Moves one rung up (direction > 0) or down (direction < 0) the ladder.
    Stays on the first/last rung at the ends.
    """
    totals = ladder_totals(**kwargs)
    if direction > 0:
        return next((t for t in totals if t > amount), totals[-1])
    return next((t for t in reversed(totals) if t < amount), totals[0])


def min_bet(**kwargs) -> float:
    return ladder_totals(**kwargs)[0]


def max_bet(**kwargs) -> float:
    return ladder_totals(**kwargs)[-1]
