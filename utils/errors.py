"""
Exceptions raised by the slot round engine.
"""


class SlotsError(Exception):
    """Base class for every slot engine error."""


class ConfigurationError(SlotsError, ValueError):
    """The static game configuration (weights, paylines) is unusable."""


class InvalidSampleSize(SlotsError, ValueError):
    """More distinct symbols were requested than the pool holds."""

    def __init__(self, requested: int, available: int):
        super().__init__(
            f"Cannot draw {requested} distinct symbols from a pool of {available}."
        )
        self.requested = requested
        self.available = available


class RoundRejected(SlotsError):
    """A round could not be started. Nothing was debited."""

    reason = "rejected"


class InsufficientBalance(RoundRejected):
    """The wager exceeds the available balance."""

    reason = "insufficient_balance"

    def __init__(self, wager: float, balance: float):
        super().__init__(f"Wager {wager} exceeds available balance {balance}.")
        self.wager = wager
        self.balance = balance


class RoundAlreadyInProgress(RoundRejected):
    """A spin is still resolving."""

    reason = "round_in_progress"

    def __init__(self):
        super().__init__("A round is already in progress.")


class InvalidWager(RoundRejected):
    """The wager is not a positive, finite number."""

    reason = "invalid_wager"

    def __init__(self, wager):
        super().__init__(f"Invalid wager: {wager!r}")
        self.wager = wager
