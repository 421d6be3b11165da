"""Exceptions raised by the blackjack engine.

Every error is raised before any state is mutated, so callers can simply
report it and ask again.
"""


class BlackjackError(Exception):
    """Base class for all engine errors."""


class BetError(BlackjackError):
    """A wager was rejected."""


class BetBelowMinimum(BetError):
    """Bet is smaller than the table minimum."""


class BetExceedsBank(BetError):
    """Bet is larger than the player's bank."""


class InsufficientFunds(BlackjackError):
    """Bank cannot cover the extra stake for a double or split."""


class WrongPhase(BlackjackError):
    """Operation requested outside the phase that allows it."""


class InsuranceNotAvailable(WrongPhase):
    """Insurance requested while it is not being offered."""


class InsuranceExceedsMax(BlackjackError):
    """Insurance amount is outside 0..half the main bet."""


class InvalidHandIndex(BlackjackError):
    """Active hand index does not point at a player hand."""


class ActionNotLegal(BlackjackError):
    """Action is not allowed for the active hand."""


class CardParseError(BlackjackError, ValueError):
    """Card token could not be parsed."""
