"""Single-player blackjack engine - UI-agnostic."""

from blackjack.cards import Card, Rank, Shoe, Suit, load_shoe, parse_card
from blackjack.hand import Hand
from blackjack.rules import Outcome, RuleSet

__all__ = [
    "Card",
    "Rank",
    "Shoe",
    "Suit",
    "load_shoe",
    "parse_card",
    "Hand",
    "Outcome",
    "RuleSet",
]
