"""Pytest fixtures for blackjack engine tests."""

import pytest
from random import Random

from blackjack.cards import Card, Rank, Suit
from blackjack.hand import Hand
from blackjack.rules import RuleSet
from blackjack.game import BlackjackGame


def cards(tokens: str) -> list[Card]:
    """Parse a space-separated list of card tokens, e.g. '8S 9C 8H'."""
    return [Card.from_string(t) for t in tokens.split()]


def hand_of(tokens: str, **flags) -> Hand:
    """Build a hand from card tokens plus optional flags."""
    return Hand(cards=cards(tokens), **flags)


@pytest.fixture
def make_cards():
    """Card-list builder: make_cards('AS 10H')."""
    return cards


@pytest.fixture
def make_hand():
    """Hand builder: make_hand('8S 8H', bet=10, is_from_split=True)."""
    return hand_of


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.KING, Suit.HEARTS))
    return hand


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    hand = Hand()
    hand.add_card(Card(Rank.EIGHT, Suit.SPADES))
    hand.add_card(Card(Rank.EIGHT, Suit.HEARTS))
    return hand


@pytest.fixture
def bust_hand():
    """A busted hand."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    hand.add_card(Card(Rank.KING, Suit.CLUBS))
    return hand


@pytest.fixture
def rules():
    """Default ruleset."""
    return RuleSet()


@pytest.fixture
def game(rng):
    """A new game with a 1000-chip bank and a seeded shoe."""
    return BlackjackGame(bank=1000, rng=rng)


@pytest.fixture
def stacked_game(rng):
    """
    Factory for games dealt from a fixed card order.

    Deal order is player, dealer (hole), player, dealer (up), then hits.
    """

    def _make(tokens: str, bank: int = 1000, rules: RuleSet | None = None) -> BlackjackGame:
        return BlackjackGame(rules=rules, bank=bank, rng=rng, shoe=cards(tokens))

    return _make
