"""Card, deck and shoe primitives."""

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from random import Random
from typing import Iterable, Iterator

from blackjack.errors import CardParseError


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks, Ace low (1) through King (13)."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        """Check if this rank has a value of 10."""
        return self.blackjack_value == 10


_RANK_TOKENS = {
    "A": Rank.ACE,
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "J": Rank.JACK,
    "Q": Rank.QUEEN,
    "K": Rank.KING,
}

_SUIT_TOKENS = {
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        """Check if this card has a value of 10."""
        return self.rank.is_ten_value

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a token like 'AS', '10H', 'kd' or 'Q♠'."""
        token = s.strip().upper()
        if len(token) not in (2, 3):
            raise CardParseError(f"Invalid card string: {s!r}")

        rank_str = token[:-1]
        suit_str = token[-1]

        if rank_str not in _RANK_TOKENS:
            raise CardParseError(f"Invalid rank: {rank_str!r}")
        if suit_str not in _SUIT_TOKENS:
            raise CardParseError(f"Invalid suit: {suit_str!r}")

        return cls(_RANK_TOKENS[rank_str], _SUIT_TOKENS[suit_str])


def parse_card(token: str) -> Card:
    """Parse a compact card token. See Card.from_string."""
    return Card.from_string(token)


def new_deck() -> list[Card]:
    """Return an ordered 52-card deck, suit by suit, Ace to King."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def shuffle(deck: list[Card], rng: Random) -> None:
    """Shuffle a deck in place (Fisher-Yates) using the given random source."""
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randrange(i + 1)
        deck[i], deck[j] = deck[j], deck[i]


def draw(deck: list[Card], n: int) -> tuple[list[Card], list[Card]]:
    """
    Take cards from the front of a deck.

    Returns:
        (drawn, remaining). If n exceeds the deck size the whole deck is
        drawn and the remainder is empty.
    """
    n = max(0, min(n, len(deck)))
    return deck[:n], deck[n:]


def load_shoe(path: str | Path) -> list[Card]:
    """
    Read a stacked shoe from a text file.

    One card token per line; blank lines and lines starting with '#' are
    ignored.
    """
    cards: list[Card] = []
    with open(path, encoding="utf-8") as fh:
        for lineno, raw in enumerate(fh, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            try:
                cards.append(Card.from_string(line))
            except CardParseError as exc:
                raise CardParseError(f"{path}:{lineno}: {exc}") from exc
    return cards


class Shoe:
    """The ordered sequence of undealt cards. Cards are dealt from the front."""

    def __init__(
        self,
        rng: Random | None = None,
        cards: Iterable[Card] | None = None,
    ) -> None:
        """
        Initialize a shoe.

        Args:
            rng: Random source used whenever the shoe is refilled
            cards: Optional stacked sequence; the shoe starts empty otherwise
        """
        self._rng = rng or Random()
        self._cards: list[Card] = list(cards) if cards is not None else []

    def refill(self) -> None:
        """Replace the contents with a freshly shuffled 52-card deck."""
        deck = new_deck()
        shuffle(deck, self._rng)
        self._cards = deck

    def load(self, cards: Iterable[Card]) -> None:
        """Stack the shoe with a fixed card order."""
        self._cards = list(cards)

    def draw(self, n: int = 1) -> list[Card]:
        """Draw up to n cards from the front. Never raises on exhaustion."""
        drawn, self._cards = draw(self._cards, n)
        return drawn

    def draw_one(self) -> Card | None:
        """Draw a single card, or None if the shoe is empty."""
        drawn = self.draw(1)
        return drawn[0] if drawn else None

    @property
    def is_empty(self) -> bool:
        """Check if no cards remain."""
        return not self._cards

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
