"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterator

from blackjack.cards import Card


@dataclass
class Hand:
    """A blackjack hand plus the round-scoped flags that govern its legal actions."""

    cards: list[Card] = field(default_factory=list)
    bet: int = 0
    is_split_aces: bool = False
    doubled: bool = False
    surrendered: bool = False
    is_initial_deal: bool = True  # no action taken yet
    is_from_split: bool = False  # blocks natural blackjack
    insurance_bet: int = 0

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def totals(self) -> tuple[int, int, bool]:
        """
        Compute the hand totals.

        Returns:
            (hard, soft, is_soft). The hard total counts every Ace as 1.
            The soft total promotes exactly one Ace to 11 when that does
            not bust; otherwise it equals the hard total.
        """
        hard = sum(1 if card.is_ace else card.value for card in self.cards)
        has_ace = any(card.is_ace for card in self.cards)

        if has_ace and hard + 10 <= 21:
            return hard, hard + 10, True
        return hard, hard, False

    @property
    def value(self) -> int:
        """Return the best total: soft if available, otherwise hard."""
        _, soft, _ = self.totals()
        return soft

    @property
    def is_soft(self) -> bool:
        """Check if an Ace is currently counted as 11."""
        return self.totals()[2]

    @property
    def is_blackjack(self) -> bool:
        """Check for an untouched two-card 21 that did not come from a split."""
        return (
            len(self.cards) == 2
            and self.value == 21
            and self.is_initial_deal
            and not self.is_from_split
        )

    @property
    def is_bust(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    @property
    def can_split(self) -> bool:
        """Two untouched cards of the same rank. Equal point value is not enough."""
        return (
            self.is_initial_deal
            and len(self.cards) == 2
            and self.cards[0].rank == self.cards[1].rank
        )

    @property
    def can_double(self) -> bool:
        """Check if the hand may double down."""
        return self.is_initial_deal and not self.is_split_aces

    @property
    def can_surrender(self) -> bool:
        """Late surrender: first decision on a two-card hand only."""
        return self.is_initial_deal and len(self.cards) == 2

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        return "[" + ", ".join(str(card) for card in self.cards) + "]"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value}, bet={self.bet})"
