"""Dealer policy: hole-card peek and drawing to 17."""

from blackjack.cards import Card, Shoe
from blackjack.hand import Hand
from blackjack.rules import DEALER_STANDS_SOFT_17


def peek_for_blackjack(up_card: Card, down_card: Card) -> bool:
    """
    Check whether the dealer's two cards make a natural.

    Only meaningful when the up card is an Ace or ten-valued; the caller
    decides when a peek is allowed.
    """
    return Hand(cards=[up_card, down_card]).is_blackjack


def dealer_should_hit(hand: Hand) -> bool:
    """Dealer hits below 17 and stands on every 17, soft or hard."""
    value = hand.value
    if value < 17:
        return True
    if value == 17 and hand.is_soft and not DEALER_STANDS_SOFT_17:
        return True
    return False


def dealer_play(shoe: Shoe, hand: Hand) -> list[Card]:
    """
    Play out the dealer's hand from the shoe.

    Returns:
        The cards drawn. Drawing stops early if the shoe runs out.
    """
    drawn: list[Card] = []
    while dealer_should_hit(hand):
        card = shoe.draw_one()
        if card is None:
            break
        hand.add_card(card)
        drawn.append(card)
    return drawn
