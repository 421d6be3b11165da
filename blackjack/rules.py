"""Table rules, hand outcomes and payouts."""

from dataclasses import dataclass
from enum import Enum, auto

from blackjack.hand import Hand

DEALER_STANDS_SOFT_17 = True  # S17
BLACKJACK_PAYOUT = 1.5  # 3:2
INSURANCE_PAYOUT = 2.0  # 2:1
MIN_BET = 1
STARTING_BANK = 1000
MAX_HANDS = 4


@dataclass(frozen=True)
class RuleSet:
    """
    Table configuration.

    The playing rules themselves (S17, 3:2, late surrender, no resplit of
    aces) are fixed; only limits and the shoe policy vary.
    """

    min_bet: int = MIN_BET
    starting_bank: int = STARTING_BANK
    max_hands: int = MAX_HANDS

    # False: continuous shoe, rebuilt only when it runs out.
    # True: a fresh shuffled deck for every round.
    reshuffle_each_round: bool = False

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.min_bet < 1:
            raise ValueError("min_bet must be at least 1")
        if self.starting_bank < self.min_bet:
            raise ValueError("starting_bank must cover the minimum bet")
        if not 1 <= self.max_hands <= MAX_HANDS:
            raise ValueError(f"max_hands must be between 1 and {MAX_HANDS}")


class Outcome(Enum):
    """Result of one player hand against the dealer."""

    WIN = auto()
    LOSE = auto()
    PUSH = auto()
    BLACKJACK = auto()
    SURRENDER = auto()

    def __str__(self) -> str:
        return self.name.title()


def determine_outcome(player: Hand, dealer: Hand) -> Outcome:
    """Compare a finished player hand with the dealer's hand."""
    if player.surrendered:
        return Outcome.SURRENDER
    if player.is_bust:
        return Outcome.LOSE
    if dealer.is_bust:
        return Outcome.WIN

    player_bj = player.is_blackjack
    dealer_bj = dealer.is_blackjack

    if player_bj and not dealer_bj:
        return Outcome.BLACKJACK
    if dealer_bj and not player_bj:
        return Outcome.LOSE

    if player.value == dealer.value:
        return Outcome.PUSH
    if player.value > dealer.value:
        return Outcome.WIN
    return Outcome.LOSE


def payout(outcome: Outcome, bet: int, is_insurance: bool = False) -> int:
    """
    Amount credited back to the bank for a settled wager.

    Stakes are withdrawn when placed, so this is the total returned
    (stake included), never a negative number.
    """
    if is_insurance:
        if outcome == Outcome.WIN:
            return bet + int(bet * INSURANCE_PAYOUT)
        return 0

    if outcome == Outcome.BLACKJACK:
        return int(bet * (1 + BLACKJACK_PAYOUT))
    if outcome == Outcome.WIN:
        return bet * 2
    if outcome == Outcome.PUSH:
        return bet
    if outcome == Outcome.SURRENDER:
        return bet // 2
    return 0
