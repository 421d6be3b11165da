"""Game phases and player actions."""

from enum import Enum, auto


class Phase(Enum):
    """
    Game state machine states.

    Flow: BETTING → INSURANCE (dealer shows an Ace) → PLAYER_ACTION → DEALER_ACTION → RESOLUTION → BETTING
    """

    # Waiting for a wager
    BETTING = auto()

    # Dealer shows an Ace; insurance decision pending
    INSURANCE = auto()

    # Player acts on the active hand
    PLAYER_ACTION = auto()

    # Dealer plays out
    DEALER_ACTION = auto()

    # Settling bets
    RESOLUTION = auto()

    # Bank exhausted
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class Action(Enum):
    """Player actions on the active hand."""

    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()
    SURRENDER = auto()

    def __str__(self) -> str:
        return self.name.title()


# Machine transitions; GAME_OVER has no way out
TRANSITIONS = [
    {"trigger": "offer_insurance", "source": "betting", "dest": "insurance"},
    {"trigger": "deal_to_player", "source": "betting", "dest": "player_action"},
    {"trigger": "dealer_blackjack", "source": ["betting", "insurance"], "dest": "resolution"},
    {"trigger": "insurance_settled", "source": "insurance", "dest": "player_action"},
    {"trigger": "player_done", "source": "player_action", "dest": "dealer_action"},
    {"trigger": "dealer_done", "source": "dealer_action", "dest": "resolution"},
    {"trigger": "round_settled", "source": "resolution", "dest": "betting"},
    {"trigger": "bankrupt", "source": "resolution", "dest": "game_over"},
]
