"""Game engine and state management."""

from blackjack.game.events import GameEvent, EventType
from blackjack.game.state import Action, Phase
from blackjack.game.engine import BlackjackGame, HandResult

__all__ = [
    "GameEvent",
    "EventType",
    "Action",
    "Phase",
    "BlackjackGame",
    "HandResult",
]
