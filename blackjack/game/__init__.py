"""Game engine and state management."""

from blackjack.game.events import GameEvent, EventType, EventEmitter
from blackjack.game.state import RoundState
from blackjack.game.engine import BlackjackGame, DEALER, shuffle_position

__all__ = [
    "GameEvent",
    "EventType",
    "EventEmitter",
    "RoundState",
    "BlackjackGame",
    "DEALER",
    "shuffle_position",
]
