"""Blackjack engine - 100% UI-agnostic."""

from blackjack.cards import Card, Deck, Shoe, Rank, Suit
from blackjack.dealer import DealerPolicy, make_dealer
from blackjack.errors import (
    BlackjackError,
    ConfigurationError,
    EmptyDeckError,
    IllegalActionError,
    InvalidCardError,
    SplitLimitError,
)
from blackjack.hand import BJ_VALUE, BUSTED, Hand, HandValues, Outcome
from blackjack.player import Action, DrawPolicy, Player

__all__ = [
    "Card",
    "Deck",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "HandValues",
    "Outcome",
    "BJ_VALUE",
    "BUSTED",
    "Action",
    "DrawPolicy",
    "Player",
    "DealerPolicy",
    "make_dealer",
    "BlackjackError",
    "ConfigurationError",
    "EmptyDeckError",
    "IllegalActionError",
    "InvalidCardError",
    "SplitLimitError",
]
