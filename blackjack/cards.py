"""Card, Deck, and Shoe classes - immutable card representations."""

import logging
from collections.abc import Iterable, MutableSequence
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from random import Random
from typing import Iterator

from blackjack.errors import ConfigurationError, EmptyDeckError, InvalidCardError

logger = logging.getLogger(__name__)

# Fraction of the shoe that must be dealt before the cut card can come up
CUT_CARD_PENETRATION = 0.75


class Suit(Enum):
    """Card suits, valued in standard deck order."""

    DIAMONDS = 1
    CLUBS = 2
    HEARTS = 3
    SPADES = 4
    JOKER = 5

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def symbol(self) -> str:
        """Return the suit symbol."""
        return {
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
            Suit.JOKER: "*",
        }[self]


class Rank(Enum):
    """
    Card ranks.

    Values are the rank codes used for ordering: the Ace sorts low and the
    joker sorts after the King.
    """

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
    JOKER = 14

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return self.name.lower()

    @property
    def points(self) -> int:
        """Return the hard blackjack value (Ace = 1, royals = 10)."""
        if self == Rank.JOKER:
            return 0
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_royal(self) -> bool:
        """Check if this rank is a Jack, Queen or King."""
        return self in (Rank.JACK, Rank.QUEEN, Rank.KING)


STANDARD_SUITS = (Suit.DIAMONDS, Suit.CLUBS, Suit.HEARTS, Suit.SPADES)
STANDARD_RANKS = tuple(rank for rank in Rank if rank != Rank.JOKER)


@total_ordering
@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card, ordered by suit and then rank."""

    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        if not isinstance(self.rank, Rank) or not isinstance(self.suit, Suit):
            raise InvalidCardError(f"Invalid card: {self.rank!r} of {self.suit!r}")
        if (self.rank == Rank.JOKER) != (self.suit == Suit.JOKER):
            raise InvalidCardError(
                f"Jokers and only jokers take the joker suit: {self.rank.name} of {self.suit.name}"
            )

    def __str__(self) -> str:
        if self.is_joker:
            return "joker"
        return f"{self.rank} of {self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.sort_key < other.sort_key

    @property
    def sort_key(self) -> tuple[int, int]:
        """Return the (suit, rank) codes that define card order."""
        return (self.suit.value, self.rank.value)

    @property
    def points(self) -> int:
        """Return the hard blackjack point value."""
        return self.rank.points

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_royal(self) -> bool:
        """Check if this card is a Jack, Queen or King."""
        return self.rank.is_royal

    @property
    def is_ten_value(self) -> bool:
        """Check if this card is a ten or a royal."""
        return self.rank == Rank.TEN or self.rank.is_royal

    @property
    def is_joker(self) -> bool:
        """Check if this card is a joker."""
        return self.rank == Rank.JOKER

    @classmethod
    def of(cls, rank_id: int, suit_id: int) -> "Card":
        """Create a card from integer rank and suit codes."""
        try:
            return cls(Rank(rank_id), Suit(suit_id))
        except ValueError as exc:
            raise InvalidCardError(f"Invalid card codes: rank={rank_id}, suit={suit_id}") from exc

    @classmethod
    def from_names(cls, rank: int | str, suit: str) -> "Card":
        """
        Create a card from names, e.g. ``("ace", "spades")`` or ``(7, "hearts")``.

        Both names are case-insensitive; a joker is ``("joker", "joker")``.
        """
        if isinstance(rank, int):
            rank_id = rank
        elif rank.strip().isdigit():
            rank_id = int(rank)
        else:
            rank_id = _RANK_NAMES.get(rank.strip().lower(), -1)
        suit_id = _SUIT_NAMES.get(suit.strip().lower(), -1)
        return cls.of(rank_id, suit_id)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh' or 'JOKER'."""
        s = s.strip().upper()
        if s == "JOKER":
            return cls(Rank.JOKER, Suit.JOKER)
        if len(s) < 2:
            raise InvalidCardError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {
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
            "T": Rank.TEN,
            "J": Rank.JACK,
            "Q": Rank.QUEEN,
            "K": Rank.KING,
        }

        suit_map = {suit.name[0]: suit for suit in STANDARD_SUITS}
        suit_map.update({suit.symbol: suit for suit in STANDARD_SUITS})

        if rank_str not in rank_map:
            raise InvalidCardError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise InvalidCardError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


_RANK_NAMES = {
    "ace": Rank.ACE.value,
    "jack": Rank.JACK.value,
    "queen": Rank.QUEEN.value,
    "king": Rank.KING.value,
    "joker": Rank.JOKER.value,
}
_SUIT_NAMES = {suit.name.lower(): suit.value for suit in Suit}


def standard_cards(include_jokers: bool = False) -> list[Card]:
    """Return the 52 standard cards in sorted order, jokers last if requested."""
    cards = [Card(rank, suit) for suit in STANDARD_SUITS for rank in STANDARD_RANKS]
    if include_jokers:
        cards.extend([Card(Rank.JOKER, Suit.JOKER), Card(Rank.JOKER, Suit.JOKER)])
    return cards


class Deck:
    """
    An ordered pile of cards.

    The top of the deck is where cards are both drawn from and stacked on.
    Iterating a deck yields its cards in the order they would be drawn.
    """

    def __init__(self, cards: Iterable[Card] = (), rng: Random | None = None) -> None:
        """
        Initialize a deck.

        Args:
            cards: Initial cards, top card first
            rng: Random number generator for shuffling
        """
        self._rng = rng or Random()
        # Stored bottom-to-top so the top card is the end of the list
        self._cards: list[Card] = list(cards)[::-1]

    @staticmethod
    def standard(include_jokers: bool = False, rng: Random | None = None) -> "Deck":
        """Build a sorted standard deck, optionally with two jokers at the bottom."""
        return Deck(standard_cards(include_jokers), rng=rng)

    @staticmethod
    def empty(rng: Random | None = None) -> "Deck":
        """Build a deck with no cards."""
        return Deck(rng=rng)

    def shuffle(self) -> None:
        """Shuffle the deck."""
        self._rng.shuffle(self._cards)

    def sort(self) -> None:
        """Sort the deck so cards are drawn in ascending card order."""
        self._cards.sort(reverse=True)

    def draw(self) -> Card:
        """Draw a card from the top of the deck."""
        if not self._cards:
            raise EmptyDeckError("Cannot draw from empty deck")
        return self._cards.pop()

    def stack_on(self, card: Card) -> None:
        """Put a card on top of the deck."""
        self._cards.append(card)

    def stack_on_deck(self, other: "Deck") -> None:
        """
        Move every card of another deck on top of this one.

        The other deck's top-to-bottom run becomes this deck's new
        top-to-bottom run; the other deck is left empty.
        """
        self._cards.extend(other._cards)
        other._cards.clear()

    def add_to_bottom(self, card: Card) -> None:
        """Put a card at the bottom of the deck."""
        self._cards.insert(0, card)

    @property
    def size(self) -> int:
        """Return the number of cards in the deck."""
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return reversed(self._cards)

    def __str__(self) -> str:
        if not self._cards:
            return "empty deck"
        return "\n".join(str(card) for card in self)


class Shoe(Deck):
    """
    A multi-deck blackjack shoe with a discard pile and a cut card.

    The cut card sits somewhere in the last quarter of the shoe. The draw
    that reaches it still deals from the current cards; afterwards the
    discard pile is merged back in and everything is reshuffled.
    """

    def __init__(self, num_decks: int = 6, rng: Random | None = None) -> None:
        """
        Initialize a shuffled shoe.

        Args:
            num_decks: Number of standard 52-card decks (no jokers)
            rng: Random number generator for shuffling and cut placement
        """
        if num_decks < 1:
            raise ConfigurationError("Shoe must have at least 1 deck")

        super().__init__(rng=rng)
        self._num_decks = num_decks
        self._discard_pile = Deck.empty(rng=self._rng)
        for _ in range(num_decks):
            self.stack_on_deck(Deck.standard(rng=self._rng))

        self.shuffle()
        self._cut_index = 0
        self._place_cut_card()
        self._draws_since_shuffle = 0
        logger.debug("Shoe of %d decks ready, cut card at %d", num_decks, self._cut_index)

    def draw(self) -> Card:
        """
        Draw a card from the shoe.

        Reaching the cut card reshuffles the discard pile back in, after
        this draw's card has been taken.
        """
        if not self._cards:
            raise EmptyDeckError("Cannot draw from empty shoe")

        self._cut_index -= 1
        self._draws_since_shuffle += 1
        card = super().draw()
        if self._cut_index == 0:
            self._reshuffle()
        return card

    def discard_hand(self, hand: MutableSequence[Card]) -> None:
        """Move every card of a hand, in order, onto the discard pile."""
        for card in hand:
            self._discard_pile.stack_on(card)
        del hand[:]

    def _reshuffle(self) -> None:
        """Merge the discard pile back in, shuffle, and re-place the cut card."""
        self.stack_on_deck(self._discard_pile)
        self.shuffle()
        self._place_cut_card()
        self._draws_since_shuffle = 0
        logger.debug("Shoe reshuffled: %d cards, cut card at %d", len(self), self._cut_index)

    def _place_cut_card(self) -> None:
        """Put the cut card at a random spot in the last quarter of the shoe."""
        size = len(self._cards)
        if size == 0:
            # Every card is out; the next draw raises EmptyDeckError
            logger.warning("Shoe exhausted with an empty discard pile")
            self._cut_index = 0
            return
        lower = int(size * CUT_CARD_PENETRATION)
        self._cut_index = self._rng.randint(lower + 1, size)

    @property
    def draws_since_shuffle(self) -> int:
        """Return the number of draws since the last reshuffle."""
        return self._draws_since_shuffle

    @property
    def cut_index(self) -> int:
        """Return how many draws remain until the cut card comes up."""
        return self._cut_index

    @property
    def discard_size(self) -> int:
        """Return the number of cards in the discard pile."""
        return len(self._discard_pile)

    @property
    def num_decks(self) -> int:
        """Return the number of decks in the shoe."""
        return self._num_decks
