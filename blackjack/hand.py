"""Hand evaluation for blackjack."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple

from blackjack.cards import Card

# Score of a natural; compares above every ordinary total
BJ_VALUE = 600

# Score of a busted hand
BUSTED = -1


class Outcome(Enum):
    """Result of a hand played against the dealer."""

    LOSS = -1
    PUSH = 0
    WIN = 1
    BLACKJACK = 2

    def __str__(self) -> str:
        return self.name

    def payout(self, bet: int) -> int:
        """Return the amount credited back for a bet with this outcome."""
        if self == Outcome.BLACKJACK:
            # 3:2 plus the stake, truncated
            return bet * 5 // 2
        if self == Outcome.WIN:
            return bet * 2
        if self == Outcome.PUSH:
            return bet
        return 0


class HandValues(NamedTuple):
    """
    The two totals worth tracking for a hand.

    ``low`` counts every Ace as 1. ``high`` counts the first Ace as 11 and
    is None when the hand has no Ace; counting a second Ace as 11 would
    always bust, so no other interpretation matters. A natural is reported
    as ``(BJ_VALUE, None)``.
    """

    low: int
    high: int | None = None


def is_natural(cards: Sequence[Card]) -> bool:
    """Check for a two-card Ace plus ten-value hand, regardless of suit."""
    if len(cards) != 2:
        return False
    first, second = cards
    return (first.is_ace and second.is_ten_value) or (second.is_ace and first.is_ten_value)


def hand_values(cards: Sequence[Card]) -> HandValues:
    """Compute the low and high totals of a hand."""
    if is_natural(cards):
        return HandValues(BJ_VALUE)

    low = 0
    high = None
    for card in cards:
        if card.is_ace and high is None:
            high = low + 11
            low += 1
        else:
            low += card.points
            if high is not None:
                high += card.points

    return HandValues(low, high)


def _unless_busted(total: int | None) -> int:
    if total is None:
        return BUSTED
    if total > 21 and total != BJ_VALUE:
        return BUSTED
    return total


def score_hand(cards: Sequence[Card]) -> int:
    """
    Return the best interpretation of a hand.

    Returns:
        BJ_VALUE for a natural, BUSTED if every total is over 21,
        otherwise the highest total that does not bust
    """
    low, high = hand_values(cards)
    return max(_unless_busted(low), _unless_busted(high))


def judge(hand_score: int, dealer_score: int, split_aces: bool = False) -> Outcome:
    """
    Compare a hand's score with the dealer's.

    A natural made from split aces is paid as an ordinary win, and a busted
    hand loses even when the dealer busts too.
    """
    if hand_score == BJ_VALUE and dealer_score != BJ_VALUE and not split_aces:
        return Outcome.BLACKJACK
    if hand_score > dealer_score:
        return Outcome.WIN
    if hand_score == BUSTED or hand_score < dealer_score:
        return Outcome.LOSS
    return Outcome.PUSH


@dataclass
class Hand:
    """A blackjack hand with its bet and standing flag."""

    cards: list[Card] = field(default_factory=list)
    bet: int = 0
    standing: bool = False
    is_split_hand: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    @property
    def values(self) -> HandValues:
        """Return the low and high totals."""
        return hand_values(self.cards)

    @property
    def score(self) -> int:
        """Return the best score, BJ_VALUE or BUSTED."""
        return score_hand(self.cards)

    @property
    def is_soft(self) -> bool:
        """Check if an Ace can still count as 11 without busting."""
        high = self.values.high
        return high is not None and high <= 21

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural."""
        return is_natural(self.cards)

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted."""
        return self.score == BUSTED

    @property
    def is_pair(self) -> bool:
        """Check if the hand is a pair (two cards of same rank)."""
        return (
            len(self.cards) == 2
            and self.cards[0].rank == self.cards[1].rank
        )

    @property
    def has_split_aces(self) -> bool:
        """Check if this hand came from splitting a pair of Aces."""
        return self.is_split_hand and bool(self.cards) and self.cards[0].is_ace

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        if not self.cards:
            return "EMPTY"
        return ", ".join(str(card) for card in self.cards)
