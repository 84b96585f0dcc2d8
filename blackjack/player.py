"""Hand-holders: the players at the table and, configured differently, the dealer."""

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Callable

from blackjack.cards import Card, Shoe
from blackjack.errors import ConfigurationError, IllegalActionError, SplitLimitError
from blackjack.hand import Hand, HandValues, Outcome

logger = logging.getLogger(__name__)


class Action(Enum):
    """Possible player actions."""

    HIT = auto()
    STAND = auto()
    DOUBLE_DOWN = auto()
    SPLIT = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").lower()


class DrawPolicy(ABC):
    """Decides the next action for a hand that plays itself."""

    @abstractmethod
    def decide(self, hand: Hand) -> Action:
        """
        Choose an action for the hand.

        Args:
            hand: The hand being played

        Returns:
            Action.HIT to draw another card, anything else to stop
        """
        ...


Renderer = Callable[["Player"], str]


def render_player(player: "Player") -> str:
    """
    Render every hand and bet followed by the insurance bet and wealth.

    e.g.::

        HAND 1: jack of hearts, 2 of clubs
        BET 1: $1000
        INSURANCE BET: $0
        WEALTH: $7590
    """
    lines = []
    for i in range(player.num_hands):
        hand = player.hand(i)
        if hand.cards:
            lines.append(f"HAND {i + 1}: {hand}")
        else:
            lines.append("EMPTY")
        lines.append(f"BET {i + 1}: ${hand.bet}")
    lines.append(f"INSURANCE BET: ${player.insurance_bet}")
    lines.append(f"WEALTH: ${player.wealth}")
    return "\n".join(lines) + "\n"


class Player:
    """
    Holds one or two hands drawn from a shared shoe, with bets and wealth.

    Wealth never includes money currently at stake. Every bet is rejected
    if it would take wealth below zero, and a rejected call changes nothing.
    """

    # A single split is supported
    MAX_HANDS = 2

    def __init__(
        self,
        shoe: Shoe,
        wealth: int,
        policy: DrawPolicy | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        """
        Initialize a hand-holder.

        Args:
            shoe: Shoe to draw from and discard to
            wealth: Starting wealth
            policy: Decides draws for draw_until_satisfied
            renderer: Produces the text form of this holder
        """
        if shoe is None:
            raise ConfigurationError("A player needs a shoe")
        if wealth < 0:
            raise ConfigurationError(f"Wealth cannot be negative: {wealth}")

        self._shoe = shoe
        self._wealth = wealth
        self._insurance_bet = 0
        self._hands: list[Hand] = [Hand()]
        self.policy = policy
        self._renderer = renderer or render_player

    @property
    def wealth(self) -> int:
        """Return wealth not currently at stake."""
        return self._wealth

    @property
    def insurance_bet(self) -> int:
        """Return the current insurance bet."""
        return self._insurance_bet

    @property
    def num_hands(self) -> int:
        """Return the number of hands held."""
        return len(self._hands)

    def hand(self, i: int) -> Hand:
        """Return hand i."""
        return self._hands[i]

    def get_hand(self, i: int) -> list[Card]:
        """Return a copy of the cards in hand i."""
        return list(self._hands[i].cards)

    def get_bet(self, i: int) -> int:
        """Return the bet on hand i."""
        return self._hands[i].bet

    def is_standing(self, i: int) -> bool:
        """Check if hand i is standing."""
        return self._hands[i].standing

    def hand_values(self, i: int) -> HandValues:
        """Return the low and high totals of hand i."""
        return self._hands[i].values

    def score(self, i: int) -> int:
        """Return the best score of hand i."""
        return self._hands[i].score

    def draw(self, i: int) -> Card:
        """Draw one card from the shoe into hand i."""
        card = self._shoe.draw()
        self._hands[i].add_card(card)
        return card

    def _check_bet(self, amount: int) -> None:
        if amount < 0:
            raise IllegalActionError(f"Bet cannot be negative: {amount}")
        if amount > self._wealth:
            raise IllegalActionError(f"Bet of ${amount} exceeds wealth of ${self._wealth}")

    def place_bet(self, i: int, amount: int) -> None:
        """Move amount from wealth onto the bet for hand i."""
        hand = self._hands[i]
        self._check_bet(amount)
        self._wealth -= amount
        hand.bet += amount
        logger.debug("Bet $%d on hand %d, wealth now $%d", amount, i, self._wealth)

    def place_insurance_bet(self, amount: int) -> None:
        """Move amount from wealth onto the insurance bet (at most half the first bet)."""
        self._check_bet(amount)
        cap = self._hands[0].bet // 2
        if amount > cap:
            raise IllegalActionError(f"Insurance cannot exceed ${cap}")
        self._wealth -= amount
        self._insurance_bet += amount

    def take_action(self, i: int, action: Action) -> list[Card]:
        """
        Apply an action to hand i.

        Returns:
            The cards drawn by the action, in draw order (zero to two)

        Raises:
            IllegalActionError: double down after the first two cards, a split
                of anything but a pair, or a bet the player cannot cover
            SplitLimitError: split by a player who already has two hands
        """
        hand = self._hands[i]

        if action == Action.HIT:
            return [self.draw(i)]

        if action == Action.STAND:
            hand.standing = True
            return []

        if action == Action.DOUBLE_DOWN:
            if len(hand) != 2:
                raise IllegalActionError("Can only double down on the first two cards")
            self.place_bet(i, hand.bet)
            hand.standing = True
            return [self.draw(i)]

        if action == Action.SPLIT:
            return self._split(i)

        raise IllegalActionError(f"Unknown action: {action!r}")

    def _split(self, i: int) -> list[Card]:
        """Split hand i into two hands, each getting one more card."""
        if len(self._hands) >= self.MAX_HANDS:
            raise SplitLimitError("Only one split per round is supported")

        hand = self._hands[i]
        if not hand.is_pair:
            raise IllegalActionError("Can only split two cards of equal rank")
        self._check_bet(hand.bet)

        new_hand = Hand(cards=[hand.cards.pop()], is_split_hand=True)
        hand.is_split_hand = True
        self._hands.append(new_hand)
        j = len(self._hands) - 1
        self.place_bet(j, hand.bet)

        drawn = [self.draw(i), self.draw(j)]

        # Split aces get one card each and nothing more
        if hand.cards[0].is_ace:
            hand.standing = True
            new_hand.standing = True

        return drawn

    def draw_until_satisfied(self, i: int = 0) -> list[Card]:
        """
        Draw into hand i for as long as the policy says hit, then stand.

        Returns:
            The cards drawn, in order
        """
        if self.policy is None:
            raise ConfigurationError("No draw policy configured")

        hand = self._hands[i]
        drawn = []
        while self.policy.decide(hand) == Action.HIT:
            drawn.append(self.draw(i))
        hand.standing = True
        return drawn

    def discard(self) -> None:
        """Send every card to the discard pile and go back to one empty hand."""
        for hand in self._hands:
            self._shoe.discard_hand(hand.cards)
        self._hands = [Hand()]

    def sit(self) -> None:
        """Clear the standing flag on every hand."""
        for hand in self._hands:
            hand.standing = False

    def resolve_bet(self, i: int, outcome: Outcome) -> None:
        """Pay out the bet on hand i for the given outcome and clear it."""
        hand = self._hands[i]
        self._wealth += outcome.payout(hand.bet)
        hand.bet = 0

    def resolve_insurance_bet(self, dealer_had_blackjack: bool) -> None:
        """Pay insurance 2:1 plus the stake if the dealer had blackjack, then clear it."""
        if dealer_had_blackjack:
            self._wealth += 3 * self._insurance_bet
        self._insurance_bet = 0

    def __str__(self) -> str:
        return self._renderer(self)
