"""The dealer: a hand-holder with a fixed draw rule and a hidden hole card."""

from blackjack.cards import Shoe
from blackjack.hand import Hand
from blackjack.player import Action, DrawPolicy, Player


class DealerPolicy(DrawPolicy):
    """
    House rule: draw until the hand is worth at least 17.

    An Ace counts high whenever that gives a total from 17 to 21, so the
    dealer stands on every soft 17.
    """

    def __init__(self, stand_on: int = 17) -> None:
        self.stand_on = stand_on

    def decide(self, hand: Hand) -> Action:
        low, high = hand.values
        if low >= self.stand_on:
            return Action.STAND
        if high is None or high < self.stand_on or high > 21:
            return Action.HIT
        return Action.STAND


def render_dealer(dealer: Player) -> str:
    """Render the dealer's hand, hiding the first card until the dealer stands."""
    hand = dealer.hand(0)
    if hand.standing or not hand.cards:
        return f"HAND: {hand}\n"
    if len(hand) == 1:
        return "HAND: hidden card\n"
    return f"HAND: hidden card, {hand.cards[1]}\n"


def make_dealer(shoe: Shoe) -> Player:
    """Create a dealer drawing from the given shoe."""
    return Player(shoe, 0, policy=DealerPolicy(), renderer=render_dealer)
