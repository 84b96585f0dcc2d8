"""Tests for the Player class."""

import pytest
from random import Random

from blackjack.cards import Card, Shoe
from blackjack.errors import (
    ConfigurationError,
    EmptyDeckError,
    IllegalActionError,
    SplitLimitError,
)
from blackjack.hand import BJ_VALUE, HandValues, Outcome
from blackjack.player import Action, DrawPolicy, Player

C = Card.from_string


def deal(player, rig, shoe, *codes):
    """Rig the shoe and draw the given cards into hand 0."""
    rig(shoe, *(C(code) for code in codes))
    for _ in codes:
        player.draw(0)


class HitBelow(DrawPolicy):
    """Test policy: hit while the score is below a threshold."""

    def __init__(self, threshold):
        self.threshold = threshold

    def decide(self, hand):
        return Action.HIT if hand.score < self.threshold else Action.STAND


class TestConstruction:
    """Tests for creating players."""

    def test_defaults(self, player):
        assert player.wealth == 500
        assert player.insurance_bet == 0
        assert player.num_hands == 1
        assert player.get_hand(0) == []
        assert player.get_bet(0) == 0
        assert not player.is_standing(0)

    def test_negative_wealth_raises(self, shoe):
        with pytest.raises(ConfigurationError):
            Player(shoe, -1)

    def test_missing_shoe_raises(self):
        with pytest.raises(ConfigurationError):
            Player(None, 100)


class TestBetting:
    """Tests for bets and insurance."""

    def test_place_bet(self, player):
        player.place_bet(0, 100)
        assert player.get_bet(0) == 100
        assert player.wealth == 400

    def test_bets_accumulate(self, player):
        player.place_bet(0, 100)
        player.place_bet(0, 50)
        assert player.get_bet(0) == 150
        assert player.wealth == 350

    def test_bet_entire_wealth(self, player):
        player.place_bet(0, 500)
        assert player.wealth == 0

    def test_bet_over_wealth_changes_nothing(self, player):
        with pytest.raises(IllegalActionError):
            player.place_bet(0, 501)
        assert player.wealth == 500
        assert player.get_bet(0) == 0

    def test_negative_bet_raises(self, player):
        with pytest.raises(IllegalActionError):
            player.place_bet(0, -5)

    def test_missing_hand_raises(self, player):
        with pytest.raises(IndexError):
            player.place_bet(1, 10)

    def test_insurance_up_to_half(self, player):
        player.place_bet(0, 100)
        player.place_insurance_bet(50)
        assert player.insurance_bet == 50
        assert player.wealth == 350

    def test_insurance_over_half_raises(self, player):
        player.place_bet(0, 100)
        with pytest.raises(IllegalActionError):
            player.place_insurance_bet(51)
        assert player.insurance_bet == 0
        assert player.wealth == 400

    def test_insurance_over_wealth_raises(self, shoe):
        player = Player(shoe, 100)
        player.place_bet(0, 100)
        with pytest.raises(IllegalActionError):
            player.place_insurance_bet(10)

    def test_insurance_paid_three_to_one_back(self, player):
        player.place_bet(0, 100)
        player.place_insurance_bet(50)
        player.resolve_insurance_bet(True)
        assert player.wealth == 500
        assert player.insurance_bet == 0

    def test_insurance_lost(self, player):
        player.place_bet(0, 100)
        player.place_insurance_bet(50)
        player.resolve_insurance_bet(False)
        assert player.wealth == 350
        assert player.insurance_bet == 0


class TestActions:
    """Tests for hit, stand, double down and split."""

    def test_hit(self, player, shoe, rig):
        rig(shoe, C("5H"))
        drawn = player.take_action(0, Action.HIT)
        assert drawn == [C("5H")]
        assert player.get_hand(0) == [C("5H")]

    def test_stand(self, player):
        assert player.take_action(0, Action.STAND) == []
        assert player.is_standing(0)

    def test_double_down(self, player, shoe, rig):
        deal(player, rig, shoe, "5H", "6C")
        player.place_bet(0, 100)
        rig(shoe, C("KS"))

        drawn = player.take_action(0, Action.DOUBLE_DOWN)

        assert drawn == [C("KS")]
        assert player.get_bet(0) == 200
        assert player.wealth == 300
        assert player.is_standing(0)
        assert player.score(0) == 21

    def test_double_down_after_three_cards_raises(self, player, shoe, rig):
        deal(player, rig, shoe, "2H", "3C", "4D")
        player.place_bet(0, 10)
        with pytest.raises(IllegalActionError):
            player.take_action(0, Action.DOUBLE_DOWN)
        assert player.get_bet(0) == 10

    def test_double_down_without_funds_raises(self, shoe, rig):
        player = Player(shoe, 100)
        deal(player, rig, shoe, "5H", "6C")
        player.place_bet(0, 60)
        with pytest.raises(IllegalActionError):
            player.take_action(0, Action.DOUBLE_DOWN)
        assert len(player.get_hand(0)) == 2
        assert player.wealth == 40

    def test_split(self, player, shoe, rig):
        deal(player, rig, shoe, "8H", "8C")
        player.place_bet(0, 100)
        rig(shoe, C("3D"), C("KS"))

        drawn = player.take_action(0, Action.SPLIT)

        assert drawn == [C("3D"), C("KS")]
        assert player.num_hands == 2
        assert player.get_hand(0) == [C("8H"), C("3D")]
        assert player.get_hand(1) == [C("8C"), C("KS")]
        assert player.get_bet(0) == 100
        assert player.get_bet(1) == 100
        assert player.wealth == 300
        assert not player.is_standing(0)
        assert not player.is_standing(1)

    def test_second_split_raises(self, player, shoe, rig):
        deal(player, rig, shoe, "8H", "8C")
        player.place_bet(0, 10)
        rig(shoe, C("8D"), C("2S"))
        player.take_action(0, Action.SPLIT)

        with pytest.raises(SplitLimitError):
            player.take_action(0, Action.SPLIT)
        assert player.num_hands == 2

    def test_split_non_pair_raises(self, player, shoe, rig):
        deal(player, rig, shoe, "KH", "QC")
        player.place_bet(0, 10)
        with pytest.raises(IllegalActionError):
            player.take_action(0, Action.SPLIT)
        assert player.num_hands == 1

    def test_split_without_funds_changes_nothing(self, shoe, rig):
        player = Player(shoe, 100)
        deal(player, rig, shoe, "8H", "8C")
        player.place_bet(0, 60)

        with pytest.raises(IllegalActionError):
            player.take_action(0, Action.SPLIT)

        assert player.num_hands == 1
        assert player.get_hand(0) == [C("8H"), C("8C")]
        assert player.wealth == 40
        assert player.get_bet(0) == 60

    def test_split_aces_stand(self, player, shoe, rig):
        deal(player, rig, shoe, "AH", "AC")
        player.place_bet(0, 100)
        rig(shoe, C("KD"), C("5S"))

        player.take_action(0, Action.SPLIT)

        assert player.is_standing(0)
        assert player.is_standing(1)
        assert player.score(0) == BJ_VALUE
        assert player.hand(0).has_split_aces
        assert player.score(1) == 16

    def test_hit_on_empty_shoe_propagates(self):
        small = Shoe(num_decks=1, rng=Random(1))
        player = Player(small, 100)
        for _ in range(52):
            player.draw(0)
        with pytest.raises(EmptyDeckError):
            player.take_action(0, Action.HIT)


class TestResolution:
    """Tests for settling bets."""

    @pytest.mark.parametrize(
        "outcome,wealth",
        [
            (Outcome.LOSS, 400),
            (Outcome.PUSH, 500),
            (Outcome.WIN, 600),
            (Outcome.BLACKJACK, 650),
        ],
    )
    def test_resolve_bet(self, player, outcome, wealth):
        player.place_bet(0, 100)
        player.resolve_bet(0, outcome)
        assert player.wealth == wealth
        assert player.get_bet(0) == 0

    def test_discard_returns_to_one_hand(self, player, shoe, rig):
        deal(player, rig, shoe, "8H", "8C")
        player.place_bet(0, 10)
        rig(shoe, C("2D"), C("3S"))
        player.take_action(0, Action.SPLIT)

        player.discard()

        assert player.num_hands == 1
        assert player.get_hand(0) == []
        assert shoe.discard_size == 4

    def test_sit_clears_standing(self, player):
        player.take_action(0, Action.STAND)
        player.sit()
        assert not player.is_standing(0)


class TestDrawPolicy:
    """Tests for policy-driven drawing."""

    def test_without_policy_raises(self, player):
        with pytest.raises(ConfigurationError):
            player.draw_until_satisfied()

    def test_draws_until_policy_stands(self, shoe, rig):
        player = Player(shoe, 0, policy=HitBelow(15))
        rig(shoe, C("2H"), C("3C"), C("4D"), C("9S"), C("KD"))

        drawn = player.draw_until_satisfied()

        assert drawn == [C("2H"), C("3C"), C("4D"), C("9S")]
        assert player.is_standing(0)
        assert player.hand_values(0) == HandValues(18, None)


class TestRender:
    """Tests for the text form."""

    def test_render(self, player, shoe, rig):
        deal(player, rig, shoe, "JH", "2C")
        player.place_bet(0, 100)
        assert str(player) == (
            "HAND 1: jack of hearts, 2 of clubs\n"
            "BET 1: $100\n"
            "INSURANCE BET: $0\n"
            "WEALTH: $400\n"
        )

    def test_render_empty(self, player):
        assert str(player) == "EMPTY\nBET 1: $0\nINSURANCE BET: $0\nWEALTH: $500\n"

    def test_custom_renderer(self, shoe):
        player = Player(shoe, 5, renderer=lambda p: f"${p.wealth}")
        assert str(player) == "$5"
