"""Pytest fixtures for blackjack engine tests."""

import pytest
from random import Random

from blackjack.cards import Card, Deck, Shoe, Rank, Suit
from blackjack.dealer import make_dealer
from blackjack.hand import Hand
from blackjack.player import Player
from blackjack.game import BlackjackGame


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    d = Deck.standard(rng=rng)
    d.shuffle()
    return d


@pytest.fixture
def shoe(rng):
    """A shuffled 6-deck shoe (the cut card is at least 235 draws away)."""
    return Shoe(num_decks=6, rng=rng)


@pytest.fixture
def rig():
    """Stack cards on a shoe so they are drawn in the order given."""

    def stack(shoe, *cards):
        for card in reversed(cards):
            shoe.stack_on(card)

    return stack


@pytest.fixture
def player(shoe):
    """A player with $500 drawing from the shoe."""
    return Player(shoe, 500)


@pytest.fixture
def dealer(shoe):
    """A dealer drawing from the shoe."""
    return make_dealer(shoe)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.KING, Suit.HEARTS))
    return hand


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    hand = Hand()
    hand.add_card(Card(Rank.EIGHT, Suit.SPADES))
    hand.add_card(Card(Rank.EIGHT, Suit.HEARTS))
    return hand


@pytest.fixture
def bust_hand():
    """A busted hand."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    hand.add_card(Card(Rank.KING, Suit.CLUBS))
    return hand


@pytest.fixture
def game(rng):
    """The house default game: one $500 player, 6 decks, $10-$10,000."""
    return BlackjackGame(
        num_players=1,
        num_decks=6,
        table_min=10,
        table_max=10000,
        wallets=[500],
        rng=rng,
    )


@pytest.fixture
def two_player_game(rng):
    """Two players with $500 each."""
    return BlackjackGame(num_players=2, wallets=[500, 500], rng=rng)
