"""Blackjack game engine with state machine."""

import logging
from collections.abc import Sequence
from random import Random
from typing import Any, Callable

from transitions import Machine

from blackjack.cards import Card, Shoe
from blackjack.dealer import make_dealer
from blackjack.errors import ConfigurationError, IllegalActionError, SplitLimitError
from blackjack.game.events import EventEmitter, EventType, GameEvent
from blackjack.game.state import RoundState
from blackjack.hand import BJ_VALUE, BUSTED, HandValues, Outcome, judge
from blackjack.player import Action, Player

logger = logging.getLogger(__name__)

# Player index that addresses the dealer in accessors
DEALER = -1

# Most cards a hand can hold without busting (four aces, four twos, three threes)
MAX_CARDS_PER_HAND = 11

_ACTION_EVENTS = {
    Action.HIT: EventType.PLAYER_HIT,
    Action.STAND: EventType.PLAYER_STAND,
    Action.DOUBLE_DOWN: EventType.PLAYER_DOUBLE,
    Action.SPLIT: EventType.PLAYER_SPLIT,
}


def shuffle_position(draws_before: int, num_drawn: int, draws_after: int) -> int | None:
    """
    Locate a reshuffle inside a batch of draws.

    The shoe counts the draw that reaches the cut card against the old
    shuffle and restarts its counter after it, so the counter alone tells
    where the reshuffle fell.

    Args:
        draws_before: Shoe's draws-since-shuffle before the batch
        num_drawn: Number of cards drawn in the batch
        draws_after: Shoe's draws-since-shuffle after the batch

    Returns:
        Index within the batch of the last card dealt before the reshuffle,
        or None if no reshuffle happened
    """
    if draws_after == draws_before + num_drawn:
        return None
    return num_drawn - draws_after - 1


class BlackjackGame:
    """
    Blackjack table: one shoe, one dealer, and players seated left to right.

    Drives the round life cycle. Players are addressed by index ``i`` and
    their hands by index ``j``; ``DEALER`` addresses the dealer where noted.
    The engine is UI-agnostic: a front end calls the round operations in
    order, reads state through the accessors, and may follow along through
    events.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "start_deal", "source": "betting", "dest": "dealing"},
        {"trigger": "offer_insurance", "source": "dealing", "dest": "insurance"},
        {"trigger": "open_play", "source": ["dealing", "insurance"], "dest": "player_turns"},
        {"trigger": "start_dealer_turn", "source": ["insurance", "player_turns"], "dest": "dealer_turn"},
        {
            "trigger": "start_resolution",
            "source": ["insurance", "player_turns", "dealer_turn"],
            "dest": "resolution",
        },
        {"trigger": "start_cleanup", "source": "resolution", "dest": "cleanup"},
        {"trigger": "start_betting", "source": "cleanup", "dest": "betting"},
    ]

    def __init__(
        self,
        num_players: int = 1,
        num_decks: int = 6,
        table_min: int = 10,
        table_max: int = 10000,
        wallets: Sequence[int] = (500,),
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new blackjack game.

        Args:
            num_players: Number of players at the table
            num_decks: Number of decks in the shoe
            table_min: Smallest legal bet
            table_max: Largest legal bet
            wallets: Starting wealth of each player, left to right
            rng: Random number generator for reproducible games

        Raises:
            ConfigurationError: if any argument is out of range, or the shoe
                is too small to be sure of finishing a round
        """
        wallets = list(wallets)
        if num_players <= 0:
            raise ConfigurationError("num_players must be at least 1")
        if num_decks <= 0:
            raise ConfigurationError("num_decks must be at least 1")
        if table_min < 0 or table_min > table_max:
            raise ConfigurationError("Table limits must satisfy 0 <= table_min <= table_max")
        if len(wallets) != num_players:
            raise ConfigurationError(f"Expected {num_players} wallets, got {len(wallets)}")
        if ((MAX_CARDS_PER_HAND + 1) * (num_players + 1)) // 52 >= num_decks:
            raise ConfigurationError(f"{num_decks} decks cannot serve {num_players} players")

        self.table_min = table_min
        self.table_max = table_max
        self.shoe = Shoe(num_decks=num_decks, rng=rng)
        self.dealer = make_dealer(self.shoe)
        self.players = [Player(self.shoe, wealth) for wealth in wallets]
        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="betting",
            auto_transitions=False,
            model_attribute="_machine_state",
        )
        logger.info(
            "Table open: %d players, %d decks, limits $%d-$%d",
            num_players, num_decks, table_min, table_max,
        )

    @classmethod
    def from_config(cls, table: Any, rng: Random | None = None) -> "BlackjackGame":
        """Create a game from a table configuration (see ``config.TableConfig``)."""
        return cls(
            num_players=table.num_players,
            num_decks=table.num_decks,
            table_min=table.table_min,
            table_max=table.table_max,
            wallets=table.wallets,
            rng=rng,
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def _note_rejection(self, message: str) -> None:
        logger.warning("Rejected: %s", message)
        self.events.emit_new(EventType.INVALID_ACTION, message=message, state=self.state.name)

    def _reject(self, message: str) -> IllegalActionError:
        self._note_rejection(message)
        return IllegalActionError(message)

    def _require(self, what: str, *states: RoundState) -> None:
        if self.state not in states:
            raise self._reject(f"Cannot {what} during {self.state}")

    def _announce(self, draws_before: int, dealt: list[tuple[int, int, str]]) -> None:
        """Emit a CARD_DEALT per (player, hand, card) and locate any reshuffle among them."""
        for player_index, hand_index, card in dealt:
            self.events.emit_new(
                EventType.CARD_DEALT,
                player=player_index,
                hand=hand_index,
                card=card,
            )
        position = shuffle_position(draws_before, len(dealt), self.shoe.draws_since_shuffle)
        if position is not None:
            logger.info("Shoe reshuffled after card %d of %d", position + 1, len(dealt))
            self.events.emit_new(EventType.SHOE_SHUFFLED, position=position)

    # Round operations, in the order they are called

    def place_initial_bet(self, i: int, amount: int) -> None:
        """
        Place player i's opening bet.

        Raises:
            IllegalActionError: outside the table limits or beyond the
                player's wealth
        """
        self._require("bet", RoundState.BETTING)
        if amount < self.table_min or amount > self.table_max:
            raise self._reject(f"Bet must be between {self.table_min} and {self.table_max}")

        try:
            self.players[i].place_bet(0, amount)
        except IllegalActionError as exc:
            self._note_rejection(str(exc))
            raise

        self.events.emit_new(EventType.BET_PLACED, player=i, amount=amount)

    def deal_initial_cards(self) -> list[Card]:
        """
        Deal two cards to every player who can afford to play, and the dealer.

        Cards go one at a time: each player left to right then the dealer,
        twice over. The dealer's first card is dealt face down.

        Returns:
            Every card drawn, in order
        """
        self._require("deal", RoundState.BETTING)
        self.start_deal()

        cards = []
        for round_number in range(2):
            for i, player in enumerate(self.players):
                if self.has_enough_to_play(i, 0):
                    before = self.shoe.draws_since_shuffle
                    card = player.draw(0)
                    cards.append(card)
                    self._announce(before, [(i, 0, str(card))])

            before = self.shoe.draws_since_shuffle
            card = self.dealer.draw(0)
            cards.append(card)
            face = "hidden card" if round_number == 0 else str(card)
            self._announce(before, [(DEALER, 0, face)])

        self.events.emit_new(EventType.ROUND_STARTED, cards_dealt=len(cards))
        logger.info("Dealt %d cards, dealer shows %s", len(cards), self.dealer.hand(0).cards[1])

        if self.dealer_shows_ace:
            self.offer_insurance()
            self.events.emit_new(EventType.INSURANCE_OFFERED)
        else:
            self.open_play()
        return cards

    def player_insurance_bet(self, i: int, amount: int) -> None:
        """
        Place player i's insurance bet; zero declines.

        Raises:
            IllegalActionError: a non-zero amount outside the table limits,
                beyond the player's wealth, or over half the opening bet
        """
        self._require("buy insurance", RoundState.INSURANCE)
        if amount != 0 and (amount < self.table_min or amount > self.table_max):
            raise self._reject(
                f"Insurance must be 0 or between {self.table_min} and {self.table_max}"
            )

        try:
            self.players[i].place_insurance_bet(amount)
        except IllegalActionError as exc:
            self._note_rejection(str(exc))
            raise

        self.events.emit_new(EventType.INSURANCE_BET_PLACED, player=i, amount=amount)

    def player_action(self, i: int, j: int, action: Action) -> list[Card]:
        """
        Apply an action to player i's hand j.

        The first action taken closes the insurance round.

        Returns:
            The cards drawn by the action, in order (zero to two)

        Raises:
            IllegalActionError: the hand has no bet, is standing or busted,
                a double down would exceed the table maximum, or the player
                rejects the action
            SplitLimitError: the player already has two hands
        """
        self._require("act", RoundState.INSURANCE, RoundState.PLAYER_TURNS)
        player = self.players[i]
        bet = player.get_bet(j)

        if action == Action.DOUBLE_DOWN and bet * 2 > self.table_max:
            raise self._reject(f"Doubling ${bet} would exceed the table maximum")
        if bet < self.table_min:
            raise self._reject(f"Player {i} has not bet on hand {j}")
        if not self.is_not_standing_or_busted(i, j):
            raise self._reject(f"Player {i}'s hand {j} is finished")

        before = self.shoe.draws_since_shuffle
        try:
            drawn = player.take_action(j, action)
        except (IllegalActionError, SplitLimitError) as exc:
            self._note_rejection(str(exc))
            raise

        if self.state == RoundState.INSURANCE:
            self.open_play()

        # A split deals to the original hand first, then to the new one
        targets = [j, player.num_hands - 1] if action == Action.SPLIT else [j]
        self._announce(before, [(i, hand, str(card)) for hand, card in zip(targets, drawn)])
        self.events.emit_new(
            _ACTION_EVENTS[action],
            player=i,
            hand=j,
            score=player.score(j),
        )
        return drawn

    def dealer_turn(self) -> list[Card]:
        """
        Play the dealer's hand by the house rule.

        Returns:
            The cards the dealer drew, in order
        """
        self._require("play the dealer", RoundState.INSURANCE, RoundState.PLAYER_TURNS)
        self.start_dealer_turn()

        before = self.shoe.draws_since_shuffle
        drawn = self.dealer.draw_until_satisfied()
        self._announce(before, [(DEALER, 0, str(card)) for card in drawn])
        self.events.emit_new(EventType.DEALER_STANDS, score=self.score(DEALER))
        return drawn

    def _enter_resolution(self) -> None:
        if self.state != RoundState.RESOLUTION:
            self.start_resolution()

    def resolve_all_bets(self) -> list[Outcome]:
        """
        Settle every hand against the dealer and pay out.

        Returns:
            One outcome per hand: each player's hands left to right,
            players in seating order
        """
        self._require(
            "resolve bets",
            RoundState.INSURANCE,
            RoundState.PLAYER_TURNS,
            RoundState.DEALER_TURN,
            RoundState.RESOLUTION,
        )
        self._enter_resolution()

        dealer_score = self.score(DEALER)
        outcomes = []
        for i, player in enumerate(self.players):
            for j in range(player.num_hands):
                outcome = judge(player.score(j), dealer_score, player.hand(j).has_split_aces)
                bet = player.get_bet(j)
                player.resolve_bet(j, outcome)
                outcomes.append(outcome)
                self.events.emit_new(
                    EventType.BET_RESOLVED,
                    player=i,
                    hand=j,
                    outcome=outcome,
                    bet=bet,
                    payout=outcome.payout(bet),
                )

        logger.info("Round resolved: %s", ", ".join(str(o) for o in outcomes))
        return outcomes

    def resolve_all_insurance_bets(self) -> None:
        """Pay 2:1 plus stake on every insurance bet if the dealer has blackjack."""
        self._require(
            "resolve insurance",
            RoundState.INSURANCE,
            RoundState.PLAYER_TURNS,
            RoundState.DEALER_TURN,
            RoundState.RESOLUTION,
        )
        self._enter_resolution()

        dealer_blackjack = self.dealer_has_blackjack
        for i, player in enumerate(self.players):
            amount = player.insurance_bet
            player.resolve_insurance_bet(dealer_blackjack)
            if amount:
                self.events.emit_new(
                    EventType.INSURANCE_RESOLVED,
                    player=i,
                    amount=amount,
                    won=dealer_blackjack,
                )

    def end_turn(self) -> None:
        """Collect every card into the discard pile and reopen betting."""
        self._require("end the round", RoundState.RESOLUTION)
        self.start_cleanup()

        for player in self.players:
            player.sit()
            player.discard()
        self.dealer.sit()
        self.dealer.discard()

        self.start_betting()
        self.events.emit_new(
            EventType.ROUND_ENDED,
            draws_since_shuffle=self.shoe.draws_since_shuffle,
            discard_size=self.shoe.discard_size,
        )

    # Accessors

    def _holder(self, i: int) -> Player:
        return self.dealer if i == DEALER else self.players[i]

    def get_hand(self, i: int, j: int = 0) -> list[Card]:
        """Return a copy of player i's hand j, or the dealer's hand for DEALER."""
        return self._holder(i).get_hand(0 if i == DEALER else j)

    def hand_values(self, i: int, j: int = 0) -> HandValues:
        """Return the low and high totals of player i's hand j (or the dealer's)."""
        return self._holder(i).hand_values(0 if i == DEALER else j)

    def score(self, i: int, j: int = 0) -> int:
        """Return the score of player i's hand j (or the dealer's): BJ_VALUE, BUSTED or a total."""
        return self._holder(i).score(0 if i == DEALER else j)

    def get_wealth(self, i: int) -> int:
        """Return player i's wealth, not counting money at stake."""
        return self.players[i].wealth

    def get_bet(self, i: int, j: int = 0) -> int:
        """Return player i's bet on hand j."""
        return self.players[i].get_bet(j)

    def get_insurance_bet(self, i: int) -> int:
        """Return player i's insurance bet."""
        return self.players[i].insurance_bet

    def num_hands(self, i: int) -> int:
        """Return the number of hands player i holds."""
        return self.players[i].num_hands

    @property
    def num_players(self) -> int:
        """Return the number of players."""
        return len(self.players)

    @property
    def draws_since_shuffle(self) -> int:
        """Return the shoe's draws since its last reshuffle."""
        return self.shoe.draws_since_shuffle

    def is_not_standing_or_busted(self, i: int, j: int = 0) -> bool:
        """Check if player i's hand j can still act."""
        player = self.players[i]
        return not player.is_standing(j) and player.score(j) != BUSTED

    def has_enough_to_play(self, i: int, j: int = 0) -> bool:
        """Check if player i can cover the table minimum or has already bet it on hand j."""
        player = self.players[i]
        return player.wealth >= self.table_min or player.get_bet(j) >= self.table_min

    @property
    def dealer_shows_ace(self) -> bool:
        """Check if the dealer's face-up (second) card is an Ace."""
        cards = self.dealer.hand(0).cards
        return len(cards) >= 2 and cards[1].is_ace

    @property
    def dealer_has_blackjack(self) -> bool:
        """Check if the dealer holds a natural."""
        return self.score(DEALER) == BJ_VALUE

    def render(self, i: int) -> str:
        """Return the text form of player i, or of the dealer for DEALER."""
        return str(self._holder(i))
