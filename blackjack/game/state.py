"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round life cycle states.

    Flow: BETTING → DEALING → (INSURANCE) → PLAYER_TURNS → DEALER_TURN → RESOLUTION → CLEANUP
    """

    # Initial bets are taken
    BETTING = auto()

    # Two cards each, players first then dealer, twice
    DEALING = auto()

    # Only when the dealer's face-up card is an Ace
    INSURANCE = auto()

    # Players act on their hands
    PLAYER_TURNS = auto()

    # Dealer draws to 17
    DEALER_TURN = auto()

    # Bets and insurance are paid out
    RESOLUTION = auto()

    # Cards return to the shoe
    CLEANUP = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[RoundState, list[RoundState]] = {
    RoundState.BETTING: [RoundState.DEALING],
    RoundState.DEALING: [RoundState.INSURANCE, RoundState.PLAYER_TURNS],
    RoundState.INSURANCE: [RoundState.PLAYER_TURNS, RoundState.DEALER_TURN, RoundState.RESOLUTION],
    RoundState.PLAYER_TURNS: [RoundState.DEALER_TURN, RoundState.RESOLUTION],  # RESOLUTION if dealer BJ
    RoundState.DEALER_TURN: [RoundState.RESOLUTION],
    RoundState.RESOLUTION: [RoundState.CLEANUP],
    RoundState.CLEANUP: [RoundState.BETTING],
}


def is_valid_transition(from_state: RoundState, to_state: RoundState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
