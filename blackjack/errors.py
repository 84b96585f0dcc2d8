"""Exceptions raised by the blackjack engine."""


class BlackjackError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(BlackjackError, ValueError):
    """Invalid construction parameters for a game, shoe, card or player."""


class InvalidCardError(ConfigurationError):
    """Rank or suit outside its domain, or a joker paired with a real suit."""


class IllegalActionError(BlackjackError, ValueError):
    """
    A bet or action the current table state does not allow.

    Recoverable: the engine state is left unchanged and the caller may
    re-prompt.
    """


class SplitLimitError(BlackjackError):
    """A player who already holds two hands tried to split again."""


class EmptyDeckError(BlackjackError, IndexError):
    """Draw from a deck with no cards left."""
