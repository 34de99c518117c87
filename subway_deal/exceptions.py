"""
Custom exception hierarchy for the Subway Deal rules engine.

Provides typed errors that can be handled consistently across
the engine, the match host and the API layer. Every error carries a
stable ``code`` (the class name) that is reported to clients.
"""


class SubwayDealError(Exception):
    """Base exception for all game-related errors."""

    def __init__(self, message: str = ""):
        self.message = message or (self.__class__.__doc__ or "").strip()
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.__class__.__name__


class ValidationError(SubwayDealError):
    """Action is not legal in the current state."""


class NotYourTurn(ValidationError):
    """It is not this player's turn."""


class NotYourResponse(ValidationError):
    """Only the current target of the pending action may respond."""


class ActionBudgetExhausted(ValidationError):
    """No actions left this turn."""


class InvalidPlacement(ValidationError):
    """Card cannot be placed in that property set."""


class NotFound(ValidationError):
    """Card is not where it was expected."""


class NoSuchSet(ValidationError):
    """Player owns no cards of that color."""


class NotEligible(ValidationError):
    """Target or card is not eligible for the requested effect."""


class AlreadyPending(ValidationError):
    """Another action is already awaiting responses."""


class NoCounterAvailable(ValidationError):
    """Player holds no matching Fare Evasion card."""


class GameAlreadyOver(ValidationError):
    """The match has already been won."""


class MalformedPayload(ValidationError):
    """Action payload is missing fields or has the wrong shape."""


class UnknownAction(ValidationError):
    """Action type is not recognised."""


class CardNotInHand(ValidationError):
    """Card is not in the player's hand."""


class CardNotBankable(ValidationError):
    """Card cannot be placed in the bank."""


class PendingActionOutstanding(ValidationError):
    """Turn cannot advance while an action awaits responses."""


class IntegrityError(SubwayDealError):
    """Game data references something that does not exist."""


class UnknownCard(IntegrityError):
    """Card id is not in the catalog."""


class UnknownColor(IntegrityError):
    """Color tag is not defined."""


class CorruptedSet(IntegrityError):
    """Property set contents contradict the game state."""
