# dim_scorekeeper/errors.py
"""Rule violations raised by the round engine.

Every error is recoverable: the engine corrects its local state where needed,
records the message as its current error and re-raises.
"""

from __future__ import annotations


class DimError(ValueError):
    """Base class for Dim rule errors."""

    code = "DIM_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"[{self.code}] {message}")


class ValidationError(DimError):
    """Raised when the game setup input is incomplete or out of range."""

    code = "VALIDATION"


class TurnViolation(DimError):
    """Raised when a bet is submitted out of turn."""

    code = "NOT_YOUR_TURN"

    def __init__(self, message: str, turn_holder: int) -> None:
        self.turn_holder = turn_holder
        super().__init__(message)


class CapacityExceeded(DimError):
    """Raised when recorded hands would total more than the round's tricks."""

    code = "CAPACITY_EXCEEDED"


class InconsistentState(DimError):
    """Raised when a defensive re-validation fails and a phase is reopened."""

    code = "INCONSISTENT_STATE"


class IllegalValue(DimError):
    """Raised when a bet or hand count is not among the legal choices."""

    code = "ILLEGAL_VALUE"


class OutOfPhase(DimError):
    """Raised for operations on a round that is not active or not in the right phase."""

    code = "OUT_OF_PHASE"
