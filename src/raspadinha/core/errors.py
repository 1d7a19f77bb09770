"""Game error taxonomy.

Every error carries an HTTP status hint so the API layer can map it without
knowing the concrete type. None of them is fatal; all are raised before any
state is mutated.
"""

from __future__ import annotations


class GameError(Exception):
    """Base game error with HTTP status hint."""

    status_code: int = 400

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(detail)


class InvalidConfiguration(GameError):
    """A price tier or its payout table failed validation at load time."""

    status_code = 500


class InvalidStateTransition(GameError):
    """An operation was invoked from a state that does not permit it."""

    status_code = 409

    def __init__(self, current_state: str, operation: str) -> None:
        self.current_state = current_state
        self.operation = operation
        super().__init__(f"Cannot {operation} while session is '{current_state}'")


class OutOfRangeInput(GameError):
    """An input value fell outside its accepted range."""

    status_code = 422


class UnknownTier(OutOfRangeInput):
    """No price tier is configured for the requested value."""

    status_code = 404


class PaymentError(GameError):
    """The simulated payment was rejected."""

    status_code = 402
