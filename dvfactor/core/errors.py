"""Exception hierarchy shared by the engine, repositories and services."""
from __future__ import annotations


class DVFactorError(Exception):
    """Base class for every error raised by the service.

    ``context`` carries the identifiers (edition, user, employee, ...) an
    operator needs to diagnose the failure without re-deriving state.
    """

    status_code = 400
    retryable = False

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = {key: value for key, value in context.items() if value is not None}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"

    def as_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "error": type(self).__name__,
            "detail": self.message,
            "context": {key: str(value) for key, value in self.context.items()},
        }
        if self.retryable:
            payload["retryable"] = True
        return payload


class PayoutTableError(DVFactorError):
    """The payout percentage table cannot answer a required lookup."""

    status_code = 500


class DuplicateRecordError(DVFactorError):
    """A (user, edition) record already exists where a new one was expected."""

    status_code = 409


class BetValidationError(DVFactorError):
    """A bet selection breaks the distinctness or bonus rules."""

    status_code = 422


class ProfileValidationError(DVFactorError):
    """A nickname or display name breaks the profile rules."""

    status_code = 422


class NotFoundError(DVFactorError):
    """A referenced record does not exist."""

    status_code = 404


class EditionClosedError(DVFactorError):
    """The edition no longer accepts bets."""

    status_code = 409


class PaymentRequiredError(DVFactorError):
    """The participant must have a confirmed payment for this action."""

    status_code = 402


class InvalidTransitionError(DVFactorError):
    """A lifecycle transition is not allowed from the current state."""

    status_code = 409


class DataStoreUnavailableError(DVFactorError):
    """The relational store could not be reached; the caller may retry."""

    status_code = 503
    retryable = True


__all__ = [
    "BetValidationError",
    "DVFactorError",
    "DataStoreUnavailableError",
    "DuplicateRecordError",
    "EditionClosedError",
    "InvalidTransitionError",
    "NotFoundError",
    "PaymentRequiredError",
    "PayoutTableError",
    "ProfileValidationError",
]
