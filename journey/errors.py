"""Typed failures raised by the journey core.

Every error carries a ``detail`` dict naming the offending id and the rule
that was violated, so a caller can build a message without re-reading state.
"""

from __future__ import annotations

from typing import Any


class JourneyError(Exception):
    """Base class for all recoverable journey failures."""

    kind = "journey_error"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind, "message": self.message, "detail": self.detail}


class ValidationError(JourneyError):
    """Bad input to a command (blank name, unknown difficulty, expired token)."""

    kind = "validation_error"


class NotFoundError(JourneyError):
    kind = "not_found"


class LockedActivityError(JourneyError):
    kind = "locked_activity"


class LockedCharacterError(JourneyError):
    kind = "locked_character"


class DuplicateError(JourneyError):
    kind = "duplicate"


class CorruptStateError(JourneyError):
    """A persisted record violates the ledger's structural invariants."""

    kind = "corrupt_state"


class ConfigurationError(JourneyError):
    """The roster cannot be built from the supplied tables."""

    kind = "configuration_error"
