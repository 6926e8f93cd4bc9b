"""30-day journey progression core."""

from .errors import (
    ConfigurationError,
    CorruptStateError,
    DuplicateError,
    JourneyError,
    LockedActivityError,
    LockedCharacterError,
    NotFoundError,
    ValidationError,
)
from .ledger import Ledger
from .models import (
    JOURNEY_LENGTH,
    LANDMARK_DAYS,
    Achievement,
    Activity,
    Character,
    CompletionResult,
    LedgerRecord,
    Projection,
    User,
)
from .projector import project
from .roster import Roster
from .storage import Storage
from .verification import VerificationDesk

__all__ = [
    "JOURNEY_LENGTH",
    "LANDMARK_DAYS",
    "Achievement",
    "Activity",
    "Character",
    "CompletionResult",
    "ConfigurationError",
    "CorruptStateError",
    "DuplicateError",
    "JourneyError",
    "Ledger",
    "LedgerRecord",
    "LockedActivityError",
    "LockedCharacterError",
    "NotFoundError",
    "Projection",
    "Roster",
    "Storage",
    "User",
    "ValidationError",
    "VerificationDesk",
    "project",
]
