"""Two-phase registration.

request_verification() checks the sign-up form and hands back a one-time
token; confirm_verification() consumes it and registers the learner. The
desk only holds pending sign-ups in memory; nothing here sleeps or schedules.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from journey.errors import NotFoundError, ValidationError
from journey.ledger import Ledger, as_utc
from journey.models import DIFFICULTIES
from journey.roster import Roster

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PendingRegistration:
    token: str
    name: str
    email: str
    difficulty: str
    requested_at: datetime


class VerificationDesk:
    def __init__(self, roster: Roster | None = None, ttl_minutes: int = 30) -> None:
        self.roster = roster or Roster()
        self.ttl = timedelta(minutes=ttl_minutes)
        self._pending: dict[str, PendingRegistration] = {}

    def request_verification(
        self,
        name: str,
        email: str,
        difficulty: str = "beginner",
        *,
        now: datetime | None = None,
    ) -> PendingRegistration:
        name = (name or "").strip()
        email = (email or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        if not email:
            raise ValidationError("Email is required", field="email")
        if difficulty not in DIFFICULTIES:
            raise ValidationError(
                f"Unknown difficulty '{difficulty}'", field="difficulty", value=difficulty
            )
        now = as_utc(now or datetime.now(timezone.utc))
        self.purge_expired(now)
        pending = PendingRegistration(
            token=secrets.token_urlsafe(16),
            name=name,
            email=email,
            difficulty=difficulty,
            requested_at=now,
        )
        self._pending[pending.token] = pending
        logger.info(f"Verification requested for {email}")
        return pending

    def confirm_verification(self, token: str, *, now: datetime | None = None) -> Ledger:
        """Consume a token and register its learner. Tokens work once."""
        pending = self._pending.pop(token, None)
        if pending is None:
            raise NotFoundError("Unknown or already used verification token", token=token)
        now = as_utc(now or datetime.now(timezone.utc))
        if now - pending.requested_at > self.ttl:
            logger.warning(f"Verification token for {pending.email} expired")
            raise ValidationError(
                "Verification token has expired",
                field="token",
                requested_at=pending.requested_at.isoformat(),
            )
        return Ledger.register(
            pending.name,
            pending.email,
            pending.difficulty,
            roster=self.roster,
            now=now,
        )

    def purge_expired(self, now: datetime | None = None) -> int:
        """Drop sign-ups whose token can no longer be confirmed."""
        now = as_utc(now or datetime.now(timezone.utc))
        expired = [
            token
            for token, pending in self._pending.items()
            if now - pending.requested_at > self.ttl
        ]
        for token in expired:
            del self._pending[token]
        if expired:
            logger.info(f"Purged {len(expired)} expired verification token(s)")
        return len(expired)

    def pending_count(self) -> int:
        return len(self._pending)
