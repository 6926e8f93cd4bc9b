"""Per-learner progression ledger.

The Ledger is the only thing that mutates journey state. Each command checks
all of its preconditions before touching the record, so a rejected command
leaves the ledger exactly as it was.

Unlock rules:
  completion  : completing day N unlocks day N+1 (if any) and moves
                current_day to at least N+1, capped at the journey length
  calendar    : unlock_next_day() moves current_day forward by one and
                unlocks the activity for the day it lands on
  characters  : a locked character unlocks once the completed count reaches
                its required_completions

Unlock flags are one-way: nothing in this module ever sets one back to False.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

import pydantic

from journey import projector
from journey.errors import (
    CorruptStateError,
    DuplicateError,
    LockedActivityError,
    LockedCharacterError,
    NotFoundError,
    ValidationError,
)
from journey.models import (
    JOURNEY_LENGTH,
    RECORD_VERSION,
    Achievement,
    Activity,
    Character,
    CompletionResult,
    LedgerRecord,
    Projection,
    User,
)
from journey.roster import Roster

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_since(start: datetime, now: datetime | None = None) -> int:
    """Return full UTC calendar days between start and now."""
    now_dt = as_utc(now or _utcnow())
    delta = (now_dt.date() - as_utc(start).date()).days
    return max(0, delta)


class Ledger:
    def __init__(self, record: LedgerRecord) -> None:
        self._record = record

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def register(
        cls,
        name: str,
        email: str,
        difficulty: str = "beginner",
        *,
        roster: Roster | None = None,
        now: datetime | None = None,
    ) -> "Ledger":
        """Start a fresh journey: day 1 unlocked, no character chosen."""
        name = (name or "").strip()
        email = (email or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        if not email:
            raise ValidationError("Email is required", field="email")
        roster = roster or Roster()
        activities = roster.build_activities(difficulty)
        user = User(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            difficulty=difficulty,
            registered_at=as_utc(now or _utcnow()),
        )
        record = LedgerRecord(
            user=user,
            activities=activities,
            characters=roster.build_characters(),
        )
        logger.info(f"Registered learner {user.id} on the {difficulty} path")
        return cls(record)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def user_id(self) -> str:
        return self._record.user.id

    @property
    def current_day(self) -> int:
        return self._record.current_day

    @property
    def selected_character_id(self) -> str | None:
        return self._record.selected_character_id

    @property
    def completed_count(self) -> int:
        return sum(1 for a in self._record.activities if a.completed)

    def activity(self, activity_id: str) -> Activity:
        return self._find_activity(activity_id).model_copy(deep=True)

    def character(self, character_id: str) -> Character:
        return self._find_character(character_id).model_copy(deep=True)

    def snapshot(self) -> LedgerRecord:
        """Deep copy of the full state; safe to hand to other collaborators."""
        return self._record.model_copy(deep=True)

    def project(self) -> Projection:
        return projector.project(self._record)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def select_character(self, character_id: str) -> Character:
        character = self._find_character(character_id)
        if not character.unlocked:
            logger.warning(f"{self.user_id}: character '{character_id}' is still locked")
            raise LockedCharacterError(
                f"Character '{character.name}' is locked",
                character_id=character_id,
                required_completions=character.required_completions,
                completed_count=self.completed_count,
            )
        self._record.selected_character_id = character.id
        self._record.user.character_id = character.id
        self._record.character_selection_required = False
        return character.model_copy(deep=True)

    def complete_activity(self, activity_id: str) -> CompletionResult:
        activity = self._find_activity(activity_id)
        if not activity.unlocked:
            logger.warning(f"{self.user_id}: '{activity_id}' completed while locked")
            raise LockedActivityError(
                f"Day {activity.day} is still locked",
                activity_id=activity_id,
                day=activity.day,
                current_day=self._record.current_day,
                rule="an activity must be unlocked before it can be completed",
            )
        if activity.completed:
            return CompletionResult(
                activity=activity.model_copy(deep=True), already_completed=True
            )

        activity.completed = True
        unlocked_activity = None
        following = self._activity_for_day(activity.day + 1)
        if following is not None and not following.unlocked:
            following.unlocked = True
            unlocked_activity = following.model_copy(deep=True)
        self._record.current_day = min(
            max(self._record.current_day, activity.day + 1), JOURNEY_LENGTH
        )
        unlocked_characters = self._unlock_characters()
        logger.info(
            f"{self.user_id}: completed day {activity.day} "
            f"({self.completed_count}/{JOURNEY_LENGTH})"
        )
        return CompletionResult(
            activity=activity.model_copy(deep=True),
            unlocked_activity=unlocked_activity,
            unlocked_characters=unlocked_characters,
        )

    def unlock_next_day(self) -> Activity | None:
        """Advance the calendar by one day. Returns the activity it unlocked, if any."""
        if self._record.current_day < JOURNEY_LENGTH:
            self._record.current_day += 1
        reached = self._activity_for_day(self._record.current_day)
        if reached is None or reached.unlocked:
            return None
        reached.unlocked = True
        logger.info(f"{self.user_id}: calendar unlocked day {reached.day}")
        return reached.model_copy(deep=True)

    def sync_calendar(self, now: datetime | None = None) -> list[Activity]:
        """Catch current_day up with the days elapsed since registration."""
        elapsed = days_since(self._record.user.registered_at, now)
        target = min(elapsed + 1, JOURNEY_LENGTH)
        unlocked = []
        while self._record.current_day < target:
            activity = self.unlock_next_day()
            if activity is not None:
                unlocked.append(activity)
        return unlocked

    def add_achievement(
        self, achievement: Achievement, *, now: datetime | None = None
    ) -> Achievement:
        if any(a.id == achievement.id for a in self._record.achievements):
            raise DuplicateError(
                f"Achievement '{achievement.id}' already earned",
                achievement_id=achievement.id,
            )
        entry = achievement.model_copy(
            deep=True, update={"unlocked_at": as_utc(now or _utcnow())}
        )
        self._record.achievements.append(entry)
        logger.info(f"{self.user_id}: earned achievement '{entry.id}'")
        return entry.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_record(self) -> dict[str, Any]:
        return self._record.model_dump(mode="json")

    def to_json(self) -> str:
        return self._record.model_dump_json(indent=2)

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "Ledger":
        try:
            record = LedgerRecord.model_validate(data)
        except pydantic.ValidationError as e:
            raise _corrupt_from(e) from e
        _check_record(record)
        return cls(record)

    @classmethod
    def from_json(cls, text: str | bytes) -> "Ledger":
        try:
            record = LedgerRecord.model_validate_json(text)
        except pydantic.ValidationError as e:
            raise _corrupt_from(e) from e
        _check_record(record)
        return cls(record)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return self._record.model_dump() == other._record.model_dump()

    def __repr__(self) -> str:
        return (
            f"Ledger(user_id={self.user_id!r}, current_day={self.current_day}, "
            f"completed={self.completed_count})"
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find_activity(self, activity_id: str) -> Activity:
        for activity in self._record.activities:
            if activity.id == activity_id:
                return activity
        raise NotFoundError(f"Unknown activity '{activity_id}'", activity_id=activity_id)

    def _find_character(self, character_id: str) -> Character:
        for character in self._record.characters:
            if character.id == character_id:
                return character
        raise NotFoundError(
            f"Unknown character '{character_id}'", character_id=character_id
        )

    def _activity_for_day(self, day: int) -> Activity | None:
        for activity in self._record.activities:
            if activity.day == day:
                return activity
        return None

    def _unlock_characters(self) -> list[Character]:
        completed = self.completed_count
        unlocked = []
        for character in self._record.characters:
            if not character.unlocked and completed >= character.required_completions:
                character.unlocked = True
                unlocked.append(character.model_copy(deep=True))
                logger.info(f"{self.user_id}: unlocked character '{character.id}'")
        return unlocked


def _corrupt_from(e: pydantic.ValidationError) -> CorruptStateError:
    errors = [
        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]}
        for err in e.errors()
    ]
    logger.warning(f"Rejected ledger record: {len(errors)} schema error(s)")
    return CorruptStateError("Ledger record failed schema validation", errors=errors)


def _check_record(record: LedgerRecord) -> None:
    """Raise CorruptStateError if a stored record breaks a structural invariant."""

    def fail(message: str, **detail: Any) -> None:
        logger.warning(f"Rejected ledger record for {record.user.id}: {message}")
        raise CorruptStateError(message, user_id=record.user.id, **detail)

    if record.version != RECORD_VERSION:
        fail(
            f"Unsupported record version {record.version}",
            rule="version",
            version=record.version,
        )

    days = sorted(a.day for a in record.activities)
    if days != list(range(1, JOURNEY_LENGTH + 1)):
        missing = sorted(set(range(1, JOURNEY_LENGTH + 1)) - set(days))
        fail(
            f"Activity days must run 1..{JOURNEY_LENGTH} without gaps",
            rule="day_contiguity",
            missing_days=missing,
            days=days,
        )

    ids = [a.id for a in record.activities]
    if len(set(ids)) != len(ids):
        fail("Activity ids must be unique", rule="unique_activity_ids")

    for activity in record.activities:
        if activity.completed and not activity.unlocked:
            fail(
                f"Day {activity.day} is completed but locked",
                rule="completed_implies_unlocked",
                activity_id=activity.id,
            )

    if not 1 <= record.current_day <= JOURNEY_LENGTH:
        fail(
            f"current_day {record.current_day} is out of range",
            rule="current_day_range",
            current_day=record.current_day,
        )

    completed_days = [a.day for a in record.activities if a.completed]
    if completed_days:
        floor = min(max(completed_days) + 1, JOURNEY_LENGTH)
        if record.current_day < floor:
            fail(
                f"current_day {record.current_day} is behind completed day {max(completed_days)}",
                rule="current_day_behind_completions",
                current_day=record.current_day,
                expected_at_least=floor,
            )

    character_ids = [c.id for c in record.characters]
    if len(set(character_ids)) != len(character_ids):
        fail("Character ids must be unique", rule="unique_character_ids")
    if (
        record.selected_character_id is not None
        and record.selected_character_id not in character_ids
    ):
        fail(
            f"Selected character '{record.selected_character_id}' does not exist",
            rule="selected_character_exists",
            character_id=record.selected_character_id,
        )

    if record.selected_character_id is not None:
        selected = next(c for c in record.characters if c.id == record.selected_character_id)
        if not selected.unlocked:
            fail(
                f"Selected character '{selected.id}' is still locked",
                rule="selected_character_unlocked",
                character_id=selected.id,
            )
    if record.user.character_id != record.selected_character_id:
        fail(
            "User character does not match the selected character",
            rule="user_character_matches",
            user_character_id=record.user.character_id,
            selected_character_id=record.selected_character_id,
        )

    record.activities.sort(key=lambda a: a.day)
