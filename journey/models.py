"""Core journey models.

The ledger, projector and storage all operate on these types.
Pydantic is used for validation and serialisation at every data boundary.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

JOURNEY_LENGTH = 30
LANDMARK_DAYS = (5, 10, 15, 20, 25)
RECORD_VERSION = 1

Difficulty = Literal["beginner", "intermediate", "advanced"]
ActivityType = Literal["quiz", "puzzle", "story", "craft", "song"]

DIFFICULTIES: tuple[str, ...] = ("beginner", "intermediate", "advanced")
ACTIVITY_TYPES: tuple[str, ...] = ("quiz", "puzzle", "story", "craft", "song")


class Position(BaseModel):
    """Layout coordinate for the journey map. The core never reads it."""

    x: float
    y: float


class Activity(BaseModel):
    """One day of the journey."""

    id: str
    day: int
    title: str
    description: str
    difficulty: Difficulty = "beginner"
    type: ActivityType
    completed: bool = False
    unlocked: bool = False
    reward: str | None = None
    position: Position


class Character(BaseModel):
    """A selectable avatar. Locked ones open up after enough completions."""

    id: str
    name: str
    description: str
    avatar: str
    unlocked: bool = False
    required_completions: int = 0


class User(BaseModel):
    id: str
    name: str
    email: str
    difficulty: Difficulty = "beginner"
    character_id: str | None = None
    registered_at: datetime


class Achievement(BaseModel):
    """An append-only trophy entry."""

    id: str
    title: str
    description: str = ""
    icon: str = ""
    unlocked_at: datetime | None = None
    progress: int | None = None
    max_progress: int | None = None


class LedgerRecord(BaseModel):
    """Full persisted state of one learner's journey."""

    version: int = RECORD_VERSION
    user: User
    activities: list[Activity]
    characters: list[Character]
    selected_character_id: str | None = None
    achievements: list[Achievement] = Field(default_factory=list)
    current_day: int = 1
    character_selection_required: bool = True


class CompletionResult(BaseModel):
    """What a single ``complete_activity`` call changed."""

    activity: Activity
    unlocked_activity: Activity | None = None
    unlocked_characters: list[Character] = Field(default_factory=list)
    already_completed: bool = False


class Landmark(BaseModel):
    day: int
    activity: Activity


class Projection(BaseModel):
    """Display-ready state derived from a ledger record."""

    completed_count: int
    total: int = JOURNEY_LENGTH
    completion_percentage: float
    current_day: int
    current_day_label: int
    landmarks: list[Landmark]
    scroll_position: int
    character_position: int
    focus_activity_id: str | None = None
    selected_character_id: str | None = None
    character_selection_required: bool = True
