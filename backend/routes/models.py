"""Pydantic request models for API endpoints."""

from pydantic import BaseModel


class RequestVerificationBody(BaseModel):
    name: str
    email: str
    difficulty: str | None = None


class SelectCharacterBody(BaseModel):
    character_id: str


class AchievementBody(BaseModel):
    id: str
    title: str
    description: str = ""
    icon: str = ""
    progress: int | None = None
    max_progress: int | None = None


class UpdateSettings(BaseModel):
    roster_seed: int | None = None
    default_difficulty: str | None = None
    calendar_unlocks: bool | None = None
    verification_ttl_minutes: int | None = None
