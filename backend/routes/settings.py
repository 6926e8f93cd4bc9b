"""Health check, settings, and roster endpoints."""

from datetime import timedelta

from fastapi import APIRouter, Request

from journey import Roster, ValidationError
from journey.models import DIFFICULTIES

from .models import UpdateSettings

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings(request: Request):
    """Get app settings (roster seed, default difficulty, calendar unlocks)."""
    return request.app.state.storage.get_config()


@router.patch("/settings")
async def update_settings(request: Request, body: UpdateSettings):
    """Update app settings (partial merge). New sign-ups pick up the changes."""
    fields = body.model_dump(exclude_none=True)
    difficulty = fields.get("default_difficulty")
    if difficulty is not None and difficulty not in DIFFICULTIES:
        raise ValidationError(
            f"Unknown difficulty '{difficulty}'", field="default_difficulty", value=difficulty
        )
    config = request.app.state.storage.update_config(fields)
    desk = request.app.state.desk
    desk.roster = Roster(seed=config["roster_seed"])
    desk.ttl = timedelta(minutes=config["verification_ttl_minutes"])
    return config


@router.get("/roster")
async def get_roster(request: Request):
    """The journey template new learners start from."""
    roster: Roster = request.app.state.desk.roster
    difficulty = request.app.state.storage.get_config()["default_difficulty"]
    return {
        "seed": roster.seed,
        "characters": roster.build_characters(),
        "activities": roster.build_activities(difficulty),
    }
