"""Journey snapshot, view, and progression command endpoints."""

from fastapi import APIRouter, HTTPException, Request

from journey import Achievement

from .models import AchievementBody, SelectCharacterBody

router = APIRouter()


def _open(request: Request, user_id: str):
    return request.app.state.sessions.open(request.app.state.storage, user_id)


@router.get("/journeys")
async def list_journeys(request: Request):
    """List learner ids with a stored journey."""
    return request.app.state.storage.list_ledgers()


@router.get("/journeys/{user_id}")
async def get_journey(request: Request, user_id: str):
    """Full snapshot of a learner's journey."""
    async with _open(request, user_id) as ledger:
        return ledger.snapshot()


@router.get("/journeys/{user_id}/view")
async def get_view(request: Request, user_id: str):
    """Derived map state: progress, current day, landmarks, scroll offsets."""
    async with _open(request, user_id) as ledger:
        return ledger.project()


@router.post("/journeys/{user_id}/character")
async def select_character(request: Request, user_id: str, body: SelectCharacterBody):
    """Choose the learner's travelling companion."""
    async with _open(request, user_id) as ledger:
        ledger.select_character(body.character_id)
        return ledger.snapshot()


@router.post("/journeys/{user_id}/activities/{activity_id}/complete")
async def complete_activity(request: Request, user_id: str, activity_id: str):
    """Complete an unlocked activity; reports anything it unlocked."""
    async with _open(request, user_id) as ledger:
        result = ledger.complete_activity(activity_id)
        return {"result": result, "view": ledger.project()}


@router.post("/journeys/{user_id}/advance-day")
async def advance_day(request: Request, user_id: str):
    """Calendar-driven unlock of the next day."""
    async with _open(request, user_id) as ledger:
        unlocked = ledger.unlock_next_day()
        return {"unlocked_activity": unlocked, "current_day": ledger.current_day}


@router.post("/journeys/{user_id}/achievements", status_code=201)
async def add_achievement(request: Request, user_id: str, body: AchievementBody):
    """Record a newly earned achievement."""
    async with _open(request, user_id) as ledger:
        return ledger.add_achievement(Achievement(**body.model_dump()))


@router.delete("/journeys/{user_id}")
async def delete_journey(request: Request, user_id: str):
    """Remove a learner's stored journey."""
    storage = request.app.state.storage
    sessions = request.app.state.sessions
    try:
        async with sessions.lock(user_id):
            if not storage.delete_ledger(user_id):
                raise HTTPException(404, "Journey not found")
    finally:
        sessions.forget(user_id)
    return {"ok": True}
