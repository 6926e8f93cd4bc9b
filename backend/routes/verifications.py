"""Two-phase sign-up endpoints."""

from fastapi import APIRouter, Request

from .models import RequestVerificationBody

router = APIRouter()


@router.post("/verifications", status_code=201)
async def request_verification(request: Request, body: RequestVerificationBody):
    """Start a sign-up and return the one-time confirmation token."""
    difficulty = body.difficulty or request.app.state.storage.get_config()["default_difficulty"]
    pending = request.app.state.desk.request_verification(body.name, body.email, difficulty)
    return {"token": pending.token, "email": pending.email}


@router.post("/verifications/{token}/confirm", status_code=201)
async def confirm_verification(request: Request, token: str):
    """Consume a token, register the learner, and persist their new journey."""
    storage = request.app.state.storage
    ledger = request.app.state.desk.confirm_verification(token)
    async with request.app.state.sessions.lock(ledger.user_id):
        storage.save_ledger(ledger)
    return ledger.snapshot()
