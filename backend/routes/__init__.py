"""FastAPI API endpoints under /api.

Endpoint groups: settings (health, config, roster), verifications (two-phase
registration), journeys (snapshot, view, and the progression commands).
Every journey command runs under that learner's session lock and is saved
before the response is sent.
"""

from fastapi import APIRouter

from .journeys import router as journeys_router
from .settings import router as settings_router
from .verifications import router as verifications_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(verifications_router)
router.include_router(journeys_router)
