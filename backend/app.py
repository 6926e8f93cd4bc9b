import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.routes import router
from backend.sessions import SessionRegistry
from journey import (
    ConfigurationError,
    CorruptStateError,
    DuplicateError,
    JourneyError,
    LockedActivityError,
    LockedCharacterError,
    NotFoundError,
    Roster,
    Storage,
    ValidationError,
    VerificationDesk,
)

load_dotenv(Path(__file__).parent.parent / ".env")

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"

# Most specific first; the first isinstance match wins.
ERROR_STATUS_CODES: list[tuple[type[JourneyError], int]] = [
    (ValidationError, 422),
    (NotFoundError, 404),
    (LockedActivityError, 423),
    (LockedCharacterError, 423),
    (DuplicateError, 409),
    (CorruptStateError, 500),
    (ConfigurationError, 500),
]


async def journey_error_handler(request: Request, exc: JourneyError) -> JSONResponse:
    status = next(
        (code for cls, code in ERROR_STATUS_CODES if isinstance(exc, cls)), 400
    )
    return JSONResponse(status_code=status, content=exc.to_dict())


def create_app(data_dir: Path | None = None) -> FastAPI:
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))
    storage = Storage(resolved)
    config = storage.get_config()

    app = FastAPI(title="Journey Tracker")
    app.state.storage = storage
    app.state.sessions = SessionRegistry()
    app.state.desk = VerificationDesk(
        Roster(seed=config["roster_seed"]),
        ttl_minutes=config["verification_ttl_minutes"],
    )
    app.add_exception_handler(JourneyError, journey_error_handler)
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (uses DATA_DIR env var or default)
app = create_app()
