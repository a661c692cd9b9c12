"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from owners_meeting.config import get_settings
from owners_meeting.db.session import SessionLocal
from owners_meeting.errors import ServiceError
from owners_meeting.routers import amendments, meetings, proposals, session, voting
from owners_meeting.schemas.common import ErrorResponse
from owners_meeting.services.meetings import get_live_meeting

logger = logging.getLogger(__name__)


def _warm_backend_state() -> None:
    """Prime the DB connection and the live-meeting lookup at process start."""

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
            get_live_meeting(db)
    except Exception:
        logger.exception("Backend warm-up failed; continuing without startup pre-warm.")


@asynccontextmanager
async def lifespan(_: FastAPI):
    _warm_backend_state()
    yield


settings = get_settings()

app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def handle_service_error(_: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("service.error status=%d code=%s message=%s", exc.status_code, exc.code, exc.message)
    body = ErrorResponse(detail=exc.message, code=exc.code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(SQLAlchemyError)
async def handle_store_error(_: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("store.error type=%s", type(exc).__name__)
    body = ErrorResponse(detail="Database error", code=getattr(exc, "code", None) or type(exc).__name__)
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


app.include_router(session.router, tags=["session"])
app.include_router(meetings.router, tags=["meetings"])
app.include_router(proposals.router, tags=["proposals"])
app.include_router(amendments.router, tags=["amendments"])
app.include_router(voting.router, tags=["voting"])


@app.get("/health")
def health() -> dict[str, str]:
    """Simple health check endpoint."""

    return {"status": "ok"}
