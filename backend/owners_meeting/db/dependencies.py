"""FastAPI dependency helpers for database access."""

from collections.abc import Generator

from sqlalchemy.orm import Session

from owners_meeting.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Yield one database session per request."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
