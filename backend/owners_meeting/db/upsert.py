"""Dialect-aware INSERT ... ON CONFLICT statements."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from owners_meeting.errors import StoreError


def upsert(
    db: Session,
    model: Any,
    *,
    values: dict[str, Any],
    conflict_columns: list[str],
) -> None:
    """Insert one row, or update every non-key column when the unique key already exists."""

    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = pg_insert(model).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite_insert(model).values(**values)
    else:
        raise StoreError(f"Upsert is not supported for dialect {dialect}", code="unsupported_dialect")

    update_columns = {
        name: getattr(stmt.excluded, name) for name in values if name not in conflict_columns
    }
    stmt = stmt.on_conflict_do_update(index_elements=conflict_columns, set_=update_columns)
    db.execute(stmt)
