"""Store implementation backed by SQLAlchemy Core on a request session."""
import logging
from typing import Any, Sequence

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from event_admin.database import Base
from event_admin.store.base import Filter, Store, StoreError

# Import all models so Base.metadata knows every table
from event_admin.models.event import Event                              # noqa: F401
from event_admin.models.category import MeetingCategory, EventCategory  # noqa: F401
from event_admin.models.organizer import EventOrganizingMeetingCategory, EventOrganizingCategory  # noqa: F401
from event_admin.models.attendee import EventAttendee, EventInvitee      # noqa: F401
from event_admin.models.participant import Participant, ParticipantMeetingCategory  # noqa: F401
from event_admin.models.meeting import Meeting                          # noqa: F401
from event_admin.models.company import Company                          # noqa: F401

logger = logging.getLogger(__name__)


class SqlStore(Store):
    """Runs each store call as its own committed transaction."""

    def __init__(self, db: Session, metadata=Base.metadata):
        self._db = db
        self._metadata = metadata

    def _table(self, name: str) -> Table:
        table = self._metadata.tables.get(name)
        if table is None:
            raise StoreError(f"Unknown table '{name}'", table=name)
        return table

    def _where(self, table: Table, filters: Sequence[Filter]) -> list:
        clauses = []
        for f in filters:
            if f.column not in table.c:
                raise StoreError(f"Unknown column '{f.column}' on '{table.name}'", table=table.name)
            column = table.c[f.column]
            if f.op == "eq":
                clauses.append(column == f.value)
            elif f.op == "in":
                clauses.append(column.in_(f.value))
            else:
                raise StoreError(f"Unsupported filter operator '{f.op}'", table=table.name)
        return clauses

    def _run(self, table: Table, operation):
        try:
            result = operation()
            self._db.commit()
            return result
        except SQLAlchemyError as e:
            self._db.rollback()
            message = str(getattr(e, "orig", None) or e)
            logger.warning("Store call on '%s' failed: %s", table.name, message)
            raise StoreError(message, table=table.name) from e

    def select(self, table: str, filters: Sequence[Filter] = ()) -> list[dict[str, Any]]:
        t = self._table(table)
        stmt = select(t).where(*self._where(t, filters))
        return self._run(t, lambda: [dict(r) for r in self._db.execute(stmt).mappings().all()])

    def insert(self, table: str, rows: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        if not rows:
            return []
        t = self._table(table)

        def _insert_all():
            inserted = []
            for row in rows:
                stmt = insert(t).values(**row).returning(*t.c)
                inserted.append(dict(self._db.execute(stmt).mappings().one()))
            return inserted

        return self._run(t, _insert_all)

    def update(self, table: str, patch: dict[str, Any], filters: Sequence[Filter]) -> list[dict[str, Any]]:
        if not filters:
            raise StoreError("Refusing to update without filters", table=table)
        t = self._table(table)
        stmt = update(t).where(*self._where(t, filters)).values(**patch).returning(*t.c)
        return self._run(t, lambda: [dict(r) for r in self._db.execute(stmt).mappings().all()])

    def delete(self, table: str, filters: Sequence[Filter]) -> int:
        if not filters:
            raise StoreError("Refusing to delete without filters", table=table)
        t = self._table(table)
        stmt = delete(t).where(*self._where(t, filters))
        return self._run(t, lambda: self._db.execute(stmt).rowcount)
