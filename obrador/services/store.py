# Obrador - Timesheet Store
# Single-document reads and writes against the timesheets table

import logging
from contextlib import contextmanager
from dataclasses import fields
from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from obrador.exceptions import RecordNotFound, StoreUnavailable
from obrador.models.timesheet import Timesheet
from obrador.models.user import User
from obrador.timesheets.entry import TimesheetEntry
from obrador.timesheets.query import FetchScope


logger = logging.getLogger(__name__)

# Entry fields that map one-to-one onto columns (id maps to timesheet_id)
_COLUMN_FIELDS = [f.name for f in fields(TimesheetEntry) if f.name != "id"]


@contextmanager
def guard_store(db: Session, operation: str) -> Iterator[None]:
    """Turn a dropped connection or exhausted pool into a retryable StoreUnavailable."""
    try:
        yield
    except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
        db.rollback()
        logger.warning("Store %s failed: %s", operation, exc)
        raise StoreUnavailable() from exc


def to_entry(row: Timesheet) -> TimesheetEntry:
    return TimesheetEntry(
        id=row.timesheet_id,
        **{name: getattr(row, name) for name in _COLUMN_FIELDS},
    )


class TimesheetStore:
    """
    Facade over the timesheets table.
    
    Each write is its own commit: single-document operations are atomic,
    and there are no multi-document transactions. Concurrent updates to
    one record are last-write-wins.
    
    Transient database failures surface as StoreUnavailable.
    
    Usage:
        store = TimesheetStore(db)
        entry = store.add(composed)
        entries = store.query(FetchScope(user_id=5, date_from="2025-01-01"))
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def _guard(self, operation: str):
        return guard_store(self.db, f"timesheet {operation}")
    
    def _get_row(self, timesheet_id: int) -> Optional[Timesheet]:
        return self.db.get(Timesheet, timesheet_id)
    
    def get(self, timesheet_id: int) -> Optional[TimesheetEntry]:
        with self._guard("get"):
            row = self._get_row(timesheet_id)
        return to_entry(row) if row else None
    
    def query(self, scope: FetchScope) -> list[TimesheetEntry]:
        """Entries in scope, ordered by date then start minute."""
        stmt = select(Timesheet)
        
        if scope.user_id is not None:
            stmt = stmt.where(Timesheet.user_id == scope.user_id)
        
        if scope.date:
            stmt = stmt.where(Timesheet.date == scope.date)
        else:
            if scope.date_from:
                stmt = stmt.where(Timesheet.date >= scope.date_from)
            if scope.date_to:
                stmt = stmt.where(Timesheet.date <= scope.date_to)
        
        if scope.ascending:
            stmt = stmt.order_by(Timesheet.date.asc(), Timesheet.start_minutes.asc())
        else:
            stmt = stmt.order_by(Timesheet.date.desc(), Timesheet.start_minutes.desc())
        
        with self._guard("query"):
            rows = self.db.execute(stmt.limit(scope.limit)).scalars().all()
        return [to_entry(row) for row in rows]
    
    def add(self, entry: TimesheetEntry) -> TimesheetEntry:
        row = Timesheet(**{name: getattr(entry, name) for name in _COLUMN_FIELDS})
        with self._guard("add"):
            self.db.add(row)
            self.db.commit()
        return to_entry(row)
    
    def update(self, timesheet_id: int, entry: TimesheetEntry) -> TimesheetEntry:
        """Overwrite every stored field of one record with entry's values."""
        with self._guard("update"):
            row = self._get_row(timesheet_id)
            if row is None:
                raise RecordNotFound()
            for name in _COLUMN_FIELDS:
                setattr(row, name, getattr(entry, name))
            self.db.commit()
        return to_entry(row)
    
    def delete(self, timesheet_id: int) -> None:
        with self._guard("delete"):
            row = self._get_row(timesheet_id)
            if row is None:
                raise RecordNotFound()
            self.db.delete(row)
            self.db.commit()
    
    def find_user(self, user_id: int) -> Optional[User]:
        with self._guard("find_user"):
            return self.db.execute(
                select(User).where(User.user_id == user_id)
            ).scalar_one_or_none()
