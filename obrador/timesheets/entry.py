# Obrador - Timesheet value types

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Owner:
    """Identity copied onto an entry at write time."""
    user_id: int
    username: str
    display_name: str


@dataclass(frozen=True)
class TimesheetInput:
    """
    Partial input for a create or update.
    
    None means "not provided": the composer falls back to the previous
    record, then to the type default. An empty string is a value and
    clears a classification field.
    """
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    client: Optional[str] = None
    task: Optional[str] = None
    work_order: Optional[str] = None
    is_holiday: Optional[bool] = None
    user_id: Optional[int] = None


@dataclass(frozen=True)
class TimesheetEntry:
    """A composed work-hour record, as stored."""
    user_id: int
    username: str
    user_display_name: str
    date: str
    start_time: str
    end_time: str
    start_minutes: int
    duration_minutes: int
    night_minutes: int
    is_holiday: bool
    holiday_minutes: int
    client: str = ""
    task: str = ""
    work_order: str = ""
    search_text: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    created_by: Optional[int] = None
    created_by_name: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[int] = None
    updated_by_name: Optional[str] = None
    
    @property
    def owner_label(self) -> str:
        return self.user_display_name or self.username
