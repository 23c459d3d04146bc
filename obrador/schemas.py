# Obrador - API Schemas
# Request and response bodies; camelCase on the wire

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from obrador.models.movement import Movement
from obrador.timesheets.entry import TimesheetEntry, TimesheetInput
from obrador.timesheets.summary import SummaryRow


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class TimesheetUpdate(CamelModel):
    """
    Partial entry input for PATCH. Omitted fields keep their value.
    
    Clock times and dates are checked by the composer, so a malformed
    time surfaces as "Horarios invalidos" rather than a schema error.
    """
    user_id: Optional[int] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    client: Optional[str] = None
    task: Optional[str] = None
    work_order: Optional[str] = None
    is_holiday: Optional[bool] = None
    
    def to_input(self) -> TimesheetInput:
        return TimesheetInput(
            user_id=self.user_id,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            client=self.client,
            task=self.task,
            work_order=self.work_order,
            is_holiday=self.is_holiday,
        )


class TimesheetCreate(TimesheetUpdate):
    """New entry: date and both times are required."""
    date: str
    start_time: str
    end_time: str
    client: str = ""
    task: str = ""
    work_order: str = ""
    is_holiday: bool = False


class TimesheetOut(CamelModel):
    """An entry as returned by the API (no search text, no start minute)."""
    id: int
    user_id: int
    username: str
    user_display_name: str
    date: str
    start_time: str
    end_time: str
    duration_minutes: int
    night_minutes: int
    is_holiday: bool
    holiday_minutes: int
    client: str
    task: str
    work_order: str
    created_at: Optional[datetime] = None
    created_by: Optional[int] = None
    created_by_name: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[int] = None
    updated_by_name: Optional[str] = None
    
    @classmethod
    def from_entry(cls, entry: TimesheetEntry) -> "TimesheetOut":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            username=entry.username,
            user_display_name=entry.user_display_name,
            date=entry.date,
            start_time=entry.start_time,
            end_time=entry.end_time,
            duration_minutes=entry.duration_minutes,
            night_minutes=entry.night_minutes,
            is_holiday=entry.is_holiday,
            holiday_minutes=entry.holiday_minutes,
            client=entry.client,
            task=entry.task,
            work_order=entry.work_order,
            created_at=entry.created_at,
            created_by=entry.created_by,
            created_by_name=entry.created_by_name,
            updated_at=entry.updated_at,
            updated_by=entry.updated_by,
            updated_by_name=entry.updated_by_name,
        )


class SummaryRowOut(CamelModel):
    user_id: int
    display_name: str
    username: str
    normal_minutes: int
    holiday_minutes: int
    night_minutes: int
    total_minutes: int
    
    @classmethod
    def from_row(cls, row: SummaryRow, night_only: bool = False) -> "SummaryRowOut":
        return cls(
            user_id=row.user_id,
            display_name=row.display_name,
            username=row.username,
            normal_minutes=row.normal_minutes,
            holiday_minutes=row.holiday_minutes,
            night_minutes=row.night_minutes,
            total_minutes=row.total_minutes(night_only),
        )


class MovementOut(CamelModel):
    id: int
    entity: str
    entity_id: str
    type: str
    by: str
    at: datetime
    payload: dict[str, Any]
    summary: str
    
    @classmethod
    def from_movement(cls, movement: Movement) -> "MovementOut":
        return cls(
            id=movement.movement_id,
            entity=movement.entity,
            entity_id=movement.entity_id,
            type=movement.type,
            by=movement.by,
            at=movement.at,
            payload=movement.payload or {},
            summary=movement.describe(),
        )


class DeleteResult(BaseModel):
    ok: bool = True
