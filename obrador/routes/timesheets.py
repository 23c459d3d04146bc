# Obrador - Timesheet Routes
# JSON API for submitting, editing, listing and summarizing work hours

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from obrador.database import get_db
from obrador.dependencies import RequirePermission
from obrador.schemas import (
    DeleteResult,
    MovementOut,
    SummaryRowOut,
    TimesheetCreate,
    TimesheetOut,
    TimesheetUpdate,
)
from obrador.services.timesheet import TimesheetService
from obrador.timesheets.principal import Principal
from obrador.timesheets.query import FetchScope, FilterCriteria, parse_boolean


router = APIRouter(prefix="/timesheets", tags=["timesheets"])

can_read = RequirePermission("read", "view_all")
can_read_own = RequirePermission("submit", "read")
can_view_one = RequirePermission("submit", "read", "view_all", "manage")
can_submit = RequirePermission("submit")
can_change = RequirePermission("submit", "manage")


def filter_criteria(
    client: Optional[str] = Query(None),
    task: Optional[str] = Query(None),
    work_order: Optional[str] = Query(None, alias="workOrder"),
    user: Optional[str] = Query(None, description="Display name or username"),
    q: Optional[str] = Query(None, description="Free text"),
    is_holiday: Optional[str] = Query(None, alias="isHoliday"),
    night_only: Optional[str] = Query(None, alias="nightOnly"),
) -> FilterCriteria:
    """Filter query parameters shared by the list and summary endpoints."""
    return FilterCriteria(
        client=client,
        task=task,
        work_order=work_order,
        user=user,
        q=q,
        is_holiday=parse_boolean(is_holiday),
        night_only=bool(parse_boolean(night_only)),
    )


@router.get("", response_model=list[TimesheetOut])
def list_timesheets(
    user_id: Optional[int] = Query(None, alias="userId"),
    date: Optional[str] = Query(None, description="Exact day, YYYY-MM-DD"),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    limit: Optional[int] = Query(None),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    criteria: FilterCriteria = Depends(filter_criteria),
    principal: Principal = Depends(can_read),
    db: Session = Depends(get_db),
):
    """List entries across users, newest first unless order=asc."""
    service = TimesheetService(db, principal)
    entries = service.list_entries(
        FetchScope(
            user_id=user_id,
            date=date,
            date_from=date_from,
            date_to=date_to,
            limit=limit or 0,
            order=order,
        ),
        criteria,
    )
    return [TimesheetOut.from_entry(entry) for entry in entries]


@router.get("/mine", response_model=list[TimesheetOut])
def list_my_timesheets(
    date: Optional[str] = Query(None),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    principal: Principal = Depends(can_read_own),
    db: Session = Depends(get_db),
):
    """The caller's own entries, oldest first."""
    service = TimesheetService(db, principal)
    entries = service.list_mine(date=date, date_from=date_from, date_to=date_to)
    return [TimesheetOut.from_entry(entry) for entry in entries]


@router.get("/summary", response_model=list[SummaryRowOut])
def summarize_timesheets(
    user_id: Optional[int] = Query(None, alias="userId"),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    limit: Optional[int] = Query(None),
    criteria: FilterCriteria = Depends(filter_criteria),
    principal: Principal = Depends(can_read),
    db: Session = Depends(get_db),
):
    """
    Per-user normal, holiday and night minutes.
    
    With nightOnly the total column reports night minutes alone.
    """
    service = TimesheetService(db, principal)
    rows = service.summarize(
        FetchScope(
            user_id=user_id,
            date_from=date_from,
            date_to=date_to,
            limit=limit or 0,
        ),
        criteria,
    )
    return [SummaryRowOut.from_row(row, night_only=criteria.night_only) for row in rows]


@router.post("", response_model=TimesheetOut, status_code=201)
def create_timesheet(
    body: TimesheetCreate,
    principal: Principal = Depends(can_submit),
    db: Session = Depends(get_db),
):
    """Submit a shift. Managers may submit for another userId."""
    service = TimesheetService(db, principal)
    entry = service.create_entry(body.to_input())
    return TimesheetOut.from_entry(entry)


@router.get("/{timesheet_id}", response_model=TimesheetOut)
def get_timesheet(
    timesheet_id: int,
    principal: Principal = Depends(can_view_one),
    db: Session = Depends(get_db),
):
    service = TimesheetService(db, principal)
    return TimesheetOut.from_entry(service.view_entry(timesheet_id))


@router.get("/{timesheet_id}/history", response_model=list[MovementOut])
def timesheet_history(
    timesheet_id: int,
    principal: Principal = Depends(can_read),
    db: Session = Depends(get_db),
):
    """Recorded movements for one entry, oldest first."""
    service = TimesheetService(db, principal)
    return [MovementOut.from_movement(movement) for movement in service.history(timesheet_id)]


@router.patch("/{timesheet_id}", response_model=TimesheetOut)
def update_timesheet(
    timesheet_id: int,
    body: TimesheetUpdate,
    principal: Principal = Depends(can_change),
    db: Session = Depends(get_db),
):
    """Edit an entry: owners within the edit window, managers always."""
    service = TimesheetService(db, principal)
    entry = service.update_entry(timesheet_id, body.to_input())
    return TimesheetOut.from_entry(entry)


@router.delete("/{timesheet_id}", response_model=DeleteResult)
def delete_timesheet(
    timesheet_id: int,
    principal: Principal = Depends(can_change),
    db: Session = Depends(get_db),
):
    service = TimesheetService(db, principal)
    service.delete_entry(timesheet_id)
    return DeleteResult()
