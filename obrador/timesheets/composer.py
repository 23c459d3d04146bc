# Obrador - Entry Composer
# Merge partial input into a full, derived, stamped timesheet entry

import re
from datetime import date as date_type, datetime
from typing import Optional

from obrador.exceptions import EmptyDuration, InvalidSchedule, ValidationError
from obrador.models.base import utcnow

from .clock import DAY_MINUTES, night_overlap, parse_clock, shift_duration
from .entry import Owner, TimesheetEntry, TimesheetInput
from .principal import Principal

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MAX_LABEL_LENGTH = 200

_LABELS = {
    "client": "El cliente",
    "task": "La tarea",
    "work_order": "La orden de trabajo",
}


def sanitize_text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def build_search_text(
    day: str,
    client: str,
    task: str,
    work_order: str,
    user_display_name: str,
    username: str,
) -> str:
    """Lower-cased blob the free-text filter matches against."""
    values = [day, client, task, work_order, user_display_name, username]
    return " ".join(value or "" for value in values).strip().lower()


def _pick(value, fallback):
    return value if value is not None else fallback


def _validate_date(value: Optional[str]) -> str:
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValidationError("La fecha es obligatoria (AAAA-MM-DD)")
    try:
        date_type.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Fecha invalida: {value}")
    return value


def _validate_label(field: str, value: object) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{_LABELS[field]} debe ser texto")
    cleaned = sanitize_text(value)
    if len(cleaned) > MAX_LABEL_LENGTH:
        raise ValidationError(
            f"{_LABELS[field]} no puede superar {MAX_LABEL_LENGTH} caracteres"
        )
    return cleaned


def compose_entry(
    data: TimesheetInput,
    owner: Owner,
    actor: Principal,
    previous: Optional[TimesheetEntry] = None,
    now: Optional[datetime] = None,
) -> TimesheetEntry:
    """
    Build the full entry for a create (no previous) or an update.
    
    Every provided field in data overrides previous; missing fields fall
    back to previous, then to '' / False. All derived fields are
    recomputed from the merged values, so an update can never leave
    duration, night minutes or search text stale.
    
    Identity and creation stamps are carried over from previous
    unchanged; the caller stamps creation on first save.
    
    Raises:
        ValidationError: missing/invalid date or bad classification text
        InvalidSchedule: start or end is not an HH:MM time
        EmptyDuration: start equals end, or the shift exceeds one day
    """
    day = _validate_date(_pick(data.date, previous.date if previous else None))
    start_time = _pick(data.start_time, previous.start_time if previous else None)
    end_time = _pick(data.end_time, previous.end_time if previous else None)
    
    start_minutes = parse_clock(start_time)
    end_minutes = parse_clock(end_time)
    if start_minutes is None or end_minutes is None:
        raise InvalidSchedule()
    
    if start_minutes == end_minutes:
        raise EmptyDuration()
    duration_minutes = shift_duration(start_minutes, end_minutes)
    if not 0 < duration_minutes <= DAY_MINUTES:
        raise EmptyDuration()
    
    night_minutes = night_overlap(start_minutes, end_minutes)
    is_holiday = bool(_pick(data.is_holiday, previous.is_holiday if previous else False))
    
    client = _validate_label("client", _pick(data.client, previous.client if previous else ""))
    task = _validate_label("task", _pick(data.task, previous.task if previous else ""))
    work_order = _validate_label(
        "work_order", _pick(data.work_order, previous.work_order if previous else "")
    )
    
    return TimesheetEntry(
        id=previous.id if previous else None,
        user_id=owner.user_id,
        username=owner.username,
        user_display_name=owner.display_name,
        date=day,
        start_time=start_time,
        end_time=end_time,
        start_minutes=start_minutes,
        duration_minutes=duration_minutes,
        night_minutes=night_minutes,
        is_holiday=is_holiday,
        holiday_minutes=duration_minutes if is_holiday else 0,
        client=client,
        task=task,
        work_order=work_order,
        search_text=build_search_text(
            day, client, task, work_order, owner.display_name, owner.username
        ),
        created_at=previous.created_at if previous else None,
        created_by=previous.created_by if previous else None,
        created_by_name=previous.created_by_name if previous else None,
        updated_at=now or utcnow(),
        updated_by=actor.id,
        updated_by_name=actor.actor_name,
    )
