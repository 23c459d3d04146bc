# Obrador - Edit Authority Policy
# Who may create, change or delete a timesheet entry, and until when

from datetime import date as date_type, datetime, timedelta
from typing import Optional

from obrador.exceptions import EditWindowExpired, Forbidden
from obrador.models.base import utcnow

from .entry import TimesheetEntry
from .principal import Principal

DEFAULT_EDIT_WINDOW = timedelta(hours=24)


def is_manager(actor: Principal) -> bool:
    """Managers (manage capability or admin role) act on any record, any time."""
    return actor.is_admin or actor.capabilities.manage


def _window_start(entry: TimesheetEntry) -> Optional[datetime]:
    """
    When the owner's edit window opened.
    
    createdAt, or midnight UTC of the entry's date for records that lack
    it. None when neither is usable.
    """
    created_at = entry.created_at
    if isinstance(created_at, str):
        try:
            created_at = datetime.fromisoformat(created_at)
        except ValueError:
            created_at = None
    if isinstance(created_at, datetime):
        if created_at.tzinfo is not None:
            created_at = created_at.replace(tzinfo=None) - created_at.utcoffset()
        return created_at
    
    try:
        day = date_type.fromisoformat(entry.date)
    except (TypeError, ValueError):
        return None
    return datetime(day.year, day.month, day.day)


def check_edit(
    actor: Principal,
    entry: TimesheetEntry,
    now: Optional[datetime] = None,
    window: timedelta = DEFAULT_EDIT_WINDOW,
    forbidden_message: Optional[str] = None,
) -> None:
    """
    Raise unless actor may modify or delete entry.
    
    Raises:
        Forbidden: a non-manager acting on someone else's record
        EditWindowExpired: the owner's window since creation has passed
    """
    if is_manager(actor):
        return
    
    if entry.user_id != actor.id:
        raise Forbidden(forbidden_message)
    
    opened_at = _window_start(entry)
    current = now or utcnow()
    if opened_at is None or current - opened_at > window:
        hours = int(window.total_seconds() // 3600)
        raise EditWindowExpired(f"Solo podes editar durante las primeras {hours} horas")


def can_edit(
    actor: Principal,
    entry: TimesheetEntry,
    now: Optional[datetime] = None,
    window: timedelta = DEFAULT_EDIT_WINDOW,
) -> bool:
    """Boolean form of check_edit, for deciding what the UI offers."""
    try:
        check_edit(actor, entry, now=now, window=window)
    except (Forbidden, EditWindowExpired):
        return False
    return True


def can_create_for(actor: Principal, target_user_id: Optional[int]) -> bool:
    if target_user_id is None or target_user_id == actor.id:
        return True
    return is_manager(actor)


def resolve_owner_id(
    actor: Principal,
    requested_user_id: Optional[int],
    current_owner_id: Optional[int] = None,
) -> int:
    """
    Whose record this is after the write.
    
    Managers may pick any user; everyone else's requested user id is
    ignored. On update the current owner is kept unless a manager moves it.
    """
    if is_manager(actor) and requested_user_id is not None:
        return requested_user_id
    if current_owner_id is not None:
        return current_owner_id
    return actor.id
