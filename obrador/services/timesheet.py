# Obrador - Timesheet Service
# Read-modify-write pipeline for timesheet entries, with audit movements

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from obrador.config import Settings, get_settings
from obrador.exceptions import Forbidden, RecordNotFound
from obrador.models.base import utcnow
from obrador.models.movement import Movement
from obrador.services.audit import TIMESHEETS, AuditEmitter, AuditQuery
from obrador.services.store import TimesheetStore
from obrador.timesheets.composer import compose_entry
from obrador.timesheets.entry import Owner, TimesheetEntry, TimesheetInput
from obrador.timesheets.policy import can_create_for, check_edit, resolve_owner_id
from obrador.timesheets.principal import Principal
from obrador.timesheets.query import FetchScope, FilterCriteria, apply_filters, clamp_limit
from obrador.timesheets.summary import SummaryRow, summarize


logger = logging.getLogger(__name__)


class TimesheetService:
    """
    Timesheet operations on behalf of one actor.
    
    Each mutation is fetch-if-exists, authorize, compose, persist, then
    emit a movement. There is no lock or version check: two edits of the
    same record inside the window are last-write-wins.
    
    Usage:
        service = TimesheetService(db, principal)
        
        entry = service.create_entry(TimesheetInput(
            date="2025-03-10", start_time="22:00", end_time="07:00",
            client="Acme", task="Guardia",
        ))
        
        entry = service.update_entry(entry.id, TimesheetInput(end_time="06:00"))
        service.delete_entry(entry.id)
        
        rows = service.summarize(
            FetchScope(date_from="2025-03-01", date_to="2025-03-15"),
            FilterCriteria(night_only=True),
        )
    """
    
    def __init__(
        self,
        db: Session,
        actor: Principal,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.actor = actor
        self.settings = settings or get_settings()
        self.clock = clock
        self.store = TimesheetStore(db)
        self.audit = AuditEmitter(db)
    
    @property
    def edit_window(self) -> timedelta:
        return timedelta(hours=self.settings.edit_window_hours)
    
    # Reads
    
    def get_entry(self, timesheet_id: int) -> TimesheetEntry:
        entry = self.store.get(timesheet_id)
        if entry is None:
            raise RecordNotFound()
        return entry
    
    def view_entry(self, timesheet_id: int) -> TimesheetEntry:
        """One entry, if the actor owns it or may read everyone's hours."""
        entry = self.get_entry(timesheet_id)
        if entry.user_id != self.actor.id and not self.actor.allows("read", "view_all", "manage"):
            raise Forbidden("No podes ver este registro")
        return entry
    
    def list_entries(
        self,
        scope: FetchScope,
        criteria: Optional[FilterCriteria] = None,
    ) -> list[TimesheetEntry]:
        scope = replace(
            scope,
            limit=clamp_limit(
                scope.limit, self.settings.list_default_limit, self.settings.list_max_limit
            ),
        )
        entries = self.store.query(scope)
        return list(apply_filters(entries, criteria or FilterCriteria()))
    
    def list_mine(
        self,
        date: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> list[TimesheetEntry]:
        return self.store.query(
            FetchScope(
                user_id=self.actor.id,
                date=date,
                date_from=date_from,
                date_to=date_to,
                limit=self.settings.mine_limit,
                order="asc",
            )
        )
    
    def summarize(
        self,
        scope: FetchScope,
        criteria: Optional[FilterCriteria] = None,
    ) -> list[SummaryRow]:
        """Per-user totals over the filtered entries; day filters are not applied."""
        scope = replace(
            scope,
            date=None,
            order="asc",
            limit=clamp_limit(
                scope.limit, self.settings.summary_default_limit, self.settings.summary_max_limit
            ),
        )
        entries = self.store.query(scope)
        return summarize(apply_filters(entries, criteria or FilterCriteria()))
    
    def history(self, timesheet_id: int) -> list[Movement]:
        """
        Movements for one entry, oldest first.
        
        Deleted entries keep their trail; an id that never existed is
        RecordNotFound.
        """
        movements = AuditQuery(self.db).get_record_history(TIMESHEETS, timesheet_id)
        if not movements:
            self.get_entry(timesheet_id)
        return movements
    
    # Mutations
    
    def create_entry(self, data: TimesheetInput) -> TimesheetEntry:
        """
        Submit a new shift.
        
        Non-managers always create for themselves; a user_id in their
        input is ignored.
        
        Raises:
            ValidationError, InvalidSchedule, EmptyDuration: bad input
            RecordNotFound: a manager named an unknown user
            StoreUnavailable: transient storage failure
        """
        if not can_create_for(self.actor, data.user_id):
            logger.info(
                "Ignoring user_id %s from %s: creating for self",
                data.user_id, self.actor.username,
            )
        owner = self._resolve_owner(resolve_owner_id(self.actor, data.user_id))
        
        now = self.clock()
        composed = compose_entry(data, owner, self.actor, now=now)
        created = self.store.add(
            replace(
                composed,
                created_at=now,
                created_by=self.actor.id,
                created_by_name=self.actor.actor_name,
            )
        )
        logger.info("Timesheet %s created by %s for %s", created.id, self.actor.username, owner.username)
        
        self.audit.emit_timesheet("create", created, self.actor.username)
        return created
    
    def update_entry(self, timesheet_id: int, data: TimesheetInput) -> TimesheetEntry:
        """
        Change an entry; every derived field is recomputed from the merge.
        
        Raises:
            RecordNotFound: no such entry
            Forbidden: a non-manager editing someone else's entry
            EditWindowExpired: the owner's edit window has closed
            ValidationError, InvalidSchedule, EmptyDuration: bad input
        """
        existing = self.get_entry(timesheet_id)
        check_edit(self.actor, existing, now=self.clock(), window=self.edit_window)
        
        owner_id = resolve_owner_id(self.actor, data.user_id, existing.user_id)
        if owner_id == existing.user_id:
            owner = Owner(existing.user_id, existing.username, existing.user_display_name)
        else:
            owner = self._resolve_owner(owner_id)
        
        now = self.clock()
        composed = compose_entry(data, owner, self.actor, previous=existing, now=now)
        updated = self.store.update(
            timesheet_id,
            replace(
                composed,
                created_at=existing.created_at or now,
                created_by=existing.created_by if existing.created_by is not None else owner.user_id,
                created_by_name=existing.created_by_name or owner.display_name,
            ),
        )
        logger.info("Timesheet %s updated by %s", timesheet_id, self.actor.username)
        
        self.audit.emit_timesheet("update", updated, self.actor.username)
        return updated
    
    def delete_entry(self, timesheet_id: int) -> TimesheetEntry:
        """
        Hard-delete an entry under the same authority rule as updates.
        
        Returns the entry as it was before removal.
        """
        existing = self.get_entry(timesheet_id)
        check_edit(
            self.actor,
            existing,
            now=self.clock(),
            window=self.edit_window,
            forbidden_message="No podes eliminar este registro",
        )
        
        self.store.delete(timesheet_id)
        logger.info("Timesheet %s deleted by %s", timesheet_id, self.actor.username)
        
        self.audit.emit_timesheet("delete", existing, self.actor.username)
        return existing
    
    # Helpers
    
    def _resolve_owner(self, user_id: int) -> Owner:
        """Identity for the record's owner; the actor needs no lookup."""
        if user_id == self.actor.id:
            return Owner(
                user_id=self.actor.id,
                username=self.actor.username,
                display_name=self.actor.display_name or self.actor.username or "Usuario",
            )
        
        user = self.store.find_user(user_id)
        if user is None:
            raise RecordNotFound("Usuario no encontrado")
        return Owner(user_id=user.user_id, username=user.username, display_name=user.label)
