# Obrador - Audit Emitter
# Records a movement for every timesheet mutation

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from obrador.models.movement import Movement
from obrador.services.store import guard_store
from obrador.timesheets.entry import TimesheetEntry


logger = logging.getLogger(__name__)

TIMESHEETS = "timesheets"
MOVEMENT_TYPES = {"create", "update", "delete"}


def movement_payload(entry: TimesheetEntry) -> dict[str, Any]:
    """
    Flat projection of an entry for the movements log.
    
    Internal fields (search text, start minute) stay out.
    """
    return {
        "timesheetId": entry.id,
        "userId": entry.user_id,
        "userDisplayName": entry.owner_label,
        "username": entry.username,
        "date": entry.date,
        "startTime": entry.start_time,
        "endTime": entry.end_time,
        "client": entry.client,
        "task": entry.task,
        "workOrder": entry.work_order,
        "durationMinutes": entry.duration_minutes,
        "nightMinutes": entry.night_minutes,
        "isHoliday": bool(entry.is_holiday),
    }


class AuditEmitter:
    """
    Writes movements after the main mutation has been committed.
    
    Emission is fire-and-forget: a failing audit sink is logged and
    rolled back, never raised, so it cannot block timesheet work.
    
    Usage:
        audit = AuditEmitter(db)
        audit.emit(TIMESHEETS, entry.id, "create", actor.username, movement_payload(entry))
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def emit(
        self,
        entity: str,
        entity_id: Any,
        type: str,
        actor_name: Optional[str],
        payload: Optional[dict[str, Any]] = None,
    ) -> Optional[Movement]:
        if type not in MOVEMENT_TYPES:
            logger.warning("Unknown movement type %r for %s:%s", type, entity, entity_id)
        
        movement = Movement(
            entity=entity,
            entity_id=str(entity_id),
            type=type,
            by=actor_name or "system",
            payload=payload or {},
        )
        try:
            self.db.add(movement)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Could not record %s movement for %s:%s", type, entity, entity_id)
            return None
        
        return movement
    
    def emit_timesheet(self, type: str, entry: TimesheetEntry, actor_name: Optional[str]) -> Optional[Movement]:
        return self.emit(TIMESHEETS, entry.id, type, actor_name, movement_payload(entry))


class AuditQuery:
    """
    Read side of the movements log.
    
    Usage:
        history = AuditQuery(db).get_record_history("timesheets", 42)
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_record_history(self, entity: str, entity_id: Any) -> list[Movement]:
        """Movements for one record, oldest first."""
        with guard_store(self.db, "movement history"):
            return list(
                self.db.execute(
                    select(Movement)
                    .where(Movement.entity == entity, Movement.entity_id == str(entity_id))
                    .order_by(Movement.at.asc(), Movement.movement_id.asc())
                ).scalars().all()
            )
