# Obrador - Services
# Business logic layer

from .audit import AuditEmitter, AuditQuery, movement_payload
from .auth import AuthService
from .store import TimesheetStore
from .timesheet import TimesheetService

__all__ = [
    "AuditEmitter",
    "AuditQuery",
    "movement_payload",
    "AuthService",
    "TimesheetStore",
    "TimesheetService",
]
