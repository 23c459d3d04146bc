# Obrador - SQLAlchemy Models

from .base import Base, TimestampMixin, utcnow
from .role import Role
from .user import User
from .user_session import UserSession
from .timesheet import Timesheet
from .movement import Movement

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "Role",
    "User",
    "UserSession",
    "Timesheet",
    "Movement",
]
