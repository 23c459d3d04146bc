# Obrador - Role Model

from typing import Any

from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Role(TimestampMixin, Base):
    """
    Named permission bundle.
    
    permissions is a nested map of permission groups to flags, e.g.
    
        {"timesheets": {"submit": true, "read": true, "manage": false}}
    
    A user's effective permissions are the union of all their roles
    (any role granting a flag grants it).
    """
    
    __tablename__ = "roles"
    
    name: Mapped[str] = mapped_column(
        String(50),
        primary_key=True
    )
    
    description: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default=""
    )
    
    permissions: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict
    )
    
    def __repr__(self) -> str:
        return f"<Role {self.name}>"
