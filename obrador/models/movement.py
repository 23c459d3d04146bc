# Obrador - Movement Model
# Audit trail of mutations, shared with the other ledgers

from datetime import datetime
from typing import Optional, Any

from sqlalchemy import String, Integer, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class Movement(Base):
    """
    One audited mutation.
    
    Types used by timesheets:
        - create: payload is the entry as created
        - update: payload is the entry after the change
        - delete: payload is the entry as it was before removal
    
    The payload is a flat projection of the entry; internal search and
    sort fields are never included.
    """
    
    __tablename__ = "movements"
    
    __table_args__ = (
        Index("ix_movements_entity", "entity", "entity_id"),
    )
    
    movement_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    
    entity: Mapped[str] = mapped_column(
        String(50),
        nullable=False
    )
    
    entity_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False
    )
    
    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False
    )
    
    # Who made the change (username or display name)
    by: Mapped[str] = mapped_column(
        String(80),
        nullable=False,
        default="system"
    )
    
    at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
        index=True
    )
    
    payload: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True
    )
    
    def __repr__(self) -> str:
        return f"<Movement {self.type} {self.entity}:{self.entity_id} by {self.by}>"
    
    def describe(self) -> str:
        """One-line Spanish summary shown in the movements list."""
        payload = self.payload or {}
        if self.entity == "timesheets":
            user = payload.get("userDisplayName") or payload.get("username") or "Usuario"
            day = f" ({payload['date']})" if payload.get("date") else ""
            if self.type == "create":
                return f"Carga de horas de {user}{day}"
            if self.type == "update":
                return f"Actualizacion de horas de {user}{day}"
            if self.type == "delete":
                return f"Eliminacion de horas de {user}{day}"
        
        if not payload:
            return self.type
        return f"{self.type}: {', '.join(payload.keys())}"
