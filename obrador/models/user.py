# Obrador - User Model

from typing import Optional

from sqlalchemy import String, Boolean, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """
    A person who can log hours.
    
    Accounts are managed elsewhere; the timesheet engine only reads the
    identity (username, display name) and the role names.
    """
    
    __tablename__ = "users"
    
    user_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    
    username: Mapped[str] = mapped_column(
        String(40),
        unique=True,
        nullable=False,
        index=True
    )
    
    display_name: Mapped[Optional[str]] = mapped_column(
        String(80),
        nullable=True
    )
    
    # Role names, e.g. ["admin"] or ["operario"]
    roles: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list
    )
    
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False
    )
    
    def __repr__(self) -> str:
        return f"<User {self.username}>"
    
    @property
    def label(self) -> str:
        """Name shown on timesheets: display name, then username."""
        return self.display_name or self.username or "Usuario"
