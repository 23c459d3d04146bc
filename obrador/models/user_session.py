# Obrador - User Session Model
# Database-backed session storage, validated on every request

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Boolean, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow

if TYPE_CHECKING:
    from .user import User


class UserSession(Base):
    """
    Database-backed user sessions.
    
    Sessions are issued by the login flow (outside this service); here
    they are only looked up, so the session can be revoked centrally.
    """
    
    __tablename__ = "user_sessions"
    
    __table_args__ = (
        Index("ix_user_sessions_user_active", "user_id", "is_active"),
    )
    
    session_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id"),
        nullable=False,
        index=True
    )
    
    # The session token (bearer header or cookie)
    session_token: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True
    )
    
    expires_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False
    )
    
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False
    )
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False
    )
    
    last_activity_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True
    )
    
    user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[user_id]
    )
    
    def __repr__(self) -> str:
        status = "active" if self.is_active else "inactive"
        return f"<UserSession {self.session_id} ({status}) for user {self.user_id}>"
    
    @property
    def is_expired(self) -> bool:
        """Check if session has expired."""
        return utcnow() > self.expires_at
    
    @property
    def is_valid(self) -> bool:
        """Check if session is valid (active and not expired)."""
        return self.is_active and not self.is_expired
