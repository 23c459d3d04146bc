# Obrador - Authentication Service
# Session lookup and principal construction

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from obrador.models.base import utcnow
from obrador.models.role import Role
from obrador.models.user import User
from obrador.models.user_session import UserSession
from obrador.services.store import guard_store
from obrador.timesheets.principal import Principal, TimesheetCapabilities, merge_permissions


logger = logging.getLogger(__name__)


class AuthService:
    """
    Turns a session token into a Principal.
    
    Tokens are issued by the login flow elsewhere; this service only
    validates them and resolves the user's permissions once, merging all
    of the user's roles.
    
    Usage:
        auth = AuthService(db)
        user = auth.validate_session(token)
        principal = auth.build_principal(user) if user else None
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def validate_session(self, session_token: str) -> Optional[User]:
        """
        Validate a session token and return the associated user.
        
        Returns None for unknown, inactive or expired sessions and for
        inactive users. Raises StoreUnavailable when the database cannot
        be reached.
        """
        with guard_store(self.db, "session lookup"):
            return self._validate_session(session_token)
    
    def _validate_session(self, session_token: str) -> Optional[User]:
        session = self.db.execute(
            select(UserSession)
            .where(UserSession.session_token == session_token)
            .where(UserSession.is_active == True)
        ).scalar_one_or_none()
        
        if not session:
            return None
        
        if session.is_expired:
            session.is_active = False
            self.db.commit()
            logger.info("Session %s expired", session.session_id)
            return None
        
        user = self.db.execute(
            select(User)
            .where(User.user_id == session.user_id)
            .where(User.is_active == True)
        ).scalar_one_or_none()
        
        if not user:
            return None
        
        session.last_activity_at = utcnow()
        self.db.commit()
        
        return user
    
    def collect_permissions(self, role_names: list[str]) -> dict[str, dict[str, bool]]:
        if not role_names:
            return {}
        with guard_store(self.db, "role lookup"):
            roles = self.db.execute(
                select(Role).where(Role.name.in_(role_names))
            ).scalars().all()
        return merge_permissions(role.permissions for role in roles)
    
    def build_principal(self, user: User) -> Principal:
        roles = tuple(user.roles or ())
        permissions = self.collect_permissions(list(roles))
        return Principal(
            id=user.user_id,
            username=user.username,
            display_name=user.display_name,
            roles=roles,
            capabilities=TimesheetCapabilities.from_permissions(permissions),
        )
