# Obrador - Authentication Dependencies
# FastAPI dependencies that resolve the principal and guard routes

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from obrador.config import get_settings
from obrador.database import get_db
from obrador.exceptions import Forbidden
from obrador.services.auth import AuthService
from obrador.timesheets.principal import Principal


settings = get_settings()


def get_session_token(request: Request) -> Optional[str]:
    """
    Extract the session token from the request.
    
    A bearer Authorization header wins over the session cookie.
    """
    header = request.headers.get("authorization", "")
    if header.startswith("Bearer "):
        return header[7:].strip() or None
    return request.cookies.get(settings.session_cookie_name)


def get_current_principal(
    request: Request,
    db: Session = Depends(get_db),
) -> Principal:
    """
    Resolve the authenticated principal or raise 401.
    
    Permissions of all the user's roles are merged here, once, into
    typed capabilities.
    """
    token = get_session_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token requerido",
        )
    
    auth = AuthService(db)
    user = auth.validate_session(token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalido",
        )
    
    return auth.build_principal(user)


class RequirePermission:
    """
    Route guard: the principal must hold any one of the capabilities.
    
    Usage:
        @router.get("/timesheets")
        def list_timesheets(
            principal: Principal = Depends(RequirePermission("read", "view_all")),
        ):
            ...
    """
    
    def __init__(self, *capabilities: str):
        self.capabilities = capabilities
    
    def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.roles:
            raise Forbidden("Sin rol")
        if self.capabilities and not principal.allows(*self.capabilities):
            raise Forbidden("Permiso denegado")
        return principal
