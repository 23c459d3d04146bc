# Obrador - Principal
# The authenticated actor, with permissions resolved once at the boundary

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

ADMIN_ROLE = "admin"


def merge_permissions(permission_maps: Iterable[Mapping[str, Any]]) -> dict[str, dict[str, bool]]:
    """
    Union of several nested permission maps.
    
    A flag is granted when any map grants it; falsy flags never revoke.
    
        >>> merge_permissions([{"timesheets": {"read": True}},
        ...                    {"timesheets": {"submit": True, "read": False}}])
        {'timesheets': {'read': True, 'submit': True}}
    """
    merged: dict[str, dict[str, bool]] = {}
    for permissions in permission_maps:
        for group, flags in (permissions or {}).items():
            if not group:
                continue
            target = merged.setdefault(group, {})
            for key, value in (flags or {}).items():
                if value:
                    target[key] = True
    return merged


@dataclass(frozen=True)
class TimesheetCapabilities:
    """What an actor may do with timesheets."""
    submit: bool = False
    read: bool = False
    manage: bool = False
    view_all: bool = False
    
    @classmethod
    def from_permissions(cls, permissions: Mapping[str, Any]) -> "TimesheetCapabilities":
        group = permissions.get("timesheets") or {}
        return cls(
            submit=group.get("submit") is True,
            read=group.get("read") is True,
            manage=group.get("manage") is True,
            view_all=group.get("viewAll") is True,
        )
    
    def has_any(self, *names: str) -> bool:
        return any(getattr(self, name) for name in names)


@dataclass(frozen=True)
class Principal:
    """
    The actor behind a request.
    
    Built by the authentication boundary and passed explicitly down the
    call chain; the engine never looks permissions up on its own.
    """
    id: int
    username: str
    display_name: Optional[str] = None
    roles: tuple[str, ...] = ()
    capabilities: TimesheetCapabilities = TimesheetCapabilities()
    
    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles
    
    @property
    def actor_name(self) -> str:
        """Name stamped on records this actor writes."""
        return self.display_name or self.username or "Sistema"
    
    def allows(self, *capabilities: str) -> bool:
        """True when the actor holds any of the named capabilities."""
        return self.is_admin or self.capabilities.has_any(*capabilities)
