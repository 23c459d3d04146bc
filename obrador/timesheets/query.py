# Obrador - Query & Filter Engine
# Fetch scopes for the store and composable in-memory filters

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .entry import TimesheetEntry

TRUE_VALUES = {"true", "1", "yes", "si"}


def parse_boolean(value: object) -> Optional[bool]:
    """
    Query-string boolean: true/1/yes/si are True, anything else False.
    
    None (parameter absent) stays None, meaning "do not filter".
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def clamp_limit(limit: Optional[int], default: int, ceiling: int) -> int:
    """Requested page size, defaulted and capped to bound read cost."""
    if not limit or limit <= 0:
        limit = default
    return min(limit, ceiling)


@dataclass(frozen=True)
class FetchScope:
    """
    What to pull from the store.
    
    date, when given, wins over date_from/date_to. Bounds are inclusive
    YYYY-MM-DD strings. Results come back ordered by date, then start
    minute, in the given direction.
    """
    user_id: Optional[int] = None
    date: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    limit: int = 500
    order: str = "desc"
    
    @property
    def ascending(self) -> bool:
        return self.order == "asc"


def _lower(value: Optional[str]) -> str:
    return (value or "").strip().lower()


@dataclass(frozen=True)
class FilterCriteria:
    """
    Conjunctive filters over fetched entries.
    
    Text criteria are case-insensitive substring matches; user matches
    display name or username; q matches the precomputed search text.
    """
    client: Optional[str] = None
    task: Optional[str] = None
    work_order: Optional[str] = None
    user: Optional[str] = None
    q: Optional[str] = None
    is_holiday: Optional[bool] = None
    night_only: bool = False
    
    def matches(self, entry: TimesheetEntry) -> bool:
        if self.client and _lower(self.client) not in _lower(entry.client):
            return False
        if self.task and _lower(self.task) not in _lower(entry.task):
            return False
        if self.work_order and _lower(self.work_order) not in _lower(entry.work_order):
            return False
        if self.user:
            needle = _lower(self.user)
            if needle not in _lower(entry.user_display_name) and needle not in _lower(entry.username):
                return False
        if self.is_holiday is not None and bool(entry.is_holiday) != self.is_holiday:
            return False
        if self.night_only and (entry.night_minutes or 0) <= 0:
            return False
        if self.q and _lower(self.q) not in _lower(entry.search_text):
            return False
        return True


class FilteredEntries:
    """
    Lazy view of a fetched batch under some criteria.
    
    Iterating re-runs the filters from the start, so the same batch can
    be walked again or re-filtered without touching the store.
    """
    
    def __init__(self, entries: Iterable[TimesheetEntry], criteria: FilterCriteria):
        self._entries = entries
        self.criteria = criteria
    
    def __iter__(self) -> Iterator[TimesheetEntry]:
        return (entry for entry in self._entries if self.criteria.matches(entry))
    
    def refine(self, criteria: FilterCriteria) -> "FilteredEntries":
        """Same batch, different criteria."""
        return FilteredEntries(self._entries, criteria)


def apply_filters(entries: Iterable[TimesheetEntry], criteria: FilterCriteria) -> FilteredEntries:
    return FilteredEntries(entries, criteria)
