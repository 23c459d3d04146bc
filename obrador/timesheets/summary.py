# Obrador - Summarizer
# Per-user totals for payroll-style reports

from dataclasses import dataclass
from typing import Iterable

from .entry import TimesheetEntry


@dataclass
class SummaryRow:
    user_id: int
    display_name: str
    username: str
    normal_minutes: int = 0
    holiday_minutes: int = 0
    night_minutes: int = 0
    
    def add(self, entry: TimesheetEntry) -> None:
        self.holiday_minutes += entry.holiday_minutes or 0
        self.night_minutes += entry.night_minutes or 0
        # Holiday shifts count only in the holiday and night buckets
        if not entry.is_holiday:
            self.normal_minutes += max((entry.duration_minutes or 0) - (entry.night_minutes or 0), 0)
    
    def total_minutes(self, night_only: bool = False) -> int:
        """Presentation total; a night-only report shows night minutes alone."""
        if night_only:
            return self.night_minutes
        return self.normal_minutes + self.holiday_minutes + self.night_minutes


def summarize(entries: Iterable[TimesheetEntry]) -> list[SummaryRow]:
    """One row per user present in entries, sorted by display name."""
    rows: dict[int, SummaryRow] = {}
    for entry in entries:
        row = rows.get(entry.user_id)
        if row is None:
            row = rows[entry.user_id] = SummaryRow(
                user_id=entry.user_id,
                display_name=entry.owner_label,
                username=entry.username,
            )
        row.add(entry)
    return sorted(rows.values(), key=lambda row: row.display_name.casefold())
