# Obrador - Timesheet accounting engine
# Pure domain logic: clock arithmetic, composition, authority, filters, summaries

from .clock import DAY_MINUTES, NIGHT_WINDOWS, parse_clock, shift_duration, night_overlap
from .entry import Owner, TimesheetEntry, TimesheetInput
from .principal import Principal, TimesheetCapabilities, merge_permissions
from .composer import compose_entry, build_search_text
from .policy import can_create_for, can_edit, check_edit, is_manager, resolve_owner_id
from .query import FetchScope, FilterCriteria, FilteredEntries, apply_filters, parse_boolean
from .summary import SummaryRow, summarize

__all__ = [
    "DAY_MINUTES",
    "NIGHT_WINDOWS",
    "parse_clock",
    "shift_duration",
    "night_overlap",
    "Owner",
    "TimesheetEntry",
    "TimesheetInput",
    "Principal",
    "TimesheetCapabilities",
    "merge_permissions",
    "compose_entry",
    "build_search_text",
    "can_create_for",
    "can_edit",
    "check_edit",
    "is_manager",
    "resolve_owner_id",
    "FetchScope",
    "FilterCriteria",
    "FilteredEntries",
    "apply_filters",
    "parse_boolean",
    "SummaryRow",
    "summarize",
]
