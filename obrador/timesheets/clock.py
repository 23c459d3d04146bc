# Obrador - Clock Arithmetic
# "HH:MM" parsing, shift duration and night-window overlap, all in minutes

import re
from typing import Optional

DAY_MINUTES = 24 * 60

# 21:00-24:00 and 24:00-06:00 (next day), on a two-day minute scale
NIGHT_WINDOWS = (
    (21 * 60, 24 * 60),
    (24 * 60, 30 * 60),
)

_CLOCK_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_clock(text: object) -> Optional[int]:
    """
    Parse an "HH:MM" 24-hour clock time into minutes since midnight.
    
    Returns None for anything that is not a string in that exact shape
    (two-digit hours 00-23, two-digit minutes 00-59).
    """
    if not isinstance(text, str):
        return None
    match = _CLOCK_PATTERN.match(text)
    if not match:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def _wrap_end(start_minutes: int, end_minutes: int) -> int:
    """Move an end that is not after the start onto the next day."""
    if end_minutes <= start_minutes:
        return end_minutes + DAY_MINUTES
    return end_minutes


def shift_duration(start_minutes: int, end_minutes: int) -> int:
    """
    Length of a shift in minutes.
    
    An end at or before the start means the shift crosses midnight, so
    the result is always in (0, 1440]. Equal start and end yields 1440;
    callers that treat that as "no duration" must check for it.
    """
    return _wrap_end(start_minutes, end_minutes) - start_minutes


def night_overlap(start_minutes: int, end_minutes: int) -> int:
    """
    Minutes of the shift that fall inside the night windows.
    
    The shift is laid on a two-day scale (end wrapped like shift_duration)
    and intersected with each night window shifted by -1, 0 and +1 day.
    The -1 day copy holds the 00:00-06:00 tail of the previous night, for
    shifts that start after midnight; the +1 day copy holds the next
    night, for shifts that run into it. Counting the previous day as well
    differs from the older night calculation, which only looked at the
    same and next day and so gave 0 for a 03:00-07:00 shift (180 here).
    Window bounds are half-open: a shift starting exactly at 21:00
    counts that minute, one ending at 21:00 does not.
    
        >>> night_overlap(22 * 60, 7 * 60)
        480
        >>> night_overlap(6 * 60, 14 * 60)
        0
    """
    adjusted_end = _wrap_end(start_minutes, end_minutes)
    windows = [
        (window_start + offset, window_end + offset)
        for offset in (-DAY_MINUTES, 0, DAY_MINUTES)
        for window_start, window_end in NIGHT_WINDOWS
    ]
    
    minutes = 0
    for window_start, window_end in windows:
        overlap_start = max(start_minutes, window_start)
        overlap_end = min(adjusted_end, window_end)
        if overlap_end > overlap_start:
            minutes += overlap_end - overlap_start
    
    return max(0, min(minutes, adjusted_end - start_minutes))
