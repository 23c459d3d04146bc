import pytest

from obrador.timesheets.clock import DAY_MINUTES, night_overlap, parse_clock, shift_duration


@pytest.mark.parametrize("text, minutes", [
    ("00:00", 0),
    ("06:30", 390),
    ("21:00", 1260),
    ("23:59", 1439),
])
def test_parse_clock_valid(text, minutes):
    assert parse_clock(text) == minutes


@pytest.mark.parametrize("text", [
    "24:00", "12:60", "7:30", "07:5", "0730", "07:30:00", " 07:30", "", "ab:cd", None, 730,
])
def test_parse_clock_rejects_anything_else(text):
    assert parse_clock(text) is None


def test_shift_duration_same_day():
    assert shift_duration(8 * 60, 16 * 60) == 480


def test_shift_duration_wraps_over_midnight():
    assert shift_duration(22 * 60, 7 * 60) == 540


def test_shift_duration_equal_times_is_a_full_day():
    # Composer rejects this case; the arithmetic itself is total
    assert shift_duration(600, 600) == DAY_MINUTES


def test_shift_duration_always_within_one_day():
    samples = range(0, DAY_MINUTES, 37)
    for start in samples:
        for end in samples:
            if start == end:
                continue
            assert 0 < shift_duration(start, end) <= DAY_MINUTES


def test_night_overlap_evening_until_midnight():
    assert night_overlap(21 * 60, 24 * 60) == 180


def test_night_overlap_pure_daytime_shift():
    assert night_overlap(6 * 60, 14 * 60) == 0


def test_night_overlap_overnight_shift():
    # 22:00 -> 07:00: night runs 22:00-06:00, the last hour is daytime
    assert shift_duration(22 * 60, 7 * 60) == 540
    assert night_overlap(22 * 60, 7 * 60) == 480


def test_night_overlap_shift_starting_after_midnight():
    # 03:00 -> 07:00 holds three night hours (03:00-06:00)
    assert night_overlap(3 * 60, 7 * 60) == 180


def test_night_overlap_starting_on_window_boundary_counts_first_minute():
    assert night_overlap(21 * 60, 21 * 60 + 1) == 1


def test_night_overlap_ending_on_window_boundary_counts_nothing():
    assert night_overlap(18 * 60, 21 * 60) == 0
    assert night_overlap(6 * 60, 6 * 60 + 30) == 0


@pytest.mark.parametrize("start", [0, 3 * 60, 12 * 60, 21 * 60, 23 * 60 + 30])
def test_full_day_shift_holds_one_whole_night(start):
    # 21:00-06:00 is nine hours, met exactly once in any 24h span
    assert night_overlap(start, start) == 9 * 60


def test_night_minutes_never_exceed_duration():
    samples = range(0, DAY_MINUTES, 23)
    for start in samples:
        for end in samples:
            night = night_overlap(start, end)
            assert 0 <= night <= shift_duration(start, end)
