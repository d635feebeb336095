import calendar
from datetime import date, datetime, timedelta, timezone

import pytest

from bettrcalendar.core.config import ZOOM_DAILY, ZOOM_MONTHLY, ZOOM_WEEKLY
from bettrcalendar.core.windows import (
    build_window, fetch_range, shift_reference, start_of_week, sunday_index, window_title
)

SAMPLE_DATES = [date(2024, 1, 1) + timedelta(days=offset) for offset in range(0, 800, 13)]


class TestWeekly:
    @pytest.mark.parametrize("reference", SAMPLE_DATES)
    def test_seven_ascending_dates_starting_sunday(self, reference):
        window = build_window(reference, ZOOM_WEEKLY)

        assert len(window) == 7
        assert window.padding == 0
        assert window.dates[0].weekday() == 6
        assert all(b - a == timedelta(days=1) for a, b in zip(window.dates, window.dates[1:]))
        assert reference in window.dates

    def test_sunday_starts_its_own_week(self):
        sunday = date(2024, 3, 17)
        assert start_of_week(sunday) == sunday

    def test_saturday_belongs_to_previous_sunday(self):
        assert start_of_week(date(2024, 3, 16)) == date(2024, 3, 10)


class TestMonthly:
    def test_march_2024_has_five_padding_slots(self):
        window = build_window(date(2024, 3, 1), ZOOM_MONTHLY)

        assert window.slots[:5] == [None] * 5
        assert window.padding == 5
        assert window.dates == [date(2024, 3, d) for d in range(1, 32)]

    def test_sunday_first_regardless_of_calendar_module_setting(self):
        previous = calendar.firstweekday()
        calendar.setfirstweekday(calendar.MONDAY)
        try:
            window = build_window(date(2024, 3, 1), ZOOM_MONTHLY)
            week = build_window(date(2024, 3, 13), ZOOM_WEEKLY)
        finally:
            calendar.setfirstweekday(previous)

        assert window.padding == 5
        assert week.dates[0] == date(2024, 3, 10)

    def test_month_starting_on_sunday_has_no_padding(self):
        window = build_window(date(2024, 9, 20), ZOOM_MONTHLY)
        assert window.padding == 0
        assert window.dates[0] == date(2024, 9, 1)

    def test_leap_february(self):
        window = build_window(date(2024, 2, 10), ZOOM_MONTHLY)
        assert window.dates[-1] == date(2024, 2, 29)
        assert len(window.dates) == 29

    @pytest.mark.parametrize("reference", SAMPLE_DATES)
    def test_padding_matches_first_weekday_and_dates_have_no_gaps(self, reference):
        window = build_window(reference, ZOOM_MONTHLY)
        first = reference.replace(day=1)

        assert window.padding == sunday_index(first)
        assert all(slot is None for slot in window.slots[:window.padding])
        assert window.dates[0] == first
        assert len(set(window.dates)) == len(window.dates)
        assert all(b - a == timedelta(days=1) for a, b in zip(window.dates, window.dates[1:]))
        assert all(day.month == reference.month for day in window.dates)


class TestDaily:
    def test_single_reference_date(self):
        assert build_window(date(2024, 3, 15), ZOOM_DAILY).slots == [date(2024, 3, 15)]

    def test_datetime_is_normalized_to_local_date(self):
        instant = datetime(2024, 3, 15, 12, 0).astimezone()
        assert build_window(instant, ZOOM_DAILY).slots == [date(2024, 3, 15)]


def test_unknown_zoom_is_rejected():
    with pytest.raises(ValueError):
        build_window(date(2024, 3, 15), 'yearly')


class TestNavigation:
    @pytest.mark.parametrize("reference", SAMPLE_DATES)
    @pytest.mark.parametrize("zoom", [ZOOM_WEEKLY, ZOOM_DAILY])
    def test_prev_undoes_next(self, reference, zoom):
        forward = shift_reference(reference, zoom, 1)
        assert shift_reference(forward, zoom, -1) == reference

    @pytest.mark.parametrize("reference", SAMPLE_DATES)
    def test_monthly_prev_undoes_next_modulo_day_reset(self, reference):
        forward = shift_reference(reference, ZOOM_MONTHLY, 1)
        assert shift_reference(forward, ZOOM_MONTHLY, -1) == reference.replace(day=1)

    def test_monthly_clamps_to_first_day(self):
        assert shift_reference(date(2024, 1, 31), ZOOM_MONTHLY, 1) == date(2024, 2, 1)

    def test_monthly_crosses_year_boundaries(self):
        assert shift_reference(date(2024, 12, 5), ZOOM_MONTHLY, 1) == date(2025, 1, 1)
        assert shift_reference(date(2024, 1, 5), ZOOM_MONTHLY, -1) == date(2023, 12, 1)

    def test_weekly_moves_seven_days(self):
        assert shift_reference(date(2024, 3, 15), ZOOM_WEEKLY, -1) == date(2024, 3, 8)

    def test_daily_moves_one_day(self):
        assert shift_reference(date(2024, 2, 29), ZOOM_DAILY, 1) == date(2024, 3, 1)


class TestFetchRange:
    def test_covers_whole_month_and_days_ahead(self):
        start, end = fetch_range(date(2024, 3, 15), 30)

        assert start.tzinfo is not None
        assert start.date() == date(2024, 3, 1)
        assert end.date() == date(2024, 4, 16)

    def test_month_end_wins_when_later(self):
        start, end = fetch_range(date(2024, 3, 2), 5)
        assert end.date() == date(2024, 4, 1)

    def test_start_is_before_end(self):
        start, end = fetch_range(datetime(2024, 3, 15, tzinfo=timezone.utc), 0)
        assert start < end


class TestTitles:
    def test_monthly(self):
        window = build_window(date(2024, 3, 15), ZOOM_MONTHLY)
        assert window_title(window, date(2024, 3, 15)) == "March 2024"

    def test_weekly(self):
        window = build_window(date(2024, 3, 6), ZOOM_WEEKLY)
        assert window_title(window, date(2024, 3, 6)) == "Week of Mar 3, 2024"

    def test_daily(self):
        window = build_window(date(2024, 3, 1), ZOOM_DAILY)
        assert window_title(window, date(2024, 3, 1)) == "Mar 1, 2024"
