from datetime import date, datetime, timedelta, timezone

import pytest

from classroll.core.exceptions import ValidationError
from classroll.utils.school_calendar import (
    generate_school_year_dates,
    iter_weekday_dates,
    normalize_weekday,
    require_weekday,
    school_start_year,
    school_year_window,
)


class TestNormalizeWeekday:
    @pytest.mark.parametrize("value", [1, 2, 3, 4, 5, 6, 7])
    def test_iso_values_pass_through(self, value):
        assert normalize_weekday(value) == value

    def test_zero_is_sunday(self):
        assert normalize_weekday(0) == 7

    @pytest.mark.parametrize("name,expected", [
        ("lundi", 1),
        ("Mercredi", 3),
        ("  DIMANCHE ", 7),
    ])
    def test_day_names(self, name, expected):
        assert normalize_weekday(name) == expected

    @pytest.mark.parametrize("value", [True, False, 8, -1, 3.0, "monday", "", None, "3"])
    def test_unrecognised_values(self, value):
        assert normalize_weekday(value) is None

    def test_require_weekday_raises(self):
        with pytest.raises(ValidationError) as exc:
            require_weekday(9)
        assert exc.value.status_code == 400
        assert exc.value.extra == {"field": "weekday"}


class TestSchoolYear:
    def test_start_year_switches_in_september(self):
        assert school_start_year(datetime(2025, 9, 1, tzinfo=timezone.utc)) == 2025
        assert school_start_year(datetime(2025, 8, 31, 23, 59, tzinfo=timezone.utc)) == 2024
        assert school_start_year(datetime(2026, 1, 15, tzinfo=timezone.utc)) == 2025

    def test_start_year_uses_utc(self):
        # 01:00 on Sept 1st in UTC+2 is still August in UTC
        paris_summer = timezone(timedelta(hours=2))
        assert school_start_year(datetime(2025, 9, 1, 1, 0, tzinfo=paris_summer)) == 2024

    def test_window_bounds(self):
        window = school_year_window(2024)
        assert window.start == date(2024, 9, 1)
        assert window.end == date(2025, 7, 14)
        assert date(2025, 7, 14) in window
        assert date(2025, 7, 15) not in window
        assert date(2024, 8, 31) not in window


class TestGeneration:
    @pytest.mark.parametrize("iso", [1, 2, 3, 4, 5, 6, 7])
    def test_dates_cover_the_window_weekly(self, iso):
        window = school_year_window(2024)
        dates = generate_school_year_dates(iso, 2024)

        assert dates
        assert all(d.isoweekday() == iso for d in dates)
        assert all(d in window for d in dates)
        assert all(b - a == timedelta(days=7) for a, b in zip(dates, dates[1:]))
        assert dates[0] - window.start < timedelta(days=7)
        assert window.end - dates[-1] < timedelta(days=7)

    def test_wednesdays_2024(self):
        dates = generate_school_year_dates(3, 2024)
        assert dates[0] == date(2024, 9, 4)
        assert dates[-1] == date(2025, 7, 9)
        assert len(dates) == 45

    def test_window_starting_on_the_weekday_includes_it(self):
        # Sept 1st 2024 is a Sunday
        dates = generate_school_year_dates(7, 2024)
        assert dates[0] == date(2024, 9, 1)

    def test_empty_range(self):
        assert list(iter_weekday_dates(date(2024, 9, 2), date(2024, 9, 3), 5)) == []

    def test_invalid_weekday(self):
        with pytest.raises(ValidationError):
            generate_school_year_dates(8, 2024)

    def test_invalid_weekday_fails_on_call(self):
        with pytest.raises(ValidationError):
            iter_weekday_dates(date(2024, 9, 1), date(2024, 9, 30), 9)
