# classroll/utils/school_calendar.py
"""School-year calendar arithmetic.

Everything here works on ``datetime.date`` values, so results never depend
on the server timezone. The only clock read is ``school_start_year``, which
uses UTC.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterator, List, Optional

from ..core.exceptions import ValidationError

# School year runs from September 1st to July 14th of the following year
SCHOOL_YEAR_START = (9, 1)
SCHOOL_YEAR_END = (7, 14)

ISO_WEEKDAY_FROM_NAME = {
    "lundi": 1,
    "mardi": 2,
    "mercredi": 3,
    "jeudi": 4,
    "vendredi": 5,
    "samedi": 6,
    "dimanche": 7,
}


@dataclass(frozen=True)
class SchoolYear:
    start: date
    end: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


def school_start_year(now: Optional[datetime] = None) -> int:
    """Calendar year in which the school year in progress started."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.year if now.month >= SCHOOL_YEAR_START[0] else now.year - 1


def school_year_window(start_year: Optional[int] = None) -> SchoolYear:
    if start_year is None:
        start_year = school_start_year()
    return SchoolYear(
        start=date(start_year, *SCHOOL_YEAR_START),
        end=date(start_year + 1, *SCHOOL_YEAR_END),
    )


def normalize_weekday(value: Any) -> Optional[int]:
    """Map an ISO int (1-7), a JS-style 0 (Sunday) or a French day name to an ISO weekday.

    Values 1-6 are always read as ISO. Anything unrecognised yields ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        if 1 <= value <= 7:
            return value
        if value == 0:
            return 7
        return None
    if isinstance(value, str):
        return ISO_WEEKDAY_FROM_NAME.get(value.strip().lower())
    return None


def require_weekday(value: Any) -> int:
    iso = normalize_weekday(value)
    if iso is None:
        raise ValidationError(f"Invalid weekday: {value!r}", field="weekday")
    return iso


def iter_weekday_dates(start: date, end: date, iso_weekday: int) -> Iterator[date]:
    """Iterate every date in [start, end] falling on ``iso_weekday``, in order.

    The weekday is checked here, before any date is produced.
    """
    return _weekly(start, end, require_weekday(iso_weekday))


def _weekly(start: date, end: date, iso_weekday: int) -> Iterator[date]:
    current = start + timedelta(days=(iso_weekday - start.isoweekday()) % 7)
    step = timedelta(days=7)
    while current <= end:
        yield current
        current += step


def generate_school_year_dates(iso_weekday: int, start_year: Optional[int] = None) -> List[date]:
    window = school_year_window(start_year)
    return list(iter_weekday_dates(window.start, window.end, iso_weekday))
