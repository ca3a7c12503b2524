# classroll/schemas/common.py
"""Shared field types for request bodies."""
import re
from datetime import date
from typing import Annotated, Any, Union

from pydantic import BeforeValidator, Field, StrictInt

from ..utils.school_calendar import normalize_weekday

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _to_iso_weekday(value: Any) -> int:
    iso = normalize_weekday(value)
    if iso is None:
        raise ValueError("weekday must be an ISO day (1-7), 0 for Sunday, or a day name")
    return iso


def _to_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise ValueError("date must use the YYYY-MM-DD format")
    return date.fromisoformat(value)


# Accepts ISO int, JS-style 0 for Sunday or a day name; always yields ISO 1-7
WeekdayInput = Annotated[Union[StrictInt, str], BeforeValidator(_to_iso_weekday)]

IsoDate = Annotated[date, BeforeValidator(_to_date)]

EntityId = Annotated[StrictInt, Field(gt=0)]

StartYear = Annotated[int, Field(ge=1900, le=9998)]
