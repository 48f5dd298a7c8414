from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from dateutil.parser import isoparse, isoparser
from dateutil.relativedelta import relativedelta

CANONICAL_TIMEZONE = "America/Sao_Paulo"

SATURDAY = 5
SUNDAY = 6

_ISO_PARSER = isoparser()


class InvalidDateError(ValueError):
    pass


DateInput = date | datetime | str


def _zone(tz: str) -> ZoneInfo:
    return ZoneInfo(tz)


def _require_date(value: object) -> date:
    if not isinstance(value, date):
        raise InvalidDateError(f"Expected a date, got {value!r}")
    return value


def _parse_string(value: str) -> date | datetime:
    text = value.strip()
    if not text:
        raise InvalidDateError("Empty date string")
    try:
        # Date-only strings name a calendar day, not an instant.
        return _ISO_PARSER.parse_isodate(text)
    except ValueError:
        pass
    try:
        return isoparse(text)
    except (ValueError, OverflowError) as exc:
        raise InvalidDateError(f"Unparseable date: {value!r}") from exc


def to_date(value: DateInput, tz: str = CANONICAL_TIMEZONE) -> date:
    """Return the calendar day of ``value`` in ``tz``.

    Naive datetimes are stored as UTC, so they are read as UTC instants.
    """
    if isinstance(value, str):
        value = _parse_string(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(_zone(tz)).date()
    return _require_date(value)


def start_of_day(value: DateInput, tz: str = CANONICAL_TIMEZONE) -> datetime:
    """00:00 local time in ``tz`` of the day containing ``value``, as an aware datetime."""
    return datetime.combine(to_date(value, tz), time.min, tzinfo=_zone(tz))


def today(tz: str = CANONICAL_TIMEZONE, now: datetime | None = None) -> date:
    return to_date(now or datetime.now(timezone.utc), tz)


def add_days(value: date, days: int) -> date:
    return _require_date(value) + timedelta(days=days)


def add_months(value: date, months: int) -> date:
    # relativedelta clamps to the last valid day of the target month.
    return _require_date(value) + relativedelta(months=months)


def add_years(value: date, years: int) -> date:
    return _require_date(value) + relativedelta(years=years)


def days_between(start: date, end: date) -> int:
    return (_require_date(end) - _require_date(start)).days


def is_business_day(value: date, include_saturday: bool = False) -> bool:
    weekday = _require_date(value).weekday()
    if weekday == SUNDAY:
        return False
    if weekday == SATURDAY:
        return include_saturday
    return True


def next_business_day(value: date, include_saturday: bool = False) -> date:
    candidate = add_days(value, 1)
    while not is_business_day(candidate, include_saturday):
        candidate = add_days(candidate, 1)
    return candidate
