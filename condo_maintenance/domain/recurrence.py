from __future__ import annotations

from datetime import date

from .calendar import (
    CANONICAL_TIMEZONE,
    DateInput,
    add_days,
    add_months,
    add_years,
    next_business_day,
    to_date,
)
from .enums import RecurrenceKind, SpecialRule
from .frequency import Frequency, parse_frequency


def building_age_step_years(day: date, delivery_date: date) -> int:
    """Inspection interval for a building of the age it has on ``day``."""
    age = day.year - delivery_date.year
    if age <= 10:
        return 5
    if age <= 30:
        return 3
    return 1


def next_occurrence(
    base_date: DateInput,
    frequency: str | Frequency | None,
    *,
    building_delivery_date: date | None = None,
    tz: str = CANONICAL_TIMEZONE,
) -> date | None:
    """Day of the occurrence that follows the one on ``base_date``.

    Returns None when the frequency does not recur.
    """
    freq = parse_frequency(frequency)
    day = to_date(base_date, tz)

    if freq.kind == RecurrenceKind.NONE:
        return None
    if freq.kind == RecurrenceKind.DAYS:
        return add_days(day, freq.interval)
    if freq.kind == RecurrenceKind.BUSINESS_DAYS:
        return next_business_day(day, freq.include_saturday)
    if freq.kind == RecurrenceKind.MONTHS:
        return add_months(day, freq.interval)
    if freq.kind == RecurrenceKind.YEARS:
        return add_years(day, freq.interval)
    if freq.rule == SpecialRule.BUILDING_AGE and building_delivery_date is not None:
        delivery = to_date(building_delivery_date, tz)
        return add_years(day, building_age_step_years(day, delivery))
    return None
