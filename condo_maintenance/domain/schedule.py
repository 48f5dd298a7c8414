from __future__ import annotations

from datetime import date
from typing import Iterable, Iterator

from .calendar import (
    CANONICAL_TIMEZONE,
    DateInput,
    add_days,
    add_months,
    add_years,
    days_between,
    is_business_day,
    to_date,
)
from .entities import TaskDescriptor
from .enums import RecurrenceKind, SpecialRule
from .recurrence import building_age_step_years

# Past these bounds a task is reported as not due.
MAX_INTERVAL_STEPS = 600
MAX_BUILDING_RULE_STEPS = 100


def _interval_walk(task: TaskDescriptor) -> Iterator[date]:
    # Offsets from the anchor, so month-end clamping never accumulates.
    freq = task.frequency
    for step in range(MAX_INTERVAL_STEPS):
        if freq.kind == RecurrenceKind.MONTHS:
            yield add_months(task.anchor_date, step * freq.interval)
        else:
            yield add_years(task.anchor_date, step * freq.interval)


def _building_rule_walk(task: TaskDescriptor) -> Iterator[date]:
    delivery = task.building_delivery_date
    if delivery is None:
        return
    years = 0
    current = task.anchor_date
    for _ in range(MAX_BUILDING_RULE_STEPS):
        yield current
        years += building_age_step_years(current, delivery)
        current = add_years(task.anchor_date, years)


def _walk(task: TaskDescriptor) -> Iterator[date]:
    kind = task.frequency.kind
    if kind in (RecurrenceKind.MONTHS, RecurrenceKind.YEARS):
        return _interval_walk(task)
    if kind == RecurrenceKind.SPECIAL and task.frequency.rule == SpecialRule.BUILDING_AGE:
        return _building_rule_walk(task)
    return iter(())


def _past_cycle_end(task: TaskDescriptor, day: date) -> bool:
    return task.completion_date is not None and day > task.completion_date


def is_due_on(task: TaskDescriptor, reference_day: DateInput, tz: str = CANONICAL_TIMEZONE) -> bool:
    day = to_date(reference_day, tz)
    anchor = task.anchor_date
    if day < anchor or _past_cycle_end(task, day):
        return False

    freq = task.frequency
    if freq.kind == RecurrenceKind.NONE:
        return day == anchor
    if freq.kind == RecurrenceKind.DAYS:
        return days_between(anchor, day) % freq.interval == 0
    if freq.kind == RecurrenceKind.BUSINESS_DAYS:
        return is_business_day(day, freq.include_saturday)

    for candidate in _walk(task):
        if candidate == day:
            return True
        if candidate > day:
            return False
    return False


def _first_on_or_after(task: TaskDescriptor, start: date) -> date | None:
    anchor = task.anchor_date
    freq = task.frequency

    if freq.kind == RecurrenceKind.NONE:
        return anchor if anchor >= start else None

    if freq.kind == RecurrenceKind.DAYS:
        if start <= anchor:
            return anchor
        remainder = days_between(anchor, start) % freq.interval
        return start if remainder == 0 else add_days(start, freq.interval - remainder)

    if freq.kind == RecurrenceKind.BUSINESS_DAYS:
        candidate = max(start, anchor)
        while not is_business_day(candidate, freq.include_saturday):
            candidate = add_days(candidate, 1)
        return candidate

    for candidate in _walk(task):
        if candidate >= start:
            return candidate
    return None


def next_due_date(
    task: TaskDescriptor,
    reference_day: DateInput,
    *,
    strictly_after: bool = False,
    tz: str = CANONICAL_TIMEZONE,
) -> date | None:
    """Earliest due day on or after ``reference_day``.

    With ``strictly_after`` the reference day itself is not considered.
    """
    start = to_date(reference_day, tz)
    if strictly_after:
        start = add_days(start, 1)
    if _past_cycle_end(task, start):
        return None

    candidate = _first_on_or_after(task, start)
    if candidate is None or _past_cycle_end(task, candidate):
        return None
    return candidate


def occurrences_between(
    task: TaskDescriptor, start: DateInput, end: DateInput, tz: str = CANONICAL_TIMEZONE
) -> list[date]:
    last = to_date(end, tz)
    days = []
    current = next_due_date(task, start, tz=tz)
    while current is not None and current <= last:
        days.append(current)
        current = next_due_date(task, current, strictly_after=True, tz=tz)
    return days


def sort_by_next_due(
    tasks: Iterable[TaskDescriptor], reference_day: DateInput, tz: str = CANONICAL_TIMEZONE
) -> list[TaskDescriptor]:
    day = to_date(reference_day, tz)

    def sort_key(task: TaskDescriptor) -> tuple[bool, date]:
        upcoming = next_due_date(task, day, tz=tz)
        return (upcoming is None, upcoming or date.max)

    return sorted(tasks, key=sort_key)
