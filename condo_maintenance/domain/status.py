from __future__ import annotations

from datetime import date
from typing import Iterable

from .calendar import CANONICAL_TIMEZONE, DateInput, to_date
from .entities import CalendarDay, DayStatusInfo, OccurrenceEntity, TaskDescriptor
from .enums import DayCode, DayStatus, OccurrenceStatus
from .schedule import is_due_on, occurrences_between


def record_for_day(
    history: Iterable[OccurrenceEntity], day: date, tz: str = CANONICAL_TIMEZONE
) -> OccurrenceEntity | None:
    return next(
        (record for record in history if to_date(record.reference_date, tz) == day),
        None,
    )


def status_for_day(
    task: TaskDescriptor,
    history: Iterable[OccurrenceEntity],
    reference_day: DateInput,
    tz: str = CANONICAL_TIMEZONE,
) -> DayStatus:
    """Board column of ``task`` on ``reference_day``.

    Not due: HISTORICO once any occurrence is FEITO, PROXIMAS otherwise.
    Due: follows the record for that day (FEITO -> HISTORICO,
    EM_ANDAMENTO -> EM_ANDAMENTO, anything else or no record -> PENDENTE).
    """
    day = to_date(reference_day, tz)
    history = list(history)

    if not is_due_on(task, day, tz):
        if any(record.status == OccurrenceStatus.FEITO for record in history):
            return DayStatus.HISTORICO
        return DayStatus.PROXIMAS

    record = record_for_day(history, day, tz)
    if record is not None and record.status == OccurrenceStatus.FEITO:
        return DayStatus.HISTORICO
    if record is not None and record.status == OccurrenceStatus.EM_ANDAMENTO:
        return DayStatus.EM_ANDAMENTO
    return DayStatus.PENDENTE


def day_status(
    task: TaskDescriptor,
    history: Iterable[OccurrenceEntity],
    reference_day: DateInput,
    tz: str = CANONICAL_TIMEZONE,
) -> DayStatusInfo:
    day = to_date(reference_day, tz)
    expected = is_due_on(task, day, tz)
    record = record_for_day(history, day, tz)

    if record is not None:
        return DayStatusInfo(expected=expected, code=str(record.status), record=record)
    if expected:
        return DayStatusInfo(expected=True, code=DayCode.SEM_REGISTRO.value)
    return DayStatusInfo(expected=False, code=DayCode.NAO_ESPERADO.value)


def build_calendar(
    task: TaskDescriptor,
    history: Iterable[OccurrenceEntity],
    start: DateInput,
    end: DateInput,
    tz: str = CANONICAL_TIMEZONE,
) -> list[CalendarDay]:
    """Expected days of ``task`` within ``[start, end]`` with their day codes."""
    last = to_date(end, tz)
    if task.completion_date is not None and task.completion_date < last:
        last = task.completion_date

    history = list(history)
    return [
        CalendarDay(day=day, code=day_status(task, history, day, tz).code)
        for day in occurrences_between(task, start, last, tz)
    ]
