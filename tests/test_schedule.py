from __future__ import annotations

from datetime import date, timedelta

from condo_maintenance.domain.entities import TaskDescriptor
from condo_maintenance.domain.frequency import BUILDING_AGE_RULE_LABEL, parse_frequency
from condo_maintenance.domain.schedule import (
    MAX_INTERVAL_STEPS,
    is_due_on,
    next_due_date,
    occurrences_between,
    sort_by_next_due,
)


def _task(frequency: str, anchor: date, task_id: int = 1, **extra) -> TaskDescriptor:
    return TaskDescriptor(
        id=task_id,
        name="Limpeza da caixa d'água",
        frequency=parse_frequency(frequency),
        anchor_date=anchor,
        **extra,
    )


def _days(start: date, count: int) -> list[date]:
    return [start + timedelta(days=offset) for offset in range(count)]


def test_non_recurring_is_due_on_exactly_one_day() -> None:
    anchor = date(2025, 7, 10)
    task = _task("Não se repete", anchor)

    due = [day for day in _days(date(2025, 6, 1), 120) if is_due_on(task, day)]

    assert due == [anchor]
    assert next_due_date(task, date(2025, 7, 1)) == anchor
    assert next_due_date(task, anchor) == anchor
    assert next_due_date(task, anchor + timedelta(days=1)) is None
    assert next_due_date(task, anchor, strictly_after=True) is None


def test_daily_task_is_due_every_day_from_anchor() -> None:
    anchor = date(2025, 7, 10)
    task = _task("Todos os dias", anchor)

    assert all(is_due_on(task, day) for day in _days(anchor, 400))
    assert not is_due_on(task, anchor - timedelta(days=1))


def test_alternate_days() -> None:
    task = _task("Em dias alternados", date(2025, 7, 10))

    assert is_due_on(task, date(2025, 7, 12))
    assert not is_due_on(task, date(2025, 7, 11))
    assert next_due_date(task, date(2025, 7, 11)) == date(2025, 7, 12)
    assert next_due_date(task, date(2025, 7, 1)) == date(2025, 7, 10)


def test_weekly_scenario() -> None:
    task = _task("A cada semana", date(2025, 7, 10))

    assert is_due_on(task, date(2025, 7, 17))
    assert not is_due_on(task, date(2025, 7, 18))
    assert next_due_date(task, date(2025, 7, 18)) == date(2025, 7, 24)
    assert next_due_date(task, date(2025, 7, 17)) == date(2025, 7, 17)
    assert next_due_date(task, date(2025, 7, 17), strictly_after=True) == date(2025, 7, 24)


def test_quarterly_sequence_clamps_to_month_length() -> None:
    task = _task("A cada 3 meses", date(2025, 1, 31))

    assert occurrences_between(task, date(2025, 1, 1), date(2025, 12, 31)) == [
        date(2025, 1, 31),
        date(2025, 4, 30),
        date(2025, 7, 31),
        date(2025, 10, 31),
    ]
    assert is_due_on(task, date(2025, 4, 30))
    assert not is_due_on(task, date(2025, 7, 30))
    assert next_due_date(task, date(2025, 5, 1)) == date(2025, 7, 31)


def test_yearly_task_on_leap_day() -> None:
    task = _task("A cada 1 ano", date(2024, 2, 29))

    assert occurrences_between(task, date(2024, 1, 1), date(2028, 12, 31)) == [
        date(2024, 2, 29),
        date(2025, 2, 28),
        date(2026, 2, 28),
        date(2027, 2, 28),
        date(2028, 2, 29),
    ]


def test_business_day_walk() -> None:
    thursday = date(2025, 7, 10)
    weekdays = _task("Segunda a sexta", thursday)
    with_saturday = _task("Segunda a sábado", thursday)

    assert is_due_on(weekdays, date(2025, 7, 11))
    assert not is_due_on(weekdays, date(2025, 7, 12))
    assert not is_due_on(weekdays, date(2025, 7, 13))
    assert is_due_on(with_saturday, date(2025, 7, 12))
    assert not is_due_on(with_saturday, date(2025, 7, 13))
    assert next_due_date(weekdays, date(2025, 7, 12)) == date(2025, 7, 14)
    assert next_due_date(with_saturday, date(2025, 7, 13)) == date(2025, 7, 14)
    assert next_due_date(weekdays, date(2025, 7, 1)) == thursday


def test_not_due_before_anchor() -> None:
    task = _task("A cada 1 mês", date(2025, 7, 10))

    assert not is_due_on(task, date(2025, 6, 10))
    assert next_due_date(task, date(2025, 6, 10)) == date(2025, 7, 10)


def test_cycle_end_stops_occurrences() -> None:
    task = _task("Todos os dias", date(2025, 7, 10), completion_date=date(2025, 7, 15))

    assert is_due_on(task, date(2025, 7, 15))
    assert not is_due_on(task, date(2025, 7, 16))
    assert next_due_date(task, date(2025, 7, 16)) is None
    assert next_due_date(task, date(2025, 7, 15), strictly_after=True) is None


def test_cycle_end_before_next_candidate() -> None:
    task = _task("A cada 1 mês", date(2025, 7, 10), completion_date=date(2025, 8, 1))

    assert next_due_date(task, date(2025, 7, 11)) is None


def test_vendor_defined_frequency_is_never_due() -> None:
    task = _task("Conforme indicação dos fornecedores", date(2025, 7, 10))

    assert not is_due_on(task, date(2025, 7, 10))
    assert next_due_date(task, date(2025, 7, 1)) is None


def test_building_age_rule() -> None:
    task = _task(
        BUILDING_AGE_RULE_LABEL,
        date(2025, 3, 1),
        building_delivery_date=date(2020, 1, 1),
    )

    assert is_due_on(task, date(2025, 3, 1))
    assert is_due_on(task, date(2030, 3, 1))
    assert not is_due_on(task, date(2033, 3, 1))
    assert is_due_on(task, date(2035, 3, 1))
    assert next_due_date(task, date(2031, 1, 1)) == date(2035, 3, 1)
    assert next_due_date(task, date(2035, 3, 2)) == date(2038, 3, 1)


def test_building_age_rule_without_delivery_date() -> None:
    task = _task(BUILDING_AGE_RULE_LABEL, date(2025, 3, 1))

    assert not is_due_on(task, date(2025, 3, 1))
    assert next_due_date(task, date(2025, 1, 1)) is None


def test_monthly_walk_is_bounded() -> None:
    task = _task("A cada 1 mês", date(2000, 1, 15))
    last_step = MAX_INTERVAL_STEPS - 1

    assert is_due_on(task, date(2000 + last_step // 12, 1 + last_step % 12, 15))
    assert not is_due_on(task, date(2050, 1, 15))
    assert next_due_date(task, date(2050, 1, 1)) is None


def test_sort_by_next_due_puts_unscheduled_last() -> None:
    today = date(2025, 7, 18)
    weekly = _task("A cada semana", date(2025, 7, 10), task_id=1)
    done = _task("Não se repete", date(2025, 7, 1), task_id=2)
    daily = _task("Todos os dias", date(2025, 7, 1), task_id=3)
    monthly = _task("A cada 1 mês", date(2025, 7, 20), task_id=4)

    ordered = sort_by_next_due([weekly, done, daily, monthly], today)

    assert [task.id for task in ordered] == [3, 4, 1, 2]
