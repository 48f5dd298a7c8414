from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Mapping

from condo_maintenance.config import SETTINGS
from condo_maintenance.domain import calendar
from condo_maintenance.domain.calendar import CANONICAL_TIMEZONE, days_between
from condo_maintenance.domain.descriptors import describe_activities
from condo_maintenance.domain.entities import Notification, OccurrenceEntity, TaskDescriptor
from condo_maintenance.domain.enums import DayStatus, NotificationWhen, OccurrenceStatus
from condo_maintenance.domain.filters import ActivityFilters
from condo_maintenance.domain.schedule import is_due_on, next_due_date
from condo_maintenance.domain.status import day_status, status_for_day
from condo_maintenance.infra.repository import ActivityRepository

logger = logging.getLogger(__name__)

WHEN_ORDER = {
    NotificationWhen.OVERDUE: 0,
    NotificationWhen.DUE: 1,
    NotificationWhen.PRE: 2,
}

DEFAULT_NAME = "Atividade"


def _title(task: TaskDescriptor) -> str:
    name = task.name or DEFAULT_NAME
    return f"{name} · {task.location_name}" if task.location_name else name


def _notice(task: TaskDescriptor, when: NotificationWhen, due: date, details: str) -> Notification:
    return Notification(
        task_id=task.id,
        when=when,
        due_date=due,
        title=_title(task),
        details=details,
        name=task.name or DEFAULT_NAME,
        location_name=task.location_name,
    )


def _candidates(
    task: TaskDescriptor,
    history: list[OccurrenceEntity],
    today: date,
    lead_days: int,
    tz: str,
) -> Iterable[Notification]:
    if status_for_day(task, history, today, tz) == DayStatus.HISTORICO:
        return

    if is_due_on(task, today, tz):
        yield _notice(task, NotificationWhen.DUE, today, "Vence hoje")
        return

    upcoming = next_due_date(task, today, tz=tz)
    if upcoming is not None:
        diff = days_between(today, upcoming)
        if 0 <= diff <= lead_days:
            if diff == 0:
                yield _notice(task, NotificationWhen.DUE, upcoming, "Vence hoje")
            else:
                yield _notice(task, NotificationWhen.PRE, upcoming, f"Vence em {diff} dia(s)")
        return

    if (
        not task.frequency.is_recurring
        and task.anchor_date < today
        and task.completed_at is None
    ):
        yield _notice(task, NotificationWhen.OVERDUE, task.anchor_date, "Atrasada")


def dedupe_notifications(notices: Iterable[Notification]) -> list[Notification]:
    seen = set()
    unique = []
    for notice in notices:
        if notice.key in seen:
            continue
        seen.add(notice.key)
        unique.append(notice)
    return unique


def sort_notifications(notices: Iterable[Notification]) -> list[Notification]:
    return sorted(
        notices,
        key=lambda n: (WHEN_ORDER[n.when], (n.location_name or "").casefold(), n.due_date),
    )


def project_notifications(
    tasks: Iterable[TaskDescriptor],
    history_by_task: Mapping[int | None, list[OccurrenceEntity]],
    today: date,
    lead_days: int,
    tz: str = CANONICAL_TIMEZONE,
) -> list[Notification]:
    """Due, pre-alert and overdue notices for ``today``, deduplicated and ordered."""
    lead_days = max(int(lead_days), 0)
    tasks_by_id = {}
    notices = []
    for task in tasks:
        tasks_by_id[task.id] = task
        history = list(history_by_task.get(task.id, []))
        notices.extend(_candidates(task, history, today, lead_days, tz))

    enriched = []
    for notice in dedupe_notifications(notices):
        task = tasks_by_id[notice.task_id]
        info = day_status(task, history_by_task.get(task.id, []), notice.due_date, tz)
        enriched.append(
            Notification(
                task_id=notice.task_id,
                when=notice.when,
                due_date=notice.due_date,
                title=notice.title,
                details=notice.details,
                name=notice.name,
                location_name=notice.location_name,
                status_on_due_date=info.code,
                done_on_due_date=info.code == OccurrenceStatus.FEITO.value,
            )
        )
    return sort_notifications(enriched)


class NotificationService:
    def __init__(
        self,
        repo: ActivityRepository,
        lead_days: int | None = None,
        tz: str = CANONICAL_TIMEZONE,
    ) -> None:
        self._repo = repo
        self._lead_days = SETTINGS.notification_lead_days if lead_days is None else lead_days
        self._tz = tz

    def list_notifications(
        self,
        filters: ActivityFilters,
        lead_days: int | None = None,
        today: date | None = None,
    ) -> list[Notification]:
        today = today or calendar.today(self._tz)
        window = self._lead_days if lead_days is None else lead_days

        described = describe_activities(self._repo.list_activities(filters), self._tz)
        tasks = [task for _, task in described]
        history = self._repo.list_history_for([task.id for task in tasks])

        notices = project_notifications(tasks, history, today, window, self._tz)
        logger.info(
            "Projected %d notification(s) for %d scheduled activities on %s",
            len(notices),
            len(tasks),
            today,
        )
        return notices
