from __future__ import annotations

import logging
from datetime import date

from condo_maintenance.domain.calendar import CANONICAL_TIMEZONE, DateInput, today
from condo_maintenance.domain.descriptors import describe_activities, describe_activity
from condo_maintenance.domain.entities import ActivityEntity, CalendarDay
from condo_maintenance.domain.enums import DayStatus
from condo_maintenance.domain.filters import ActivityFilters
from condo_maintenance.domain.status import build_calendar, status_for_day
from condo_maintenance.infra.repository import ActivityRepository

logger = logging.getLogger(__name__)


class ActivityService:
    def __init__(self, repo: ActivityRepository, tz: str = CANONICAL_TIMEZONE) -> None:
        self._repo = repo
        self._tz = tz

    def board(
        self, filters: ActivityFilters, day: date | None = None
    ) -> dict[DayStatus, list[ActivityEntity]]:
        """Activities grouped by their status on ``day`` (today by default)."""
        day = day or today(self._tz)
        columns: dict[DayStatus, list[ActivityEntity]] = {status: [] for status in DayStatus}

        described = describe_activities(self._repo.list_activities(filters), self._tz)
        history = self._repo.list_history_for([task.id for _, task in described])
        for activity, task in described:
            status = status_for_day(task, history.get(task.id, []), day, self._tz)
            columns[status].append(activity)
        return columns

    def calendar(self, activity_id: int, start: DateInput, end: DateInput) -> list[CalendarDay]:
        activity = self._repo.get_activity(activity_id)
        if not activity:
            return []
        task = describe_activity(activity, self._tz)
        if task is None:
            logger.info("Activity %s has no anchor date, calendar is empty", activity_id)
            return []
        return build_calendar(task, self._repo.list_history(activity_id), start, end, self._tz)
