from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from condo_maintenance.domain.calendar import CANONICAL_TIMEZONE, DateInput, to_date
from condo_maintenance.domain.entities import OccurrenceEntity
from condo_maintenance.domain.enums import OccurrenceStatus
from condo_maintenance.domain.frequency import parse_frequency
from condo_maintenance.domain.recurrence import next_occurrence
from condo_maintenance.infra.repository import ActivityRepository

logger = logging.getLogger(__name__)

_BASE_STATUSES = (OccurrenceStatus.FEITO, OccurrenceStatus.ATRASADO)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _coerce_status(status: OccurrenceStatus | str) -> OccurrenceStatus:
    if isinstance(status, OccurrenceStatus):
        return status
    return OccurrenceStatus(str(status).strip().upper())


class OccurrenceService:
    def __init__(self, repo: ActivityRepository, tz: str = CANONICAL_TIMEZONE) -> None:
        self._repo = repo
        self._tz = tz

    def record_occurrence(
        self,
        activity_id: int,
        reference_date: DateInput,
        status: OccurrenceStatus | str,
        notes: str | None = None,
    ) -> OccurrenceEntity:
        """Store the status of one occurrence, then schedule the next one if it is done.

        The status write is kept even when scheduling the follow-up fails.
        """
        day = to_date(reference_date, self._tz)
        status = _coerce_status(status)

        data: dict = {"status": status.value}
        data["completed_at"] = _utcnow() if status == OccurrenceStatus.FEITO else None
        if notes is not None:
            data["notes"] = notes

        record = self._repo.save_occurrence(activity_id, day, data)
        self._sync_activity_completion(activity_id, data["completed_at"])
        self.schedule_next_occurrence(activity_id, day, status)
        return record

    def _sync_activity_completion(self, activity_id: int, completed_at: datetime | None) -> None:
        # One-off activities carry their completion on the activity itself.
        activity = self._repo.get_activity(activity_id)
        if activity and not parse_frequency(activity.frequency).is_recurring:
            self._repo.update_activity(activity_id, {"completed_at": completed_at})

    def mark_done(
        self, activity_id: int, reference_date: DateInput, notes: str | None = None
    ) -> OccurrenceEntity:
        return self.record_occurrence(activity_id, reference_date, OccurrenceStatus.FEITO, notes)

    def schedule_next_occurrence(
        self,
        activity_id: int,
        reference_date: DateInput,
        status: OccurrenceStatus | str,
    ) -> OccurrenceEntity | None:
        if str(status).strip().upper() != OccurrenceStatus.FEITO.value:
            return None

        activity = self._repo.get_activity(activity_id)
        if not activity:
            logger.warning("Activity %s not found, next occurrence not scheduled", activity_id)
            return None

        day = to_date(reference_date, self._tz)
        next_day = next_occurrence(
            day,
            activity.frequency,
            building_delivery_date=activity.building_delivery_date,
            tz=self._tz,
        )
        if next_day is None:
            logger.debug("Activity %s does not recur after %s", activity_id, day)
            return None

        if activity.completion_date and next_day > to_date(activity.completion_date, self._tz):
            logger.info(
                "Activity %s cycle ended on %s, %s not scheduled",
                activity_id,
                activity.completion_date,
                next_day,
            )
            return None

        record, created = self._repo.ensure_occurrence(
            activity_id, next_day, OccurrenceStatus.PENDENTE
        )
        if created:
            logger.info("Scheduled activity %s for %s", activity_id, next_day)
        return record

    def next_execution(self, activity_id: int) -> date | None:
        activity = self._repo.get_activity(activity_id)
        if not activity:
            return None

        closed = [
            record
            for record in self._repo.list_history(activity_id)
            if record.status in _BASE_STATUSES
        ]
        if closed:
            base = max(record.reference_date for record in closed)
        else:
            base = activity.expected_date
        if base is None:
            return None

        return next_occurrence(
            base,
            activity.frequency,
            building_delivery_date=activity.building_delivery_date,
            tz=self._tz,
        )
