from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from .calendar import CANONICAL_TIMEZONE, to_date
from .entities import ActivityEntity, TaskDescriptor
from .frequency import FREQUENCY_LABELS_VERSION, is_known_label, parse_frequency

logger = logging.getLogger(__name__)


def resolve_anchor(activity: ActivityEntity, tz: str = CANONICAL_TIMEZONE) -> date | None:
    """Expected date, then start timestamp, then creation timestamp."""
    for candidate in (activity.expected_date, activity.start_at, activity.created_at):
        if candidate is not None and candidate != "":
            return to_date(candidate, tz)
    return None


def describe_activity(
    activity: ActivityEntity, tz: str = CANONICAL_TIMEZONE
) -> TaskDescriptor | None:
    anchor = resolve_anchor(activity, tz)
    if anchor is None:
        logger.debug("Activity %s has no anchor date, skipping", activity.id)
        return None

    if not is_known_label(activity.frequency):
        logger.warning(
            "Activity %s has unknown frequency %r (labels v%s), treating as non-recurring",
            activity.id,
            activity.frequency,
            FREQUENCY_LABELS_VERSION,
        )

    return TaskDescriptor(
        id=activity.id,
        name=activity.name,
        frequency=parse_frequency(activity.frequency),
        anchor_date=anchor,
        completion_date=(
            to_date(activity.completion_date, tz) if activity.completion_date else None
        ),
        building_delivery_date=(
            to_date(activity.building_delivery_date, tz)
            if activity.building_delivery_date
            else None
        ),
        location_name=activity.location_name,
        completed_at=activity.completed_at,
    )


def describe_activities(
    activities: Iterable[ActivityEntity], tz: str = CANONICAL_TIMEZONE
) -> list[tuple[ActivityEntity, TaskDescriptor]]:
    described = []
    for activity in activities:
        task = describe_activity(activity, tz)
        if task is not None:
            described.append((activity, task))
    return described
