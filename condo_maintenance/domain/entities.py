from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .enums import NotificationWhen, OccurrenceStatus
from .frequency import Frequency


@dataclass(frozen=True)
class CondominiumEntity:
    id: int | None
    company_id: int
    name: str
    delivery_date: Optional[date]


@dataclass(frozen=True)
class ActivityEntity:
    id: int | None
    company_id: int
    condominium_id: int
    name: str
    frequency: str
    expected_date: Optional[date]
    start_at: Optional[datetime]
    created_at: datetime
    completion_date: Optional[date]
    completed_at: Optional[datetime]
    location_name: str | None = None
    building_delivery_date: Optional[date] = None


@dataclass(frozen=True)
class OccurrenceEntity:
    activity_id: int
    reference_date: date
    status: OccurrenceStatus
    completed_at: Optional[datetime] = None
    notes: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class TaskDescriptor:
    id: int | None
    name: str
    frequency: Frequency
    anchor_date: date
    completion_date: Optional[date] = None
    building_delivery_date: Optional[date] = None
    location_name: str | None = None
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class DayStatusInfo:
    expected: bool
    code: str
    record: OccurrenceEntity | None = None


@dataclass(frozen=True)
class CalendarDay:
    day: date
    code: str


@dataclass(frozen=True)
class Notification:
    task_id: int | None
    when: NotificationWhen
    due_date: date
    title: str
    details: str
    name: str
    location_name: str | None = None
    status_on_due_date: str | None = None
    done_on_due_date: bool = False

    @property
    def key(self) -> tuple[int | None, NotificationWhen, date]:
        return (self.task_id, self.when, self.due_date)
