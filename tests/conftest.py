from __future__ import annotations

import os
import tempfile
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path

import pytest

_DB_DIR = Path(tempfile.mkdtemp(prefix="condo_maintenance_"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"
os.environ.setdefault("LOG_DIR", str(_DB_DIR / "logs"))

from condo_maintenance.domain.entities import ActivityEntity, OccurrenceEntity  # noqa: E402
from condo_maintenance.domain.enums import OccurrenceStatus  # noqa: E402
from condo_maintenance.domain.filters import ActivityFilters  # noqa: E402


class FakeRepo:
    def __init__(self) -> None:
        self.activities: list[ActivityEntity] = []
        self.history: list[OccurrenceEntity] = []
        self._id = 1

    def add_activity(self, **data) -> ActivityEntity:
        defaults = {
            "id": self._id,
            "company_id": 1,
            "condominium_id": 1,
            "name": "Atividade",
            "frequency": "Não se repete",
            "expected_date": None,
            "start_at": None,
            "created_at": datetime(2025, 1, 1, 12, 0),
            "completion_date": None,
            "completed_at": None,
        }
        defaults.update(data)
        activity = ActivityEntity(**defaults)
        self.activities.append(activity)
        self._id += 1
        return activity

    def add_occurrence(self, activity_id: int, reference_date: date, status: OccurrenceStatus) -> None:
        self.history.append(OccurrenceEntity(activity_id, reference_date, status))

    def list_activities(self, filters: ActivityFilters) -> list[ActivityEntity]:
        return [
            a
            for a in self.activities
            if filters.company_id is None or a.company_id == filters.company_id
        ]

    def get_activity(self, activity_id: int) -> ActivityEntity | None:
        return next((a for a in self.activities if a.id == activity_id), None)

    def update_activity(self, activity_id: int, data: dict) -> ActivityEntity | None:
        existing = self.get_activity(activity_id)
        if existing is None:
            return None
        updated = replace(existing, **data)
        self.activities = [updated if a is existing else a for a in self.activities]
        return updated

    def list_history(self, activity_id: int) -> list[OccurrenceEntity]:
        records = [h for h in self.history if h.activity_id == activity_id]
        return sorted(records, key=lambda h: h.reference_date)

    def list_history_for(self, activity_ids) -> dict[int, list[OccurrenceEntity]]:
        return {activity_id: self.list_history(activity_id) for activity_id in activity_ids}

    def get_occurrence(self, activity_id: int, reference_date: date) -> OccurrenceEntity | None:
        return next(
            (
                h
                for h in self.history
                if h.activity_id == activity_id and h.reference_date == reference_date
            ),
            None,
        )

    def save_occurrence(self, activity_id: int, reference_date: date, data: dict) -> OccurrenceEntity:
        existing = self.get_occurrence(activity_id, reference_date)
        fields = dict(data)
        fields["status"] = OccurrenceStatus(fields["status"])
        if existing is None:
            record = OccurrenceEntity(activity_id=activity_id, reference_date=reference_date, **fields)
            self.history.append(record)
            return record
        updated = replace(existing, **fields)
        self.history = [updated if h is existing else h for h in self.history]
        return updated

    def ensure_occurrence(
        self, activity_id: int, reference_date: date, status: OccurrenceStatus
    ) -> tuple[OccurrenceEntity, bool]:
        existing = self.get_occurrence(activity_id, reference_date)
        if existing is not None:
            return existing, False
        record = OccurrenceEntity(activity_id, reference_date, OccurrenceStatus(status))
        self.history.append(record)
        return record, True


@pytest.fixture
def repo() -> FakeRepo:
    return FakeRepo()
