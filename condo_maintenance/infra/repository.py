from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from condo_maintenance.domain.entities import ActivityEntity, CondominiumEntity, OccurrenceEntity
from condo_maintenance.domain.enums import OccurrenceStatus
from condo_maintenance.domain.filters import ActivityFilters

from .db import SessionLocal
from .models import ActivityModel, CondominiumModel, OccurrenceModel

logger = logging.getLogger(__name__)


def _to_condominium(model: CondominiumModel) -> CondominiumEntity:
    return CondominiumEntity(
        id=model.id,
        company_id=model.company_id,
        name=model.name,
        delivery_date=model.delivery_date,
    )


def _to_activity(model: ActivityModel) -> ActivityEntity:
    condominium = model.condominium
    return ActivityEntity(
        id=model.id,
        company_id=model.company_id,
        condominium_id=model.condominium_id,
        name=model.name,
        frequency=model.frequency,
        expected_date=model.expected_date,
        start_at=model.start_at,
        created_at=model.created_at,
        completion_date=model.completion_date,
        completed_at=model.completed_at,
        location_name=condominium.name if condominium else None,
        building_delivery_date=condominium.delivery_date if condominium else None,
    )


def _to_occurrence(model: OccurrenceModel) -> OccurrenceEntity:
    return OccurrenceEntity(
        id=model.id,
        activity_id=model.activity_id,
        reference_date=model.reference_date,
        status=OccurrenceStatus(model.status),
        completed_at=model.completed_at,
        notes=model.notes,
    )


def _apply_filters(stmt, filters: ActivityFilters) -> object:
    if filters.company_id is not None:
        stmt = stmt.where(ActivityModel.company_id == filters.company_id)
    if filters.condominium_id is not None:
        stmt = stmt.where(ActivityModel.condominium_id == filters.condominium_id)
    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(
            or_(
                ActivityModel.name.ilike(pattern),
                ActivityModel.frequency.ilike(pattern),
            )
        )
    return stmt


def _occurrence_key(activity_id: int, reference_date: date):
    return select(OccurrenceModel).where(
        OccurrenceModel.activity_id == activity_id,
        OccurrenceModel.reference_date == reference_date,
    )


def _normalize_status(data: dict) -> dict:
    normalized = dict(data)
    if isinstance(normalized.get("status"), OccurrenceStatus):
        normalized["status"] = normalized["status"].value
    return normalized


class ActivityRepository:
    def create_condominium(self, data: dict) -> CondominiumEntity:
        with SessionLocal() as session:
            condominium = CondominiumModel(**data)
            session.add(condominium)
            session.commit()
            session.refresh(condominium)
            return _to_condominium(condominium)

    def list_activities(self, filters: ActivityFilters) -> list[ActivityEntity]:
        with SessionLocal() as session:
            stmt = select(ActivityModel)
            stmt = _apply_filters(stmt, filters)
            stmt = stmt.order_by(ActivityModel.created_at.desc(), ActivityModel.id.desc())
            return [_to_activity(activity) for activity in session.scalars(stmt)]

    def get_activity(self, activity_id: int) -> Optional[ActivityEntity]:
        with SessionLocal() as session:
            activity = session.get(ActivityModel, activity_id)
            return _to_activity(activity) if activity else None

    def create_activity(self, data: dict) -> ActivityEntity:
        with SessionLocal() as session:
            activity = ActivityModel(**data)
            session.add(activity)
            session.commit()
            session.refresh(activity)
            return _to_activity(activity)

    def update_activity(self, activity_id: int, data: dict) -> Optional[ActivityEntity]:
        with SessionLocal() as session:
            activity = session.get(ActivityModel, activity_id)
            if not activity:
                return None
            for key, value in data.items():
                setattr(activity, key, value)
            session.commit()
            session.refresh(activity)
            return _to_activity(activity)

    def delete_activity(self, activity_id: int) -> None:
        with SessionLocal() as session:
            activity = session.get(ActivityModel, activity_id)
            if not activity:
                return
            session.delete(activity)
            session.commit()

    def list_history(self, activity_id: int) -> list[OccurrenceEntity]:
        with SessionLocal() as session:
            stmt = (
                select(OccurrenceModel)
                .where(OccurrenceModel.activity_id == activity_id)
                .order_by(OccurrenceModel.reference_date.asc())
            )
            return [_to_occurrence(record) for record in session.scalars(stmt)]

    def list_history_for(
        self,
        activity_ids: Iterable[int],
        start: date | None = None,
        end: date | None = None,
    ) -> dict[int, list[OccurrenceEntity]]:
        ids = list(activity_ids)
        history: dict[int, list[OccurrenceEntity]] = {activity_id: [] for activity_id in ids}
        if not ids:
            return history

        with SessionLocal() as session:
            stmt = select(OccurrenceModel).where(OccurrenceModel.activity_id.in_(ids))
            if start is not None:
                stmt = stmt.where(OccurrenceModel.reference_date >= start)
            if end is not None:
                stmt = stmt.where(OccurrenceModel.reference_date <= end)
            stmt = stmt.order_by(OccurrenceModel.activity_id, OccurrenceModel.reference_date)
            for record in session.scalars(stmt):
                history[record.activity_id].append(_to_occurrence(record))
        return history

    def get_occurrence(self, activity_id: int, reference_date: date) -> Optional[OccurrenceEntity]:
        with SessionLocal() as session:
            record = session.scalar(_occurrence_key(activity_id, reference_date))
            return _to_occurrence(record) if record else None

    def save_occurrence(self, activity_id: int, reference_date: date, data: dict) -> OccurrenceEntity:
        data = _normalize_status(data)
        with SessionLocal() as session:
            record = session.scalar(_occurrence_key(activity_id, reference_date))
            if record is None:
                record = OccurrenceModel(
                    activity_id=activity_id, reference_date=reference_date, **data
                )
                session.add(record)
            else:
                for key, value in data.items():
                    setattr(record, key, value)
            session.commit()
            session.refresh(record)
            return _to_occurrence(record)

    def ensure_occurrence(
        self, activity_id: int, reference_date: date, status: OccurrenceStatus
    ) -> tuple[OccurrenceEntity, bool]:
        """Create the record for ``(activity_id, reference_date)`` unless it exists.

        Returns the stored record and whether this call created it. An existing
        record is returned untouched.
        """
        with SessionLocal() as session:
            existing = session.scalar(_occurrence_key(activity_id, reference_date))
            if existing is not None:
                return _to_occurrence(existing), False

            record = OccurrenceModel(
                activity_id=activity_id,
                reference_date=reference_date,
                status=OccurrenceStatus(status).value,
            )
            session.add(record)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                existing = session.scalar(_occurrence_key(activity_id, reference_date))
                if existing is None:
                    raise
                logger.info(
                    "Occurrence %s/%s was created concurrently, keeping it",
                    activity_id,
                    reference_date,
                )
                return _to_occurrence(existing), False
            session.refresh(record)
            return _to_occurrence(record), True
