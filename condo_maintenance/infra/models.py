from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CondominiumModel(Base):
    __tablename__ = "condominiums"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    delivery_date = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class ActivityModel(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False, index=True)
    condominium_id = Column(
        Integer, ForeignKey("condominiums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(200), nullable=False)
    frequency = Column(String(255), nullable=False, default="Não se repete")
    expected_date = Column(Date, nullable=True)
    start_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    completion_date = Column(Date, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    condominium = relationship("CondominiumModel", lazy="joined")
    history = relationship(
        "OccurrenceModel",
        cascade="all, delete-orphan",
        order_by="OccurrenceModel.reference_date",
    )


class OccurrenceModel(Base):
    __tablename__ = "activity_history"
    __table_args__ = (
        UniqueConstraint("activity_id", "reference_date", name="uq_activity_history_reference"),
    )

    id = Column(Integer, primary_key=True)
    activity_id = Column(
        Integer, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reference_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="PENDENTE")
    completed_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
