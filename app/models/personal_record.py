"""PersonalRecord model - current best per (user, exercise, metric)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Enum, Float, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.core.enums import PRMetric
from app.db.base import Base


class PersonalRecord(Base):
    """Exactly one row per (user_id, exercise_id, metric); updated in place on improvement."""

    __tablename__ = "personal_records"
    __table_args__ = (
        UniqueConstraint("user_id", "exercise_id", "metric", name="uq_personal_records_user_exercise_metric"),
        Index("ix_personal_records_user_id", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    exercise_id: Mapped[str] = mapped_column(String(128), nullable=False)
    exercise_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    metric: Mapped[PRMetric] = mapped_column(Enum(PRMetric), nullable=False)
    value_number: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)
    context_json: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)  # reps/weight/setIndex/workoutId/workoutDate
    achieved_at: Mapped[str] = mapped_column(String(40), nullable=False)  # workout date as sent by the client
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
