"""Personal record schemas.

Records keep the camelCase field names existing consumers read (valueNumber, unit,
contextJson, achievedAt); Python code uses the snake_case attributes.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.enums import PRMetric, PRStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PRContext(_CamelModel):
    """The set that produced a record."""

    reps: float
    weight: float
    set_index: int
    workout_id: str
    workout_date: str | None = None


class PersonalRecordCreate(_CamelModel):
    user_id: str
    exercise_id: str
    exercise_name: str = ""
    metric: PRMetric
    value_number: float
    unit: str
    context_json: dict[str, Any] = {}
    achieved_at: str


class PersonalRecordRead(PersonalRecordCreate):
    id: UUID
    created_at: datetime
    updated_at: datetime


class NewRecord(_CamelModel):
    value_number: float
    unit: str
    achieved_at: str
    context: PRContext


class EvaluatedPR(_CamelModel):
    """Transient result of comparing one exercise/metric against the stored record."""

    exercise_id: str
    exercise_name: str
    metric: PRMetric
    status: PRStatus
    previous_record: PersonalRecordRead | None = None
    new_record: NewRecord
