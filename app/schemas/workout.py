"""Workout session schemas: the shapes the analytics core consumes."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.enums import SetFlag, WorkoutStatus
from app.services.set_validation import parse_number


class LoggedSet(BaseModel):
    """One attempt at an exercise. reps/weight are normalized to float | None on the way in."""

    reps: float | None = None
    weight: float | None = None
    completed: bool = False
    # None = never computed; eligibility then relies on derived flags only
    validation_flags: set[SetFlag] | None = None

    @field_validator("reps", "weight", mode="before")
    @classmethod
    def _normalize_number(cls, value: Any) -> float | None:
        return parse_number(value)


class ExerciseEntry(BaseModel):
    id: str
    name: str
    target_sets: int = 0
    target_reps: str | None = None
    target_weight: str | None = None
    sets: list[LoggedSet] = []


class WorkoutStats(BaseModel):
    total_sets: int = 0
    completed_sets: int = 0
    total_volume: float = 0.0
    total_reps: float = 0.0


class WorkoutSession(BaseModel):
    """A finalized session as handed to PR evaluation and the progression summary."""

    id: str
    name: str = "Workout"
    date: str  # ISO timestamp; becomes achievedAt on new records
    exercises: list[ExerciseEntry] = []
    stats: WorkoutStats | None = None


class WorkoutSetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    exercise_id: str
    exercise_name: str
    set_index: int
    reps: float | None = None
    weight: float | None = None
    notes: str | None = None
    completed: bool = False


class WorkoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    status: WorkoutStatus
    performed_at: datetime
    started_at: datetime
    completed_at: datetime | None = None
    total_volume: float | None = None
    pr_count: int | None = None
    sets: list[WorkoutSetRead] = Field(default_factory=list)
