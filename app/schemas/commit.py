"""Workout commit payload: what a client sends to store a session."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field, ValidationError, model_validator

from app.core.enums import WorkoutStatus
from app.core.exceptions import WorkoutCommitError

NonNegativeNumber = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class CommitWorkout(BaseModel):
    workout_id: UUID
    started_at: AwareDatetime
    completed_at: AwareDatetime | None = None
    routine_id: str | None = None
    routine_name: str | None = None
    updated_at_client: int
    schema_version: int

    @property
    def status(self) -> WorkoutStatus:
        return WorkoutStatus.COMPLETED if self.completed_at else WorkoutStatus.DRAFT

    @property
    def performed_at(self) -> datetime:
        return self.completed_at or self.started_at


class CommitSet(BaseModel):
    set_id: UUID
    exercise_id: str = Field(min_length=1)
    exercise_name: str = Field(min_length=1)
    set_index: int = Field(ge=0)
    reps: NonNegativeNumber | None = None
    weight: NonNegativeNumber | None = None
    notes: str | None = None
    completed: bool
    updated_at_client: int | None = None


class WorkoutCommitPayload(BaseModel):
    workout: CommitWorkout
    sets: list[CommitSet] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_consistency(self) -> "WorkoutCommitPayload":
        workout = self.workout
        if workout.completed_at and workout.completed_at < workout.started_at:
            raise ValueError("completed_at must be after started_at")
        for set_ in self.sets:
            if set_.completed and (set_.reps is None or set_.weight is None):
                raise ValueError("Completed sets must include reps and weight")
        return self


def validate_workout_commit_payload(data: Any) -> WorkoutCommitPayload:
    """Parse a raw commit body. Raises WorkoutCommitError with a readable message."""
    try:
        return WorkoutCommitPayload.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "Invalid payload")
        raise WorkoutCommitError(f"{location}: {message}" if location else message) from exc
