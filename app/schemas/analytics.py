"""Analytics request/response schemas."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.core.enums import OverallProgression
from app.schemas.pr import EvaluatedPR, PersonalRecordRead
from app.schemas.workout import WorkoutStats
from app.services.set_validation import parse_number


class SetFlagsRequest(BaseModel):
    reps: float | None = None
    weight: float | None = None
    target_reps: str | None = None
    history_reps: list[float] = Field(default_factory=list)  # Oldest first

    @field_validator("reps", "weight", mode="before")
    @classmethod
    def _normalize_number(cls, value: Any) -> float | None:
        return parse_number(value)


class BestE1rm(BaseModel):
    exercise_id: str
    exercise_name: str
    value: float
    reps: float
    weight: float
    set_index: int | None = None
    is_new_best: bool
    previous_value: float | None = None


class SessionVolumeBest(BaseModel):
    """One exercise's volume this session vs its best earlier session."""

    exercise_id: str
    exercise_name: str
    volume: float
    is_new_best: bool
    previous_value: float | None = None


class BiggestWinRead(BaseModel):
    exercise_name: str
    improvement: str


class ProgressionSummaryRead(BaseModel):
    progressed_sets: int
    matched_sets: int
    regressed_sets: int
    total_sets: int
    overall_status: OverallProgression
    biggest_wins: list[BiggestWinRead] = []


class WorkoutCompletionResult(BaseModel):
    """Response of POST /workouts/{id}/complete."""

    workout_id: str
    stats: WorkoutStats
    total_volume: float
    exercise_volumes: dict[str, float]
    best_e1rm: list[BestE1rm] = []
    session_volume_bests: list[SessionVolumeBest] = []
    prs: list[EvaluatedPR] = []
    saved_records: list[PersonalRecordRead] = []
    pr_count: int
    pr_messages: list[str] = []
    progression: ProgressionSummaryRead
