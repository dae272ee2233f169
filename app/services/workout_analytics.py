"""Volume and estimated 1RM math over completed sets.

Volume here uses is_volume_contributing (strictly positive reps and weight), which is
deliberately stricter than set_validation.is_set_eligible_for_stats: a completed
bodyweight set (weight 0) is stats-eligible but adds no weighted volume.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from app.core.constants import E1RM_REP_DIVISOR
from app.schemas.workout import ExerciseEntry, WorkoutSession, WorkoutStats
from app.services.set_validation import is_set_eligible_for_stats, is_valid_number


@dataclass
class CompletedSetRecord:
    """A set flattened out of its workout, tagged with where it came from."""

    reps: float | None
    weight: float | None
    completed: bool
    exercise_id: str
    exercise_name: str
    workout_id: str
    set_index: int | None = None


@dataclass
class BestSetResult:
    value: float
    set: CompletedSetRecord


@dataclass
class WeekOverWeek:
    delta: float
    percent: float


def is_volume_contributing(set_: CompletedSetRecord) -> bool:
    if not set_.completed:
        return False
    if not is_valid_number(set_.reps) or not is_valid_number(set_.weight):
        return False
    return set_.reps > 0 and set_.weight > 0


def calculate_set_volume(reps: float, weight: float) -> float:
    return reps * weight


def calculate_e1rm(weight: float, reps: float) -> float:
    """Epley: weight * (1 + reps / 30)."""
    return weight * (1 + reps / E1RM_REP_DIVISOR)


def compute_workout_volume(sets: Iterable[CompletedSetRecord]) -> float:
    return sum(
        (calculate_set_volume(s.reps, s.weight) for s in sets if is_volume_contributing(s)),
        0.0,
    )


def compute_exercise_session_volumes(sets: Iterable[CompletedSetRecord]) -> dict[str, float]:
    """Volume per exercise_id, keyed in first-seen order."""
    volumes: dict[str, float] = {}
    for s in sets:
        if not is_volume_contributing(s):
            continue
        volumes[s.exercise_id] = volumes.get(s.exercise_id, 0.0) + calculate_set_volume(s.reps, s.weight)
    return volumes


def compute_best_e1rm_set(sets: Iterable[CompletedSetRecord]) -> BestSetResult | None:
    """Highest e1RM among contributing sets; on a tie the earlier set is kept."""
    best: BestSetResult | None = None
    for s in sets:
        if not is_volume_contributing(s):
            continue
        value = calculate_e1rm(s.weight, s.reps)
        if best is None or value > best.value:
            best = BestSetResult(value=value, set=s)
    return best


def compute_week_over_week(current_volume: float, previous_volume: float) -> WeekOverWeek:
    # No baseline reports 0% even though delta is non-zero
    delta = current_volume - previous_volume
    percent = (delta / previous_volume) * 100 if previous_volume > 0 else 0.0
    return WeekOverWeek(delta=delta, percent=percent)


def is_new_best(current_value: float, previous_value: float | None) -> bool:
    """Strictly better than the previous best. Equality is not a new best."""
    if previous_value is None or not is_valid_number(previous_value):
        return True
    return current_value > previous_value


def flatten_workout_sets(workout: WorkoutSession) -> list[CompletedSetRecord]:
    return [
        CompletedSetRecord(
            reps=s.reps,
            weight=s.weight,
            completed=s.completed,
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            workout_id=workout.id,
            set_index=index,
        )
        for exercise in workout.exercises
        for index, s in enumerate(exercise.sets)
    ]


def compute_workout_stats(exercises: Sequence[ExerciseEntry]) -> WorkoutStats:
    """Totals for a session: every set, completed sets, and reps/volume over stats-eligible sets."""
    stats = WorkoutStats()
    for exercise in exercises:
        for s in exercise.sets:
            stats.total_sets += 1
            if s.completed:
                stats.completed_sets += 1
            if is_set_eligible_for_stats(s):
                stats.total_reps += s.reps
                stats.total_volume += calculate_set_volume(s.reps, s.weight)
    return stats
