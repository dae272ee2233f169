"""End-of-workout progression summary: compare each set with the last time it was done.

Sets are matched by exercise name (normalized) and position among the exercise's
stats-eligible sets. History is a list of earlier workouts, most recent first.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from app.core.constants import BIGGEST_WINS_LIMIT, WIN_REPS_DELTA, WIN_WEIGHT_DELTA
from app.core.enums import OverallProgression, SetProgression
from app.schemas.workout import ExerciseEntry, LoggedSet, WorkoutSession
from app.services.formatting import format_number, normalize_exercise_name
from app.services.set_validation import is_set_eligible_for_stats


@dataclass
class SetPerformance:
    weight: float
    reps: float


@dataclass
class BiggestWin:
    exercise_name: str
    improvement: str


@dataclass
class ProgressionSummary:
    progressed_sets: int = 0
    matched_sets: int = 0
    regressed_sets: int = 0
    total_sets: int = 0
    overall_status: OverallProgression = OverallProgression.MAINTAINED
    biggest_wins: list[BiggestWin] = field(default_factory=list)


def _eligible_sets(sets: Sequence[LoggedSet]) -> list[LoggedSet]:
    return [s for s in sets if is_set_eligible_for_stats(s)]


def get_most_recent_set_performance(
    history: Sequence[WorkoutSession],
    exercise_name: str,
    set_index: int,
    exclude_session_id: str | None = None,
) -> SetPerformance | None:
    """
    The set at set_index in the most recent workout containing the exercise.

    Only the first workout (in history order) with a matching exercise counts; if it
    has fewer eligible sets than set_index + 1, older workouts are tried.
    """
    target = normalize_exercise_name(exercise_name)
    for workout in history:
        if exclude_session_id is not None and workout.id == exclude_session_id:
            continue
        exercise = next((ex for ex in workout.exercises if normalize_exercise_name(ex.name) == target), None)
        if exercise is None:
            continue
        valid_sets = _eligible_sets(exercise.sets)
        if len(valid_sets) > set_index:
            previous = valid_sets[set_index]
            return SetPerformance(weight=previous.weight, reps=previous.reps)
    return None


def analyze_set_progression(
    current_weight: float,
    current_reps: float,
    previous: SetPerformance | None,
) -> SetProgression:
    if previous is None:
        return SetProgression.PROGRESSED
    if current_weight > previous.weight or current_reps > previous.reps:
        return SetProgression.PROGRESSED
    if current_weight * current_reps == previous.weight * previous.reps:
        return SetProgression.MATCHED
    return SetProgression.REGRESSED


def describe_improvement(weight_diff: float, reps_diff: float) -> str:
    """'+10 lb, +3 reps' - only the positive parts are listed."""
    parts = []
    if weight_diff > 0:
        parts.append(f"+{format_number(weight_diff)} lb")
    if reps_diff > 0:
        parts.append(f"+{format_number(reps_diff)} reps")
    return ", ".join(parts)


def get_workout_progression_summary(
    exercises: Sequence[ExerciseEntry],
    session_id: str,
    history: Sequence[WorkoutSession],
) -> ProgressionSummary:
    summary = ProgressionSummary()
    wins: list[BiggestWin] = []

    for exercise in exercises:
        for index, set_ in enumerate(_eligible_sets(exercise.sets)):
            previous = get_most_recent_set_performance(history, exercise.name, index, session_id)
            status = analyze_set_progression(set_.weight, set_.reps, previous)

            if status == SetProgression.PROGRESSED:
                summary.progressed_sets += 1
            elif status == SetProgression.MATCHED:
                summary.matched_sets += 1
            else:
                summary.regressed_sets += 1

            if previous is not None and status == SetProgression.PROGRESSED:
                weight_diff = set_.weight - previous.weight
                reps_diff = set_.reps - previous.reps
                if weight_diff >= WIN_WEIGHT_DELTA or reps_diff >= WIN_REPS_DELTA:
                    wins.append(BiggestWin(exercise.name, describe_improvement(weight_diff, reps_diff)))

    summary.total_sets = summary.progressed_sets + summary.matched_sets + summary.regressed_sets
    if summary.progressed_sets > summary.total_sets / 2:
        summary.overall_status = OverallProgression.PROGRESSED
    elif summary.regressed_sets > summary.total_sets / 2:
        summary.overall_status = OverallProgression.RECOVERY
    else:
        summary.overall_status = OverallProgression.MAINTAINED

    # Iteration order, not ranked by size
    summary.biggest_wins = wins[:BIGGEST_WINS_LIMIT]
    return summary
