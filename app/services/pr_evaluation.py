"""PR evaluation: compare a finished workout's best sets against stored records.

Pure: the caller takes a snapshot of the stored records (PRStore.get_records_snapshot)
and persists the new_pr / first_pr results afterwards (PRStore.save_prs).
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping, Sequence
from typing import NamedTuple

from app.core.constants import REPS_UNIT
from app.core.enums import PRMetric, PRStatus
from app.schemas.pr import EvaluatedPR, NewRecord, PersonalRecordRead, PRContext
from app.schemas.workout import ExerciseEntry, LoggedSet
from app.services.formatting import format_number, normalize_exercise_name
from app.services.set_validation import is_set_eligible_for_stats

logger = logging.getLogger(__name__)

METRICS_TO_CHECK: tuple[PRMetric, ...] = (PRMetric.WEIGHT, PRMetric.REPS, PRMetric.VOLUME)

RecordKey = tuple[str, PRMetric]

_METRIC_LABELS = {
    PRMetric.WEIGHT: "Heaviest set",
    PRMetric.REPS: "Most reps",
    PRMetric.VOLUME: "Best volume",
}
_STATUS_LABELS = {
    PRStatus.FIRST_PR: "First PR",
    PRStatus.TIED_PR: "Tied PR",
    PRStatus.NEW_PR: "New PR",
}


class BestSet(NamedTuple):
    set: LoggedSet
    set_index: int
    value: float


def metric_value(set_: LoggedSet, metric: PRMetric) -> float:
    if metric == PRMetric.WEIGHT:
        return set_.weight
    if metric == PRMetric.REPS:
        return set_.reps
    return set_.weight * set_.reps


def get_best_set(exercise: ExerciseEntry, metric: PRMetric) -> BestSet | None:
    """First eligible set reaching the highest value for the metric, or None."""
    best: BestSet | None = None
    for index, set_ in enumerate(exercise.sets):
        if not is_set_eligible_for_stats(set_):
            continue
        value = metric_value(set_, metric)
        if best is None or value > best.value:
            best = BestSet(set=set_, set_index=index, value=value)
    return best


def classify_pr(best_value: float, existing: PersonalRecordRead | None) -> PRStatus | None:
    """first_pr without a record, new_pr above it, tied_pr equal to it, None below it."""
    if existing is None:
        return PRStatus.FIRST_PR
    if best_value > existing.value_number:
        return PRStatus.NEW_PR
    if best_value == existing.value_number:
        return PRStatus.TIED_PR
    return None


def evaluate_exercise_metric(
    exercise: ExerciseEntry,
    metric: PRMetric,
    workout_id: str,
    workout_date: str,
    existing: PersonalRecordRead | None,
    weight_unit: str = "lbs",
) -> EvaluatedPR | None:
    best = get_best_set(exercise, metric)
    if best is None:
        return None

    status = classify_pr(best.value, existing)
    if status is None:
        return None

    return EvaluatedPR(
        exercise_id=exercise.id,
        exercise_name=exercise.name,
        metric=metric,
        status=status,
        previous_record=existing,
        new_record=NewRecord(
            value_number=best.value,
            unit=REPS_UNIT if metric == PRMetric.REPS else weight_unit,
            achieved_at=workout_date,
            context=PRContext(
                reps=best.set.reps,
                weight=best.set.weight,
                set_index=best.set_index,
                workout_id=workout_id,
                workout_date=workout_date,
            ),
        ),
    )


def evaluate_workout_prs(
    workout_id: str,
    workout_date: str,
    exercises: Sequence[ExerciseEntry],
    existing_records: Mapping[RecordKey, PersonalRecordRead],
    excluded_exercises: Collection[str] = (),
    weight_unit: str = "lbs",
) -> list[EvaluatedPR]:
    """
    Evaluate weight, reps and volume records for every exercise in a workout.

    existing_records maps (exercise_id, metric) to the stored record. Exercises whose
    name is in excluded_exercises (case-insensitive) and exercises without any
    stats-eligible set are skipped. Results follow exercise order, then metric order.
    """
    excluded = {normalize_exercise_name(name) for name in excluded_exercises}
    evaluated: list[EvaluatedPR] = []

    for exercise in exercises:
        if normalize_exercise_name(exercise.name) in excluded:
            logger.debug("Skipping %s: excluded from PRs", exercise.name)
            continue
        if not any(is_set_eligible_for_stats(s) for s in exercise.sets):
            continue

        for metric in METRICS_TO_CHECK:
            result = evaluate_exercise_metric(
                exercise,
                metric,
                workout_id,
                workout_date,
                existing_records.get((exercise.id, metric)),
                weight_unit=weight_unit,
            )
            if result is not None:
                logger.debug("%s %s: %s", exercise.name, metric.value, result.status.value)
                evaluated.append(result)

    return evaluated


def format_pr_text(pr: EvaluatedPR) -> str:
    """e.g. 'New PR: Bench Press - Heaviest set (225 lbs)'."""
    record = pr.new_record
    value = format_number(record.value_number, thousands=pr.metric == PRMetric.VOLUME)
    return f"{_STATUS_LABELS[pr.status]}: {pr.exercise_name} - {_METRIC_LABELS[pr.metric]} ({value} {record.unit})"
