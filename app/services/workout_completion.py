"""Finish a stored workout: totals, PR evaluation + persistence, progression summary."""

from __future__ import annotations

import logging
from collections.abc import Collection

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import PRStatus, WorkoutStatus
from app.models.workout import Workout
from app.schemas.analytics import (
    BestE1rm,
    BiggestWinRead,
    ProgressionSummaryRead,
    SessionVolumeBest,
    WorkoutCompletionResult,
)
from app.schemas.pr import EvaluatedPR
from app.schemas.workout import WorkoutSession
from app.services.pr_evaluation import evaluate_workout_prs, format_pr_text
from app.services.pr_store import PRStore
from app.services.progression_summary import get_workout_progression_summary
from app.services.workout_analytics import (
    CompletedSetRecord,
    compute_best_e1rm_set,
    compute_exercise_session_volumes,
    compute_workout_stats,
    compute_workout_volume,
    flatten_workout_sets,
    is_new_best,
)
from app.services.workout_history import load_history, workout_to_session

logger = logging.getLogger(__name__)


def _group_by_exercise(sets: list[CompletedSetRecord]) -> dict[str, list[CompletedSetRecord]]:
    grouped: dict[str, list[CompletedSetRecord]] = {}
    for s in sets:
        grouped.setdefault(s.exercise_id, []).append(s)
    return grouped


def compute_best_e1rm_per_exercise(
    session: WorkoutSession,
    history: list[WorkoutSession],
) -> list[BestE1rm]:
    """Best e1RM set per exercise in this session, flagged when it beats every earlier session."""
    previous_sets: list[CompletedSetRecord] = []
    for past in history:
        previous_sets.extend(flatten_workout_sets(past))
    previous_by_exercise = _group_by_exercise(previous_sets)

    results: list[BestE1rm] = []
    for exercise_id, sets in _group_by_exercise(flatten_workout_sets(session)).items():
        best = compute_best_e1rm_set(sets)
        if best is None:
            continue
        previous = compute_best_e1rm_set(previous_by_exercise.get(exercise_id, []))
        previous_value = previous.value if previous else None
        results.append(
            BestE1rm(
                exercise_id=exercise_id,
                exercise_name=best.set.exercise_name,
                value=best.value,
                reps=best.set.reps,
                weight=best.set.weight,
                set_index=best.set.set_index,
                is_new_best=is_new_best(best.value, previous_value),
                previous_value=previous_value,
            )
        )
    return results


def compute_session_volume_bests(
    session: WorkoutSession,
    history: list[WorkoutSession],
) -> list[SessionVolumeBest]:
    """Per-exercise session volume against the best single-session volume in history."""
    previous_best: dict[str, float] = {}
    for past in history:
        for exercise_id, volume in compute_exercise_session_volumes(flatten_workout_sets(past)).items():
            previous_best[exercise_id] = max(volume, previous_best.get(exercise_id, 0.0))

    names = {ex.id: ex.name for ex in session.exercises}
    results: list[SessionVolumeBest] = []
    for exercise_id, volume in compute_exercise_session_volumes(flatten_workout_sets(session)).items():
        previous_value = previous_best.get(exercise_id)
        results.append(
            SessionVolumeBest(
                exercise_id=exercise_id,
                exercise_name=names.get(exercise_id, exercise_id),
                volume=volume,
                is_new_best=volume > 0 and is_new_best(volume, previous_value),
                previous_value=previous_value,
            )
        )
    return results


def counts_toward_pr_count(pr: EvaluatedPR, workout_id: str) -> bool:
    """
    new_pr and first_pr count. A tie with a record this same workout set earlier
    also counts, so completing a workout again keeps its count.
    """
    if pr.status in (PRStatus.NEW_PR, PRStatus.FIRST_PR):
        return True
    previous = pr.previous_record
    return (
        pr.status == PRStatus.TIED_PR
        and previous is not None
        and previous.context_json.get("workoutId") == workout_id
    )


async def complete_workout(
    db: AsyncSession,
    workout: Workout,
    user_id: str,
    excluded_exercises: Collection[str] = (),
    weight_unit: str = "lbs",
) -> WorkoutCompletionResult:
    session = workout_to_session(workout)
    history = await load_history(db, user_id, before=workout.performed_at, exclude_workout_id=workout.id)

    set_records = flatten_workout_sets(session)
    total_volume = compute_workout_volume(set_records)
    stats = compute_workout_stats(session.exercises)

    store = PRStore(db, user_id)
    snapshot = await store.get_records_snapshot(ex.id for ex in session.exercises)
    prs = evaluate_workout_prs(
        session.id,
        session.date,
        session.exercises,
        snapshot,
        excluded_exercises=excluded_exercises,
        weight_unit=weight_unit,
    )
    saved = await store.save_prs(prs)
    pr_count = sum(1 for pr in prs if counts_toward_pr_count(pr, session.id))

    summary = get_workout_progression_summary(session.exercises, session.id, history)

    workout.total_volume = total_volume
    workout.pr_count = pr_count
    workout.status = WorkoutStatus.COMPLETED
    await db.flush()

    logger.info(
        "Completed workout %s: volume=%s prs=%d progression=%s",
        session.id,
        total_volume,
        pr_count,
        summary.overall_status.value,
    )

    return WorkoutCompletionResult(
        workout_id=session.id,
        stats=stats,
        total_volume=total_volume,
        exercise_volumes=compute_exercise_session_volumes(set_records),
        best_e1rm=compute_best_e1rm_per_exercise(session, history),
        session_volume_bests=compute_session_volume_bests(session, history),
        prs=prs,
        saved_records=saved,
        pr_count=pr_count,
        pr_messages=[format_pr_text(pr) for pr in prs],
        progression=ProgressionSummaryRead(
            progressed_sets=summary.progressed_sets,
            matched_sets=summary.matched_sets,
            regressed_sets=summary.regressed_sets,
            total_sets=summary.total_sets,
            overall_status=summary.overall_status,
            biggest_wins=[BiggestWinRead(exercise_name=w.exercise_name, improvement=w.improvement) for w in summary.biggest_wins],
        ),
    )
