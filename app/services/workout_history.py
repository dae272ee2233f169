"""Persistence of committed workouts and conversion to the analytics session shape."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.enums import WorkoutStatus
from app.core.exceptions import WorkoutCommitError
from app.models.workout import Workout, WorkoutSet
from app.schemas.commit import WorkoutCommitPayload
from app.schemas.workout import ExerciseEntry, LoggedSet, WorkoutSession

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


def as_utc(value: datetime) -> datetime:
    """SQLite hands DateTime(timezone=True) back naive; stored values are UTC."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def workout_to_session(workout: Workout) -> WorkoutSession:
    """Group stored sets back into exercises, in exercise order then set index."""
    exercises: dict[str, ExerciseEntry] = {}
    for s in sorted(workout.sets, key=lambda s: (s.exercise_order, s.set_index, str(s.id))):
        entry = exercises.get(s.exercise_id)
        if entry is None:
            entry = exercises[s.exercise_id] = ExerciseEntry(id=s.exercise_id, name=s.exercise_name)
        entry.sets.append(LoggedSet(reps=s.reps, weight=s.weight, completed=s.completed))
    return WorkoutSession(
        id=str(workout.id),
        name=workout.name,
        date=as_utc(workout.performed_at).isoformat(),
        exercises=list(exercises.values()),
    )


async def get_workout(db: AsyncSession, workout_id: uuid.UUID, user_id: str) -> Workout | None:
    result = await db.execute(
        select(Workout)
        .where(Workout.id == workout_id, Workout.user_id == user_id)
        .options(selectinload(Workout.sets))
    )
    return result.scalar_one_or_none()


async def load_history(
    db: AsyncSession,
    user_id: str,
    before: datetime,
    exclude_workout_id: uuid.UUID | None = None,
    limit: int = HISTORY_LIMIT,
) -> list[WorkoutSession]:
    """The user's completed workouts performed before `before`, most recent first. Drafts never count."""
    stmt = (
        select(Workout)
        .where(
            Workout.user_id == user_id,
            Workout.status == WorkoutStatus.COMPLETED,
            Workout.performed_at < before,
        )
        .options(selectinload(Workout.sets))
        .order_by(Workout.performed_at.desc())
        .limit(limit)
    )
    if exclude_workout_id is not None:
        stmt = stmt.where(Workout.id != exclude_workout_id)
    result = await db.execute(stmt)
    return [workout_to_session(w) for w in result.scalars().all()]


async def commit_workout(db: AsyncSession, user_id: str, payload: WorkoutCommitPayload) -> Workout:
    """Upsert the workout row and replace all of its sets with the payload's."""
    data = payload.workout
    workout = await db.get(Workout, data.workout_id)
    if workout is None:
        workout = Workout(id=data.workout_id, user_id=user_id)
        db.add(workout)
    elif workout.user_id != user_id:
        raise WorkoutCommitError("Workout belongs to another user")

    workout.name = data.routine_name or "Workout"
    workout.routine_id = data.routine_id
    # Stored as UTC; SQLite drops the offset
    workout.started_at = data.started_at.astimezone(timezone.utc)
    workout.completed_at = data.completed_at.astimezone(timezone.utc) if data.completed_at else None
    workout.performed_at = data.performed_at.astimezone(timezone.utc)
    workout.status = data.status
    await db.flush()

    await db.execute(delete(WorkoutSet).where(WorkoutSet.workout_id == data.workout_id))

    exercise_order: dict[str, int] = {}
    for s in payload.sets:
        exercise_order.setdefault(s.exercise_id, len(exercise_order))
        db.add(
            WorkoutSet(
                id=s.set_id,
                workout_id=data.workout_id,
                exercise_id=s.exercise_id,
                exercise_name=s.exercise_name,
                exercise_order=exercise_order[s.exercise_id],
                set_index=s.set_index,
                reps=s.reps,
                weight=s.weight,
                notes=s.notes,
                completed=s.completed,
            )
        )
    await db.flush()
    logger.info("Committed workout %s (%s, %d sets)", data.workout_id, data.status.value, len(payload.sets))
    return workout
