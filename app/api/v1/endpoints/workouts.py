"""Workout commit / completion endpoints."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_user_id
from app.core.config import get_settings
from app.core.exceptions import WorkoutCommitError
from app.db.session import get_db
from app.schemas.analytics import WorkoutCompletionResult
from app.schemas.commit import validate_workout_commit_payload
from app.schemas.workout import WorkoutRead, WorkoutSetRead
from app.services.workout_completion import complete_workout
from app.services.workout_history import commit_workout, get_workout

logger = logging.getLogger(__name__)

router = APIRouter()


class CompleteWorkoutRequest(BaseModel):
    excluded_exercises: list[str] = []  # Exercise names kept out of PR tracking


@router.post("/commit")
async def commit(
    body: Any = Body(...),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Store a session (draft, or completed when completed_at is set). Replaces any sets sent earlier."""
    try:
        payload = validate_workout_commit_payload(body)
        await commit_workout(db, user_id, payload)
    except WorkoutCommitError as e:
        logger.warning("Rejected workout commit: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "workout_id": str(payload.workout.workout_id),
        "status": payload.workout.status.value,
        "set_count": len(payload.sets),
    }


@router.get("/{workout_id}", response_model=WorkoutRead)
async def read_workout(
    workout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """A stored workout with its sets in exercise order."""
    workout = await get_workout(db, workout_id, user_id)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    sorted_sets = sorted(workout.sets, key=lambda s: (s.exercise_order, s.set_index, str(s.id)))
    return WorkoutRead(
        id=workout.id,
        name=workout.name,
        status=workout.status,
        performed_at=workout.performed_at,
        started_at=workout.started_at,
        completed_at=workout.completed_at,
        total_volume=workout.total_volume,
        pr_count=workout.pr_count,
        sets=[WorkoutSetRead.model_validate(s) for s in sorted_sets],
    )


@router.post("/{workout_id}/complete", response_model=WorkoutCompletionResult)
async def complete(
    workout_id: uuid.UUID,
    payload: CompleteWorkoutRequest | None = None,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """
    Compute totals, detect and save personal records, and summarize progression
    against earlier sessions. Safe to call again after editing sets.
    """
    workout = await get_workout(db, workout_id, user_id)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return await complete_workout(
        db,
        workout,
        user_id,
        excluded_exercises=payload.excluded_exercises if payload else (),
        weight_unit=get_settings().weight_unit,
    )
