"""Stateless analytics helpers exposed for the logging UI."""

from __future__ import annotations

from fastapi import APIRouter

from app.schemas.analytics import SetFlagsRequest
from app.services.set_validation import SetFlagsResult, get_set_flags
from app.services.workout_analytics import WeekOverWeek, compute_week_over_week

router = APIRouter()


@router.post("/set-flags", response_model=SetFlagsResult)
async def set_flags(payload: SetFlagsRequest):
    """
    Flags for a set being logged: missing data, out-of-range reps, rep outliers vs
    history (or the target range when there is no history), with a suggested rep count.
    """
    return get_set_flags(
        payload.reps,
        payload.weight,
        target_reps=payload.target_reps,
        history_reps=payload.history_reps,
    )


@router.get("/week-over-week", response_model=WeekOverWeek)
async def week_over_week(current: float, previous: float):
    """Volume change vs the previous period. percent is 0 when there is no baseline."""
    return compute_week_over_week(current, previous)
