"""Personal records: list, per exercise, and bulk clear."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_user_id
from app.db.session import get_db
from app.schemas.pr import PersonalRecordRead
from app.services.pr_store import PRStore

router = APIRouter()


@router.get("", response_model=list[PersonalRecordRead])
async def list_records(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Every stored record for the user, ordered by exercise name."""
    return await PRStore(db, user_id).get_personal_records()


@router.get("/by-exercise", response_model=dict[str, list[PersonalRecordRead]])
async def records_by_exercise(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    return await PRStore(db, user_id).get_prs_by_exercise()


@router.get("/exercises/{exercise_id}", response_model=list[PersonalRecordRead])
async def exercise_records(
    exercise_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    return await PRStore(db, user_id).get_exercise_prs(exercise_id)


@router.delete("")
async def clear_records(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Bulk data-clear: the only way records are deleted."""
    deleted = await PRStore(db, user_id).clear()
    return {"deleted": deleted}
