"""PR store: current best per (user, exercise, metric), upserted on improvement.

No locking: correctness assumes one writer per user at a time. Two concurrent first
inserts for the same key hit the unique constraint and the second one raises
IntegrityError instead of creating a duplicate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import PRMetric, PRStatus
from app.models.personal_record import PersonalRecord
from app.schemas.pr import EvaluatedPR, PersonalRecordCreate, PersonalRecordRead

logger = logging.getLogger(__name__)

_SAVED_STATUSES = frozenset({PRStatus.NEW_PR, PRStatus.FIRST_PR})


class PRStore:
    def __init__(self, db: AsyncSession, user_id: str):
        self._db = db
        self.user_id = user_id

    async def _get_row(self, user_id: str, exercise_id: str, metric: PRMetric) -> PersonalRecord | None:
        result = await self._db.execute(
            select(PersonalRecord).where(
                PersonalRecord.user_id == user_id,
                PersonalRecord.exercise_id == exercise_id,
                PersonalRecord.metric == metric,
            )
        )
        return result.scalar_one_or_none()

    async def get_personal_records(self) -> list[PersonalRecordRead]:
        result = await self._db.execute(
            select(PersonalRecord)
            .where(PersonalRecord.user_id == self.user_id)
            .order_by(PersonalRecord.exercise_name, PersonalRecord.metric)
        )
        return [PersonalRecordRead.model_validate(r) for r in result.scalars().all()]

    async def get_exercise_prs(self, exercise_id: str) -> list[PersonalRecordRead]:
        result = await self._db.execute(
            select(PersonalRecord)
            .where(PersonalRecord.user_id == self.user_id, PersonalRecord.exercise_id == exercise_id)
            .order_by(PersonalRecord.metric)
        )
        return [PersonalRecordRead.model_validate(r) for r in result.scalars().all()]

    async def get_pr_by_exercise_and_metric(self, exercise_id: str, metric: PRMetric) -> PersonalRecordRead | None:
        row = await self._get_row(self.user_id, exercise_id, metric)
        return PersonalRecordRead.model_validate(row) if row else None

    async def get_records_snapshot(
        self, exercise_ids: Iterable[str]
    ) -> dict[tuple[str, PRMetric], PersonalRecordRead]:
        """All stored records for the given exercises, keyed the way evaluate_workout_prs expects."""
        ids = list(dict.fromkeys(exercise_ids))
        if not ids:
            return {}
        result = await self._db.execute(
            select(PersonalRecord).where(
                PersonalRecord.user_id == self.user_id,
                PersonalRecord.exercise_id.in_(ids),
            )
        )
        return {
            (r.exercise_id, r.metric): PersonalRecordRead.model_validate(r)
            for r in result.scalars().all()
        }

    async def get_prs_by_exercise(self) -> dict[str, list[PersonalRecordRead]]:
        """Records grouped by exercise name."""
        grouped: dict[str, list[PersonalRecordRead]] = {}
        for record in await self.get_personal_records():
            grouped.setdefault(record.exercise_name, []).append(record)
        return grouped

    async def upsert_pr(self, record: PersonalRecordCreate) -> PersonalRecordRead:
        """Replace value/unit/context/achieved_at of the existing record for the key, or insert one."""
        now = datetime.now(timezone.utc)
        row = await self._get_row(record.user_id, record.exercise_id, record.metric)

        if row is not None:
            row.exercise_name = record.exercise_name or row.exercise_name
            row.value_number = record.value_number
            row.unit = record.unit
            row.context_json = dict(record.context_json)
            row.achieved_at = record.achieved_at
            row.updated_at = now
        else:
            row = PersonalRecord(
                user_id=record.user_id,
                exercise_id=record.exercise_id,
                exercise_name=record.exercise_name,
                metric=record.metric,
                value_number=record.value_number,
                unit=record.unit,
                context_json=dict(record.context_json),
                achieved_at=record.achieved_at,
                created_at=now,
                updated_at=now,
            )
            self._db.add(row)

        await self._db.flush()
        return PersonalRecordRead.model_validate(row)

    async def save_prs(self, evaluated_prs: Iterable[EvaluatedPR]) -> list[PersonalRecordRead]:
        """Persist new_pr and first_pr results. tied_pr leaves the stored record untouched."""
        saved: list[PersonalRecordRead] = []
        for pr in evaluated_prs:
            if pr.status not in _SAVED_STATUSES:
                continue
            record = await self.upsert_pr(
                PersonalRecordCreate(
                    user_id=self.user_id,
                    exercise_id=pr.exercise_id,
                    exercise_name=pr.exercise_name,
                    metric=pr.metric,
                    value_number=pr.new_record.value_number,
                    unit=pr.new_record.unit,
                    context_json=pr.new_record.context.model_dump(by_alias=True, exclude_none=True),
                    achieved_at=pr.new_record.achieved_at,
                )
            )
            logger.info(
                "Saved %s %s record for %s: %s %s",
                pr.status.value,
                pr.metric.value,
                pr.exercise_name,
                record.value_number,
                record.unit,
            )
            saved.append(record)
        return saved

    async def clear(self) -> int:
        """Delete every record for this user. Returns the number removed."""
        result = await self._db.execute(delete(PersonalRecord).where(PersonalRecord.user_id == self.user_id))
        await self._db.flush()
        logger.info("Cleared %d personal records for user %s", result.rowcount, self.user_id)
        return result.rowcount
