"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.personal_record import PersonalRecord
from app.models.workout import Workout, WorkoutSet

__all__ = [
    "PersonalRecord",
    "Workout",
    "WorkoutSet",
]
