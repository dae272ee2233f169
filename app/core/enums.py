"""Shared enums for models and API."""

from enum import Enum


class SetFlag(str, Enum):
    """Why a logged set is kept out of statistics."""

    MISSING_REPS = "missing_reps"
    MISSING_WEIGHT = "missing_weight"
    REPS_HARD_INVALID = "reps_hard_invalid"  # Outside REP_MIN..REP_MAX
    REP_OUTLIER = "rep_outlier"  # Implausibly high vs history / target


class PRMetric(str, Enum):
    """Metric a personal record is tracked on."""

    WEIGHT = "weight"  # Heaviest weight
    REPS = "reps"  # Most reps in one set
    VOLUME = "volume"  # Highest single-set volume (weight × reps)


class PRStatus(str, Enum):
    """Outcome of comparing a workout's best against the stored record."""

    NEW_PR = "new_pr"
    FIRST_PR = "first_pr"
    TIED_PR = "tied_pr"


class SetProgression(str, Enum):
    PROGRESSED = "progressed"
    MATCHED = "matched"
    REGRESSED = "regressed"


class OverallProgression(str, Enum):
    PROGRESSED = "progressed"
    MAINTAINED = "maintained"
    RECOVERY = "recovery"


class WorkoutStatus(str, Enum):
    DRAFT = "draft"
    COMPLETED = "completed"
