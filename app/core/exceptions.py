"""Domain exceptions raised at the API boundary."""


class WorkoutTrackerError(Exception):
    """Base class for errors the API maps to a client response."""


class WorkoutCommitError(WorkoutTrackerError):
    """A workout commit payload failed validation."""
