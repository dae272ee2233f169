"""Set validation: which logged sets count toward stats, and which look wrong.

A set is stats-eligible when it is completed, both reps and weight are real numbers,
and none of the SetFlag values apply. Flags are derived from the set itself every time
eligibility is checked; flags stored on the set (e.g. a rep outlier detected against
history while logging) are honoured on top of the derived ones.

Everything here is pure and never raises on malformed input - bad data is simply
excluded.
"""

from __future__ import annotations

import math
import re
import statistics
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from app.core.constants import (
    OUTLIER_HISTORY_WINDOW,
    OUTLIER_MEDIAN_MULTIPLIER,
    OUTLIER_TARGET_SLACK,
    REP_MAX,
    REP_MIN,
)
from app.core.enums import SetFlag

_INT_RE = re.compile(r"\d+")
_DECIMAL_RE = re.compile(r"\d+(\.\d+)?")

_STAT_INVALID_FLAGS = frozenset(
    {SetFlag.MISSING_REPS, SetFlag.MISSING_WEIGHT, SetFlag.REPS_HARD_INVALID, SetFlag.REP_OUTLIER}
)


class SetLike(Protocol):
    reps: float | None
    weight: float | None
    completed: bool
    validation_flags: set[SetFlag] | None


@dataclass
class TargetReps:
    min: int
    max: int
    suggested: int


@dataclass
class SetFlagsResult:
    flags: list[SetFlag] = field(default_factory=list)
    is_incomplete: bool = False
    is_hard_invalid: bool = False
    suggested_reps: int | None = None


@dataclass
class DefaultSetValues:
    reps: float | None
    weight: float | None


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (2.5 -> 3), unlike the builtin round()."""
    return math.floor(value + 0.5)


def parse_number(value: Any) -> float | None:
    """Normalize a raw reps/weight value: numbers and numeric strings pass, anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        try:
            parsed = float(trimmed)
        except ValueError:
            return None
        return None if math.isnan(parsed) else parsed
    return None


def is_valid_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def is_missing_reps(reps: float | None) -> bool:
    return not is_valid_number(reps) or reps < REP_MIN


def is_missing_weight(weight: float | None) -> bool:
    return not is_valid_number(weight)


def get_missing_flags(reps: float | None, weight: float | None) -> list[SetFlag]:
    flags: list[SetFlag] = []
    if is_missing_reps(reps):
        flags.append(SetFlag.MISSING_REPS)
    if is_missing_weight(weight):
        flags.append(SetFlag.MISSING_WEIGHT)
    return flags


def _is_hard_invalid_reps(reps: float | None) -> bool:
    return is_valid_number(reps) and (reps < REP_MIN or reps > REP_MAX)


def get_validation_flags(reps: float | None, weight: float | None, is_outlier: bool = False) -> list[SetFlag]:
    """Flags derivable without history (missing data, hard range), plus an explicit outlier marker."""
    flags = get_missing_flags(reps, weight)
    if _is_hard_invalid_reps(reps):
        flags.append(SetFlag.REPS_HARD_INVALID)
    if is_outlier:
        flags.append(SetFlag.REP_OUTLIER)
    return flags


def is_set_incomplete(set_: SetLike) -> bool:
    return is_missing_reps(set_.reps) or is_missing_weight(set_.weight)


def is_incomplete(flags: Iterable[SetFlag]) -> bool:
    present = set(flags)
    return SetFlag.MISSING_REPS in present or SetFlag.MISSING_WEIGHT in present


def is_stat_invalid(flags: Iterable[SetFlag]) -> bool:
    return any(flag in _STAT_INVALID_FLAGS for flag in flags)


def is_set_eligible_for_stats(set_: SetLike) -> bool:
    """True when the set may feed volume, PR and progression statistics."""
    if not set_.completed:
        return False
    if not is_valid_number(set_.reps) or not is_valid_number(set_.weight):
        return False
    flags = set(get_validation_flags(set_.reps, set_.weight))
    if set_.validation_flags:
        flags |= set(set_.validation_flags)
    return not is_stat_invalid(flags)


is_stats_eligible = is_set_eligible_for_stats


def parse_target_reps(target_reps: str | None) -> TargetReps | None:
    """'8-10' -> (8, 10, 9); '8-10 / 12-15' -> (8, 15, 12). None when no integer is present."""
    if not target_reps:
        return None
    numbers = [int(match) for match in _INT_RE.findall(target_reps)]
    if not numbers:
        return None
    low, high = min(numbers), max(numbers)
    return TargetReps(min=low, max=high, suggested=round_half_up((low + high) / 2))


def parse_target_weight(target_weight: str | float | None) -> float | None:
    if target_weight is None or isinstance(target_weight, bool):
        return None
    if isinstance(target_weight, (int, float)):
        return None if math.isnan(target_weight) else float(target_weight)
    match = _DECIMAL_RE.search(target_weight)
    return float(match.group(0)) if match else None


def _typical_reps(history_reps: Sequence[float | None]) -> float | None:
    cleaned = [r for r in history_reps if is_valid_number(r) and REP_MIN <= r <= REP_MAX]
    window = cleaned[-OUTLIER_HISTORY_WINDOW:]
    if not window:
        return None
    return statistics.median(window)


def get_set_flags(
    reps: float | None,
    weight: float | None,
    target_reps: str | None = None,
    history_reps: Sequence[float | None] = (),
) -> SetFlagsResult:
    """
    Full flag set for a set being logged.

    history_reps are earlier rep counts for the same exercise, oldest first; only the
    last OUTLIER_HISTORY_WINDOW in-range values are used. Without history the target
    rep range (e.g. "8-12") is the fallback; with neither, no outlier check runs.
    """
    flags = get_missing_flags(reps, weight)
    is_hard_invalid = False
    suggested_reps: int | None = None

    if _is_hard_invalid_reps(reps):
        flags.append(SetFlag.REPS_HARD_INVALID)
        is_hard_invalid = True

    typical = _typical_reps(history_reps)
    target = parse_target_reps(target_reps)
    if is_valid_number(reps) and not is_hard_invalid:
        if typical and reps >= typical * OUTLIER_MEDIAN_MULTIPLIER:
            flags.append(SetFlag.REP_OUTLIER)
            suggested_reps = round_half_up(typical)
        elif typical is None and target and reps > target.max + OUTLIER_TARGET_SLACK:
            flags.append(SetFlag.REP_OUTLIER)
            suggested_reps = target.suggested

    return SetFlagsResult(
        flags=flags,
        is_incomplete=is_incomplete(flags),
        is_hard_invalid=is_hard_invalid,
        suggested_reps=suggested_reps if suggested_reps != reps else None,
    )


def get_default_set_values(
    sets: Sequence[SetLike],
    target_reps: str | None = None,
    target_weight: str | None = None,
) -> DefaultSetValues:
    """Prefill for the next set: repeat the last eligible set, else fall back to the targets."""
    for set_ in reversed(sets):
        if is_set_eligible_for_stats(set_):
            return DefaultSetValues(reps=set_.reps, weight=set_.weight)

    parsed_reps = parse_target_reps(target_reps)
    reps = min(parsed_reps.suggested, REP_MAX) if parsed_reps and parsed_reps.suggested >= REP_MIN else None
    return DefaultSetValues(reps=reps, weight=parse_target_weight(target_weight))
