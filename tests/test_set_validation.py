"""
Unit tests for set validation.

Tests cover:
- number normalization at ingestion
- missing-data and hard-range flags
- stats eligibility
- target rep parsing and rep outlier detection
- default values for the next set
"""
import math

import pytest

from app.core.enums import SetFlag
from app.schemas.workout import LoggedSet
from app.services.set_validation import (
    get_default_set_values,
    get_set_flags,
    get_validation_flags,
    is_incomplete,
    is_missing_reps,
    is_missing_weight,
    is_set_eligible_for_stats,
    is_stat_invalid,
    parse_number,
    parse_target_reps,
    parse_target_weight,
    round_half_up,
)


@pytest.mark.unit
class TestParseNumber:
    def test_numbers_pass_through_as_float(self):
        assert parse_number(8) == 8.0
        assert parse_number(102.5) == 102.5

    def test_numeric_strings_are_parsed(self):
        assert parse_number(" 135 ") == 135.0

    def test_blank_nan_and_garbage_become_none(self):
        assert parse_number("") is None
        assert parse_number("   ") is None
        assert parse_number("abc") is None
        assert parse_number(float("nan")) is None
        assert parse_number(None) is None

    def test_bool_is_not_a_number(self):
        assert parse_number(True) is None

    def test_logged_set_normalizes_on_ingestion(self):
        s = LoggedSet(reps="8", weight="", completed=True)
        assert s.reps == 8.0
        assert s.weight is None


@pytest.mark.unit
class TestMissingAndHardInvalid:
    def test_missing_reps(self):
        assert is_missing_reps(None)
        assert is_missing_reps(math.nan)
        assert is_missing_reps(0)
        assert not is_missing_reps(1)

    def test_missing_weight_allows_zero(self):
        """Bodyweight sets log weight 0; that is not missing."""
        assert is_missing_weight(None)
        assert not is_missing_weight(0)

    def test_out_of_range_reps_flagged_not_clamped(self):
        flags = get_validation_flags(41, 100)
        assert flags == [SetFlag.REPS_HARD_INVALID]

    def test_zero_reps_is_missing_and_hard_invalid(self):
        flags = get_validation_flags(0, 100)
        assert SetFlag.MISSING_REPS in flags
        assert SetFlag.REPS_HARD_INVALID in flags

    def test_explicit_outlier_marker(self):
        assert get_validation_flags(10, 100, is_outlier=True) == [SetFlag.REP_OUTLIER]

    def test_flag_groupings(self):
        assert is_incomplete([SetFlag.MISSING_WEIGHT])
        assert not is_incomplete([SetFlag.REP_OUTLIER])
        assert is_stat_invalid([SetFlag.REP_OUTLIER])
        assert not is_stat_invalid([])


@pytest.mark.unit
class TestEligibility:
    def test_completed_valid_set_is_eligible(self):
        assert is_set_eligible_for_stats(LoggedSet(reps=8, weight=100, completed=True))

    def test_zero_weight_is_eligible(self):
        assert is_set_eligible_for_stats(LoggedSet(reps=10, weight=0, completed=True))

    @pytest.mark.parametrize(
        "reps,weight",
        [(8, 100), (0, 0), (None, None), (50, 100), (12, 0)],
    )
    def test_incomplete_set_is_never_eligible(self, reps, weight):
        assert not is_set_eligible_for_stats(LoggedSet(reps=reps, weight=weight, completed=False))

    def test_missing_values_are_not_eligible(self):
        assert not is_set_eligible_for_stats(LoggedSet(reps=None, weight=100, completed=True))
        assert not is_set_eligible_for_stats(LoggedSet(reps=8, weight=None, completed=True))

    def test_hard_invalid_reps_excluded_even_without_stored_flags(self):
        assert not is_set_eligible_for_stats(LoggedSet(reps=41, weight=100, completed=True))

    def test_stored_outlier_flag_excludes_set(self):
        s = LoggedSet(reps=30, weight=100, completed=True, validation_flags={SetFlag.REP_OUTLIER})
        assert not is_set_eligible_for_stats(s)

    def test_stale_empty_flags_do_not_hide_missing_data(self):
        s = LoggedSet(reps=0, weight=100, completed=True, validation_flags=set())
        assert not is_set_eligible_for_stats(s)


@pytest.mark.unit
class TestTargetParsing:
    def test_simple_range(self):
        target = parse_target_reps("8-10")
        assert (target.min, target.max, target.suggested) == (8, 10, 9)

    def test_compound_range_uses_overall_min_max(self):
        target = parse_target_reps("8-10 / 12-15")
        assert (target.min, target.max) == (8, 15)
        # (8 + 15) / 2 = 11.5 rounds half up
        assert target.suggested == 12

    def test_single_number(self):
        target = parse_target_reps("5")
        assert (target.min, target.max, target.suggested) == (5, 5, 5)

    def test_no_numbers(self):
        assert parse_target_reps("AMRAP") is None
        assert parse_target_reps(None) is None
        assert parse_target_reps("") is None

    def test_target_weight(self):
        assert parse_target_weight("135 lbs") == 135.0
        assert parse_target_weight("62.5kg") == 62.5
        assert parse_target_weight("bodyweight") is None
        assert parse_target_weight(None) is None

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(9.0) == 9


@pytest.mark.unit
class TestGetSetFlags:
    def test_clean_set(self):
        result = get_set_flags(8, 100, target_reps="8-10", history_reps=[8, 9, 8])
        assert result.flags == []
        assert not result.is_incomplete
        assert not result.is_hard_invalid
        assert result.suggested_reps is None

    def test_outlier_vs_history_median(self):
        """Median of [8, 10, 9] is 9; 18 >= 2 * 9 is an outlier."""
        result = get_set_flags(18, 100, history_reps=[8, 10, 9])
        assert SetFlag.REP_OUTLIER in result.flags
        assert result.suggested_reps == 9

    def test_just_below_double_median_is_fine(self):
        result = get_set_flags(17, 100, history_reps=[8, 10, 9])
        assert result.flags == []

    def test_even_history_uses_mean_of_middle_values(self):
        # median([8, 9]) = 8.5 -> threshold 17, suggestion rounds to 9
        result = get_set_flags(17, 100, history_reps=[8, 9])
        assert SetFlag.REP_OUTLIER in result.flags
        assert result.suggested_reps == 9

    def test_history_window_is_last_ten_in_range_values(self):
        history = [30] * 5 + [0, 99] + [5] * 10
        result = get_set_flags(10, 100, history_reps=history)
        assert SetFlag.REP_OUTLIER in result.flags
        assert result.suggested_reps == 5

    def test_target_fallback_without_history(self):
        result = get_set_flags(21, 100, target_reps="8-10")
        assert SetFlag.REP_OUTLIER in result.flags
        assert result.suggested_reps == 9

    def test_target_fallback_boundary(self):
        assert get_set_flags(20, 100, target_reps="8-10").flags == []

    def test_history_takes_precedence_over_target(self):
        # 21 > 10 + 10 but history median 12 puts the threshold at 24
        result = get_set_flags(21, 100, target_reps="8-10", history_reps=[12, 12, 12])
        assert result.flags == []

    def test_no_history_no_target_no_outlier_check(self):
        assert get_set_flags(39, 100).flags == []

    def test_hard_invalid_skips_outlier_check(self):
        result = get_set_flags(45, 100, history_reps=[8, 8, 8])
        assert result.flags == [SetFlag.REPS_HARD_INVALID]
        assert result.is_hard_invalid
        assert result.suggested_reps is None

    def test_missing_data(self):
        result = get_set_flags(None, None)
        assert result.flags == [SetFlag.MISSING_REPS, SetFlag.MISSING_WEIGHT]
        assert result.is_incomplete


@pytest.mark.unit
class TestDefaultSetValues:
    def test_repeats_last_eligible_set(self):
        sets = [
            LoggedSet(reps=8, weight=100, completed=True),
            LoggedSet(reps=6, weight=110, completed=True),
            LoggedSet(reps=None, weight=None, completed=False),
        ]
        defaults = get_default_set_values(sets, target_reps="8-10")
        assert (defaults.reps, defaults.weight) == (6, 110)

    def test_falls_back_to_targets(self):
        defaults = get_default_set_values([], target_reps="8-12", target_weight="135")
        assert (defaults.reps, defaults.weight) == (10, 135.0)

    def test_target_suggestion_capped_at_rep_max(self):
        defaults = get_default_set_values([], target_reps="50-60")
        assert defaults.reps == 40
        assert defaults.weight is None
