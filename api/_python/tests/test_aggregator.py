"""
Tests for contextual aggregation.

All configurations share group -> median -> rank; these tests cover the
primitive and each configuration built on it.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import peak_at_14_features, scored
from peakshift.science.aggregator import (
    MEAL_RECENCY_BANDS,
    best_group,
    circular_windows,
    find_best_window,
    group_scores,
    meal_recency_band,
    rank_groups,
    summarize_meal_recency,
    summarize_weekdays,
)
from peakshift.science.normalizer import features_from_documents, normalize_features
from peakshift.types import ScoredSample


class TestGroupingPrimitive:
    def test_samples_without_key_are_skipped(self):
        samples = [scored(1.0, hour=9), scored(2.0, hour=None), scored(3.0, hour=9)]
        assert group_scores(samples, lambda s: s.hour) == {9: [1.0, 3.0]}

    def test_seeded_keys_keep_order_and_may_be_empty(self):
        groups = group_scores([scored(1.0, hour=2)], lambda s: s.hour, keys=[5, 2, 7])
        assert list(groups) == [5, 2, 7]
        assert groups[5] == []

    def test_rank_groups_best_first(self):
        ranked = rank_groups({"a": [0.0, 1.0, 2.0], "b": [3.0], "c": [-1.0]})
        assert [g.bucket for g in ranked] == ["b", "a", "c"]
        assert ranked[1].n == 3
        assert ranked[1].median_score == 1.0

    def test_rank_groups_gate(self):
        ranked = rank_groups({"a": [1.0, 1.0], "b": [5.0]}, min_samples=2)
        assert [g.bucket for g in ranked] == ["a"]

    def test_rank_groups_ties_keep_group_order(self):
        ranked = rank_groups({"x": [1.0], "y": [1.0], "z": [2.0]})
        assert [g.bucket for g in ranked] == ["z", "x", "y"]

    def test_best_group_strictly_greatest_first_wins_ties(self):
        groups = {0: [1.0] * 5, 1: [2.0] * 5, 2: [2.0] * 5}
        assert best_group(groups, min_samples=5).bucket == 1

    def test_best_group_none_when_gate_not_met(self):
        assert best_group({0: [9.0] * 4}, min_samples=5) is None

    def test_best_group_ignores_high_scoring_small_groups(self):
        groups = {0: [0.0] * 5, 1: [100.0] * 4}
        assert best_group(groups, min_samples=5).bucket == 0


class TestCircularWindows:
    def test_window_merges_adjacent_hours(self):
        windows = circular_windows({9: [1.0], 10: [2.0], 11: [3.0]})
        assert windows[9] == [1.0, 2.0]
        assert windows[10] == [2.0, 3.0]
        assert len(windows) == 24

    def test_last_window_wraps_to_midnight(self):
        windows = circular_windows({23: [1.0], 0: [2.0]})
        assert windows[23] == [1.0, 2.0]

    def test_wider_windows(self):
        windows = circular_windows({22: [1.0], 23: [2.0], 0: [3.0]}, width=3)
        assert windows[22] == [1.0, 2.0, 3.0]


class TestFindBestWindow:
    """Sliding 2-hour peak search with a 5-sample evidence gate."""

    def test_recovers_afternoon_peak(self):
        samples = normalize_features(features_from_documents(peak_at_14_features())).samples
        window = find_best_window(samples)

        assert window.start_hour == 14
        assert window.end_hour == 16
        assert window.sample_count == 6
        assert window.median_score == 2.0

    def test_exactly_threshold_samples_produce_result(self):
        samples = [scored(1.0, hour=9)] * 3 + [scored(1.0, hour=10)] * 2
        window = find_best_window(samples, min_samples=5)
        assert window is not None
        assert window.start_hour == 9
        assert window.sample_count == 5

    def test_one_below_threshold_is_unavailable(self):
        samples = [scored(1.0, hour=9)] * 2 + [scored(1.0, hour=10)] * 2
        assert find_best_window(samples, min_samples=5) is None

    def test_spread_out_samples_are_unavailable(self):
        """Plenty of samples, but no 2-hour window holds five."""
        samples = [scored(1.0, hour=h) for h in range(0, 24, 3)] * 2
        assert find_best_window(samples) is None

    def test_single_hour_ties_resolve_to_earliest_start(self):
        """All samples at 09:00: windows 08-10 and 09-11 tie, 08 comes first."""
        samples = [scored(0.5, hour=9)] * 6
        assert find_best_window(samples).start_hour == 8

    def test_window_across_midnight(self):
        samples = [scored(3.0, hour=23)] * 3 + [scored(3.0, hour=0)] * 3
        samples += [scored(0.0, hour=12)] * 10
        window = find_best_window(samples)
        assert window.start_hour == 23
        assert window.end_hour == 1

    def test_samples_without_hour_ignored(self):
        samples = [scored(5.0, hour=None)] * 10 + [scored(0.0, hour=7)] * 5
        window = find_best_window(samples)
        assert window.sample_count == 5
        assert window.median_score == 0.0

    def test_outlier_does_not_flip_peak(self):
        """One absurd score can't drag a window ahead of a consistently better one."""
        samples = [scored(1.0, hour=8)] * 6
        samples += [scored(-1.0, hour=18)] * 5 + [scored(1000.0, hour=18)]
        assert find_best_window(samples).start_hour == 7


class TestMealRecency:
    """Three bands by minutes since last meal: <=90, <=180, >180."""

    @pytest.mark.parametrize(
        "minutes,band",
        [(0, "≤90m"), (90, "≤90m"), (90.5, "90–180m"), (180, "90–180m"), (181, ">180m"), (600, ">180m")],
    )
    def test_band_boundaries(self, minutes, band):
        assert meal_recency_band(minutes) == band

    def test_unknown_recency_has_no_band(self):
        assert meal_recency_band(None) is None

    def test_all_bands_reported_best_first(self):
        samples = [scored(0.5, mins=30)] * 3 + [scored(1.5, mins=200)] * 2
        samples += [scored(9.0, mins=None)]
        summary = summarize_meal_recency(samples)

        assert [g.bucket for g in summary] == [">180m", "≤90m", "90–180m"]
        assert [g.n for g in summary] == [2, 3, 0]
        assert summary[2].median_score == 0.0

    def test_empty_input_keeps_band_order(self):
        summary = summarize_meal_recency([])
        assert [g.bucket for g in summary] == list(MEAL_RECENCY_BANDS)
        assert all(g.n == 0 for g in summary)


class TestWeekdays:
    """Day-of-week grouping reuses the same primitive."""

    def _sample(self, score: float, day: int) -> ScoredSample:
        return ScoredSample(
            score=score, rt_z=-score, taken_at=datetime(2026, 1, 12 + day, 9, tzinfo=timezone.utc)
        )

    def test_weekday_ranking(self):
        samples = [self._sample(1.0, 0)] * 2 + [self._sample(2.0, 2)] * 2 + [self._sample(-1.0, 4)]
        ranked = summarize_weekdays(samples, min_samples=2)
        assert [g.bucket for g in ranked] == ["Wed", "Mon"]

    def test_samples_without_timestamp_skipped(self):
        ranked = summarize_weekdays([ScoredSample(score=1.0, rt_z=-1.0)], min_samples=1)
        assert ranked == []
