"""
Tests for distance-based track resampling.
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from track_projection.data_models import GeoCoordinate
from track_projection.errors import MalformedInputError
from track_projection.geo_math import haversine_distance_m
from track_projection.resampler import resample


class TestResampleEndpoints:
    """The first and last input points always survive."""

    @pytest.mark.parametrize("min_segment_m", [1.0, 50.0, 333.0, 1e9])
    def test_endpoints_preserved(self, northbound_track, min_segment_m):
        result = resample(northbound_track, min_segment_m)
        assert result[0] == northbound_track[0]
        assert result[-1] == northbound_track[-1]

    def test_huge_threshold_keeps_only_endpoints(self):
        """Points within a meter of each other and an unreachable threshold give [p0, p2]."""
        p0 = GeoCoordinate(68.5, 24.5)
        p1 = GeoCoordinate(68.500001, 24.5)
        p2 = GeoCoordinate(68.500002, 24.500001)
        assert resample([p0, p1, p2], 1e9) == [p0, p2]

    def test_two_point_track(self):
        a = GeoCoordinate(68.5, 24.5)
        b = GeoCoordinate(68.6, 24.5)
        assert resample([a, b], 1e9) == [a, b]


class TestResampleSpacing:
    """Accepted points respect the minimum spacing."""

    def test_min_spacing_except_last_pair(self, northbound_track):
        result = resample(northbound_track, 50.0)
        for a, b in zip(result[:-2], result[1:-1]):
            assert haversine_distance_m(a, b) >= 50.0

    def test_every_fifth_point_accepted(self, northbound_track):
        """11.1 m steps reach 50 m after five steps."""
        result = resample(northbound_track, 50.0)
        assert result[:-1] == northbound_track[0::5]

    def test_subsequence_in_order(self, northbound_track):
        """Resampled points are taken from the input without reordering."""
        result = resample(northbound_track, 30.0)
        indices = [northbound_track.index(p) for p in result]
        assert indices == sorted(indices)

    def test_short_tail_segment_kept(self, northbound_track):
        """The final point is appended even when closer than the threshold."""
        track = northbound_track[:8]  # last accepted is index 5, tail is ~22 m further
        result = resample(track, 50.0)
        assert result == [track[0], track[5], track[7]]
        assert haversine_distance_m(result[-2], result[-1]) < 50.0

    def test_duplicate_tail_when_last_point_accepted(self):
        """When the last point is itself accepted it appears twice."""
        a = GeoCoordinate(68.5, 24.5)
        b = GeoCoordinate(68.6, 24.5)
        assert resample([a, b], 10.0) == [a, b, b]

    def test_small_threshold_keeps_all_distinct_points(self, northbound_track):
        result = resample(northbound_track, 1.0)
        assert result == northbound_track + [northbound_track[-1]]


class TestResampleContract:
    """Input validation and purity."""

    def test_empty_track_raises(self):
        with pytest.raises(MalformedInputError, match="at least 2 points"):
            resample([], 50.0)

    def test_single_point_raises(self):
        with pytest.raises(MalformedInputError, match="got 1"):
            resample([GeoCoordinate(68.5, 24.5)], 50.0)

    @pytest.mark.parametrize("bad", [0.0, -5.0, float("nan"), float("inf")])
    def test_non_positive_threshold_raises(self, northbound_track, bad):
        with pytest.raises(ValueError, match="min_segment_m"):
            resample(northbound_track, bad)

    def test_input_not_modified(self, northbound_track):
        before = list(northbound_track)
        result = resample(northbound_track, 50.0)
        assert northbound_track == before
        assert result is not northbound_track

    def test_repeated_calls_independent(self, northbound_track):
        """No state leaks between calls."""
        first = resample(northbound_track, 50.0)
        resample(northbound_track[:10], 5.0)
        assert resample(northbound_track, 50.0) == first

    def test_accepts_tuple_input(self, northbound_track):
        assert resample(tuple(northbound_track), 50.0) == resample(northbound_track, 50.0)
