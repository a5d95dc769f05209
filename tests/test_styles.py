"""
Tests for the styles module.
"""

import logging
import pytest
import numpy as np
import sys
import os

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from resquin.math.styles import (
    STYLE_INDICATORS, ScaleSpec, style_counts, normalize_counts
)


NA = np.nan


class TestScaleSpec:
    """Tests for the scale midpoint."""

    def test_integer_midpoint(self):
        """A scale with an odd number of options has an integer midpoint."""
        scale = ScaleSpec.from_bounds(1, 5)
        assert scale.scale_mid == 3
        assert scale.has_integer_midpoint

    def test_no_integer_midpoint(self):
        """A scale with an even number of options has no middle option."""
        scale = ScaleSpec.from_bounds(1, 4)
        assert scale.scale_mid == 2.5
        assert not scale.has_integer_midpoint

    def test_zero_centred(self):
        """Scales may include negative options."""
        scale = ScaleSpec.from_bounds(-2, 2)
        assert scale.scale_mid == 0
        assert scale.has_integer_midpoint


class TestStyleCounts:
    """Tests for counting responses per style."""

    def test_full_row(self):
        """A row of low responses counts as disacquiescent."""
        values = np.array([[1, 2, 1]], dtype=float)
        counts = style_counts(values, np.array([True]), ScaleSpec.from_bounds(1, 5))

        assert counts['MRS'][0] == 0
        assert counts['ARS'][0] == 0
        assert counts['DRS'][0] == 3
        assert counts['ERS'][0] == 2
        assert counts['NERS'][0] == 1

    def test_missing_responses_count_nowhere(self):
        """Missing cells fall in no category, including NERS."""
        values = np.array([[NA, 3, 5]])
        counts = style_counts(values, np.array([True]), ScaleSpec.from_bounds(1, 5))

        assert counts['MRS'][0] == 1
        assert counts['ARS'][0] == 1
        assert counts['DRS'][0] == 0
        assert counts['ERS'][0] == 1
        assert counts['NERS'][0] == 1

    def test_partitions(self):
        """MRS + ARS + DRS and ERS + NERS both equal the valid count."""
        values = np.array([
            [1, 2, 3, 4, 5],
            [5, 5, NA, 3, 1],
            [NA, NA, 2, 2, 4],
            [3, 3, 3, 3, 3]
        ])
        eligible = np.array([True, True, True, True])
        counts = style_counts(values, eligible, ScaleSpec.from_bounds(1, 5))
        n_valid = (~np.isnan(values)).sum(axis=1)

        assert np.array_equal(counts['MRS'] + counts['ARS'] + counts['DRS'], n_valid)
        assert np.array_equal(counts['ERS'] + counts['NERS'], n_valid)

    def test_ineligible_rows(self):
        """Rows that are not eligible get NaN for every indicator."""
        values = np.array([[1, 2], [3, NA]])
        counts = style_counts(values, np.array([True, False]), ScaleSpec.from_bounds(1, 5))

        assert list(counts.keys()) == STYLE_INDICATORS
        for name in STYLE_INDICATORS:
            assert not np.isnan(counts[name][0])
            assert np.isnan(counts[name][1])

    def test_no_midpoint(self, caplog):
        """MRS is NaN for all rows and a notice is logged."""
        caplog.set_level(logging.WARNING, logger='resquin.math.styles')
        values = np.array([[1, 2, 3], [4, 4, 1]], dtype=float)
        counts = style_counts(values, np.array([True, True]), ScaleSpec.from_bounds(1, 4))

        assert np.all(np.isnan(counts['MRS']))
        assert list(counts['ARS']) == [1, 2]
        assert list(counts['DRS']) == [2, 1]
        assert "No scale midpoint found" in caplog.text


class TestNormalizeCounts:
    """Tests for turning counts into proportions."""

    def test_divides_by_valid_count(self):
        """Each row is divided by its own number of valid responses."""
        counts = {'ARS': np.array([1.0, 2.0, NA]), 'DRS': np.array([3.0, 0.0, NA])}
        n_valid = np.array([4, 2, 0])
        shares = normalize_counts(counts, n_valid)

        assert np.allclose(shares['ARS'][:2], [0.25, 1.0])
        assert np.allclose(shares['DRS'][:2], [0.75, 0.0])
        assert np.isnan(shares['ARS'][2])
