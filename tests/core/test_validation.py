"""
Tests for input validation utilities.

Validates:
    - check_array: conversion, dtype coercion, object rejection
    - check_finite: NaN/Inf detection
    - check_ndim / check_1d: dimensionality checks
    - check_consistent_length: multi-array length matching
    - check_min_samples: minimum sample count
    - check_labels: string conversion, missing labels
    - check_probability_pair: ordered tail probabilities
"""

import numpy as np
import pytest

from pyeffectsize.core.exceptions import DimensionError, ValidationError
from pyeffectsize.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_finite,
    check_labels,
    check_min_samples,
    check_ndim,
    check_probability_pair,
)


class TestCheckArray:

    def test_int_list_becomes_float(self):
        result = check_array([1, 2, 3], "y")
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_float32_preserved(self):
        result = check_array(np.array([1.0], dtype=np.float32), "y")
        assert result.dtype == np.float32

    def test_strings_rejected(self):
        with pytest.raises(ValidationError, match="y: non-numeric"):
            check_array(['a', 'b'], "y")

    def test_mixed_rejected(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array(np.array([1, 'a', None], dtype=object), "y")


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0]), "y")

    def test_counts_nan_and_inf(self):
        with pytest.raises(ValidationError, match=r"2 NaN, 1 Inf"):
            check_finite(np.array([np.nan, np.inf, np.nan, 1.0]), "y")


class TestDimensions:

    def test_1d_passes(self):
        check_1d(np.zeros(3), "y")

    def test_2d_fails_1d(self):
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((3, 2)), "y")

    def test_ndim(self):
        check_ndim(np.zeros((2, 2, 2)), 3, "values")
        with pytest.raises(DimensionError):
            check_ndim(np.zeros((2, 2)), 3, "values")


class TestCheckConsistentLength:

    def test_equal_lengths(self):
        check_consistent_length(np.zeros(4), np.zeros(4), names=("y", "subject"))

    def test_mismatch_lists_lengths(self):
        with pytest.raises(DimensionError, match="y=4, subject=3"):
            check_consistent_length(np.zeros(4), np.zeros(3), names=("y", "subject"))

    def test_names_must_match(self):
        with pytest.raises(ValueError):
            check_consistent_length(np.zeros(4), np.zeros(4), names=("y",))


class TestCheckMinSamples:

    def test_too_few(self):
        with pytest.raises(ValidationError, match="at least 2"):
            check_min_samples(np.zeros(1), 2, "subjects")


class TestCheckLabels:

    def test_numbers_become_strings(self):
        result = check_labels([1, 2, 10], "subject")
        assert list(result) == ['1', '2', '10']

    def test_strings_kept(self):
        result = check_labels(np.array(['P1', 'P2']), "subject")
        assert list(result) == ['P1', 'P2']

    def test_none_rejected(self):
        with pytest.raises(ValidationError, match="1 missing labels"):
            check_labels(['a', None, 'b'], "subject")

    def test_nan_rejected(self):
        with pytest.raises(ValidationError, match="missing labels"):
            check_labels([1.0, np.nan], "layout")

    def test_nat_rejected(self):
        dates = np.array(['2024-03-01', 'NaT'], dtype='datetime64[D]')
        with pytest.raises(ValidationError, match="first at row 1"):
            check_labels(dates, "session")

    def test_pandas_na_rejected(self):
        pd = pytest.importorskip("pandas")
        with pytest.raises(ValidationError, match="1 missing labels"):
            check_labels(np.array(['P1', pd.NA], dtype=object), "subject")

    def test_2d_rejected(self):
        with pytest.raises(DimensionError):
            check_labels([['a', 'b']], "subject")


class TestCheckProbabilityPair:

    def test_valid(self):
        assert check_probability_pair((0.025, 0.975), "probs") == (0.025, 0.975)

    @pytest.mark.parametrize("probs", [
        (0.975, 0.025),
        (0.5, 0.5),
        (-0.1, 0.9),
        (0.1, 1.5),
    ])
    def test_invalid(self, probs):
        with pytest.raises(ValidationError, match="probs"):
            check_probability_pair(probs, "probs")

    def test_wrong_length(self):
        with pytest.raises(ValidationError, match="pair"):
            check_probability_pair((0.025, 0.5, 0.975), "probs")
