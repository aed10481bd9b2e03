"""
Input validation utilities for pyeffectsize.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pyeffectsize.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a numeric numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, etc.)
    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    # Ensure floating point for numerical stability
    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray, ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray, name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_consistent_length(
    *arrays: NDArray,
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Args:
        *arrays: Arrays to check
        names: Parameter names for error messages (must match number of arrays)

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray, min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples.

    Raises:
        ValidationError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


def check_labels(labels: ArrayLike, name: str) -> NDArray[np.str_]:
    """
    Validate a 1D array of categorical labels and convert to strings.

    Labels are compared as strings, so 1 and '1' denote the same level.
    Missing labels (None, NaN, NaT, pandas NA) are rejected.

    Args:
        labels: Subject identifiers or factor levels
        name: Parameter name for error messages

    Returns:
        1D numpy array of str

    Raises:
        DimensionError: If labels are not 1D
        ValidationError: If any label is missing
    """
    arr = np.asarray(labels)
    check_1d(arr, name)

    # Integer, bool and fixed-width string arrays cannot hold a missing value
    if arr.dtype.kind in 'OfcMm':
        missing = [i for i, v in enumerate(arr) if _is_missing(v)]
        if missing:
            raise ValidationError(
                f"{name}: {len(missing)} missing labels (first at row {missing[0]})"
            )

    return np.array([str(v) for v in arr])


def _is_missing(value: Any) -> bool:
    """None, NaN, NaT, or pandas NA."""
    if value is None:
        return True
    try:
        return bool(value != value)
    except TypeError:
        # pd.NA propagates through comparisons and has no truth value
        return True


def check_probability_pair(probs: tuple[float, float], name: str) -> tuple[float, float]:
    """
    Verify a (low, high) pair of tail probabilities.

    Raises:
        ValidationError: Unless 0 <= low < high <= 1
    """
    try:
        low, high = (float(p) for p in probs)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name}: expected a pair of floats, got {probs!r}") from e

    if not (0.0 <= low < high <= 1.0):
        raise ValidationError(
            f"{name}: expected 0 <= low < high <= 1, got ({low}, {high})"
        )
    return low, high
