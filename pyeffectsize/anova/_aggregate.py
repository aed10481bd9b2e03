"""
Collapse repeated trials to one mean per subject x cell.

The mean-collapse shortcut is only valid for a fully crossed design, so
every (subject, cell) combination must hold at least one trial. Missing
combinations are reported, never filled.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyeffectsize.core.exceptions import (
    DataIntegrityError,
    DegenerateFactorError,
    ValidationError,
)
from pyeffectsize.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_finite,
    check_labels,
    check_min_samples,
)

# Number of missing cells spelled out in a DataIntegrityError message
_MAX_REPORTED_MISSING = 10


def aggregate_trials(
    y: Any,
    subject: Any,
    within: dict[str, Any],
) -> tuple[NDArray, tuple[str, ...], dict[str, tuple[str, ...]], NDArray]:
    """
    Average trials within each subject x cell.

    Args:
        y: 1D numeric response, one value per trial
        subject: 1D subject identifiers
        within: {factor_name: 1D level labels}, insertion order is kept

    Returns:
        (values, subjects, levels, counts) where values and counts have
        shape (n_subjects, L1, ..., Lk), subjects and levels are sorted
        string labels indexing those axes.

    Raises:
        ValidationError: Bad shapes, non-finite responses, fewer than 2 subjects
        DegenerateFactorError: A factor with fewer than 2 levels
        DataIntegrityError: A subject lacks trials in some cell
    """
    if not within:
        raise ValidationError("within: need at least one within-subject factor")

    y_arr = check_array(y, "y")
    check_1d(y_arr, "y")
    check_finite(y_arr, "y")
    check_min_samples(y_arr, 1, "y")

    subject_arr = check_labels(subject, "subject")
    check_consistent_length(y_arr, subject_arr, names=("y", "subject"))

    subjects, subject_idx = np.unique(subject_arr, return_inverse=True)
    if len(subjects) < 2:
        raise ValidationError(
            f"subject: need at least 2 subjects, got {len(subjects)}"
        )

    levels: dict[str, tuple[str, ...]] = {}
    factor_idx: list[NDArray] = []
    for name, fac in within.items():
        if ':' in name:
            raise ValidationError(
                f"{name!r}: factor names may not contain ':' (reserved for interactions)"
            )
        fac_arr = check_labels(fac, name)
        check_consistent_length(y_arr, fac_arr, names=("y", name))

        fac_levels, idx = np.unique(fac_arr, return_inverse=True)
        if len(fac_levels) < 2:
            raise DegenerateFactorError(
                f"{name}: need at least 2 levels, got {len(fac_levels)}",
                factor=name,
                n_levels=len(fac_levels),
            )
        levels[name] = tuple(str(v) for v in fac_levels)
        factor_idx.append(idx)

    shape = (len(subjects),) + tuple(len(v) for v in levels.values())
    flat = np.ravel_multi_index((subject_idx, *factor_idx), shape)
    size = int(np.prod(shape))

    counts = np.bincount(flat, minlength=size).reshape(shape)
    sums = np.bincount(flat, weights=y_arr, minlength=size).reshape(shape)

    missing = np.argwhere(counts == 0)
    if len(missing) > 0:
        names = list(levels.keys())
        cells = tuple(
            (
                str(subjects[m[0]]),
                {name: levels[name][m[j + 1]] for j, name in enumerate(names)},
            )
            for m in missing[:_MAX_REPORTED_MISSING]
        )
        shown = "; ".join(
            f"subject {s} at " + ", ".join(f"{k}={v}" for k, v in cell.items())
            for s, cell in cells
        )
        more = len(missing) - len(cells)
        suffix = f" (and {more} more)" if more > 0 else ""
        raise DataIntegrityError(
            f"Design is not fully crossed: {len(missing)} subject x cell "
            f"combinations have no trials: {shown}{suffix}",
            missing_cells=cells,
            n_missing=len(missing),
        )

    values = sums / counts
    return values, tuple(str(s) for s in subjects), levels, counts
