"""
Percentile bootstrap confidence intervals for effect sizes.

CI = [Q(low), Q(high)] of the replicate distribution of each effect,
using R's quantile types (default 7). Bounds that fall outside the
observed replicate range are clamped to the observed min/max, flagged,
and reported through QuantileRangeWarning.
"""

from __future__ import annotations

import warnings

import numpy as np
from numpy.typing import NDArray

from pyeffectsize.core.exceptions import QuantileRangeWarning, ValidationError
from pyeffectsize.montecarlo._quantile import outside_observed_range, r_quantile


def percentile_ci(
    t: NDArray,
    probs: tuple[float, float],
    qtype: int = 7,
) -> tuple[NDArray, tuple[bool, ...]]:
    """
    Percentile interval for every column of a replicate matrix.

    Args:
        t: (R, k) bootstrap replicates, any row order
        probs: (low, high) tail probabilities
        qtype: R quantile type 1-9

    Returns:
        (ci, degraded): ci has shape (k, 2); degraded[j] is True when a
        bound of column j was clamped to the observed range
    """
    if t.ndim != 2 or t.shape[0] < 1:
        raise ValidationError(f"t: expected (R, k) replicates with R >= 1, got shape {t.shape}")
    if not np.all(np.isfinite(t)):
        raise ValidationError("t: bootstrap replicates contain non-finite values")

    R, k = t.shape
    low, high = probs
    p = np.array([low, high], dtype=np.float64)

    clamp_low = outside_observed_range(low, R)
    clamp_high = outside_observed_range(high, R)

    if clamp_low or clamp_high:
        bad = [q for q, c in ((low, clamp_low), (high, clamp_high)) if c]
        warnings.warn(
            QuantileRangeWarning(
                f"Percentile(s) {bad} lie outside the range resolved by "
                f"{R} bootstrap replicates; bounds clamped to the observed "
                f"min/max. Increase R for a reliable interval.",
                n_replicates=R,
                prob=bad[0],
            ),
            stacklevel=3,
        )

    ci = np.empty((k, 2), dtype=np.float64)
    for j in range(k):
        x = np.sort(t[:, j])
        ci[j] = r_quantile(x, p, qtype)
        if clamp_low:
            ci[j, 0] = x[0]
        if clamp_high:
            ci[j, 1] = x[-1]

    # Quantiles are monotone in p; guard against rounding in interpolation
    ci[:, 1] = np.maximum(ci[:, 0], ci[:, 1])

    degraded = tuple(bool(clamp_low or clamp_high) for _ in range(k))
    return ci, degraded
