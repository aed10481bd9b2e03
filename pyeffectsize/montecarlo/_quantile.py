"""
R quantile type algorithms.

Implements the Hyndman & Fan (1996) quantile definitions exactly as
R's quantile() function does. Bootstrap percentile intervals default
to type 7 (linear interpolation between order statistics, R's and
numpy's default); the others are available because different rules
give visibly different bounds for small replicate counts.

Types 1-3 are discontinuous (step functions).
Types 4-9 are continuous (linear interpolation with varying definitions of
the plotting position p(k)).

Reference:
    Hyndman, R.J. and Fan, Y. (1996) "Sample Quantiles in Statistical
    Packages", The American Statistician, 50(4), 361-365.
"""

from __future__ import annotations

import math
import numpy as np
from numpy.typing import NDArray

from pyeffectsize.core.exceptions import ValidationError

# (a, b) plotting-position constants for the continuous types
_CONTINUOUS_AB = {
    4: (0.0, 1.0),
    5: (0.5, 0.5),
    6: (0.0, 0.0),
    7: (1.0, 1.0),
    8: (1.0 / 3.0, 1.0 / 3.0),
    9: (3.0 / 8.0, 3.0 / 8.0),
}


def r_quantile(x: NDArray, probs: NDArray, qtype: int = 7) -> NDArray:
    """
    Compute quantiles matching R's quantile() exactly.

    Parameters
    ----------
    x : NDArray
        1D sorted array with no NaN values.
    probs : NDArray
        1D array of probabilities in [0, 1].
    qtype : int
        R quantile type 1-9.

    Returns
    -------
    NDArray
        Quantile values, one per probability. Never outside [x[0], x[-1]].
    """
    if qtype not in range(1, 10):
        raise ValidationError(f"Quantile type must be 1-9, got {qtype}")

    probs = np.atleast_1d(np.asarray(probs, dtype=np.float64))
    n = len(x)
    if n == 0:
        raise ValidationError("Cannot compute quantiles of an empty sample")
    if n == 1:
        return np.full(len(probs), x[0])

    result = np.empty(len(probs), dtype=np.float64)

    # R fuzz factor: 4 * machine epsilon
    fuzz = 4.0 * np.finfo(np.float64).eps

    if qtype <= 3:
        # --- Discontinuous types ---
        for i, p in enumerate(probs):
            if qtype == 3:
                nppm = n * p - 0.5
            else:
                nppm = n * p  # types 1 and 2

            j = int(math.floor(nppm + fuzz))

            if qtype == 1:
                h = 1.0 if (nppm > j + fuzz) else 0.0
            elif qtype == 2:
                h = 0.5 if abs(nppm - j) < fuzz else (1.0 if nppm > j else 0.0)
            else:
                # h=1 unless nppm==j AND j is even
                nppm_eq_j = abs(nppm - j) < fuzz
                h = 0.0 if (nppm_eq_j and j % 2 == 0) else 1.0

            # R pads x: xs = [x[0], x[0], x[1], ..., x[n-1], x[n-1]]
            # and reads xs[j], xs[j+1]; xs[k] maps to x[clamp(k-1, 0, n-1)]
            lo = max(0, min(j - 1, n - 1))
            hi = max(0, min(j, n - 1))
            result[i] = (1.0 - h) * x[lo] + h * x[hi]

    else:
        # --- Continuous types 4-9 ---
        # nppm = a + p * (n + 1 - a - b)
        a, b = _CONTINUOUS_AB[qtype]

        for i, p in enumerate(probs):
            nppm = a + p * (n + 1.0 - a - b)
            j = int(math.floor(nppm + fuzz))
            h = nppm - j

            # Small negative h from floating point → clamp to 0
            if abs(h) < fuzz:
                h = 0.0
            elif abs(h - 1.0) < fuzz:
                h = 1.0

            # j is a 1-indexed order statistic; outside [1, n] we clamp
            # to the extreme observation instead of extrapolating
            if j < 1:
                result[i] = x[0]
            elif j >= n:
                result[i] = x[n - 1]
            else:
                result[i] = (1.0 - h) * x[j - 1] + h * x[j]

    return result


def outside_observed_range(prob: float, n: int) -> bool:
    """
    Whether a tail probability is finer than n replicates can resolve.

    With n sorted replicates the outermost observations sit at plotting
    positions 1/(n+1) and n/(n+1); quantiles beyond them are not backed
    by any observation. For prob=0.025 this happens for n < 39.
    """
    return prob < 1.0 / (n + 1.0) or prob > n / (n + 1.0)
