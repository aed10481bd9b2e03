"""
Common data structures for subject-level bootstrap.

BootParams is the parameter payload wrapped by Result[P] and exposed
through BootstrapSolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class BootParams:
    """
    Parameter payload for bootstrap effect-size results.

    Columns of t and f_values follow `effects`.
    - t0: generalized eta-squared on the original subjects
    - t: matrix of bootstrap ges replicates (R rows, k columns)
    - f_values: F-ratios of the same replicates
    - bias: mean(t) - t0
    - se: sd(t)
    - ci: (k, 2) percentile interval, populated by boot_ci
    - ci_degraded: per effect, True when a bound was clamped to the
      observed replicate range
    """
    effects: tuple[str, ...]
    t0: NDArray[np.floating[Any]]              # shape (k,)
    f0: NDArray[np.floating[Any]]              # shape (k,)
    t: NDArray[np.floating[Any]]               # shape (R, k)
    f_values: NDArray[np.floating[Any]]        # shape (R, k)
    R: int                                      # number of replicates
    bias: NDArray[np.floating[Any]]            # shape (k,)
    se: NDArray[np.floating[Any]]              # shape (k,)
    ci: NDArray[np.floating[Any]] | None = None
    ci_probs: tuple[float, float] | None = None
    ci_qtype: int | None = None
    ci_degraded: tuple[bool, ...] | None = None
