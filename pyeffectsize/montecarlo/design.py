"""
Design class for the subject-level bootstrap.

SubjectBootstrapDesign encapsulates all inputs needed by backends to
resample subjects. Immutable, validated at construction.
"""

from __future__ import annotations

import os
from numbers import Integral
from dataclasses import dataclass

from pyeffectsize.anova.design import RMDesign
from pyeffectsize.core.exceptions import ValidationError

# Recommended replicate count for reported intervals
DEFAULT_R = 5000


@dataclass(frozen=True)
class SubjectBootstrapDesign:
    """
    Frozen design for bootstrapping within-subjects effect sizes.

    Attributes:
        design: Aggregated repeated-measures design (read-only input
            shared by every replicate).
        R: Number of bootstrap replicates.
        n_jobs: Number of worker processes; 1 runs in-process.
        seed: Root seed. Replicate b draws from the b-th child of
            SeedSequence(seed), so results don't depend on n_jobs.
    """
    design: RMDesign
    R: int
    n_jobs: int
    seed: int | None

    @classmethod
    def for_design(
        cls,
        design: RMDesign,
        R: int = DEFAULT_R,
        *,
        n_jobs: int = 1,
        seed: int | None = None,
    ) -> SubjectBootstrapDesign:
        """
        Create a bootstrap design with validation.

        Args:
            design: RMDesign to resample.
            R: Number of bootstrap replicates. Must be >= 1. Use >= 5000
                for reported intervals; small values are for iteration.
            n_jobs: Worker processes, >= 1, or -1 for all CPUs.
            seed: Random seed (non-negative int) or None for fresh entropy.

        Returns:
            Validated SubjectBootstrapDesign.

        Raises:
            ValidationError: If inputs are invalid.
        """
        if not isinstance(design, RMDesign):
            raise ValidationError(
                f"design: expected RMDesign, got {type(design).__name__}"
            )

        if isinstance(R, bool) or not isinstance(R, Integral) or R < 1:
            raise ValidationError(f"R must be an integer >= 1, got {R!r}")

        if n_jobs == -1:
            n_jobs = os.cpu_count() or 1
        if isinstance(n_jobs, bool) or not isinstance(n_jobs, Integral) or n_jobs < 1:
            raise ValidationError(f"n_jobs must be >= 1 or -1, got {n_jobs!r}")

        if seed is not None and (
            isinstance(seed, bool) or not isinstance(seed, Integral) or seed < 0
        ):
            raise ValidationError(f"seed must be a non-negative int or None, got {seed!r}")

        return cls(
            design=design,
            R=int(R),
            n_jobs=min(int(n_jobs), int(R)),
            seed=None if seed is None else int(seed),
        )
