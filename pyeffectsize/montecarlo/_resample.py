"""
Subject-level resampling for within-subjects designs.

A bootstrap sample draws whole subjects with replacement. Each draw
becomes a new synthetic subject carrying every cell of the original,
so the sample is fully crossed by construction and duplicates of one
subject never merge into a single subject.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pyeffectsize.anova.design import RMDesign


def draw_subjects(n: int, rng: np.random.Generator) -> NDArray[np.intp]:
    """Draw n subject indices uniformly with replacement."""
    return rng.choice(n, size=n, replace=True)


def synthetic_labels(subjects: tuple[str, ...], indices: NDArray) -> tuple[str, ...]:
    """
    Relabel draws as distinct subjects.

    Draw i (1-based) of original subject s is named "{s}_{i}", so the
    same subject drawn twice yields two subjects.
    """
    return tuple(f"{subjects[idx]}_{i}" for i, idx in enumerate(indices, start=1))


def resample_subjects(design: RMDesign, rng: np.random.Generator) -> RMDesign:
    """
    One bootstrap sample of a repeated-measures design.

    Args:
        design: Aggregated original design
        rng: Random generator

    Returns:
        RMDesign with the same number of subjects, each a relabeled copy
        of a drawn subject's complete set of cells
    """
    indices = draw_subjects(design.n_subjects, rng)
    return design.with_subjects(
        design.values[indices],
        synthetic_labels(design.subjects, indices),
    )
