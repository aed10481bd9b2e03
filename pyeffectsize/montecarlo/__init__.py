"""
Subject-level bootstrap for repeated-measures effect sizes.

Usage:
    from pyeffectsize.montecarlo import boot_ges, boot_ci

    result = boot_ges(design, R=5000, n_jobs=4, seed=42)
    ci_result = boot_ci(result, probs=(0.025, 0.975))
"""

from pyeffectsize.montecarlo.solvers import boot_ges, boot_ci
from pyeffectsize.montecarlo.solution import BootstrapSolution
from pyeffectsize.montecarlo._resample import resample_subjects

__all__ = [
    "boot_ges",
    "boot_ci",
    "resample_subjects",
    "BootstrapSolution",
]
