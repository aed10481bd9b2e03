"""
Repeated-measures Analysis of Variance.

Public API:
    anova_rm(y, subject, within, ...) -> AnovaRMSolution
    anova_rm_data(data, dv=, subject=, within=, ...) -> AnovaRMSolution
    anova_rm_design(design, ...) -> AnovaRMSolution
    RMDesign                       # aggregated, fully crossed design
"""

from pyeffectsize.anova.design import RMDesign
from pyeffectsize.anova.solvers import (
    anova_rm,
    anova_rm_data,
    anova_rm_design,
)
from pyeffectsize.anova.solution import AnovaRMSolution

__all__ = [
    "anova_rm",
    "anova_rm_data",
    "anova_rm_design",
    "AnovaRMSolution",
    "RMDesign",
]
