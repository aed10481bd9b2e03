"""
pyeffectsize: generalized eta-squared with bootstrap confidence intervals
for repeated-measures experiments.

Submodules:
    anova: Trial aggregation and repeated-measures ANOVA with ges
    montecarlo: Subject-level bootstrap and percentile intervals
    report: Point estimates merged with intervals
"""

__version__ = "0.1.0"

from pyeffectsize import anova
from pyeffectsize import montecarlo
from pyeffectsize.core.datasource import DataSource
from pyeffectsize.anova import RMDesign, anova_rm, anova_rm_data
from pyeffectsize.montecarlo import boot_ci, boot_ges
from pyeffectsize.report import (
    EffectSizeReport,
    EffectSizeRow,
    effect_size_report,
    effect_size_report_design,
)

__all__ = [
    "__version__",
    "anova",
    "montecarlo",
    "DataSource",
    "RMDesign",
    "anova_rm",
    "anova_rm_data",
    "boot_ges",
    "boot_ci",
    "EffectSizeReport",
    "EffectSizeRow",
    "effect_size_report",
    "effect_size_report_design",
]
