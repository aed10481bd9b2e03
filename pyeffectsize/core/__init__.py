"""
Core infrastructure for pyeffectsize.

This module provides shared abstractions and utilities used by the
domain-specific submodules (anova, montecarlo).

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    datasource: Column container for long-format trial data
    compute: Timing
"""

from pyeffectsize.core.result import Result
from pyeffectsize.core.datasource import DataSource
from pyeffectsize.core.exceptions import (
    PyEffectSizeError,
    ValidationError,
    DimensionError,
    DataIntegrityError,
    DegenerateFactorError,
    NumericalError,
    ReplicateFailure,
    QuantileRangeWarning,
)

__all__ = [
    # Result
    "Result",
    # Data
    "DataSource",
    # Exceptions
    "PyEffectSizeError",
    "ValidationError",
    "DimensionError",
    "DataIntegrityError",
    "DegenerateFactorError",
    "NumericalError",
    "ReplicateFailure",
    "QuantileRangeWarning",
]
