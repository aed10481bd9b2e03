"""
Exception hierarchy for pyeffectsize.

All exceptions inherit from PyEffectSizeError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
    - Exceptions survive pickling, since bootstrap workers raise them
      in child processes
"""


class PyEffectSizeError(Exception):
    """Base exception for all pyeffectsize errors."""
    pass


class ValidationError(PyEffectSizeError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class DataIntegrityError(ValidationError):
    """
    Design is not fully crossed.

    Raised when at least one subject has no trials for some combination
    of within-subject factor levels. Averaging repetitions per cell is
    only valid for a complete subjects x cells table, so this aborts
    before any ANOVA is attempted.

    Attributes:
        missing_cells: (subject, {factor: level}) pairs with no trials.
            Truncated to the first few for large designs.
        n_missing: Total number of missing subject x cell combinations
    """

    def __init__(
        self,
        message: str,
        missing_cells: tuple = (),
        n_missing: int | None = None,
    ):
        super().__init__(message)
        self.missing_cells = tuple(missing_cells)
        self.n_missing = len(self.missing_cells) if n_missing is None else n_missing

    def __reduce__(self):
        return (self.__class__, (str(self), self.missing_cells, self.n_missing))


class DegenerateFactorError(ValidationError):
    """
    A within-subject factor has fewer than 2 distinct levels.

    Attributes:
        factor: Name of the offending factor
        n_levels: Number of distinct levels observed
    """

    def __init__(
        self,
        message: str,
        factor: str | None = None,
        n_levels: int | None = None,
    ):
        super().__init__(message)
        self.factor = factor
        self.n_levels = n_levels

    def __reduce__(self):
        return (self.__class__, (str(self), self.factor, self.n_levels))


class NumericalError(PyEffectSizeError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation,
    e.g. a variance decomposition whose effect-size denominator is zero.
    """
    pass


class ReplicateFailure(PyEffectSizeError):
    """
    A bootstrap replicate could not be computed.

    The whole bootstrap run is aborted: dropping the replicate would
    shrink the empirical distribution and narrow the interval without
    saying so. The underlying error is available as __cause__ when the
    failure is raised in-process.

    Attributes:
        replicate: Zero-based replicate index, or None if the failure
            could not be attributed to one replicate (e.g. a dead worker)
        reason: Short description of the underlying error
    """

    def __init__(
        self,
        message: str,
        replicate: int | None = None,
        reason: str | None = None,
    ):
        super().__init__(message)
        self.replicate = replicate
        self.reason = reason

    def __reduce__(self):
        return (self.__class__, (str(self), self.replicate, self.reason))


class QuantileRangeWarning(UserWarning):
    """
    A requested bootstrap percentile lies outside the observed replicates.

    Issued (never raised) when a tail probability is finer than the
    replicate count can resolve. The bound is clamped to the observed
    minimum or maximum rather than extrapolated.

    Attributes:
        n_replicates: Number of replicates actually available
        prob: The tail probability that could not be resolved
    """

    def __init__(
        self,
        message: str,
        n_replicates: int | None = None,
        prob: float | None = None,
    ):
        super().__init__(message)
        self.n_replicates = n_replicates
        self.prob = prob
