"""
Repeated-measures ANOVA solver dispatch.

Public API:
    anova_rm(y, subject, within, ...) -> AnovaRMSolution
    anova_rm_data(data, dv=, subject=, within=, ...) -> AnovaRMSolution
"""

from typing import Any

from pyeffectsize.core.result import Result
from pyeffectsize.core.compute.timing import Timer
from pyeffectsize.anova._repeated import repeated_measures_anova
from pyeffectsize.anova.design import RMDesign
from pyeffectsize.anova.solution import AnovaRMSolution


def anova_rm(
    y: Any,
    subject: Any,
    within: dict[str, Any],
    *,
    correction: str = 'auto',
) -> AnovaRMSolution:
    """
    Repeated-measures ANOVA with generalized eta-squared.

    Trials are averaged per subject x cell first; the design must be
    fully crossed. All factors are within-subjects.

    Args:
        y: Response variable (1D, long format, one value per trial)
        subject: Subject identifiers (1D)
        within: {factor_name: 1D condition labels}
        correction: Sphericity correction for p_corrected:
            'none': no correction
            'gg': Greenhouse-Geisser
            'hf': Huynh-Feldt
            'auto': GG if Mauchly p < 0.05, else none (default)

    Returns:
        AnovaRMSolution with one row per main effect and interaction

    Raises:
        DataIntegrityError: A subject lacks trials in some cell
        DegenerateFactorError: A factor has fewer than 2 levels
        NumericalError: Data carry no variance

    Examples:
        >>> result = anova_rm(time, subj, within={'layout': layout, 'size': size})
        >>> result.ges['layout:size']
        >>> print(result.summary())
    """
    timer = Timer()
    timer.start()

    with timer.section('aggregation'):
        design = RMDesign.for_repeated_measures(y, subject, within)

    return _solve(design, correction, timer)


def anova_rm_data(
    data: Any,
    *,
    dv: str,
    subject: str,
    within: list[str] | tuple[str, ...],
    correction: str = 'auto',
) -> AnovaRMSolution:
    """
    Repeated-measures ANOVA on tabular trial data.

    Args:
        data: DataSource, pandas DataFrame, or mapping of columns
        dv: Response column
        subject: Subject id column
        within: Within-subject factor columns
        correction: See anova_rm()

    Returns:
        AnovaRMSolution
    """
    timer = Timer()
    timer.start()

    with timer.section('aggregation'):
        design = RMDesign.from_data(data, dv=dv, subject=subject, within=within)

    return _solve(design, correction, timer)


def anova_rm_design(
    design: RMDesign,
    *,
    correction: str = 'auto',
) -> AnovaRMSolution:
    """Repeated-measures ANOVA on an already aggregated RMDesign."""
    timer = Timer()
    timer.start()
    return _solve(design, correction, timer)


def _solve(design: RMDesign, correction: str, timer: Timer) -> AnovaRMSolution:
    with timer.section('decomposition'):
        rm_params = repeated_measures_anova(design, correction=correction)

    timer.stop()

    warnings_list = [
        f"{term}: zero error variance, F is not a finite ratio"
        for term in rm_params.zero_error_terms
    ]

    result = Result(
        params=rm_params,
        info={
            'design_type': design.design_type,
            'correction': correction,
            'n_cells': design.n_cells,
        },
        timing=timer.result(),
        backend_name='cpu_rm',
        warnings=tuple(warnings_list),
    )

    return AnovaRMSolution(_result=result)
