"""
Bootstrap solver dispatch.

Public API:
    boot_ges(design, R, ...) -> BootstrapSolution
    boot_ci(boot_out, probs, ...) -> BootstrapSolution
"""

from __future__ import annotations

from dataclasses import replace

from pyeffectsize.core.result import Result
from pyeffectsize.core.validation import check_probability_pair
from pyeffectsize.core.exceptions import ValidationError
from pyeffectsize.anova.design import RMDesign
from pyeffectsize.montecarlo._ci import percentile_ci
from pyeffectsize.montecarlo.backends.cpu import CPUSubjectBootstrapBackend
from pyeffectsize.montecarlo.design import DEFAULT_R, SubjectBootstrapDesign
from pyeffectsize.montecarlo.solution import BootstrapSolution


def boot_ges(
    design: RMDesign,
    R: int = DEFAULT_R,
    *,
    n_jobs: int = 1,
    seed: int | None = None,
) -> BootstrapSolution:
    """
    Bootstrap generalized eta-squared by resampling subjects.

    Each replicate draws n subjects with replacement, relabels every draw
    as a distinct subject, and re-runs the repeated-measures estimator.
    Replicates are independent; with n_jobs > 1 they run in worker
    processes. For a given seed the output is identical for any n_jobs.

    Args:
        design: Aggregated RMDesign
        R: Number of replicates (default 5000)
        n_jobs: Worker processes (1 = in-process, -1 = all CPUs)
        seed: Random seed for reproducibility

    Returns:
        BootstrapSolution with t0, t (R x effects), bias, se

    Raises:
        ReplicateFailure: If any replicate fails; no partial result is returned

    Examples:
        >>> design = RMDesign.for_repeated_measures(y, subj, within)
        >>> boot_out = boot_ges(design, R=5000, n_jobs=4, seed=1)
        >>> boot_out = boot_ci(boot_out)
        >>> print(boot_out.summary())
    """
    boot_design = SubjectBootstrapDesign.for_design(
        design, R, n_jobs=n_jobs, seed=seed,
    )
    result = CPUSubjectBootstrapBackend().solve(boot_design)
    return BootstrapSolution(_result=result, _design=boot_design)


def boot_ci(
    boot_out: BootstrapSolution,
    probs: tuple[float, float] = (0.025, 0.975),
    *,
    qtype: int = 7,
) -> BootstrapSolution:
    """
    Percentile confidence intervals from bootstrap replicates.

    Args:
        boot_out: Result of boot_ges()
        probs: (low, high) tail probabilities; default gives a 95% interval
        qtype: R quantile type 1-9 (default 7, linear interpolation
            between order statistics)

    Returns:
        New BootstrapSolution with ci, ci_probs, ci_degraded populated.
        Bounds outside the observed replicate range are clamped and a
        QuantileRangeWarning is issued.
    """
    if not isinstance(boot_out, BootstrapSolution):
        raise ValidationError(
            f"boot_out: expected BootstrapSolution, got {type(boot_out).__name__}"
        )
    low, high = check_probability_pair(probs, "probs")

    ci, degraded = percentile_ci(boot_out.t, (low, high), qtype)

    warnings_list = list(boot_out.warnings)
    if any(degraded):
        warnings_list.append(
            f"CI bounds clamped to observed range: R={boot_out.R} replicates "
            f"cannot resolve probs ({low:g}, {high:g})"
        )

    old = boot_out._result
    new_params = replace(
        old.params,
        ci=ci,
        ci_probs=(low, high),
        ci_qtype=qtype,
        ci_degraded=degraded,
    )
    new_result = Result(
        params=new_params,
        info=old.info,
        timing=old.timing,
        backend_name=old.backend_name,
        warnings=tuple(warnings_list),
    )
    return BootstrapSolution(_result=new_result, _design=boot_out._design)
