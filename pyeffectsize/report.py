"""
Effect-size report: point estimates merged with bootstrap intervals.

effect_size_report() runs the whole pipeline on long-format trials:

    trials -> aggregation -> point estimate (anova_rm)
           -> R subject-level bootstrap replicates (boot_ges)
           -> percentile interval per effect (boot_ci)
           -> EffectSizeReport

A point estimate that cannot be computed raises; there is no report.
An interval computed from too few replicates is still reported, with
ci_degraded set on its rows and a QuantileRangeWarning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from pyeffectsize.anova.design import RMDesign
from pyeffectsize.anova.solvers import anova_rm_design
from pyeffectsize.anova.solution import AnovaRMSolution
from pyeffectsize.montecarlo.design import DEFAULT_R
from pyeffectsize.montecarlo.solvers import boot_ci, boot_ges
from pyeffectsize.montecarlo.solution import BootstrapSolution

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True)
class EffectSizeRow:
    """One effect of the report."""
    effect: str
    f_value: float
    num_df: int
    den_df: int
    ges: float
    conf_low: float
    conf_high: float
    ci_degraded: bool
    n_replicates: int


@dataclass
class EffectSizeReport:
    """
    User-facing effect-size report.

    Produced by effect_size_report(). Keeps the ANOVA and bootstrap
    solutions it was merged from.
    """
    anova: AnovaRMSolution
    bootstrap: BootstrapSolution

    @property
    def rows(self) -> tuple[EffectSizeRow, ...]:
        ci = self.bootstrap.ci
        degraded = self.bootstrap.ci_degraded
        return tuple(
            EffectSizeRow(
                effect=row.term,
                f_value=row.f_value,
                num_df=row.num_df,
                den_df=row.den_df,
                ges=row.ges,
                conf_low=float(ci[j, 0]),
                conf_high=float(ci[j, 1]),
                ci_degraded=degraded[j],
                n_replicates=self.bootstrap.R,
            )
            for j, row in enumerate(self.anova.table)
        )

    @property
    def effects(self) -> tuple[str, ...]:
        return self.anova.effects

    @property
    def probs(self) -> tuple[float, float]:
        return self.bootstrap.ci_probs

    @property
    def degraded(self) -> tuple[str, ...]:
        """Effects whose interval was clamped to the observed replicate range."""
        return tuple(r.effect for r in self.rows if r.ci_degraded)

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.anova.warnings + self.bootstrap.warnings

    def __getitem__(self, effect: str) -> EffectSizeRow:
        for row in self.rows:
            if row.effect == effect:
                return row
        raise KeyError(f"No effect {effect!r}. Available: {list(self.effects)}")

    def to_dict(self) -> dict[str, dict[str, float]]:
        """{effect: {F, num_df, den_df, ges, conf_low, conf_high}}."""
        return {
            r.effect: {
                'F': r.f_value,
                'num_df': r.num_df,
                'den_df': r.den_df,
                'ges': r.ges,
                'conf_low': r.conf_low,
                'conf_high': r.conf_high,
            }
            for r in self.rows
        }

    def to_dataframe(self) -> 'pd.DataFrame':
        """One row per effect, columns named as in ez/afex tables."""
        import pandas as pd

        return pd.DataFrame(
            {
                'Effect': [r.effect for r in self.rows],
                'DFn': [r.num_df for r in self.rows],
                'DFd': [r.den_df for r in self.rows],
                'F': [r.f_value for r in self.rows],
                'ges': [r.ges for r in self.rows],
                'effectsize_conf_low': [r.conf_low for r in self.rows],
                'effectsize_conf_high': [r.conf_high for r in self.rows],
                'ci_degraded': [r.ci_degraded for r in self.rows],
            }
        )

    def summary(self) -> str:
        lo, hi = self.probs
        width = max(10, max(len(e) for e in self.effects))
        lines = [
            "Generalized eta-squared with subject bootstrap percentile CI",
            f"Subjects: {self.anova.n_subjects}  Replicates: {self.bootstrap.R}  "
            f"Interval: [{lo:g}, {hi:g}]",
            "",
            f"{'Effect':<{width}s} {'DFn':>4} {'DFd':>5} {'F':>10} "
            f"{'ges':>8} {'low':>8} {'high':>8}",
        ]
        for r in self.rows:
            flag = " !" if r.ci_degraded else ""
            lines.append(
                f"{r.effect:<{width}s} {r.num_df:>4d} {r.den_df:>5d} "
                f"{r.f_value:>10.3f} {r.ges:>8.4f} {r.conf_low:>8.4f} "
                f"{r.conf_high:>8.4f}{flag}"
            )
        if self.degraded:
            lines.append("")
            lines.append(
                f"! interval clamped to observed range ({self.bootstrap.R} "
                f"replicates); increase R"
            )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"EffectSizeReport(effects={len(self.effects)}, "
            f"R={self.bootstrap.R}, degraded={len(self.degraded)})"
        )


def effect_size_report(
    data: Any,
    *,
    dv: str,
    subject: str,
    within: list[str] | tuple[str, ...],
    R: int = DEFAULT_R,
    probs: tuple[float, float] = (0.025, 0.975),
    n_jobs: int = 1,
    seed: int | None = None,
    qtype: int = 7,
) -> EffectSizeReport:
    """
    Generalized eta-squared with bootstrap confidence intervals.

    Args:
        data: Long-format trials: DataSource, pandas DataFrame, or mapping
            of columns
        dv: Response column
        subject: Subject id column
        within: Within-subject factor columns; order sets row order
        R: Bootstrap replicates (default 5000)
        probs: Tail probabilities of the interval
        n_jobs: Worker processes for the bootstrap (-1 = all CPUs)
        seed: Random seed for resampling
        qtype: R quantile type for the percentiles (default 7)

    Returns:
        EffectSizeReport

    Raises:
        DataIntegrityError: Design not fully crossed
        DegenerateFactorError: A factor has fewer than 2 levels
        NumericalError: Point estimate undefined
        ReplicateFailure: A bootstrap replicate failed

    Examples:
        >>> report = effect_size_report(df, dv='time', subject='participant',
        ...                             within=['layout', 'size', 'color'],
        ...                             R=5000, n_jobs=4, seed=0)
        >>> report.to_dict()['layout']['conf_low']
    """
    design = RMDesign.from_data(data, dv=dv, subject=subject, within=within)
    return effect_size_report_design(
        design, R=R, probs=probs, n_jobs=n_jobs, seed=seed, qtype=qtype,
    )


def effect_size_report_design(
    design: RMDesign,
    *,
    R: int = DEFAULT_R,
    probs: tuple[float, float] = (0.025, 0.975),
    n_jobs: int = 1,
    seed: int | None = None,
    qtype: int = 7,
) -> EffectSizeReport:
    """effect_size_report() on an already aggregated RMDesign."""
    point = anova_rm_design(design)
    boot_out = boot_ci(
        boot_ges(design, R, n_jobs=n_jobs, seed=seed),
        probs,
        qtype=qtype,
    )
    return EffectSizeReport(anova=point, bootstrap=boot_out)
