"""
Solution wrapper for repeated-measures ANOVA.

AnovaRMSolution wraps Result[AnovaRMParams] and provides convenient
accessors and R-style summary output.
"""

from dataclasses import dataclass
from typing import Any

from pyeffectsize.core.result import Result
from pyeffectsize.anova._common import (
    AnovaRMParams,
    EffectRow,
    SphericitySummary,
)


def _significance_stars(p: float | None) -> str:
    """R-style significance codes."""
    if p is None:
        return ""
    if p < 0.001:
        return "***"
    if p < 0.01:
        return "**"
    if p < 0.05:
        return "*"
    if p < 0.1:
        return "."
    return ""


@dataclass
class AnovaRMSolution:
    """
    User-facing result for repeated-measures ANOVA.

    Produced by anova_rm() and anova_rm_data().
    """
    _result: Result[AnovaRMParams]

    @property
    def table(self) -> tuple[EffectRow, ...]:
        return self._result.params.table

    @property
    def effects(self) -> tuple[str, ...]:
        """Effect names in table order."""
        return tuple(row.term for row in self.table)

    def __getitem__(self, term: str) -> EffectRow:
        for row in self.table:
            if row.term == term:
                return row
        raise KeyError(f"No effect {term!r}. Available: {list(self.effects)}")

    @property
    def n_subjects(self) -> int:
        return self._result.params.n_subjects

    @property
    def n_obs(self) -> int:
        return self._result.params.n_obs

    @property
    def n_trials(self) -> int:
        return self._result.params.n_trials

    @property
    def within_factors(self) -> tuple[str, ...]:
        return self._result.params.within_factors

    @property
    def sphericity(self) -> tuple[SphericitySummary, ...]:
        return self._result.params.sphericity

    @property
    def correction(self) -> str:
        return self._result.params.correction

    @property
    def ges(self) -> dict[str, float]:
        """Generalized eta-squared per effect."""
        return self._result.params.ges

    @property
    def eta_squared(self) -> dict[str, float]:
        return self._result.params.eta_squared

    @property
    def partial_eta_squared(self) -> dict[str, float]:
        return self._result.params.partial_eta_squared

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def to_dict(self) -> dict[str, dict[str, float]]:
        """{effect: {F, num_df, den_df, ges, p_value}}."""
        return {
            row.term: {
                'F': row.f_value,
                'num_df': row.num_df,
                'den_df': row.den_df,
                'ges': row.ges,
                'p_value': row.p_value,
            }
            for row in self.table
        }

    def summary(self) -> str:
        """Generate R-style repeated-measures ANOVA summary."""
        width = 86
        lines = [
            "Repeated-Measures ANOVA",
            "=" * width,
            f"Subjects: {self.n_subjects}",
            f"Observations: {self.n_obs} (from {self.n_trials} trials)",
            f"Correction: {self.correction}",
            "",
            f"{'Effect':<24} {'DFn':>5} {'DFd':>6} {'SSn':>12} {'SSd':>12} "
            f"{'F':>10} {'p':>11} {'ges':>7}",
            "-" * width,
        ]

        for row in self.table:
            sig = _significance_stars(row.p_corrected)
            lines.append(
                f"{row.term:<24} {row.num_df:>5d} {row.den_df:>6d} "
                f"{row.sum_sq:>12.4f} {row.error_ss:>12.4f} "
                f"{row.f_value:>10.4f} {row.p_corrected:>11.4e} "
                f"{row.ges:>7.4f} {sig}"
            )

        if self.sphericity:
            lines.append("")
            lines.append("Mauchly's Test of Sphericity:")
            lines.append(f"  {'Effect':<22} {'W':>8} {'p':>12} {'GG eps':>10} {'HF eps':>10}")
            for s in self.sphericity:
                lines.append(
                    f"  {s.term:<22} {s.mauchly_w:>8.4f} {s.p_value:>12.4e} "
                    f"{s.gg_epsilon:>10.4f} {s.hf_epsilon:>10.4f}"
                )

            lines.append("")
            lines.append("Corrected p-values:")
            for row in self.table:
                if row.num_df >= 2:
                    lines.append(
                        f"  {row.term}: GG p = {row.gg_p_value:.4e}, "
                        f"HF p = {row.hf_p_value:.4e}"
                    )

        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"AnovaRMSolution(n_subjects={self.n_subjects}, "
            f"effects={len(self.table)}, correction={self.correction!r})"
        )
