"""
Solution wrapper for bootstrap effect-size results.

BootstrapSolution wraps Result[BootParams] and provides convenient
accessors and R-style summary output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyeffectsize.core.result import Result
from pyeffectsize.montecarlo._common import BootParams
from pyeffectsize.montecarlo.design import SubjectBootstrapDesign


@dataclass
class BootstrapSolution:
    """
    User-facing bootstrap results.

    Mirrors R's boot object: t0, t, bias, SE, plus CI if computed.
    Columns follow `effects`.
    """
    _result: Result[BootParams]
    _design: SubjectBootstrapDesign

    # --- Core boot fields ---

    @property
    def effects(self) -> tuple[str, ...]:
        return self._result.params.effects

    @property
    def t0(self) -> NDArray[np.floating[Any]]:
        """Generalized eta-squared on the original subjects, shape (k,)."""
        return self._result.params.t0

    @property
    def f0(self) -> NDArray[np.floating[Any]]:
        return self._result.params.f0

    @property
    def t(self) -> NDArray[np.floating[Any]]:
        """Bootstrap ges replicates, shape (R, k)."""
        return self._result.params.t

    @property
    def f_values(self) -> NDArray[np.floating[Any]]:
        """Bootstrap F replicates, shape (R, k)."""
        return self._result.params.f_values

    @property
    def R(self) -> int:
        return self._result.params.R

    @property
    def bias(self) -> NDArray[np.floating[Any]]:
        """Bootstrap bias estimate: mean(t) - t0, shape (k,)."""
        return self._result.params.bias

    @property
    def se(self) -> NDArray[np.floating[Any]]:
        """Bootstrap standard error: sd(t), shape (k,)."""
        return self._result.params.se

    @property
    def ci(self) -> NDArray[np.floating[Any]] | None:
        """(k, 2) percentile interval, or None if boot_ci() was not run."""
        return self._result.params.ci

    @property
    def ci_probs(self) -> tuple[float, float] | None:
        return self._result.params.ci_probs

    @property
    def ci_degraded(self) -> tuple[bool, ...] | None:
        return self._result.params.ci_degraded

    def replicates(self, effect: str) -> NDArray[np.floating[Any]]:
        """ges replicates of one effect, shape (R,)."""
        try:
            j = self.effects.index(effect)
        except ValueError:
            raise KeyError(
                f"No effect {effect!r}. Available: {list(self.effects)}"
            ) from None
        return self.t[:, j]

    # --- Metadata ---

    @property
    def seed(self) -> int | None:
        return self._design.seed

    @property
    def entropy(self) -> int:
        """Root seed entropy; pass it as ``seed`` to reproduce an unseeded run."""
        return self._result.info['entropy']

    @property
    def n_jobs(self) -> int:
        return self._design.n_jobs

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # --- Display ---

    def summary(self) -> str:
        """
        R-style print.boot output.

        Produces:
            SUBJECT-LEVEL NONPARAMETRIC BOOTSTRAP

            Bootstrap Statistics (generalized eta-squared) :
                            original       bias    std. error
            layout           0.61234    0.01234       0.05678
        """
        lines = ["\nSUBJECT-LEVEL NONPARAMETRIC BOOTSTRAP\n"]
        lines.append(
            f"Call: boot_ges(design, R={self.R}, n_jobs={self.n_jobs}, "
            f"seed={self.seed})"
        )
        lines.append("")
        lines.append("Bootstrap Statistics (generalized eta-squared) :")

        width = max(8, max(len(e) for e in self.effects))
        lines.append(
            f"{'':<{width}s} {'original':>12s} {'bias':>12s} {'std. error':>12s}"
        )
        for j, effect in enumerate(self.effects):
            lines.append(
                f"{effect:<{width}s} {self.t0[j]:12.5f} {self.bias[j]:12.5f} "
                f"{self.se[j]:12.5f}"
            )

        if self.ci is not None:
            lo, hi = self.ci_probs
            lines.append("")
            lines.append(f"Percentile CI [{lo:g}, {hi:g}]:")
            for j, effect in enumerate(self.effects):
                flag = "  (clamped)" if self.ci_degraded[j] else ""
                lines.append(
                    f"  {effect}: ({self.ci[j, 0]:.5f}, {self.ci[j, 1]:.5f}){flag}"
                )

        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"BootstrapSolution(R={self.R}, k={len(self.effects)}, "
            f"n_jobs={self.n_jobs}, backend={self.backend_name!r})"
        )
