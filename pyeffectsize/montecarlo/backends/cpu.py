"""
CPU backend for the subject-level bootstrap.

CPUSubjectBootstrapBackend: resamples subjects and re-runs the effect
estimator, in-process or across a pool of worker processes.
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor, as_completed
from concurrent.futures.process import BrokenProcessPool

import numpy as np
from numpy.typing import NDArray

from pyeffectsize.core.result import Result
from pyeffectsize.core.exceptions import PyEffectSizeError, ReplicateFailure
from pyeffectsize.core.compute.timing import Timer
from pyeffectsize.anova.design import RMDesign
from pyeffectsize.anova._repeated import effect_names, estimate_effects
from pyeffectsize.montecarlo._common import BootParams
from pyeffectsize.montecarlo._resample import resample_subjects
from pyeffectsize.montecarlo.design import SubjectBootstrapDesign


def run_replicates(
    design: RMDesign,
    replicates: NDArray[np.intp],
    seeds: list[np.random.SeedSequence],
) -> tuple[NDArray, NDArray, NDArray]:
    """
    Compute a batch of bootstrap replicates.

    Module-level so worker processes can unpickle it. Each replicate owns
    its generator; nothing is shared between replicates.

    Args:
        design: Original aggregated design (read-only)
        replicates: Replicate indices of this batch
        seeds: One SeedSequence per replicate

    Returns:
        (replicates, ges, f_values), the latter two shaped (len(batch), k)

    Raises:
        ReplicateFailure: If the estimator fails on any replicate
    """
    names = effect_names(design.factors)
    k = len(names)
    ges = np.empty((len(replicates), k), dtype=np.float64)
    f_values = np.empty((len(replicates), k), dtype=np.float64)

    for row, (b, seq) in enumerate(zip(replicates, seeds)):
        rng = np.random.default_rng(seq)
        sample = resample_subjects(design, rng)
        try:
            f_values[row], ges[row] = estimate_effects(
                sample.wide(), sample.n_levels, names,
            )
        except PyEffectSizeError as e:
            raise ReplicateFailure(
                f"Bootstrap replicate {int(b)} failed: {e}",
                replicate=int(b),
                reason=str(e),
            ) from e

    return replicates, ges, f_values


class CPUSubjectBootstrapBackend:
    """
    CPU backend for bootstrapping within-subjects effect sizes.

    With n_jobs == 1 replicates run in the calling process. Otherwise the
    replicate indices are split into n_jobs contiguous chunks and mapped
    over a ProcessPoolExecutor; the design is the only data shipped.
    """

    @property
    def name(self) -> str:
        return 'cpu_subject_bootstrap'

    def solve(self, design: SubjectBootstrapDesign) -> Result[BootParams]:
        """Run bootstrap and return Result[BootParams]."""
        timer = Timer()
        timer.start()

        rm = design.design
        R = design.R
        effects = effect_names(rm.factors)
        k = len(effects)

        with timer.section('t0_computation'):
            f0, t0 = estimate_effects(rm.wide(), rm.n_levels, effects)

        root = np.random.SeedSequence(design.seed)
        seeds = root.spawn(R)
        t = np.empty((R, k), dtype=np.float64)
        f_values = np.empty((R, k), dtype=np.float64)

        with timer.section('bootstrap_replicates'):
            if design.n_jobs == 1:
                _, t[:], f_values[:] = run_replicates(rm, np.arange(R), seeds)
            else:
                self._parallel(rm, R, design.n_jobs, seeds, t, f_values)

        # Compute bias and SE
        with timer.section('summary_statistics'):
            bias = np.mean(t, axis=0) - t0
            se = np.std(t, axis=0, ddof=1) if R > 1 else np.zeros(k)

        timer.stop()

        params = BootParams(
            effects=effects,
            t0=t0,
            f0=f0,
            t=t,
            f_values=f_values,
            R=R,
            bias=bias,
            se=se,
        )

        return Result(
            params=params,
            info={
                'n_subjects': rm.n_subjects,
                'k': k,
                'n_jobs': design.n_jobs,
                'seed': design.seed,
                'entropy': root.entropy,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )

    def _parallel(
        self,
        rm: RMDesign,
        R: int,
        n_jobs: int,
        seeds: list[np.random.SeedSequence],
        t: NDArray,
        f_values: NDArray,
    ) -> None:
        """Scatter replicate chunks to worker processes and gather by index."""
        chunks = np.array_split(np.arange(R), n_jobs)
        filled = 0

        try:
            with ProcessPoolExecutor(max_workers=n_jobs) as executor:
                futures = [
                    executor.submit(
                        run_replicates, rm, chunk, [seeds[b] for b in chunk],
                    )
                    for chunk in chunks if len(chunk) > 0
                ]
                try:
                    for future in as_completed(futures):
                        idx, ges, f = future.result()
                        t[idx] = ges
                        f_values[idx] = f
                        filled += len(idx)
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise
        except BrokenProcessPool as e:
            raise ReplicateFailure(
                f"Bootstrap worker process died after {filled} of {R} replicates",
                reason=str(e),
            ) from e

        if filled != R:
            raise ReplicateFailure(
                f"Bootstrap gathered {filled} of {R} replicates"
            )
