"""
Repeated-measures ANOVA for fully within-subjects designs.

Works on the aggregated subjects x cells table. Every effect (each
non-empty subset of factors) is isolated with an orthonormal contrast
matrix: Helmert contrasts on the factors in the effect, the normalized
mean vector on the others. With Z = Y @ C_E,

    SS_E       = n * |mean(Z)|^2
    SS_{E x S} = |Z - mean(Z)|^2     (error term of E)

Generalized eta-squared follows Olejnik & Algina (2003) with all factors
measured: every subject-related source of variance goes in the
denominator,

    ges_E = SS_E / (SS_E + SS_subjects + sum_E' SS_{E' x S})

Corrections:
    - Greenhouse-Geisser: conservative, always ≤ 1
    - Huynh-Feldt: less conservative, can slightly exceed 1 (capped at 1.0)
    - 'auto': use GG when Mauchly p < 0.05, otherwise uncorrected
"""

from functools import lru_cache
from itertools import combinations

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyeffectsize.core.exceptions import NumericalError
from pyeffectsize.anova._common import (
    AnovaRMParams,
    EffectRow,
    SphericitySummary,
)
from pyeffectsize.anova.design import RMDesign

# Sums of squares smaller than this fraction of SS_total are rounding noise
_ZERO_SS_RTOL = 1e-12


def effect_terms(n_factors: int) -> tuple[tuple[int, ...], ...]:
    """
    All effects as tuples of factor indices.

    Ordered by interaction order, then by factor order:
    (0,), (1,), (2,), (0, 1), (0, 2), (1, 2), (0, 1, 2).
    """
    return tuple(
        term
        for order in range(1, n_factors + 1)
        for term in combinations(range(n_factors), order)
    )


def effect_names(factors: tuple[str, ...]) -> tuple[str, ...]:
    """Effect labels in effect_terms() order, e.g. 'layout:size'."""
    return tuple(
        ":".join(factors[j] for j in term)
        for term in effect_terms(len(factors))
    )


def decompose(
    Y: NDArray,
    n_levels: tuple[int, ...],
) -> tuple[NDArray, NDArray, NDArray, NDArray, float, float]:
    """
    Partition within-subject variance into effect and error components.

    Args:
        Y: (n_subjects, n_cells) aggregated values, cells in C order
        n_levels: Number of levels per factor

    Returns:
        (ss_effect, ss_error, num_df, den_df, ss_subjects, ss_total),
        arrays in effect_terms() order
    """
    n = Y.shape[0]
    terms = effect_terms(len(n_levels))

    ss_total = float(np.sum((Y - Y.mean()) ** 2))
    tol = _ZERO_SS_RTOL * ss_total

    ss_effect = np.empty(len(terms), dtype=np.float64)
    ss_error = np.empty(len(terms), dtype=np.float64)
    num_df = np.empty(len(terms), dtype=np.int64)

    for i, term in enumerate(terms):
        Z = Y @ _effect_contrasts(n_levels, term)
        z_bar = Z.mean(axis=0)
        ss_effect[i] = n * float(z_bar @ z_bar)
        ss_error[i] = float(np.sum((Z - z_bar) ** 2))
        num_df[i] = Z.shape[1]

    Z_subj = Y @ _effect_contrasts(n_levels, ())
    ss_subjects = float(np.sum((Z_subj - Z_subj.mean()) ** 2))

    ss_effect[ss_effect < tol] = 0.0
    ss_error[ss_error < tol] = 0.0
    if ss_subjects < tol:
        ss_subjects = 0.0

    den_df = num_df * (n - 1)
    return ss_effect, ss_error, num_df, den_df, ss_subjects, ss_total


def f_and_ges(
    ss_effect: NDArray,
    ss_error: NDArray,
    num_df: NDArray,
    den_df: NDArray,
    ss_subjects: float,
    names: tuple[str, ...] | None = None,
) -> tuple[NDArray, NDArray]:
    """
    F-ratios and generalized eta-squared from a decomposition.

    Zero error variance gives F = inf when the effect has variance and
    F = 0 when it has none.

    Raises:
        NumericalError: If the ges denominator of any effect is zero
    """
    denom = ss_effect + ss_subjects + float(np.sum(ss_error))
    if np.any(denom <= 0):
        bad = int(np.argmax(denom <= 0))
        label = names[bad] if names is not None else f"effect {bad}"
        raise NumericalError(
            f"{label}: generalized eta-squared undefined, no variance "
            f"in effect, subjects, or error terms"
        )
    ges = ss_effect / denom

    ms_effect = ss_effect / num_df
    ms_error = ss_error / den_df
    with np.errstate(divide='ignore', invalid='ignore'):
        f_values = np.where(
            ms_error > 0,
            ms_effect / ms_error,
            np.where(ms_effect > 0, np.inf, 0.0),
        )
    return f_values, ges


def estimate_effects(
    Y: NDArray,
    n_levels: tuple[int, ...],
    names: tuple[str, ...] | None = None,
) -> tuple[NDArray, NDArray]:
    """
    F and ges for every effect of a subjects x cells table.

    This is the kernel re-run on every bootstrap replicate. It is a pure
    function of its inputs.

    Args:
        Y: (n_subjects, n_cells) aggregated values
        n_levels: Number of levels per factor
        names: Effect labels used in error messages

    Returns:
        (f_values, ges), each shape (n_effects,)
    """
    ss_effect, ss_error, num_df, den_df, ss_subjects, _ = decompose(Y, n_levels)
    return f_and_ges(ss_effect, ss_error, num_df, den_df, ss_subjects, names=names)


def repeated_measures_anova(
    design: RMDesign,
    *,
    correction: str = 'auto',
    sphericity: bool = True,
) -> AnovaRMParams:
    """
    Compute repeated-measures ANOVA with generalized eta-squared.

    Args:
        design: Fully crossed RMDesign
        correction: 'none', 'gg', 'hf', or 'auto'; selects p_corrected
        sphericity: Run Mauchly's test and GG/HF corrections

    Returns:
        AnovaRMParams with one EffectRow per effect

    Raises:
        NumericalError: If the data carry no variance to decompose
    """
    if correction not in ('none', 'gg', 'hf', 'auto'):
        raise ValueError(f"correction must be 'none', 'gg', 'hf', or 'auto', got {correction!r}")

    Y = design.wide()
    n = design.n_subjects
    n_levels = design.n_levels
    terms = effect_terms(len(n_levels))
    names = effect_names(design.factors)

    ss_effect, ss_error, num_df, den_df, ss_subjects, ss_total = decompose(Y, n_levels)
    f_values, ges = f_and_ges(
        ss_effect, ss_error, num_df, den_df, ss_subjects, names=names,
    )

    table_rows: list[EffectRow] = []
    spher_rows: list[SphericitySummary] = []
    zero_error: list[str] = []

    for i, (term, name) in enumerate(zip(terms, names)):
        df1 = int(num_df[i])
        df2 = int(den_df[i])
        f_val = float(f_values[i])

        if ss_error[i] == 0.0:
            zero_error.append(name)

        p_val = float(sp_stats.f.sf(f_val, df1, df2))

        mauchly_p = 1.0
        if sphericity and df1 >= 2:
            scores = Y @ _effect_contrasts(n_levels, term)
            mauchly_w, mauchly_p, gg_eps, hf_eps = mauchly_test(scores)
            spher_rows.append(SphericitySummary(
                term=name,
                mauchly_w=mauchly_w,
                p_value=mauchly_p,
                gg_epsilon=gg_eps,
                hf_epsilon=hf_eps,
            ))
        else:
            # One contrast (or no test requested): sphericity holds trivially
            gg_eps = 1.0
            hf_eps = 1.0

        gg_p = float(sp_stats.f.sf(f_val, gg_eps * df1, gg_eps * df2))
        hf_p = float(sp_stats.f.sf(f_val, hf_eps * df1, hf_eps * df2))

        if correction == 'gg':
            p_corr = gg_p
        elif correction == 'hf':
            p_corr = hf_p
        elif correction == 'auto' and mauchly_p < 0.05:
            p_corr = gg_p
        else:
            p_corr = p_val

        effect_plus_error = ss_effect[i] + ss_error[i]
        table_rows.append(EffectRow(
            term=name,
            num_df=df1,
            den_df=df2,
            sum_sq=float(ss_effect[i]),
            error_ss=float(ss_error[i]),
            mean_sq=float(ss_effect[i] / df1),
            error_ms=float(ss_error[i] / df2),
            f_value=f_val,
            p_value=p_val,
            ges=float(ges[i]),
            eta_sq=float(ss_effect[i] / ss_total) if ss_total > 0 else 0.0,
            partial_eta_sq=(
                float(ss_effect[i] / effect_plus_error)
                if effect_plus_error > 0 else 0.0
            ),
            gg_epsilon=gg_eps,
            hf_epsilon=hf_eps,
            gg_p_value=gg_p,
            hf_p_value=hf_p,
            p_corrected=p_corr,
        ))

    return AnovaRMParams(
        table=tuple(table_rows),
        n_subjects=n,
        n_obs=int(design.values.size),
        n_trials=design.n_trials,
        within_factors=design.factors,
        sphericity=tuple(spher_rows),
        correction=correction,
        grand_mean=float(np.mean(Y)),
        ss_subjects=ss_subjects,
        ss_total=ss_total,
        ges={row.term: row.ges for row in table_rows},
        eta_squared={row.term: row.eta_sq for row in table_rows},
        partial_eta_squared={row.term: row.partial_eta_sq for row in table_rows},
        zero_error_terms=tuple(zero_error),
    )


def mauchly_test(
    scores: NDArray,
) -> tuple[float, float, float, float]:
    """
    Mauchly's test of sphericity.

    Tests whether the covariance matrix of the orthonormalized contrast
    scores is proportional to the identity matrix.

    Args:
        scores: (n, p) contrast scores of one effect, p >= 2

    Returns:
        (W, p_value, gg_epsilon, hf_epsilon)
    """
    n, p = scores.shape

    # Covariance matrix of transformed variables
    S = np.cov(scores, rowvar=False, ddof=1)

    # Mauchly's W = det(S) / (trace(S)/p)^p
    trace_S = np.trace(S)
    det_S = np.linalg.det(S)
    mean_eigenvalue = trace_S / p

    if mean_eigenvalue <= 0:
        return 0.0, 0.0, 1.0 / p, 1.0 / p

    W = det_S / (mean_eigenvalue ** p)
    W = max(0.0, min(1.0, W))  # numerical safety

    # Chi-squared approximation for p-value
    # df = p*(p+1)/2 - 1
    f = 1.0 - (2.0 * p * p + p + 2.0) / (6.0 * p * (n - 1.0))
    df_chi = p * (p + 1) // 2 - 1

    if W > 0 and df_chi > 0:
        chi_sq = -f * (n - 1.0) * np.log(W)
        p_value = float(sp_stats.chi2.sf(chi_sq, df_chi))
    else:
        p_value = 0.0

    gg_eps = _greenhouse_geisser_epsilon(S, p)
    hf_eps = _huynh_feldt_epsilon(gg_eps, p, n)

    return float(W), p_value, gg_eps, hf_eps


@lru_cache(maxsize=256)
def _effect_contrasts(n_levels: tuple[int, ...], term: tuple[int, ...]) -> NDArray:
    """
    Orthonormal (n_cells, df) contrast matrix isolating one effect.

    term=() gives the normalized all-ones vector (subject means).
    Cached per design shape; the returned array is read-only.
    """
    C = np.ones((1, 1), dtype=np.float64)
    for j, k in enumerate(n_levels):
        if j in term:
            block = _helmert_contrasts(k)
        else:
            block = np.full((k, 1), 1.0 / np.sqrt(k))
        C = np.kron(C, block)
    C.flags.writeable = False
    return C


def _helmert_contrasts(k: int) -> NDArray:
    """
    Generate (k, k-1) orthonormal Helmert contrast matrix.

    Columns are orthogonal to each other and to the constant vector.
    """
    C = np.zeros((k, k - 1), dtype=np.float64)

    for j in range(k - 1):
        # Helmert contrast j: compare level j+1 to the mean of levels 0..j
        C[:j + 1, j] = -1.0 / (j + 1)
        C[j + 1, j] = 1.0
        norm = np.sqrt(np.sum(C[:, j] ** 2))
        C[:, j] /= norm

    return C


def _greenhouse_geisser_epsilon(
    S: NDArray,
    p: int,
) -> float:
    """
    Greenhouse-Geisser epsilon correction.

    epsilon = trace(S)^2 / (p * trace(S @ S))

    Returns:
        epsilon in [1/p, 1]
    """
    trace_S = np.trace(S)
    trace_S2 = np.trace(S @ S)

    if trace_S2 == 0:
        return 1.0 / p

    eps = (trace_S ** 2) / (p * trace_S2)
    return float(max(1.0 / p, min(1.0, eps)))


def _huynh_feldt_epsilon(
    gg_eps: float,
    p: int,
    n: int,
) -> float:
    """
    Huynh-Feldt epsilon correction.

    epsilon_HF = (n * p * gg_eps - 2) / (p * (n - 1 - p * gg_eps))

    Less conservative than GG. Capped at 1.0.

    Args:
        gg_eps: Greenhouse-Geisser epsilon
        p: Effect degrees of freedom
        n: Number of subjects

    Returns:
        epsilon in [gg_eps, 1.0]
    """
    numerator = n * p * gg_eps - 2.0
    denominator = p * (n - 1.0 - p * gg_eps)

    if denominator <= 0:
        return 1.0

    hf_eps = numerator / denominator
    return float(max(gg_eps, min(1.0, hf_eps)))
