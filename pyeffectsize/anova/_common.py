"""
Common data types for repeated-measures ANOVA.

Contains the frozen parameter payloads that go inside Result[P] envelopes.
Each payload is a pure data container: no methods, no computation.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class EffectRow:
    """
    One effect (main effect or interaction) of a within-subjects ANOVA.

    The error term of each effect is its own subject x effect interaction.
    """
    term: str                  # 'layout', 'layout:size', ...
    num_df: int
    den_df: int
    sum_sq: float
    error_ss: float            # SS of subject x effect
    mean_sq: float
    error_ms: float
    f_value: float             # inf when error_ss == 0 < sum_sq
    p_value: float
    ges: float                 # generalized eta-squared
    eta_sq: float
    partial_eta_sq: float
    gg_epsilon: float
    hf_epsilon: float
    gg_p_value: float
    hf_p_value: float
    p_corrected: float         # p-value under the requested correction


@dataclass(frozen=True)
class SphericitySummary:
    """Results of Mauchly's sphericity test for one within-subjects effect."""
    term: str
    mauchly_w: float
    p_value: float
    gg_epsilon: float
    hf_epsilon: float


@dataclass(frozen=True)
class AnovaRMParams:
    """
    Parameter payload for repeated-measures ANOVA.

    Includes per-effect effect sizes, sphericity tests and corrected p-values.
    """
    table: tuple[EffectRow, ...]
    n_subjects: int
    n_obs: int                         # aggregated observations (subjects x cells)
    n_trials: int                      # raw trials before aggregation
    within_factors: tuple[str, ...]
    sphericity: tuple[SphericitySummary, ...]
    correction: str                    # 'none', 'gg', 'hf', 'auto'
    grand_mean: float
    ss_subjects: float
    ss_total: float
    ges: dict[str, float]
    eta_squared: dict[str, float]
    partial_eta_squared: dict[str, float]
    zero_error_terms: tuple[str, ...]  # effects whose error SS vanished
