"""
Tests for the subject-level bootstrap of generalized eta-squared.

Validates:
    - t0 equals the point estimate, t has one column per effect
    - Bias and SE definitions
    - Seed reproducibility, independence from n_jobs
    - A failing replicate aborts the run with ReplicateFailure
    - Design validation
"""

import numpy as np
import pytest

from pyeffectsize.anova import RMDesign, anova_rm_design
from pyeffectsize.core.exceptions import (
    NumericalError,
    ReplicateFailure,
    ValidationError,
)
from pyeffectsize.montecarlo import boot_ges
from pyeffectsize.montecarlo.design import DEFAULT_R, SubjectBootstrapDesign


class TestBootGes:

    def test_shapes(self, small_design):
        result = boot_ges(small_design, R=50, seed=1)
        assert result.effects == ('layout', 'size', 'layout:size')
        assert result.t.shape == (50, 3)
        assert result.f_values.shape == (50, 3)
        assert result.t0.shape == (3,)
        assert result.R == 50

    def test_t0_is_point_estimate(self, small_design):
        result = boot_ges(small_design, R=10, seed=1)
        point = anova_rm_design(small_design)
        np.testing.assert_allclose(
            result.t0, [point.ges[e] for e in result.effects], rtol=1e-12,
        )
        np.testing.assert_allclose(
            result.f0, [point[e].f_value for e in result.effects], rtol=1e-12,
        )

    def test_replicates_are_proportions(self, small_design):
        result = boot_ges(small_design, R=100, seed=2)
        assert np.all(result.t >= 0.0)
        assert np.all(result.t <= 1.0)

    def test_bias_and_se(self, small_design):
        result = boot_ges(small_design, R=100, seed=3)
        np.testing.assert_allclose(result.bias, result.t.mean(axis=0) - result.t0)
        np.testing.assert_allclose(result.se, result.t.std(axis=0, ddof=1))

    def test_single_replicate_has_zero_se(self, small_design):
        result = boot_ges(small_design, R=1, seed=0)
        np.testing.assert_array_equal(result.se, 0.0)

    def test_replicates_by_name(self, small_design):
        result = boot_ges(small_design, R=20, seed=4)
        np.testing.assert_array_equal(result.replicates('size'), result.t[:, 1])
        with pytest.raises(KeyError, match="layout"):
            result.replicates('color')

    def test_metadata(self, small_design):
        result = boot_ges(small_design, R=20, seed=4)
        assert result.seed == 4
        assert result.n_jobs == 1
        assert result.backend_name == 'cpu_subject_bootstrap'
        assert result.info['n_subjects'] == 8
        assert 'bootstrap_replicates' in result.timing
        assert result.ci is None

    def test_summary(self, small_design):
        result = boot_ges(small_design, R=20, seed=4)
        text = result.summary()
        assert "SUBJECT-LEVEL NONPARAMETRIC BOOTSTRAP" in text
        assert "layout:size" in text
        assert "R=20" in repr(result)


class TestReproducibility:

    def test_same_seed_same_replicates(self, small_design):
        a = boot_ges(small_design, R=30, seed=123)
        b = boot_ges(small_design, R=30, seed=123)
        np.testing.assert_array_equal(a.t, b.t)

    def test_different_seed_differs(self, small_design):
        a = boot_ges(small_design, R=30, seed=123)
        b = boot_ges(small_design, R=30, seed=124)
        assert not np.array_equal(a.t, b.t)

    def test_prefix_stable_in_R(self, small_design):
        # Replicate b draws from the b-th spawned seed regardless of R
        short = boot_ges(small_design, R=10, seed=9)
        long = boot_ges(small_design, R=25, seed=9)
        np.testing.assert_array_equal(short.t, long.t[:10])

    def test_parallel_matches_serial(self, small_design):
        serial = boot_ges(small_design, R=12, n_jobs=1, seed=5)
        parallel = boot_ges(small_design, R=12, n_jobs=2, seed=5)
        assert parallel.n_jobs == 2
        np.testing.assert_array_equal(serial.t, parallel.t)
        np.testing.assert_array_equal(serial.f_values, parallel.f_values)

    def test_explicit_seed_is_entropy(self, small_design):
        result = boot_ges(small_design, R=5, seed=77)
        assert result.entropy == 77
        assert result.info['entropy'] == 77

    def test_unseeded_run_reproducible_from_entropy(self, small_design):
        first = boot_ges(small_design, R=15)
        assert first.seed is None
        assert isinstance(first.entropy, int)

        again = boot_ges(small_design, R=15, seed=first.entropy)
        np.testing.assert_array_equal(first.t, again.t)


class TestReplicateFailure:

    def test_failure_aborts_run(self, small_design, monkeypatch):
        from pyeffectsize.montecarlo.backends import cpu

        real = cpu.estimate_effects
        calls = {'n': 0}

        def flaky(Y, n_levels, names=None):
            calls['n'] += 1
            # call 1 is the point estimate, call 3 is replicate 1
            if calls['n'] == 3:
                raise NumericalError("ges denominator is zero")
            return real(Y, n_levels, names)

        monkeypatch.setattr(cpu, 'estimate_effects', flaky)

        with pytest.raises(ReplicateFailure) as exc_info:
            boot_ges(small_design, R=10, seed=0)

        err = exc_info.value
        assert err.replicate == 1
        assert "denominator" in err.reason
        assert isinstance(err.__cause__, NumericalError)

    def test_degenerate_sample_names_effect(self, constant_subject_design):
        # Drawing subject 'a' twice leaves no variance anywhere
        with pytest.raises(ReplicateFailure) as exc_info:
            boot_ges(constant_subject_design, R=40, seed=1)

        err = exc_info.value
        assert err.replicate is not None
        assert err.reason.startswith("cond:")
        assert isinstance(err.__cause__, NumericalError)

    def test_failure_in_worker_process(self, constant_subject_design):
        with pytest.raises(ReplicateFailure) as exc_info:
            boot_ges(constant_subject_design, R=40, n_jobs=2, seed=1)

        err = exc_info.value
        assert err.replicate is not None
        assert 0 <= err.replicate < 40
        assert "cond" in err.reason


class TestValidation:

    @pytest.mark.parametrize("R", [0, -5, 2.5, True, "100"])
    def test_bad_R(self, small_design, R):
        with pytest.raises(ValidationError, match="R must be"):
            boot_ges(small_design, R=R)

    @pytest.mark.parametrize("n_jobs", [0, -2, 1.5])
    def test_bad_n_jobs(self, small_design, n_jobs):
        with pytest.raises(ValidationError, match="n_jobs"):
            boot_ges(small_design, R=5, n_jobs=n_jobs)

    @pytest.mark.parametrize("seed", [-1, 1.5, "42"])
    def test_bad_seed(self, small_design, seed):
        with pytest.raises(ValidationError, match="seed"):
            boot_ges(small_design, R=5, seed=seed)

    def test_design_type(self):
        with pytest.raises(ValidationError, match="RMDesign"):
            boot_ges({'time': [1.0, 2.0]}, R=5)

    def test_default_R(self, small_design):
        design = SubjectBootstrapDesign.for_design(small_design)
        assert design.R == DEFAULT_R == 5000

    def test_n_jobs_capped_at_R(self, small_design):
        design = SubjectBootstrapDesign.for_design(small_design, 3, n_jobs=8)
        assert design.n_jobs == 3

    def test_all_cpus(self, small_design, monkeypatch):
        monkeypatch.setattr('os.cpu_count', lambda: 6)
        design = SubjectBootstrapDesign.for_design(small_design, 100, n_jobs=-1)
        assert design.n_jobs == 6

    def test_numpy_integers_accepted(self, small_design):
        design = SubjectBootstrapDesign.for_design(
            small_design, np.int64(20), seed=np.int32(3),
        )
        assert design.R == 20
        assert type(design.R) is int
        assert design.seed == 3

    def test_design_is_frozen(self, small_design):
        assert isinstance(small_design, RMDesign)
        design = SubjectBootstrapDesign.for_design(small_design, 10)
        with pytest.raises(AttributeError):
            design.R = 20
