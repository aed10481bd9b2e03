"""
Tests for the Result[P] envelope.

Validates:
    - Generic type parameter works with arbitrary payload types
    - Frozen immutability
    - Default warnings and has_warning()
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from pyeffectsize.core.result import Result


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


class TestResultConstruction:

    def test_basic_creation(self):
        result = Result(
            params=FakeParams(value=0.42),
            info={"design_type": "rm"},
            timing={"total_seconds": 0.01},
            backend_name="cpu_rm",
        )
        assert result.params.value == 0.42
        assert result.info["design_type"] == "rm"
        assert result.timing["total_seconds"] == 0.01
        assert result.backend_name == "cpu_rm"

    def test_timing_optional(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="x")
        assert result.timing is None

    def test_warnings_default_empty(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="x")
        assert result.warnings == ()


class TestImmutability:

    def test_cannot_reassign_params(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="x")
        with pytest.raises(FrozenInstanceError):
            result.params = FakeParams(2.0)


class TestHasWarning:

    @pytest.fixture
    def result(self):
        return Result(
            params=FakeParams(1.0),
            info={},
            timing=None,
            backend_name="x",
            warnings=(
                "color: zero error variance, F is not a finite ratio",
                "percentile 0.025 clamped to observed minimum",
            ),
        )

    def test_substring_match(self, result):
        assert result.has_warning("zero error variance")
        assert result.has_warning("clamped")

    def test_no_match(self, result):
        assert not result.has_warning("did not converge")
