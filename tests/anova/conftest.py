"""
Shared fixtures for repeated-measures ANOVA tests.

Provides small hand-checkable designs, a noiseless design with a known
effect, and wide arrays for cross-checking sums of squares.
"""

import numpy as np
import pytest


def _long_from_wide(Y, factor_names):
    """Flatten (n, L1, ..., Lk) cell values to one trial per cell."""
    grids = np.meshgrid(*[np.arange(n) for n in Y.shape], indexing='ij')
    subject = np.array([f"s{i}" for i in grids[0].ravel()])
    within = {
        name: grids[j + 1].ravel()
        for j, name in enumerate(factor_names)
    }
    return Y.ravel(), subject, within


@pytest.fixture
def long_from_wide():
    """Helper turning a wide (n, L1, ..., Lk) array into long trials."""
    return _long_from_wide


@pytest.fixture
def rm_hand_2():
    """3 subjects x 2 conditions, SS values computable by hand."""
    Y = np.array([[1.0, 3.0], [2.0, 5.0], [3.0, 4.0]])
    return _long_from_wide(Y, ['condition'])


@pytest.fixture
def rm_wide_2x3():
    """8 subjects x A(2) x B(3) with subject offsets and an A effect."""
    rng = np.random.default_rng(7)
    Y = (
        rng.normal(0.0, 1.0, (8, 2, 3))
        + rng.normal(0.0, 2.0, (8, 1, 1))
        + np.array([0.0, 1.5])[None, :, None]
    )
    return Y


@pytest.fixture
def rm_noiseless():
    """
    layout(2) x size(3), 3 repetitions, no noise.

    Only layout moves the response, scaled per subject by a handicap, so
    layout has error variance and size has neither signal nor error.
    """
    handicap = np.array([1.0, 2.0, 3.0, 4.0])
    s, layout, size, rep = np.meshgrid(
        np.arange(4), np.arange(2), np.arange(3), np.arange(3), indexing='ij',
    )
    s, layout, size = s.ravel(), layout.ravel(), size.ravel()
    y = 30.0 + 2.0 * handicap[s] + handicap[s] * 0.4 * layout
    subject = np.array([f"S{i}" for i in s])
    return y, subject, {'layout': layout, 'size': size}
