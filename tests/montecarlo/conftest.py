"""
Shared fixtures for subject-level bootstrap tests.
"""

import numpy as np
import pytest

from pyeffectsize.anova import RMDesign


@pytest.fixture
def small_design():
    """8 subjects x layout(2) x size(3), already aggregated."""
    rng = np.random.default_rng(11)
    handicap = rng.uniform(0.5, 1.5, 8)
    layout = np.array([0.0, 1.0])[None, :, None]
    size = np.array([0.0, 1.0, 2.0])[None, None, :]
    h = handicap[:, None, None]
    values = (
        30.0 + 2.0 * h
        + h * (0.4 * layout + 0.2 * size + 0.6 * layout * size)
        + rng.normal(0.0, 0.3, (8, 2, 3))
    )

    s, a, b = np.meshgrid(np.arange(8), np.arange(2), np.arange(3), indexing='ij')
    return RMDesign.for_repeated_measures(
        values.ravel(),
        np.array([f"S{i}" for i in s.ravel()]),
        {'layout': a.ravel(), 'size': b.ravel()},
    )


@pytest.fixture
def constant_subject_design():
    """2 subjects x cond(2); subject 'a' has no variance."""
    return RMDesign.for_repeated_measures(
        np.array([1.0, 1.0, 2.0, 5.0]),
        np.array(['a', 'a', 'b', 'b']),
        {'cond': np.array(['x', 'y', 'x', 'y'])},
    )
