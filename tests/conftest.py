"""
pytest configuration and shared fixtures.
"""

import numpy as np
import pytest


def simulate_trials(
    rng,
    n_subjects=6,
    n_reps=20,
    noise_sd=1.0,
    layout_coef=0.4,
    size_coef=0.2,
    interaction_coef=0.6,
):
    """
    Long-format trials of a layout(2) x size(3) x color(4) pointing task.

    time = 30 + 2*h + h*(a*layout + b*size + c*layout*size + noise)
    with a per-subject handicap h. Color carries no signal.
    """
    handicap = rng.uniform(0.5, 1.5, n_subjects)
    s, layout, size, color, rep = np.meshgrid(
        np.arange(n_subjects), np.arange(2), np.arange(3), np.arange(4),
        np.arange(n_reps), indexing='ij',
    )
    s, layout, size, color, rep = (a.ravel() for a in (s, layout, size, color, rep))
    h = handicap[s]
    noise = rng.normal(0.0, noise_sd, len(s)) if noise_sd > 0 else np.zeros(len(s))
    time = 30.0 + 2.0 * h + h * (
        layout_coef * layout
        + size_coef * size
        + interaction_coef * layout * size
        + noise
    )
    return {
        'participant': np.array([f"P{i + 1}" for i in s]),
        'layout': layout,
        'size': size,
        'color': color,
        'repetition': rep,
        'time': time,
    }


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def hci_trials():
    """6 subjects x layout x size x color x 20 repetitions, noisy."""
    return simulate_trials(np.random.default_rng(2024), noise_sd=0.5)


@pytest.fixture
def hci_design(hci_trials):
    from pyeffectsize.anova import RMDesign
    return RMDesign.from_data(
        hci_trials, dv='time', subject='participant',
        within=['layout', 'size', 'color'],
    )
