# tests/conftest.py
import numpy as np
import pytest

from xcorr_core import CrossCorrelator, TransformPlanner


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def signals(rng):
    """Random real/complex sequences of assorted lengths."""
    return {
        'long': rng.standard_normal(50),
        'short': rng.standard_normal(7),
        'even_short': rng.standard_normal(4),
        'long_f32': rng.standard_normal(50).astype(np.float32),
        'short_f32': rng.standard_normal(7).astype(np.float32),
        'long_c': rng.standard_normal(30) + 1j * rng.standard_normal(30),
        'short_c': rng.standard_normal(6) + 1j * rng.standard_normal(6),
    }


@pytest.fixture
def planner():
    return TransformPlanner('numpy')


@pytest.fixture
def make_engine():
    """Helper: CrossCorrelator.create with the numpy backend unless told otherwise."""
    def make(len_a, len_b, mode='full', **kwargs):
        kwargs.setdefault('backend', 'numpy')
        return CrossCorrelator.create(len_a, len_b, mode, **kwargs)
    return make
