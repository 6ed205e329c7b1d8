# xcorr_core/engine/__init__.py
"""Correlation engine: padding, spectral product and the CrossCorrelator."""

from __future__ import annotations

from .correlator import CrossCorrelator
from .pad import pad_into
from .spectrum import multiply_conjugate

__all__ = [
    "CrossCorrelator",
    "multiply_conjugate",
    "pad_into",
]
