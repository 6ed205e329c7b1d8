# xcorr_core/transform/backends/__init__.py
"""
Built-in transform backends.

All backends are registered at import time so the registry is populated
when any code imports from the transform package.
"""

from __future__ import annotations

from ..registry import register
from .numpy_fft import NumpyBackend, NumpyTransform
from .scipy_fft import ScipyBackend, ScipyTransform

# Order here determines iteration order in list_backends().
register(ScipyBackend)
register(NumpyBackend)

__all__ = [
    "NumpyBackend",
    "NumpyTransform",
    "ScipyBackend",
    "ScipyTransform",
]
