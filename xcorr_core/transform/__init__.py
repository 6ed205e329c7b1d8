# xcorr_core/transform/__init__.py
"""
Spectral transform module with pluggable backends.

The correlation engine treats the FFT as an opaque capability. This package
defines that capability (TransformCapability), the factory protocol that
plans it (TransformBackend), the built-in numpy/scipy backends and a
planner for sharing plans between correlators.

Usage:
    from xcorr_core.transform import get_backend, TransformPlanner

    backend = get_backend("scipy", workers=4)
    n = backend.good_size(1000)
    capability = backend.plan(n, np.complex128)

    # Share plans across correlators of the same working length
    planner = TransformPlanner("numpy")
"""

from __future__ import annotations

from ._base import TransformBackend, TransformCapability
from .backends import NumpyBackend, NumpyTransform, ScipyBackend, ScipyTransform
from .planner import TransformPlanner
from .registry import DEFAULT_BACKEND, backend_accepts, get_backend, list_backends, register
from .sizes import next_good_size

__all__ = [
    # Protocols
    "TransformBackend",
    "TransformCapability",
    # Registry
    "DEFAULT_BACKEND",
    "backend_accepts",
    "get_backend",
    "list_backends",
    "register",
    # Planning
    "TransformPlanner",
    "next_good_size",
    # Built-in backends
    "NumpyBackend",
    "NumpyTransform",
    "ScipyBackend",
    "ScipyTransform",
]
