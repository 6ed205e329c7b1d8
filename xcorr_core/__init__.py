# xcorr_core/__init__.py
"""
FFT-based cross-correlation of 1-D signals.

Usage:
    from xcorr_core import CrossCorrelator, CorrelationMode

    # Build once for fixed input lengths, reuse for many data pairs
    engine = CrossCorrelator.create(1024, 64, CorrelationMode.VALID)
    result = engine.correlate(signal, template)

    # Or one-shot, scipy.signal.correlate style
    result = correlate(signal, template, mode="same")

    # Share transform plans between engines of the same working length
    planner = TransformPlanner("scipy", workers=4)
    a = CrossCorrelator.create(500, 20, planner=planner)
    b = CrossCorrelator.create(500, 20, "same", planner=planner)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .alignment import find_lag, peak_confidence
from .engine import CrossCorrelator
from .errors import (
    BackendError,
    CorrelationError,
    InsufficientSizeError,
    InvalidModeError,
    LengthMismatchError,
    SizeMismatchError,
)
from .mode import CorrelationMode
from .models import CorrelationWindow, CorrelatorSettings, LagEstimate, Precision
from .transform import (
    TransformBackend,
    TransformCapability,
    TransformPlanner,
    get_backend,
    list_backends,
    next_good_size,
)

if TYPE_CHECKING:
    from numpy.typing import ArrayLike

__version__ = "0.1.0"


def _infer_precision(a: np.ndarray, b: np.ndarray) -> Precision:
    if np.iscomplexobj(a) or np.iscomplexobj(b):
        return Precision.COMPLEX128
    if a.dtype == np.float32 and b.dtype == np.float32:
        return Precision.FLOAT32
    return Precision.FLOAT64


def correlate(
    a: ArrayLike,
    b: ArrayLike,
    mode: CorrelationMode | str = CorrelationMode.FULL,
    *,
    precision: Precision | str | None = None,
    backend: str | TransformBackend | None = None,
) -> np.ndarray:
    """
    One-shot cross-correlation of a against b.

    Builds a throwaway CrossCorrelator; keep one around instead when
    correlating many pairs of the same lengths.

    Args:
        a: Source sequence
        b: Target sequence
        mode: "full", "same" or "valid"
        precision: Inferred from the inputs when omitted (complex input ->
            complex128, two float32 inputs -> float32, else float64)
        backend: Transform backend name or instance (default "scipy")

    Returns:
        Correlation result, equal to numpy.correlate(a, b, mode) up to
        rounding for inputs where len(a) >= len(b)
    """
    a_arr = np.asarray(a)
    b_arr = np.asarray(b)
    if precision is None:
        precision = _infer_precision(a_arr, b_arr)

    engine = CrossCorrelator.create(
        a_arr.shape[0] if a_arr.ndim else 0,
        b_arr.shape[0] if b_arr.ndim else 0,
        mode,
        precision=precision,
        backend=backend,
    )
    return engine.correlate(a_arr, b_arr)


__all__ = [
    # Engine
    "CrossCorrelator",
    "CorrelationMode",
    "correlate",
    # Alignment
    "find_lag",
    "peak_confidence",
    # Models
    "CorrelationWindow",
    "CorrelatorSettings",
    "LagEstimate",
    "Precision",
    # Transforms
    "TransformBackend",
    "TransformCapability",
    "TransformPlanner",
    "get_backend",
    "list_backends",
    "next_good_size",
    # Errors
    "BackendError",
    "CorrelationError",
    "InsufficientSizeError",
    "InvalidModeError",
    "LengthMismatchError",
    "SizeMismatchError",
]
