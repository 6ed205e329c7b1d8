# xcorr_core/alignment.py
"""
Lag estimation on top of the correlation engine.

find_lag() answers "by how many samples is src shifted relative to dst":
a positive lag means src[j] ~ dst[j - lag], i.e. src trails dst.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .models import LagEstimate

if TYPE_CHECKING:
    from numpy.typing import ArrayLike

    from .engine import CrossCorrelator


def _main_lobe(magnitude: np.ndarray, peak_idx: int) -> tuple[int, int]:
    """[start, stop) of the samples falling strictly away from the peak."""
    start = peak_idx
    while start > 0 and magnitude[start - 1] < magnitude[start]:
        start -= 1
    stop = peak_idx + 1
    while stop < magnitude.shape[0] and magnitude[stop] < magnitude[stop - 1]:
        stop += 1
    return start, stop


def peak_confidence(values: np.ndarray, peak_idx: int | np.intp) -> float:
    """
    Peak-to-sidelobe score of one peak in a correlation result.

    The main lobe is every sample that falls strictly away from the
    peak on either side. The score is 100 * (1 - sidelobe / peak), where
    sidelobe is the largest magnitude outside the main lobe: 100 for an
    isolated peak, 0 when another lobe is as tall.

    Args:
        values: Correlation output (real or complex).
        peak_idx: Index of the peak in values.

    Returns:
        Confidence score in 0-100 (0 for an all-zero result).
    """
    magnitude = np.abs(values)
    peak_idx = int(peak_idx)
    peak = float(magnitude[peak_idx])
    if peak == 0.0:
        return 0.0

    start, stop = _main_lobe(magnitude, peak_idx)
    sidelobe = max(
        float(np.max(magnitude[:start], initial=0.0)),
        float(np.max(magnitude[stop:], initial=0.0)),
    )
    return float(min(100.0, max(0.0, 100.0 * (1.0 - sidelobe / peak))))


def find_lag(
    correlator: CrossCorrelator,
    src: ArrayLike,
    dst: ArrayLike,
    *,
    peak_fit: bool = False,
) -> LagEstimate:
    """
    Find the lag at which dst best matches src.

    Args:
        correlator: Engine built for len(src), len(dst); any mode
        src: Source sequence
        dst: Target sequence
        peak_fit: Refine the lag with a parabola through the peak and its
            two neighbours (sub-sample accuracy)

    Returns:
        LagEstimate with lag in samples, the peak index and value, and a
        0-100 confidence
    """
    values = correlator.correlate(src, dst)
    lags = correlator.lags
    k = int(np.argmax(np.abs(values)))
    lag = float(lags[k])

    if peak_fit and 0 < k < values.shape[0] - 1:
        y1, y2, y3 = np.abs(values[k - 1 : k + 2])
        curvature = y1 - 2 * y2 + y3
        if curvature != 0:
            delta = 0.5 * (y1 - y3) / curvature
            if -1 < delta < 1:
                lag += float(delta)

    peak_value = values[k]
    if np.iscomplexobj(peak_value):
        peak_value = np.abs(peak_value)

    return LagEstimate(
        lag=lag,
        index=k,
        peak_value=float(peak_value),
        confidence=peak_confidence(values, k),
    )
