# xcorr_core/models/types.py
"""
Result types shared across the package.

These dataclasses are small immutable values returned by mode and
alignment functions.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CorrelationWindow:
    """Slice of the full linear correlation returned by a mode."""

    offset: int  # Start index within the full (len_a + len_b - 1) result
    length: int  # Number of samples in the window

    @property
    def stop(self) -> int:
        return self.offset + self.length

    def as_slice(self) -> slice:
        return slice(self.offset, self.stop)


@dataclass(frozen=True, slots=True)
class LagEstimate:
    """Best alignment found by find_lag."""

    lag: float  # Shift of dst relative to src in samples (sub-sample if peak_fit)
    index: int  # Index of the peak in the correlation output
    peak_value: float  # Correlation value at the peak (signed, or magnitude for complex input)
    confidence: float  # Peak-to-sidelobe score (0-100)
