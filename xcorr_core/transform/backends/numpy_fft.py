# xcorr_core/transform/backends/numpy_fft.py
"""numpy.fft (pocketfft) transform backend."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..sizes import next_good_size
from ._inplace import InPlaceTransform


class NumpyTransform(InPlaceTransform):
    """In-place transform backed by numpy.fft."""

    name = "numpy"

    def _fft(self, buffer: np.ndarray) -> np.ndarray:
        return np.fft.fft(buffer)

    def _ifft(self, buffer: np.ndarray) -> np.ndarray:
        # norm="forward" leaves the inverse unscaled
        return np.fft.ifft(buffer, norm="forward")


@dataclass(frozen=True, slots=True)
class NumpyBackend:
    """Plans NumpyTransform instances; sizes round up to pure powers of 2, 3 or 5."""

    name: str = "numpy"

    def good_size(self, n: int) -> int:
        return next_good_size(n)

    def plan(self, n: int, dtype: np.dtype) -> NumpyTransform:
        return NumpyTransform(n, dtype)
