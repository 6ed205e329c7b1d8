# xcorr_core/transform/backends/scipy_fft.py
"""
scipy.fft transform backend.

scipy.fft keeps single precision intact (complex64 in, complex64 out) and
can split a transform across worker threads. The threading is internal to
each call, so the engine still sees a blocking operation.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import scipy.fft

from ._inplace import InPlaceTransform


class ScipyTransform(InPlaceTransform):
    """In-place transform backed by scipy.fft."""

    name = "scipy"

    def __init__(self, n: int, dtype: np.dtype | type = np.complex128, workers: int | None = None):
        super().__init__(n, dtype)
        self.workers = workers

    def __repr__(self) -> str:
        return f"ScipyTransform(n={self._n}, dtype={self.dtype}, workers={self.workers})"

    def _fft(self, buffer: np.ndarray) -> np.ndarray:
        return scipy.fft.fft(buffer, workers=self.workers)

    def _ifft(self, buffer: np.ndarray) -> np.ndarray:
        return scipy.fft.ifft(buffer, norm="forward", workers=self.workers)


@dataclass(frozen=True, slots=True)
class ScipyBackend:
    """Plans ScipyTransform instances; sizes come from scipy.fft.next_fast_len."""

    name: str = "scipy"
    workers: int | None = None

    def good_size(self, n: int) -> int:
        if n < 1:
            raise ValueError(f"Transform length must be >= 1, got {n}")
        return int(scipy.fft.next_fast_len(n))

    def plan(self, n: int, dtype: np.dtype) -> ScipyTransform:
        return ScipyTransform(n, dtype, workers=self.workers)
