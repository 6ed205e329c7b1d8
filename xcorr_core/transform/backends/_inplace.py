# xcorr_core/transform/backends/_inplace.py
"""
Shared base for built-in transforms.

numpy.fft and scipy.fft return new arrays; InPlaceTransform validates the
caller's buffer, runs the library call and copies the result back so the
TransformCapability in-place contract holds.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from ...errors import BackendError


class InPlaceTransform(ABC):
    """Abstract base class for fixed-length in-place transforms."""

    name: str = "base"

    def __init__(self, n: int, dtype: np.dtype | type = np.complex128):
        if n < 1:
            raise BackendError(f"[{self.name}] Transform length must be >= 1, got {n}")
        dtype = np.dtype(dtype)
        if dtype.kind != "c":
            raise BackendError(f"[{self.name}] Transform dtype must be complex, got {dtype}")
        self._n = int(n)
        self.dtype = dtype

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self._n}, dtype={self.dtype})"

    def length(self) -> int:
        return self._n

    def forward(self, buffer: np.ndarray) -> None:
        self._check(buffer)
        np.copyto(buffer, self._fft(buffer), casting="same_kind")

    def inverse(self, buffer: np.ndarray) -> None:
        self._check(buffer)
        np.copyto(buffer, self._ifft(buffer), casting="same_kind")

    def _check(self, buffer: np.ndarray) -> None:
        if not isinstance(buffer, np.ndarray) or buffer.ndim != 1:
            raise BackendError(f"[{self.name}] Buffer must be a 1-D numpy array")
        if buffer.shape[0] != self._n:
            raise BackendError(
                f"[{self.name}] Buffer length {buffer.shape[0]} doesn't match "
                f"transform length {self._n}"
            )
        if buffer.dtype.kind != "c":
            raise BackendError(
                f"[{self.name}] Buffer must be complex, got {buffer.dtype}"
            )
        if not buffer.flags.writeable:
            raise BackendError(f"[{self.name}] Buffer is read-only")

    @abstractmethod
    def _fft(self, buffer: np.ndarray) -> np.ndarray:
        """Forward DFT of buffer as a new array."""

    @abstractmethod
    def _ifft(self, buffer: np.ndarray) -> np.ndarray:
        """Unnormalized inverse DFT of buffer as a new array."""
