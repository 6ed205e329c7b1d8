# xcorr_core/transform/_base.py
"""
Protocols for spectral transform backends.

The engine never performs an FFT itself. It drives objects satisfying
TransformCapability, which are produced by a TransformBackend for one
fixed length.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import numpy as np


@runtime_checkable
class TransformCapability(Protocol):
    """Fixed-length, in-place forward/inverse DFT."""

    def forward(self, buffer: np.ndarray) -> None:
        """
        Replace buffer with its forward DFT.

        Args:
            buffer: 1-D complex array of exactly length() elements

        Raises:
            BackendError: If the buffer is unusable or the transform fails
        """
        ...

    def inverse(self, buffer: np.ndarray) -> None:
        """
        Replace buffer with its unnormalized inverse DFT.

        The 1/N scale is NOT applied; the engine owns normalization.
        """
        ...

    def length(self) -> int:
        """Transform length N this capability was planned for."""
        ...


@runtime_checkable
class TransformBackend(Protocol):
    """Factory that plans TransformCapability instances."""

    @property
    def name(self) -> str:
        """Registry name (e.g. 'scipy')."""
        ...

    def good_size(self, n: int) -> int:
        """Smallest length >= n this backend transforms efficiently."""
        ...

    def plan(self, n: int, dtype: np.dtype) -> TransformCapability:
        """
        Build a capability of length n for complex buffers of dtype.

        Args:
            n: Transform length (>= 1)
            dtype: complex64 or complex128

        Returns:
            A capability whose length() is n
        """
        ...
