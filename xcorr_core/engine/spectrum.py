# xcorr_core/engine/spectrum.py
"""
Spectral-domain steps of the correlation pipeline.

Correlation differs from convolution only by the conjugate on the second
spectrum: IDFT(A * conj(B)) at lag k is sum_j a[j] * conj(b[j - k]).
"""

from __future__ import annotations

import numpy as np


def multiply_conjugate(spectrum: np.ndarray, other: np.ndarray, length: int) -> None:
    """
    spectrum <- spectrum * conj(other) / length, in place.

    The 1/length factor is computed in double precision and cast once to
    the buffer's precision. other is conjugated in place and must be
    scratch the caller no longer needs.

    Args:
        spectrum: Forward transform of the source (overwritten with the product).
        other: Forward transform of the target (overwritten with its conjugate).
        length: Transform length N.
    """
    scale = spectrum.real.dtype.type(1.0 / length)
    np.conjugate(other, out=other)
    np.multiply(spectrum, other, out=spectrum)
    spectrum *= scale


def imaginary_residue(buffer: np.ndarray) -> float:
    """
    Largest |imag| relative to the largest |real| over the whole buffer.

    Reductions run on the real/imag views, so nothing is allocated per
    call. An all-zero real part gives the absolute residue.
    """
    real, imag = buffer.real, buffer.imag
    peak = max(float(real.max()), -float(real.min()))
    residue = max(float(imag.max()), -float(imag.min()))
    if peak == 0.0:
        return residue
    return residue / peak


def residue_tolerance(dtype: np.dtype, length: int) -> float:
    """Relative imaginary residue a healthy FFT of this length may leave behind."""
    eps = float(np.finfo(dtype).eps)
    return max(1e3 * eps * np.log2(max(length, 2)), np.sqrt(eps))
