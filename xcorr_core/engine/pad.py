# xcorr_core/engine/pad.py
"""Zero padding of input sequences into transform scratch buffers."""

from __future__ import annotations

import numpy as np


def pad_into(buffer: np.ndarray, signal: np.ndarray) -> None:
    """
    Copy signal to the front of buffer and zero the remainder.

    Real input lands in the real part with a zero imaginary part; complex
    input is copied as-is.

    Args:
        buffer: Complex scratch buffer of the working length.
        signal: 1-D input no longer than buffer.
    """
    n = signal.shape[0]
    buffer[:n] = signal
    buffer[n:] = 0
