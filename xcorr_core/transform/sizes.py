# xcorr_core/transform/sizes.py
"""Working-length helpers for FFT planning."""

from __future__ import annotations

_GOOD_RADICES = (2, 3, 5)


def _next_power(base: int, n: int) -> int:
    p = 1
    while p < n:
        p *= base
    return p


def next_good_size(n: int) -> int:
    """
    Smallest pure power of 2, 3 or 5 that is >= n.

    Lengths below 2 round up to 2. Mixed-radix products (e.g. 6, 12) are
    deliberately not considered.

    Args:
        n: Minimum required length (>= 1)

    Returns:
        The chosen transform length

    Raises:
        ValueError: If n < 1
    """
    if n < 1:
        raise ValueError(f"Transform length must be >= 1, got {n}")
    if n <= 2:
        return 2
    return min(_next_power(base, n) for base in _GOOD_RADICES)
