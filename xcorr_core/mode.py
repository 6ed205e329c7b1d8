# xcorr_core/mode.py
"""
Correlation output modes.

A mode decides how much of the full linear correlation is returned:

    FULL:  every lag where the inputs overlap at all (len_a + len_b - 1)
    SAME:  the length of the longer input, centered
    VALID: only lags where the shorter input lies fully inside the longer one

Windows are expressed as (offset, length) into the full result, whose
index i corresponds to lag i - (len_b - 1).
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from .errors import InvalidModeError
from .models.types import CorrelationWindow

_MODE_ALIASES: dict[str, str] = {
    "full": "FULL",
    "same": "SAME",
    "valid": "VALID",
}


def _check_lengths(len_a: int, len_b: int) -> None:
    if len_a <= 0 or len_b <= 0:
        raise InvalidModeError(
            f"Sequences must not be empty (len_a={len_a}, len_b={len_b})"
        )


class CorrelationMode(Enum):
    FULL = 'full'
    SAME = 'same'
    VALID = 'valid'

    @classmethod
    def parse(cls, value: CorrelationMode | str) -> CorrelationMode:
        """
        Resolve a mode from an enum member or a case-insensitive name.

        Raises:
            InvalidModeError: If the name is not a known mode
        """
        if isinstance(value, cls):
            return value
        key = _MODE_ALIASES.get(str(value).strip().lower())
        if key is None:
            available = list(_MODE_ALIASES)
            raise InvalidModeError(
                f"Unknown correlation mode: {value!r}. Available: {available}"
            )
        return cls[key]

    def output_length(self, len_a: int, len_b: int) -> int:
        """Number of samples the mode returns for inputs of these lengths."""
        return self.window(len_a, len_b).length

    def window(self, len_a: int, len_b: int) -> CorrelationWindow:
        """
        Extraction window into the full linear correlation.

        Same mode centers with floor division: offset = (min_len - 1) // 2.

        Raises:
            InvalidModeError: If either length is zero
        """
        _check_lengths(len_a, len_b)
        longest = max(len_a, len_b)
        shortest = min(len_a, len_b)

        if self is CorrelationMode.FULL:
            return CorrelationWindow(offset=0, length=len_a + len_b - 1)
        if self is CorrelationMode.SAME:
            return CorrelationWindow(offset=(shortest - 1) // 2, length=longest)
        return CorrelationWindow(offset=shortest - 1, length=longest - shortest + 1)

    def lags(self, len_a: int, len_b: int) -> np.ndarray:
        """
        Lag in samples of every output sample.

        The full result spans lags -(len_b - 1) .. len_a - 1; other modes
        return the same slice their window takes.
        """
        window = self.window(len_a, len_b)
        full_lags = np.arange(-(len_b - 1), len_a, dtype=np.intp)
        return full_lags[window.as_slice()]

    @staticmethod
    def working_length(len_a: int, len_b: int) -> int:
        """Smallest transform length that avoids circular wrap-around."""
        _check_lengths(len_a, len_b)
        return len_a + len_b - 1
