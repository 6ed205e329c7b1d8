# xcorr_core/errors.py
"""
Exception taxonomy for the correlation engine.

Every error the engine raises derives from CorrelationError, and each kind
also subclasses the builtin exception a caller would naturally catch
(ValueError for bad sizes, RuntimeError for backend failures).
"""

from __future__ import annotations


class CorrelationError(Exception):
    """Base class for all xcorr_core errors."""


class InvalidModeError(CorrelationError, ValueError):
    """Zero-length input or an unknown correlation mode."""


class SizeMismatchError(CorrelationError, ValueError):
    """Forward and inverse transforms report different lengths."""

    def __init__(self, forward_length: int, inverse_length: int, message: str | None = None):
        self.forward_length = forward_length
        self.inverse_length = inverse_length
        super().__init__(
            message
            or f"Forward transform length {forward_length} doesn't match "
            f"inverse transform length {inverse_length}"
        )


class InsufficientSizeError(SizeMismatchError):
    """Transform length is too short to hold the linear correlation."""

    def __init__(self, working_length: int, required_length: int):
        self.working_length = working_length
        self.required_length = required_length
        super().__init__(
            working_length,
            working_length,
            f"Transform length {working_length} is smaller than the "
            f"required {required_length} (len_a + len_b - 1)",
        )


class LengthMismatchError(CorrelationError, ValueError):
    """Call-time buffer length differs from what the engine was built for."""

    def __init__(self, name: str, expected: int, actual: int):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(f"{name} length should be {expected} but it was {actual}")


class BackendError(CorrelationError, RuntimeError):
    """The spectral transform backend failed or was misused."""
