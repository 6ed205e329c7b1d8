# xcorr_core/models/settings.py
"""Correlator settings dataclass.

Single source of truth for how CrossCorrelator.create() picks its backend,
precision and working length. Settings are typed and have defaults, so
callers holding a plain dict go through from_config() instead of passing
loose keyword arguments around.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from ..transform.registry import DEFAULT_BACKEND
from .enums import Precision


@dataclass
class CorrelatorSettings:
    """Construction-time options for the correlation engine."""

    # =========================================================================
    # Backend Settings
    # =========================================================================
    backend: str = DEFAULT_BACKEND  # Registered backend name or alias ("numpy", "scipy")
    workers: int | None = None  # Worker threads for backends that take them (None = library default)

    # =========================================================================
    # Pipeline Settings
    # =========================================================================
    precision: Precision | str = Precision.FLOAT64  # Coerced to Precision
    pad_to_good_size: bool = True  # Round N up to the backend's fast length
    residue_warning: bool = True  # Log when the inverse leaves imaginary residue

    def __post_init__(self):
        self.precision = Precision.parse(self.precision)

    @classmethod
    def from_config(cls, cfg: dict) -> CorrelatorSettings:
        """Create CorrelatorSettings from a config dictionary.

        Handles legacy keys ("fft_backend", "dtype") and provides defaults
        for everything missing.
        """
        backend = cfg.get("backend") or cfg.get("fft_backend") or DEFAULT_BACKEND
        precision = cfg.get("precision") or cfg.get("dtype") or Precision.FLOAT64
        workers = cfg.get("workers")

        return cls(
            backend=str(backend).lower(),
            workers=int(workers) if workers is not None else None,
            precision=precision,
            pad_to_good_size=bool(cfg.get("pad_to_good_size", True)),
            residue_warning=bool(cfg.get("residue_warning", True)),
        )

    def to_dict(self) -> dict:
        """Plain-dict form that from_config() reads back (precision as its name)."""
        return {**asdict(self), "precision": self.precision.value}
