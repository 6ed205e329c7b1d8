# xcorr_core/transform/planner.py
"""
Transform plan reuse.

A TransformPlanner hands out one capability per (length, dtype) so that
several correlators of the same working length share a single read-only
plan instead of each building their own. Each planner owns its cache;
there is no module-level planner.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import numpy as np

from ._base import TransformBackend, TransformCapability
from .registry import DEFAULT_BACKEND, get_backend

logger = logging.getLogger(__name__)


class TransformPlanner:
    """Caches TransformCapability instances planned by one backend."""

    def __init__(self, backend: str | TransformBackend = DEFAULT_BACKEND, **options: Any):
        self.backend = get_backend(backend, **options)
        self._plans: dict[tuple[int, str], TransformCapability] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._plans)

    def __repr__(self) -> str:
        return f"TransformPlanner(backend={self.backend.name!r}, plans={len(self)})"

    def good_size(self, n: int) -> int:
        return self.backend.good_size(n)

    def plan(self, n: int, dtype: np.dtype | type = np.complex128) -> TransformCapability:
        """
        Return the cached capability for (n, dtype), planning it on first use.

        Args:
            n: Transform length
            dtype: Complex scratch dtype

        Returns:
            A capability shared by every caller asking for the same key
        """
        key = (int(n), np.dtype(dtype).name)
        with self._lock:
            capability = self._plans.get(key)
            if capability is None:
                logger.debug(f"[PLANNER] Planning {self.backend.name} transform n={key[0]} dtype={key[1]}")
                capability = self.backend.plan(key[0], np.dtype(dtype))
                self._plans[key] = capability
            else:
                logger.debug(f"[PLANNER] Reusing {self.backend.name} transform n={key[0]} dtype={key[1]}")
            return capability

    def clear(self) -> None:
        """Drop every cached plan. Correlators already holding one keep it."""
        with self._lock:
            self._plans.clear()
