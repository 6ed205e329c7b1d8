"""
Data models for xcorr_core.

    from xcorr_core.models import (
        Precision, CorrelatorSettings, CorrelationWindow, LagEstimate,
    )

Model Organization:
    - enums.py: Precision
    - settings.py: Engine construction settings (CorrelatorSettings)
    - types.py: Small result values (CorrelationWindow, LagEstimate)
"""

from .enums import Precision
from .settings import CorrelatorSettings
from .types import CorrelationWindow, LagEstimate

__all__ = [
    "Precision",
    "CorrelatorSettings",
    "CorrelationWindow",
    "LagEstimate",
]
