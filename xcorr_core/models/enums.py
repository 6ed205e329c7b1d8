# xcorr_core/models/enums.py
from __future__ import annotations

from enum import Enum

import numpy as np


class Precision(Enum):
    FLOAT32 = 'float32'
    FLOAT64 = 'float64'
    COMPLEX64 = 'complex64'
    COMPLEX128 = 'complex128'

    @classmethod
    def parse(cls, value: Precision | str | np.dtype | type) -> Precision:
        """Accept a Precision, its name, or anything np.dtype() understands."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        try:
            name = np.dtype(value).name
        except TypeError as e:
            raise ValueError(f"Unsupported precision: {value!r}") from e
        for member in cls:
            if member.value == name:
                return member
        raise ValueError(f"Unsupported precision: {value!r}")

    @property
    def dtype(self) -> np.dtype:
        """Element type of input and output sequences."""
        return np.dtype(self.value)

    @property
    def scratch_dtype(self) -> np.dtype:
        """Complex element type of the transform buffers."""
        if self in (Precision.FLOAT32, Precision.COMPLEX64):
            return np.dtype(np.complex64)
        return np.dtype(np.complex128)

    @property
    def is_complex(self) -> bool:
        return self in (Precision.COMPLEX64, Precision.COMPLEX128)
