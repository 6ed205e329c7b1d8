# xcorr_core/engine/correlator.py
"""
FFT-based cross-correlation engine.

Pipeline for one call:
1. Zero-pad src and dst into two complex scratch buffers of length N
2. Forward-transform both in place
3. Multiply by the conjugate of the dst spectrum and scale by 1/N
4. Inverse-transform in place
5. Read the mode window out of the circular result

N >= len_a + len_b - 1 guarantees the circular result holds the linear
correlation without wrap-around; negative lags sit at the end of the
buffer, so full[i] = circular[(i - (len_b - 1)) mod N].
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np

from ..errors import (
    BackendError,
    InsufficientSizeError,
    LengthMismatchError,
    SizeMismatchError,
)
from ..mode import CorrelationMode
from ..models import CorrelatorSettings, CorrelationWindow, Precision
from ..transform import TransformCapability, TransformPlanner, backend_accepts
from .pad import pad_into
from .spectrum import imaginary_residue, multiply_conjugate, residue_tolerance

if TYPE_CHECKING:
    from numpy.typing import ArrayLike

    from ..transform import TransformBackend

logger = logging.getLogger(__name__)


class CrossCorrelator:
    """
    Correlates sequences of two fixed lengths under one mode.

    Build once per (len_a, len_b, mode) with create() or with_backend(),
    then call correlate() / correlate_into() for as many data pairs as
    needed. The two scratch buffers are reused across calls.

    Thread safety: every call mutates this instance's scratch buffers, so
    concurrent calls on the SAME instance must be serialized by the caller
    (e.g. with a threading.Lock). Separate instances can run concurrently,
    even when they share transform capabilities from one TransformPlanner.
    """

    def __init__(
        self,
        mode: CorrelationMode | str,
        forward: TransformCapability,
        inverse: TransformCapability,
        len_a: int,
        len_b: int,
        precision: Precision | str = Precision.FLOAT64,
        residue_warning: bool = True,
    ):
        mode = CorrelationMode.parse(mode)
        window = mode.window(len_a, len_b)
        required = CorrelationMode.working_length(len_a, len_b)

        for label, capability in (("forward", forward), ("inverse", inverse)):
            if not isinstance(capability, TransformCapability):
                raise TypeError(
                    f"{label} capability {type(capability).__name__} does not "
                    f"provide forward(), inverse() and length()"
                )

        forward_length = int(forward.length())
        inverse_length = int(inverse.length())
        if forward_length != inverse_length:
            raise SizeMismatchError(forward_length, inverse_length)
        if forward_length < required:
            raise InsufficientSizeError(forward_length, required)

        self._mode = mode
        self._len_a = int(len_a)
        self._len_b = int(len_b)
        self._n = forward_length
        self._forward = forward
        self._inverse = inverse
        self._precision = Precision.parse(precision)
        self._window = window
        self._residue_warning = residue_warning

        scratch_dtype = self._precision.scratch_dtype
        self._spectrum = np.zeros(self._n, dtype=scratch_dtype)
        self._kernel = np.zeros(self._n, dtype=scratch_dtype)

        # Circular index of each output sample (np.take wraps negatives)
        self._gather = np.arange(window.offset, window.stop, dtype=np.intp) - (self._len_b - 1)

        logger.debug(
            f"[XCORR] Correlator ready: mode={mode.value}, len_a={self._len_a}, "
            f"len_b={self._len_b}, N={self._n}, precision={self._precision.value}"
        )

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        len_a: int,
        len_b: int,
        mode: CorrelationMode | str = CorrelationMode.FULL,
        *,
        precision: Precision | str | None = None,
        backend: str | TransformBackend | None = None,
        planner: TransformPlanner | None = None,
        settings: CorrelatorSettings | None = None,
    ) -> CrossCorrelator:
        """
        Build a correlator with transforms from a registered backend.

        N is the backend's good size for len_a + len_b - 1 (or exactly that
        when settings.pad_to_good_size is off).

        Args:
            len_a: Source length
            len_b: Target length
            mode: Output mode
            precision: Overrides settings.precision
            backend: Backend name/instance; overrides settings.backend
            planner: Share plans with other correlators (mutually
                exclusive with backend)
            settings: Defaults for everything not passed explicitly;
                settings.workers only reaches backends that take it

        Raises:
            InvalidModeError: If either length is zero or the mode is unknown
            BackendError: If the backend is unknown
        """
        settings = settings or CorrelatorSettings()
        mode = CorrelationMode.parse(mode)
        precision = Precision.parse(precision) if precision is not None else settings.precision
        required = CorrelationMode.working_length(len_a, len_b)

        if planner is not None and backend is not None:
            raise ValueError("Pass either backend or planner, not both")

        if planner is None:
            name = backend or settings.backend
            planner = TransformPlanner(name, **cls._backend_options(name, settings))

        n = planner.good_size(required) if settings.pad_to_good_size else required
        capability = planner.plan(n, precision.scratch_dtype)

        return cls(
            mode,
            capability,
            capability,
            len_a,
            len_b,
            precision=precision,
            residue_warning=settings.residue_warning,
        )

    @staticmethod
    def _backend_options(backend: str | TransformBackend, settings: CorrelatorSettings) -> dict:
        # workers only reaches backends whose constructor takes it
        if settings.workers is None:
            return {}
        if not backend_accepts(backend, "workers"):
            logger.debug(
                f"[XCORR] Not passing workers={settings.workers} to backend "
                f"{getattr(backend, 'name', backend)!s}; it is an instance or has no workers option"
            )
            return {}
        return {"workers": settings.workers}

    @classmethod
    def with_backend(
        cls,
        mode: CorrelationMode | str,
        forward: TransformCapability,
        inverse: TransformCapability,
        len_a: int,
        len_b: int,
        *,
        precision: Precision | str = Precision.FLOAT64,
        residue_warning: bool = True,
    ) -> CrossCorrelator:
        """
        Build a correlator around caller-supplied transforms.

        N is read from the capabilities. Use this to share plans or to plug
        in an optimized backend.

        Raises:
            SizeMismatchError: If forward and inverse lengths differ
            InsufficientSizeError: If N < len_a + len_b - 1
            InvalidModeError: If either length is zero
        """
        return cls(
            mode,
            forward,
            inverse,
            len_a,
            len_b,
            precision=precision,
            residue_warning=residue_warning,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def mode(self) -> CorrelationMode:
        return self._mode

    @property
    def source_length(self) -> int:
        return self._len_a

    @property
    def target_length(self) -> int:
        return self._len_b

    @property
    def working_length(self) -> int:
        return self._n

    @property
    def forward(self) -> TransformCapability:
        return self._forward

    @property
    def inverse(self) -> TransformCapability:
        return self._inverse

    @property
    def precision(self) -> Precision:
        return self._precision

    @property
    def window(self) -> CorrelationWindow:
        return self._window

    @property
    def output_length(self) -> int:
        return self._window.length

    @property
    def lags(self) -> np.ndarray:
        return self._mode.lags(self._len_a, self._len_b)

    def __repr__(self) -> str:
        return (
            f"CrossCorrelator(mode={self._mode.value}, len_a={self._len_a}, "
            f"len_b={self._len_b}, N={self._n}, precision={self._precision.value})"
        )

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def correlate(self, src: ArrayLike, dst: ArrayLike) -> np.ndarray:
        """
        Correlate src against dst and return the mode window as a new array.

        Args:
            src: Sequence of length source_length
            dst: Sequence of length target_length

        Returns:
            1-D array of output_length samples (real for real precisions)

        Raises:
            LengthMismatchError: If src or dst has the wrong length
            BackendError: If a transform fails
        """
        out = np.empty(self.output_length, dtype=self._precision.dtype)
        self.correlate_into(src, dst, out)
        return out

    def correlate_into(self, src: ArrayLike, dst: ArrayLike, out: np.ndarray) -> None:
        """
        Correlate src against dst, writing the mode window into out.

        The engine allocates nothing per call here (the residue check
        reduces over the scratch buffer in place); backends may still
        allocate internally.

        Args:
            src: Sequence of length source_length
            dst: Sequence of length target_length
            out: Writable 1-D array of output_length elements whose dtype
                matches the correlator's precision

        Raises:
            LengthMismatchError: If src, dst or out has the wrong length
            TypeError: If out has the wrong dtype or complex data is given
                to a real-precision correlator
            BackendError: If a transform fails
        """
        src_arr = self._as_input(src, "src", self._len_a)
        dst_arr = self._as_input(dst, "dst", self._len_b)
        self._check_output(out)

        circular = self._run(src_arr, dst_arr)

        if self._precision.is_complex:
            np.take(circular, self._gather, out=out, mode="wrap")
            return

        if self._residue_warning:
            self._warn_on_residue(circular)
        np.take(circular.real, self._gather, out=out, mode="wrap")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _as_input(self, values: ArrayLike, name: str, expected: int) -> np.ndarray:
        arr = np.asarray(values)
        if arr.ndim != 1:
            raise ValueError(f"{name} must be 1-D, got shape {arr.shape}")
        if arr.shape[0] != expected:
            raise LengthMismatchError(name, expected, arr.shape[0])
        if np.iscomplexobj(arr) and not self._precision.is_complex:
            raise TypeError(
                f"{name} is complex but the correlator precision is {self._precision.value}"
            )
        return arr

    def _check_output(self, out: np.ndarray) -> None:
        if not isinstance(out, np.ndarray) or out.ndim != 1:
            raise TypeError("out must be a 1-D numpy array")
        if out.shape[0] != self.output_length:
            raise LengthMismatchError("out", self.output_length, out.shape[0])
        if out.dtype != self._precision.dtype:
            raise TypeError(
                f"out dtype should be {self._precision.dtype} but it was {out.dtype}"
            )

    def _run(self, src: np.ndarray, dst: np.ndarray) -> np.ndarray:
        pad_into(self._spectrum, src)
        pad_into(self._kernel, dst)

        self._invoke(self._forward.forward, self._spectrum, "forward")
        self._invoke(self._forward.forward, self._kernel, "forward")
        multiply_conjugate(self._spectrum, self._kernel, self._n)
        self._invoke(self._inverse.inverse, self._spectrum, "inverse")

        return self._spectrum

    @staticmethod
    def _invoke(step: Callable[[np.ndarray], None], buffer: np.ndarray, label: str) -> None:
        try:
            step(buffer)
        except BackendError:
            raise
        except Exception as e:
            raise BackendError(f"{label} transform failed: {e}") from e

    def _warn_on_residue(self, circular: np.ndarray) -> None:
        residue = imaginary_residue(circular)
        tolerance = residue_tolerance(circular.dtype, self._n)
        if residue > tolerance:
            logger.warning(
                f"[XCORR] Inverse transform left imaginary residue {residue:.3e} "
                f"(tolerance {tolerance:.3e}); transform backend may be faulty"
            )
