# tests/test_correlator.py
import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from tests.fakes import FailingTransform, FakeTransform, NotATransform, ResidueTransform
from xcorr_core import (
    BackendError,
    CorrelationMode,
    CorrelatorSettings,
    CrossCorrelator,
    InsufficientSizeError,
    InvalidModeError,
    LengthMismatchError,
    Precision,
    SizeMismatchError,
)
from xcorr_core.engine.spectrum import imaginary_residue
from xcorr_core.transform import next_good_size

TOLERANCE = {
    Precision.FLOAT32: dict(rtol=1e-4, atol=1e-4),
    Precision.FLOAT64: dict(rtol=1e-10, atol=1e-10),
}


def direct_full(src, dst):
    """Time-domain reference: out[i] = sum_j src[j] * dst[j - (i - (len(dst) - 1))]."""
    len_a, len_b = len(src), len(dst)
    out = np.zeros(len_a + len_b - 1, dtype=np.result_type(src, dst))
    for i in range(len_a + len_b - 1):
        lag = i - (len_b - 1)
        for j in range(len_a):
            k = j - lag
            if 0 <= k < len_b:
                out[i] += src[j] * np.conj(dst[k])
    return out


@pytest.mark.parametrize('backend', ['numpy', 'scipy'])
@pytest.mark.parametrize('precision', ['float32', 'float64'])
def test_handcrafted_full_result(backend, precision):
    engine = CrossCorrelator.create(3, 3, 'full', backend=backend, precision=precision)
    result = engine.correlate([1.0, 2.0, 3.0], [0.0, 1.0, 0.0])
    assert result.dtype == np.dtype(precision)
    np.testing.assert_allclose(result, [0.0, 1.0, 2.0, 3.0, 0.0], atol=1e-6)


def test_matches_direct_sum_for_small_inputs(make_engine, rng):
    src = rng.standard_normal(9)
    dst = rng.standard_normal(16)
    engine = make_engine(9, 16)
    np.testing.assert_allclose(engine.correlate(src, dst), direct_full(src, dst), atol=1e-12)


@pytest.mark.parametrize('precision,atol', [('float32', 1e-6), ('float64', 1e-12)])
def test_identity_with_unit_target(make_engine, rng, precision, atol):
    src = rng.uniform(-1.0, 1.0, 8).astype(precision)
    engine = make_engine(8, 1, precision=precision)
    result = engine.correlate(src, np.array([1.0], dtype=precision))
    assert result.shape == (8,)
    np.testing.assert_allclose(result, src, atol=atol)


@pytest.mark.parametrize('backend', ['numpy', 'scipy'])
@pytest.mark.parametrize('mode', ['full', 'same', 'valid'])
def test_matches_numpy_correlate(signals, backend, mode):
    src, dst = signals['long'], signals['short']
    engine = CrossCorrelator.create(len(src), len(dst), mode, backend=backend)
    np.testing.assert_allclose(
        engine.correlate(src, dst), np.correlate(src, dst, mode), **TOLERANCE[Precision.FLOAT64]
    )


@pytest.mark.parametrize('mode', ['full', 'same', 'valid'])
def test_single_precision_matches_numpy_correlate(signals, make_engine, mode):
    src, dst = signals['long_f32'], signals['short_f32']
    engine = make_engine(len(src), len(dst), mode, precision=Precision.FLOAT32)
    result = engine.correlate(src, dst)
    assert result.dtype == np.float32
    expected = np.correlate(src.astype(np.float64), dst.astype(np.float64), mode)
    np.testing.assert_allclose(result, expected, **TOLERANCE[Precision.FLOAT32])


def test_even_short_sequence_same_mode(signals, make_engine):
    src, dst = signals['long'], signals['even_short']
    engine = make_engine(len(src), len(dst), 'same')
    np.testing.assert_allclose(engine.correlate(src, dst), np.correlate(src, dst, 'same'), atol=1e-10)


@pytest.mark.parametrize('len_a,len_b', [(12, 5), (5, 12), (6, 6), (9, 4), (4, 9), (1, 7)])
def test_same_and_valid_are_slices_of_full(rng, make_engine, len_a, len_b):
    src = rng.standard_normal(len_a)
    dst = rng.standard_normal(len_b)
    full = make_engine(len_a, len_b, 'full').correlate(src, dst)

    for mode in (CorrelationMode.SAME, CorrelationMode.VALID):
        window = mode.window(len_a, len_b)
        result = make_engine(len_a, len_b, mode).correlate(src, dst)
        assert result.shape == (window.length,)
        np.testing.assert_allclose(result, full[window.as_slice()], atol=1e-12)


def test_engine_reuse_has_no_cross_call_contamination(rng, make_engine):
    pair_1 = rng.standard_normal(20), rng.standard_normal(6)
    pair_2 = rng.standard_normal(20) * 100.0, rng.standard_normal(6) * 100.0

    engine = make_engine(20, 6, 'same')
    first = engine.correlate(*pair_1)
    second = engine.correlate(*pair_2)
    first_again = engine.correlate(*pair_1)

    np.testing.assert_array_equal(first, first_again)
    np.testing.assert_allclose(second, make_engine(20, 6, 'same').correlate(*pair_2), atol=1e-9)


def test_correlate_into_writes_caller_buffer(signals, make_engine):
    src, dst = signals['long'], signals['short']
    engine = make_engine(len(src), len(dst), 'valid')
    out = np.full(engine.output_length, np.nan)

    assert engine.correlate_into(src, dst, out) is None
    np.testing.assert_allclose(out, engine.correlate(src, dst), atol=1e-12)


def test_correlate_into_rejects_bad_output(make_engine):
    engine = make_engine(10, 3, 'full')
    src, dst = np.ones(10), np.ones(3)

    with pytest.raises(LengthMismatchError) as exc:
        engine.correlate_into(src, dst, np.empty(11))
    assert exc.value.expected == 12
    assert exc.value.actual == 11

    with pytest.raises(TypeError):
        engine.correlate_into(src, dst, np.empty(12, dtype=np.float32))


def test_create_rejects_zero_length():
    with pytest.raises(InvalidModeError):
        CrossCorrelator.create(0, 4, 'full')
    with pytest.raises(InvalidModeError):
        CrossCorrelator.create(4, 0, 'valid')


def test_create_rejects_unknown_mode():
    with pytest.raises(InvalidModeError):
        CrossCorrelator.create(4, 4, 'circular')


def test_with_backend_rejects_mismatched_lengths():
    with pytest.raises(SizeMismatchError) as exc:
        CrossCorrelator.with_backend('full', FakeTransform(8), FakeTransform(16), 3, 3)
    assert exc.value.forward_length == 8
    assert exc.value.inverse_length == 16


def test_with_backend_rejects_insufficient_length():
    with pytest.raises(InsufficientSizeError) as exc:
        CrossCorrelator.with_backend('full', FakeTransform(6), FakeTransform(6), 4, 4)
    assert isinstance(exc.value, SizeMismatchError)
    assert exc.value.required_length == 7


def test_with_backend_rejects_zero_length():
    with pytest.raises(InvalidModeError):
        CrossCorrelator.with_backend('same', FakeTransform(8), FakeTransform(8), 0, 3)


def test_with_backend_rejects_non_capability():
    with pytest.raises(TypeError):
        CrossCorrelator.with_backend('full', NotATransform(), FakeTransform(8), 3, 3)


@pytest.mark.parametrize('mode', ['full', 'same', 'valid'])
def test_custom_backend_longer_than_required(rng, mode):
    src, dst = rng.standard_normal(5), rng.standard_normal(3)
    transform = FakeTransform(32)
    engine = CrossCorrelator.with_backend(mode, transform, transform, 5, 3)

    assert engine.working_length == 32
    np.testing.assert_allclose(engine.correlate(src, dst), np.correlate(src, dst, mode), atol=1e-10)
    assert transform.calls == ['forward', 'forward', 'inverse']


def test_custom_backend_exact_length(rng):
    src, dst = rng.standard_normal(6), rng.standard_normal(4)
    engine = CrossCorrelator.with_backend('full', FakeTransform(9), FakeTransform(9), 6, 4)
    np.testing.assert_allclose(engine.correlate(src, dst), direct_full(src, dst), atol=1e-10)


def test_wrong_src_length_leaves_engine_usable(signals, make_engine):
    src, dst = signals['long'], signals['short']
    engine = make_engine(len(src), len(dst), 'full')
    expected = engine.correlate(src, dst)

    with pytest.raises(LengthMismatchError) as exc:
        engine.correlate(src[:-1], dst)
    assert exc.value.name == 'src'

    with pytest.raises(LengthMismatchError):
        engine.correlate(src, np.append(dst, 1.0))

    np.testing.assert_array_equal(engine.correlate(src, dst), expected)


def test_rejects_multidimensional_input(make_engine):
    engine = make_engine(4, 2)
    with pytest.raises(ValueError):
        engine.correlate(np.ones((2, 2)), np.ones(2))


def test_real_engine_rejects_complex_input(make_engine):
    engine = make_engine(3, 2)
    with pytest.raises(TypeError):
        engine.correlate(np.ones(3) * 1j, np.ones(2))


def test_backend_exception_is_wrapped():
    failing = FailingTransform(8, RuntimeError('device lost'))
    engine = CrossCorrelator.with_backend('full', failing, failing, 4, 3)

    with pytest.raises(BackendError) as exc:
        engine.correlate(np.ones(4), np.ones(3))
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert 'device lost' in str(exc.value)


def test_backend_error_propagates_unchanged():
    original = BackendError('plan invalidated')
    forward = FakeTransform(8)
    inverse = FailingTransform(8, original, fail_on='inverse')
    engine = CrossCorrelator.with_backend('full', forward, inverse, 4, 3)

    with pytest.raises(BackendError) as exc:
        engine.correlate(np.ones(4), np.ones(3))
    assert exc.value is original


def test_imaginary_residue_is_logged(caplog):
    transform = ResidueTransform(8)
    engine = CrossCorrelator.with_backend('full', transform, transform, 4, 3)

    with caplog.at_level(logging.WARNING, logger='xcorr_core.engine.correlator'):
        engine.correlate(np.arange(4.0), np.ones(3))
    assert any('imaginary residue' in r.message for r in caplog.records)


def test_residue_warning_can_be_disabled(caplog):
    transform = ResidueTransform(8)
    engine = CrossCorrelator.with_backend('full', transform, transform, 4, 3, residue_warning=False)

    with caplog.at_level(logging.WARNING, logger='xcorr_core.engine.correlator'):
        engine.correlate(np.arange(4.0), np.ones(3))
    assert not caplog.records


def test_healthy_backend_logs_no_residue(signals, caplog):
    engine = CrossCorrelator.create(50, 7, 'full')
    with caplog.at_level(logging.WARNING, logger='xcorr_core.engine.correlator'):
        engine.correlate(signals['long'], signals['short'])
    assert not caplog.records


@pytest.mark.parametrize('precision', [Precision.COMPLEX64, Precision.COMPLEX128])
@pytest.mark.parametrize('mode', ['full', 'same', 'valid'])
def test_complex_precision_matches_numpy(signals, make_engine, precision, mode):
    src, dst = signals['long_c'], signals['short_c']
    engine = make_engine(len(src), len(dst), mode, precision=precision)
    result = engine.correlate(src.astype(precision.dtype), dst.astype(precision.dtype))

    assert result.dtype == precision.dtype
    atol = 1e-4 if precision is Precision.COMPLEX64 else 1e-10
    np.testing.assert_allclose(result, np.correlate(src, dst, mode), atol=atol)


def test_default_working_length_uses_backend_good_size():
    engine = CrossCorrelator.create(11, 9, backend='numpy')
    assert engine.working_length == next_good_size(19) == 25


def test_working_length_without_padding():
    settings = CorrelatorSettings(backend='numpy', pad_to_good_size=False)
    engine = CrossCorrelator.create(11, 9, settings=settings)
    assert engine.working_length == 19


def test_settings_supply_defaults_and_arguments_override():
    settings = CorrelatorSettings(backend='numpy', precision=Precision.FLOAT32)
    assert CrossCorrelator.create(5, 3, settings=settings).precision is Precision.FLOAT32
    assert CrossCorrelator.create(5, 3, settings=settings, precision='float64').precision is Precision.FLOAT64


def test_properties(make_engine):
    engine = make_engine(10, 4, 'valid')
    assert engine.mode is CorrelationMode.VALID
    assert engine.source_length == 10
    assert engine.target_length == 4
    assert engine.output_length == 7
    assert engine.lags.tolist() == [0, 1, 2, 3, 4, 5, 6]
    assert engine.working_length >= 13
    assert 'valid' in repr(engine)


def test_planner_shares_plans_between_engines(planner, rng):
    full = CrossCorrelator.create(30, 8, 'full', planner=planner)
    same = CrossCorrelator.create(30, 8, 'same', planner=planner)
    assert len(planner) == 1

    src, dst = rng.standard_normal(30), rng.standard_normal(8)
    np.testing.assert_allclose(same.correlate(src, dst), full.correlate(src, dst)[same.window.as_slice()], atol=1e-12)


def test_planner_and_backend_are_exclusive(planner):
    with pytest.raises(ValueError):
        CrossCorrelator.create(4, 4, planner=planner, backend='scipy')


def test_engines_sharing_plans_run_concurrently(planner, rng):
    pairs = [(rng.standard_normal(64), rng.standard_normal(16)) for _ in range(8)]
    engines = [CrossCorrelator.create(64, 16, 'valid', planner=planner) for _ in pairs]

    def run(index):
        src, dst = pairs[index]
        return [engines[index].correlate(src, dst) for _ in range(20)][-1]

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(run, range(len(pairs))))

    for (src, dst), result in zip(pairs, results):
        np.testing.assert_allclose(result, np.correlate(src, dst, 'valid'), atol=1e-10)


def test_imaginary_residue_measures_whole_buffer():
    buffer = np.array([2.0 + 0.1j, -4.0 + 0.0j, 1.0 - 0.2j])
    assert imaginary_residue(buffer) == pytest.approx(0.05)
    # all-zero real part falls back to the absolute residue
    assert imaginary_residue(np.array([0.0 + 0.3j, 0.0 - 0.1j])) == pytest.approx(0.3)
    assert imaginary_residue(np.zeros(4, dtype=np.complex64)) == 0.0


def test_correlate_into_with_residue_check_matches_without(signals):
    src, dst = signals['long'], signals['short']
    checked = CrossCorrelator.create(50, 7, 'same', backend='numpy')
    unchecked = CrossCorrelator.create(
        50, 7, 'same', settings=CorrelatorSettings(backend='numpy', residue_warning=False)
    )
    out_checked = np.empty(50)
    out_unchecked = np.empty(50)
    checked.correlate_into(src, dst, out_checked)
    unchecked.correlate_into(src, dst, out_unchecked)
    np.testing.assert_array_equal(out_checked, out_unchecked)
