"""
Unit Tests for the LPC Core Module

Validates the hand-written numerical building blocks against numpy/scipy
references.

Test Coverage:
    - FFT: in-place transform, inverse, cross-correlation
    - Windows: analysis windows, lifter weights
    - Levinson-Durbin: known AR models, scipy Toeplitz solver, degenerate input
    - Cepstrum: closed-form single-pole cepstrum, recursion reference, floor

Run:
    pytest tests/test_lpc_core.py -v
    or
    python tests/test_lpc_core.py
"""

import sys
import os
import math

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from scipy.linalg import solve_toeplitz
from scipy.signal import get_window

from src.lpc_core import (
    fft_inplace,
    cross_correlate,
    next_power_of_two,
    window_samples,
    lifter_coeffs,
    apply_window,
    resolve_window_type,
    WindowType,
    levinson_durbin,
    solve,
    lpc_to_cepstrum,
    log_energy,
    ENERGY_FLOOR,
)


def _reference_cepstrum(lpc, err, n_coeffs):
    """Direct transcription of the recursion, pure Python."""
    order = len(lpc) - 1
    a = lambda j: lpc[j] if j <= order else 0.0
    c = [math.log(max(err, ENERGY_FLOOR))]
    for n in range(1, n_coeffs):
        acc = sum(k * c[k] * a(n - k) for k in range(1, n))
        c.append(-a(n) - acc / n)
    return np.array(c)


class TestFFT:
    """Test suite for the in-place FFT and cross-correlation."""

    def test_next_power_of_two(self):
        assert next_power_of_two(0) == 1
        assert next_power_of_two(1) == 1
        assert next_power_of_two(2) == 2
        assert next_power_of_two(3) == 4
        assert next_power_of_two(819) == 1024
        assert next_power_of_two(1024) == 1024
        assert next_power_of_two(1025) == 2048

    def test_fft_random_signal(self):
        """Test FFT against numpy on power-of-2 lengths."""
        rng = np.random.default_rng(0)
        for N in [1, 2, 8, 64, 256, 1024]:
            x = rng.standard_normal(N) + 1j * rng.standard_normal(N)
            re, im = x.real.copy(), x.imag.copy()
            fft_inplace(re, im)
            error = np.abs((re + 1j * im) - np.fft.fft(x))
            assert error.max() < 1e-9, f"FFT failed for N={N}"

        print(f"\n[FFT] All sizes passed ✓")

    def test_inverse_fft(self):
        rng = np.random.default_rng(1)
        x = rng.standard_normal(512)
        re, im = x.copy(), np.zeros(512)
        fft_inplace(re, im)
        fft_inplace(re, im, inverse=True)

        assert np.abs(re - x).max() < 1e-12
        assert np.abs(im).max() < 1e-12

    def test_fft_rejects_non_power_of_2(self):
        with pytest.raises(ValueError):
            fft_inplace(np.zeros(100), np.zeros(100))
        with pytest.raises(ValueError):
            fft_inplace(np.zeros(8), np.zeros(4))

    def test_autocorrelation(self):
        """Autocorrelation matches np.correlate for lags 0..n-1."""
        rng = np.random.default_rng(2)
        n = 100
        x = rng.standard_normal(n)
        size = next_power_of_two(2 * n - 1)

        real_a, imag_a = np.zeros(size), np.zeros(size)
        real_b, imag_b = np.zeros(size), np.zeros(size)
        real_a[:n] = x
        real_b[:n] = x
        out = np.zeros(n)

        cross_correlate(real_a, imag_a, real_b, imag_b, out, n)

        expected = np.correlate(x, x, mode='full')[n - 1:]
        error = np.abs(out - expected)
        print(f"\n[Autocorrelation]")
        print(f"  Max error: {error.max():.2e}")

        assert error.max() < 1e-10

    def test_cross_correlation(self):
        rng = np.random.default_rng(3)
        n = 37
        a = rng.standard_normal(n)
        b = rng.standard_normal(n)
        size = next_power_of_two(2 * n - 1)

        real_a, imag_a = np.zeros(size), np.zeros(size)
        real_b, imag_b = np.zeros(size), np.zeros(size)
        real_a[:n] = a
        real_b[:n] = b
        out = np.zeros(n)

        cross_correlate(real_a, imag_a, real_b, imag_b, out, n)

        expected = np.array([np.sum(a[k:] * b[:n - k]) for k in range(n)])
        assert np.abs(out - expected).max() < 1e-10

    def test_cross_correlate_buffer_too_small(self):
        buffers = [np.zeros(64) for _ in range(4)]
        with pytest.raises(ValueError):
            cross_correlate(*buffers, np.zeros(40), 40)


class TestWindows:
    """Test suite for windows and lifters."""

    @pytest.mark.parametrize("name, scipy_name", [
        ('rectangular', 'boxcar'),
        ('hamming', 'hamming'),
        ('hann', 'hann'),
        ('blackman', 'blackman'),
        ('bartlett', 'bartlett'),
    ])
    def test_matches_scipy(self, name, scipy_name):
        for N in [2, 5, 64, 410]:
            ours = window_samples(name, N)
            ref = get_window(scipy_name, N, fftbins=False)
            assert ours.shape == (N,)
            assert np.abs(ours - ref).max() < 1e-12, f"{name} failed for N={N}"

    def test_aliases(self):
        assert resolve_window_type('rect') is WindowType.RECTANGULAR
        assert resolve_window_type('Hamming') is WindowType.HAMMING
        assert resolve_window_type(WindowType.HANN) is WindowType.HANN
        with pytest.raises(ValueError):
            resolve_window_type('kaiser')

    def test_single_sample_window(self):
        assert np.array_equal(window_samples('hann', 1), [1.0])

    def test_lifter(self):
        coeffs = lifter_coeffs(13, 22)
        expected = 1 + 11 * np.sin(np.pi * np.arange(13) / 22)

        assert coeffs.shape == (13,)
        assert coeffs[0] == 1.0
        assert np.allclose(coeffs, expected)

    def test_zero_lifter_is_identity(self):
        assert np.array_equal(lifter_coeffs(13, 0), np.ones(13))

    def test_apply_window_leaves_tail(self):
        block = np.ones(8)
        apply_window(block, np.full(5, 2.0))
        assert np.array_equal(block, [2, 2, 2, 2, 2, 1, 1, 1])


class TestLevinsonDurbin:
    """Test suite for the Levinson-Durbin recursion."""

    def test_ar1(self):
        """x[n] = 0.9 x[n-1] + e[n] has r[k] = 0.9^k."""
        lpc, err = solve(0.9 ** np.arange(5), 1)

        assert lpc[0] == 1.0
        assert lpc[1] == pytest.approx(-0.9)
        assert err == pytest.approx(0.19)

    def test_sinusoid_recurrence(self):
        """
        cos(wn) satisfies x[n] = 2cos(w) x[n-1] - x[n-2]: order 2 recovers
        the recurrence with zero residual.
        """
        w = 2 * np.pi * 440 / 16000
        r = 0.5 * np.cos(w * np.arange(8))

        lpc, err = solve(r, 2)

        print(f"\n[Levinson Sinusoid]")
        print(f"  LPC: {lpc}")
        print(f"  Residual: {err:.2e}")

        assert lpc[1] == pytest.approx(-2 * np.cos(w), abs=1e-9)
        assert lpc[2] == pytest.approx(1.0, abs=1e-9)
        assert 0.0 <= err < 1e-10

    def test_matches_scipy_toeplitz(self):
        rng = np.random.default_rng(4)
        n, order = 400, 12
        x = rng.standard_normal(n)
        r = np.correlate(x, x, mode='full')[n - 1:]

        lpc, err = solve(r, order)
        expected = solve_toeplitz(r[:order], -r[1:order + 1])

        error = np.abs(lpc[1:] - expected)
        print(f"\n[Levinson vs scipy]")
        print(f"  Max error: {error.max():.2e}")

        assert error.max() < 1e-8
        # Residual energy of the optimal predictor
        assert err == pytest.approx(np.dot(lpc, r[:order + 1]), rel=1e-8)
        assert err > 0

    def test_silent_frame(self):
        lpc = np.zeros(11)
        err = levinson_durbin(np.zeros(50), lpc, 10)

        assert err == 0.0
        assert lpc[0] == 1.0
        assert np.all(lpc[1:] == 0.0)

    def test_residual_never_negative(self):
        """A singular (perfectly predictable) system stops at zero residual."""
        w = 0.3
        r = 0.5 * np.cos(w * np.arange(20))
        lpc, err = solve(r, 10)

        assert 0.0 <= err < 1e-10
        assert np.all(np.isfinite(lpc))
        assert np.all(np.isfinite(lpc_to_cepstrum(lpc, err, 13)))

    def test_validation(self):
        with pytest.raises(ValueError):
            levinson_durbin(np.ones(5), np.zeros(11), 10)
        with pytest.raises(ValueError):
            levinson_durbin(np.ones(20), np.zeros(5), 10)


class TestCepstrum:
    """Test suite for LPC -> cepstrum conversion."""

    def test_single_pole(self):
        """1 / (1 - rho z^-1) has cepstrum c[n] = rho^n / n."""
        rho = 0.8
        c = lpc_to_cepstrum(np.array([1.0, -rho]), 1.0, 8)
        n = np.arange(1, 8)

        assert c[0] == 0.0
        assert np.allclose(c[1:], rho ** n / n)

    def test_matches_reference(self):
        rng = np.random.default_rng(5)
        lpc = np.concatenate([[1.0], rng.uniform(-0.5, 0.5, 10)])
        for n_coeffs in [1, 5, 11, 20]:
            ours = lpc_to_cepstrum(lpc, 0.37, n_coeffs)
            ref = _reference_cepstrum(lpc, 0.37, n_coeffs)
            assert np.abs(ours - ref).max() < 1e-12

    def test_c0_is_log_energy(self):
        lpc = np.array([1.0, -0.5, 0.25, 0.1])
        for n_coeffs in [1, 4, 13]:
            c = lpc_to_cepstrum(lpc, 2.5, n_coeffs)
            assert c[0] == log_energy(2.5)
            assert c[0] == pytest.approx(math.log(2.5))

    def test_deterministic(self):
        lpc = np.array([1.0, -1.2, 0.6, -0.1])
        first = lpc_to_cepstrum(lpc, 0.5, 13)
        for _ in range(3):
            assert np.array_equal(lpc_to_cepstrum(lpc, 0.5, 13), first)
        assert np.array_equal(lpc, [1.0, -1.2, 0.6, -0.1])

    def test_energy_floor(self):
        for err in [0.0, -1e-18, 1e-30]:
            c = lpc_to_cepstrum(np.zeros(5), err, 5)
            assert np.all(np.isfinite(c))
            assert c[0] == pytest.approx(math.log(ENERGY_FLOOR))

    def test_output_buffer(self):
        out = np.full(6, np.nan)
        result = lpc_to_cepstrum(np.array([1.0, -0.5]), 1.0, 6, out=out)
        assert result is out
        assert np.all(np.isfinite(out))
        with pytest.raises(ValueError):
            lpc_to_cepstrum(np.array([1.0, -0.5]), 1.0, 4, out=out)


def run_all_tests():
    """Run all test suites."""
    print("=" * 70)
    print("LPC Core Module - Unit Tests")
    print("=" * 70)

    test_fft = TestFFT()
    test_fft.test_next_power_of_two()
    test_fft.test_fft_random_signal()
    test_fft.test_inverse_fft()
    test_fft.test_autocorrelation()
    test_fft.test_cross_correlation()

    test_lev = TestLevinsonDurbin()
    test_lev.test_ar1()
    test_lev.test_sinusoid_recurrence()
    test_lev.test_matches_scipy_toeplitz()
    test_lev.test_silent_frame()

    test_cep = TestCepstrum()
    test_cep.test_single_pole()
    test_cep.test_matches_reference()
    test_cep.test_energy_floor()

    print("\n" + "=" * 70)
    print("ALL TESTS PASSED ✓")
    print("=" * 70)


if __name__ == "__main__":
    run_all_tests()
