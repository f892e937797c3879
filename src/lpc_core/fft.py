"""
In-place FFT and FFT-based Cross-Correlation using Numba JIT

This module implements the iterative Cooley-Tukey radix-2 FFT over separate
real/imaginary float64 buffers, so that callers can keep a fixed set of
scratch buffers and reuse them frame after frame without allocating.

Optimizations:
1. Numba JIT compilation (nopython mode, GIL released)
2. Iterative (non-recursive) implementation - avoids Python call overhead
3. In-place bit-reversal permutation
4. Cache compiled functions
"""

import numpy as np
from numba import jit


def next_power_of_two(n: int) -> int:
    """Smallest power of two that is >= n (1 for n <= 1)."""
    n = int(n)
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


@jit(nopython=True, cache=True, nogil=True)
def _bit_reverse(x: int, n_bits: int) -> int:
    """Reverse the bits of x with n_bits."""
    result = 0
    for _ in range(n_bits):
        result = (result << 1) | (x & 1)
        x >>= 1
    return result


@jit(nopython=True, cache=True, nogil=True)
def _fft_radix2_inplace(re: np.ndarray, im: np.ndarray, inverse: bool) -> None:
    """
    Iterative Cooley-Tukey radix-2 DIT FFT over split real/imag buffers.

    The length of both buffers must be a power of two. The inverse transform
    is scaled by 1/N.
    """
    N = re.shape[0]
    if N <= 1:
        return

    n_bits = 0
    while (1 << n_bits) < N:
        n_bits += 1

    # Bit-reversal permutation (swap each pair once)
    for i in range(N):
        j = _bit_reverse(i, n_bits)
        if j > i:
            tmp = re[i]
            re[i] = re[j]
            re[j] = tmp
            tmp = im[i]
            im[i] = im[j]
            im[j] = tmp

    sign = 1.0 if inverse else -1.0

    # Butterflies: stages of size 2, 4, 8, ..., N
    stage_size = 2
    while stage_size <= N:
        half_size = stage_size // 2
        theta = sign * 2.0 * np.pi / stage_size
        step_re = np.cos(theta)
        step_im = np.sin(theta)

        for k in range(0, N, stage_size):
            w_re = 1.0
            w_im = 0.0

            for j in range(half_size):
                even_idx = k + j
                odd_idx = even_idx + half_size

                odd_re = re[odd_idx] * w_re - im[odd_idx] * w_im
                odd_im = re[odd_idx] * w_im + im[odd_idx] * w_re

                re[odd_idx] = re[even_idx] - odd_re
                im[odd_idx] = im[even_idx] - odd_im
                re[even_idx] += odd_re
                im[even_idx] += odd_im

                next_re = w_re * step_re - w_im * step_im
                w_im = w_re * step_im + w_im * step_re
                w_re = next_re

        stage_size *= 2

    if inverse:
        for i in range(N):
            re[i] /= N
            im[i] /= N


@jit(nopython=True, cache=True, nogil=True)
def _cross_correlate_core(real_a, imag_a, real_b, imag_b, out, count):
    """Linear cross-correlation of a with b, lags 0..count-1, via FFT."""
    # Reverse the first `count` samples of b: correlation == convolution
    # of a with the time-reversed b.
    i = 0
    j = count - 1
    while i < j:
        tmp = real_b[i]
        real_b[i] = real_b[j]
        real_b[j] = tmp
        tmp = imag_b[i]
        imag_b[i] = imag_b[j]
        imag_b[j] = tmp
        i += 1
        j -= 1

    _fft_radix2_inplace(real_a, imag_a, False)
    _fft_radix2_inplace(real_b, imag_b, False)

    # Spectrum product, stored in a
    for k in range(real_a.shape[0]):
        re = real_a[k] * real_b[k] - imag_a[k] * imag_b[k]
        im = real_a[k] * imag_b[k] + imag_a[k] * real_b[k]
        real_a[k] = re
        imag_a[k] = im

    _fft_radix2_inplace(real_a, imag_a, True)

    # Zero lag sits at index count - 1 of the full linear convolution
    for k in range(count):
        out[k] = real_a[count - 1 + k]


def fft_inplace(real: np.ndarray, imag: np.ndarray, inverse: bool = False) -> None:
    """
    Compute the 1-D discrete Fourier Transform in place.

    Parameters
    ----------
    real : np.ndarray
        Real parts (float64), overwritten with the real parts of the result
    imag : np.ndarray
        Imaginary parts (float64), overwritten likewise
    inverse : bool
        If True, compute the inverse transform (scaled by 1/N)

    Examples
    --------
    >>> re = np.array([1.0, 2.0, 1.0, -1.0, 1.5, 1.0, 0.5, -0.5])
    >>> im = np.zeros(8)
    >>> fft_inplace(re, im)
    >>> # re + 1j * im should match numpy.fft.fft of the original input
    """
    n = real.shape[0]
    if imag.shape[0] != n:
        raise ValueError(f"Real/imag length mismatch: {n} != {imag.shape[0]}")
    if n & (n - 1) != 0:
        raise ValueError(f"FFT size must be a power of two, got {n}")
    _fft_radix2_inplace(real, imag, inverse)


def cross_correlate(
    real_a: np.ndarray,
    imag_a: np.ndarray,
    real_b: np.ndarray,
    imag_b: np.ndarray,
    out: np.ndarray,
    count: int
) -> None:
    """
    FFT-based linear cross-correlation, truncated to `count` lags.

    Computes ``out[k] = sum_n a[n + k] * b[n]`` for ``k = 0..count-1``, where
    ``b`` holds `count` meaningful samples at its start. For autocorrelation,
    copy the block into ``b`` before calling.

    All four buffers are scratch space and are overwritten. They must share a
    power-of-two length of at least ``2 * count - 1`` and be zero beyond the
    signal content, so that the circular FFT convolution equals the linear one.

    Parameters
    ----------
    real_a, imag_a : np.ndarray
        First signal (float64)
    real_b, imag_b : np.ndarray
        Second signal (float64), reversed in place by this function
    out : np.ndarray
        Output buffer, at least `count` long
    count : int
        Number of lags to produce
    """
    fft_size = real_a.shape[0]
    if fft_size & (fft_size - 1) != 0:
        raise ValueError(f"Buffer size must be a power of two, got {fft_size}")
    if fft_size < 2 * count - 1:
        raise ValueError(
            f"Buffer size {fft_size} too small for linear correlation of {count} lags"
        )
    if out.shape[0] < count:
        raise ValueError(f"Output buffer holds {out.shape[0]} values, need {count}")
    _cross_correlate_core(real_a, imag_a, real_b, imag_b, out, count)
