"""
Levinson-Durbin recursion (Numba JIT)

Solves the symmetric Toeplitz normal equations of linear prediction order by
order. With autocorrelation r[0..p] the predictor coefficients a[1..p] satisfy

    sum_{j=0..p} a[j] * r[|i - j|] = 0,  i = 1..p,  a[0] = 1

i.e. the prediction error is e[n] = x[n] + a[1] x[n-1] + ... + a[p] x[n-p].
"""

import numpy as np
from numba import jit
from typing import Tuple


@jit(nopython=True, cache=True, nogil=True)
def _levinson_durbin_core(r: np.ndarray, a: np.ndarray, order: int) -> float:
    """
    In-place recursion. `a` must be zero-initialized and hold order + 1 values.

    A silent input (r[0] <= 0) or a residual that collapses to zero part-way
    (perfectly predictable input) ends the recursion with a zero residual; the
    coefficients not reached stay zero.
    """
    err = r[0]
    a[0] = 1.0

    if err <= 0.0:
        return 0.0

    for i in range(1, order + 1):
        # Reflection coefficient
        k = 0.0
        for j in range(i):
            k -= a[j] * r[i - j]
        k /= err

        # Symmetric update: a[n], a[i-n] <- a[n] + k a[i-n], a[i-n] + k a[n]
        for n in range(i // 2 + 1):
            tmp = a[i - n] + k * a[n]
            a[n] = a[n] + k * a[i - n]
            a[i - n] = tmp

        err *= 1.0 - k * k

        if err <= 0.0:
            return 0.0

    return err


def levinson_durbin(autocorrelation: np.ndarray, lpc: np.ndarray, order: int) -> float:
    """
    Compute LPC coefficients from an autocorrelation sequence, in place.

    Parameters
    ----------
    autocorrelation : np.ndarray
        Autocorrelation lags r[0..], at least order + 1 values
    lpc : np.ndarray
        Output buffer of order + 1 values; must be zeroed by the caller.
        lpc[0] is set to 1.
    order : int
        Predictor order

    Returns
    -------
    float
        Residual prediction-error energy (never negative)
    """
    if order < 0:
        raise ValueError(f"Order must be non-negative, got {order}")
    if autocorrelation.shape[0] < order + 1:
        raise ValueError(
            f"Need {order + 1} autocorrelation lags for order {order}, "
            f"got {autocorrelation.shape[0]}"
        )
    if lpc.shape[0] < order + 1:
        raise ValueError(f"LPC buffer holds {lpc.shape[0]} values, need {order + 1}")
    return _levinson_durbin_core(autocorrelation, lpc, order)


def solve(autocorrelation: np.ndarray, order: int) -> Tuple[np.ndarray, float]:
    """
    Allocating variant of `levinson_durbin`.

    Returns
    -------
    lpc : np.ndarray
        order + 1 coefficients, lpc[0] == 1
    err : float
        Residual prediction-error energy

    Examples
    --------
    >>> r = 0.9 ** np.arange(4)  # AR(1) autocorrelation, x[n] = 0.9 x[n-1] + e[n]
    >>> lpc, err = solve(r, 1)
    >>> lpc  # [1.0, -0.9]
    >>> err  # 1 - 0.81 = 0.19
    """
    r = np.ascontiguousarray(autocorrelation, dtype=np.float64)
    lpc = np.zeros(order + 1)
    err = levinson_durbin(r, lpc, order)
    return lpc, err
