"""
LPC to cepstrum conversion.

For an all-pole model with gain G^2 = err and coefficients a[1..p]:

    c[0] = ln(err)
    c[n] = -a[n] - (1/n) * sum_{k=1}^{n-1} k * c[k] * a[n-k],   n >= 1

with a[j] = 0 for j > p, so coefficients past the predictor order continue
as a decaying tail.
"""

import math

import numpy as np
from numba import jit
from typing import Optional

# Residual energies below this are treated as this value before the log,
# so silent or perfectly predictable frames still give finite features.
ENERGY_FLOOR = 1e-10


def log_energy(err: float) -> float:
    """ln of the residual energy, floored at ENERGY_FLOOR."""
    return math.log(max(err, ENERGY_FLOOR))


@jit(nopython=True, cache=True, nogil=True)
def _cepstral_recursion(lpc: np.ndarray, out: np.ndarray) -> None:
    """Fill out[1:] from lpc; out[0] must already hold the log energy."""
    order = lpc.shape[0] - 1
    n_coeffs = out.shape[0]

    for n in range(1, n_coeffs):
        acc = 0.0
        # a[n-k] vanishes for n - k > order
        k_min = max(1, n - order)
        for k in range(k_min, n):
            acc += k * out[k] * lpc[n - k]

        a_n = lpc[n] if n <= order else 0.0
        out[n] = -a_n - acc / n


def lpc_to_cepstrum(
    lpc: np.ndarray,
    err: float,
    feature_count: int,
    out: Optional[np.ndarray] = None
) -> np.ndarray:
    """
    Convert LPC coefficients to cepstral coefficients.

    Parameters
    ----------
    lpc : np.ndarray
        LPC coefficients a[0..order] (a[0] is not used)
    err : float
        Residual prediction-error energy
    feature_count : int
        Number of cepstral coefficients to produce
    out : np.ndarray, optional
        Destination buffer of `feature_count` values. A new array is allocated
        if omitted.

    Returns
    -------
    np.ndarray
        Cepstral coefficients c[0..feature_count-1]
    """
    if feature_count < 1:
        raise ValueError(f"feature_count must be positive, got {feature_count}")

    if out is None:
        out = np.zeros(feature_count)
    elif out.shape[0] != feature_count:
        raise ValueError(f"Output buffer length {out.shape[0]} != feature_count {feature_count}")

    out[0] = log_energy(err)
    _cepstral_recursion(np.ascontiguousarray(lpc, dtype=np.float64), out)
    return out
