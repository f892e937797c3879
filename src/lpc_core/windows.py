import numpy as np
from enum import Enum
from typing import Union


class WindowType(str, Enum):
    """Analysis window types understood by `window_samples`."""
    RECTANGULAR = 'rectangular'
    HAMMING = 'hamming'
    HANN = 'hann'
    BLACKMAN = 'blackman'
    BARTLETT = 'bartlett'


_WINDOW_ALIASES = {
    'rect': WindowType.RECTANGULAR,
    'boxcar': WindowType.RECTANGULAR,
    'hanning': WindowType.HANN,
    'triangular': WindowType.BARTLETT,
}


def resolve_window_type(window: Union[str, WindowType]) -> WindowType:
    """Map a window name (or alias) to its WindowType."""
    if isinstance(window, WindowType):
        return window
    name = str(window).strip().lower()
    if name in _WINDOW_ALIASES:
        return _WINDOW_ALIASES[name]
    try:
        return WindowType(name)
    except ValueError:
        raise ValueError(f"Unknown window type: {window}") from None


def window_samples(window: Union[str, WindowType], length: int) -> np.ndarray:
    """
    Generate an analysis window.

    Parameters
    ----------
    window : str or WindowType
        Window specification:
        - 'rectangular': all ones (aliases 'rect', 'boxcar')
        - 'hamming': Hamming window
        - 'hann': Hann window
        - 'blackman': Blackman window
        - 'bartlett': Bartlett (triangular) window
    length : int
        Length of the window

    Returns
    -------
    np.ndarray
        Window of `length` float64 samples

    Notes
    -----
    Frames are analysed in the time domain, so the windows are the symmetric
    variants (normalized by N - 1), matching scipy's ``fftbins=False``.
    """
    window_type = resolve_window_type(window)

    if length < 0:
        raise ValueError(f"Window length must be non-negative, got {length}")
    if length <= 1 or window_type is WindowType.RECTANGULAR:
        return np.ones(length)

    n = np.arange(length)
    denom = length - 1

    if window_type is WindowType.HAMMING:
        # w[n] = 0.54 - 0.46 * cos(2πn / (N-1))
        return 0.54 - 0.46 * np.cos(2 * np.pi * n / denom)

    elif window_type is WindowType.HANN:
        # w[n] = 0.5 * (1 - cos(2πn / (N-1)))
        return 0.5 - 0.5 * np.cos(2 * np.pi * n / denom)

    elif window_type is WindowType.BLACKMAN:
        return (0.42
                - 0.5 * np.cos(2 * np.pi * n / denom)
                + 0.08 * np.cos(4 * np.pi * n / denom))

    # Bartlett
    return 1.0 - np.abs((n - denom / 2) / (denom / 2))


def lifter_coeffs(count: int, size: int) -> np.ndarray:
    """
    Sinusoidal liftering weights for `count` cepstral coefficients.

    w[n] = 1 + (L / 2) * sin(πn / L), n = 0..count-1

    Liftering de-emphasizes the higher-order coefficients, which are more
    susceptible to noise. A `size` of 0 gives an identity (all ones) lifter.
    """
    if size <= 0:
        return np.ones(count)
    n = np.arange(count)
    return 1 + (size / 2) * np.sin(np.pi * n / size)


def apply_window(block: np.ndarray, window: np.ndarray) -> None:
    """Multiply the leading len(window) samples of block by window, in place."""
    n = window.shape[0]
    np.multiply(block[:n], window, out=block[:n])
