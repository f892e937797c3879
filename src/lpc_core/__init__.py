"""
LPC Core Module - Hand-written Linear Prediction Building Blocks

This module provides from-scratch implementations of the numerical pieces of
LPCC analysis. The hot loops are compiled with Numba and operate on
caller-owned buffers, so an extractor can reuse them across frames.

Modules:
    - fft: in-place radix-2 FFT and FFT-based cross-correlation
    - windows: analysis windows and cepstral liftering weights
    - levinson: Levinson-Durbin recursion
    - cepstrum: LPC to cepstrum conversion
"""

from .fft import fft_inplace, cross_correlate, next_power_of_two
from .windows import WindowType, resolve_window_type, window_samples, lifter_coeffs, apply_window
from .levinson import levinson_durbin, solve
from .cepstrum import lpc_to_cepstrum, log_energy, ENERGY_FLOOR

__all__ = [
    # FFT functions
    'fft_inplace',
    'cross_correlate',
    'next_power_of_two',
    # Windows
    'WindowType',
    'resolve_window_type',
    'window_samples',
    'lifter_coeffs',
    'apply_window',
    # Linear prediction
    'levinson_durbin',
    'solve',
    # Cepstrum
    'lpc_to_cepstrum',
    'log_energy',
    'ENERGY_FLOOR',
]

__version__ = '1.0.0'
