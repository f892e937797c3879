"""
Feature extraction module.

Frame-level LPCC extraction is built on the Numba kernels of `lpc_core`;
sequence-level post-processing uses torch.
"""

from .signal import Signal, FeatureVector
from .config import ExtractorConfig, duration_to_samples
from .base import FeatureExtractor
from .lpcc import LpccExtractor

from .postprocessing import (
    to_matrix,
    to_tensor,
    mean_normalize,
    variance_normalize,
    compute_delta,
    add_deltas,
)

__all__ = [
    # Containers
    'Signal',
    'FeatureVector',
    # Extractors
    'ExtractorConfig',
    'duration_to_samples',
    'FeatureExtractor',
    'LpccExtractor',
    # Post-processing
    'to_matrix',
    'to_tensor',
    'mean_normalize',
    'variance_normalize',
    'compute_delta',
    'add_deltas',
]
