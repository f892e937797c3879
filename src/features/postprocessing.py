"""
Sequence-level post-processing of extracted feature vectors using PyTorch.

Feature sequences are handled as tensors of shape (..., n_features, n_frames),
time on the last axis.
"""

import numpy as np
import torch
from typing import List, Tuple

from src.features.signal import FeatureVector


def to_matrix(vectors: List[FeatureVector]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Stack feature vectors.

    Returns:
        features: shape (n_frames, n_features)
        times: frame time positions, shape (n_frames,)
    """
    if not vectors:
        return np.zeros((0, 0)), np.zeros(0)
    features = np.stack([v.features for v in vectors])
    times = np.array([v.time_position for v in vectors])
    return features, times


def to_tensor(vectors: List[FeatureVector]) -> torch.Tensor:
    """Feature vectors as a (n_features, n_frames) tensor."""
    features, _ = to_matrix(vectors)
    return torch.from_numpy(features.T.copy())


def mean_normalize(data: torch.Tensor) -> torch.Tensor:
    """Subtract the per-coefficient mean over time (CMN)."""
    if data.shape[-1] == 0:
        return data.clone()
    return data - data.mean(dim=-1, keepdim=True)


def variance_normalize(data: torch.Tensor, eps: float = 1e-5) -> torch.Tensor:
    """Mean and variance normalization over time (CMVN)."""
    if data.shape[-1] == 0:
        return data.clone()
    centered = mean_normalize(data)
    std = centered.pow(2).mean(dim=-1, keepdim=True).sqrt().clamp_min(eps)
    return centered / std


def compute_delta(
    data: torch.Tensor,
    width: int = 9,
    mode: str = 'replicate'
) -> torch.Tensor:
    """
    Compute delta features (local estimate of the derivative along time).

    delta[t] = sum_{n=-w..w} n * data[t + n] / sum_{n=-w..w} n^2

    Args:
        data: Feature sequence, shape (n_frames,) or (n_features, n_frames)
        width: Filter width (must be odd, typically 9)
        mode: Padding mode ('replicate', 'reflect', 'constant')

    Returns:
        Delta features with same shape as input
    """
    if width < 3 or width % 2 == 0:
        raise ValueError(f"Width must be odd and >= 3, got {width}")
    if data.ndim not in (1, 2):
        raise ValueError(f"Expected 1D or 2D input, got shape {tuple(data.shape)}")
    if data.shape[-1] == 0:
        return torch.zeros_like(data)

    half_width = width // 2
    original_ndim = data.ndim

    x = data.reshape(1, 1, -1) if original_ndim == 1 else data.unsqueeze(0)
    n_channels = x.shape[1]

    if mode == 'constant':
        x = torch.nn.functional.pad(x, (half_width, half_width), mode='constant', value=0)
    elif mode in ('replicate', 'reflect'):
        x = torch.nn.functional.pad(x, (half_width, half_width), mode=mode)
    else:
        raise ValueError(f"Unknown padding mode: {mode}")

    # Regression slope weights, one filter per feature channel
    n = torch.arange(-half_width, half_width + 1, dtype=data.dtype, device=data.device)
    weights = (n / (n ** 2).sum()).view(1, 1, -1).repeat(n_channels, 1, 1)

    delta = torch.nn.functional.conv1d(x, weights, groups=n_channels)

    if original_ndim == 1:
        return delta.reshape(-1)
    return delta.squeeze(0)


def add_deltas(
    features: torch.Tensor,
    width: int = 9,
    include_delta: bool = True,
    include_delta_delta: bool = True
) -> torch.Tensor:
    """
    Append delta and delta-delta features.

    Args:
        features: Input features, shape (n_features, n_frames)
        width: Filter width for delta computation
        include_delta: If True, include first derivative
        include_delta_delta: If True, include second derivative

    Returns:
        Shape (n_features * k, n_frames), k = 1 + include_delta + include_delta_delta
    """
    result = [features]
    delta = None

    if include_delta or include_delta_delta:
        delta = compute_delta(features, width=width)
    if include_delta:
        result.append(delta)
    if include_delta_delta:
        result.append(compute_delta(delta, width=width))

    return torch.cat(result, dim=-2)
