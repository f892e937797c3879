"""Signal container and per-frame feature vectors."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class Signal:
    """Mono sample sequence with its sampling rate (Hz)."""

    samples: np.ndarray
    sampling_rate: int

    def __post_init__(self):
        samples = np.ascontiguousarray(self.samples, dtype=np.float64)
        if samples.ndim != 1:
            raise ValueError(f"Input must be 1D, got shape {samples.shape}")
        if self.sampling_rate <= 0:
            raise ValueError(f"sampling_rate must be positive, got {self.sampling_rate}")
        object.__setattr__(self, 'samples', samples)

    def __len__(self) -> int:
        return self.samples.shape[0]

    def __getitem__(self, index):
        return self.samples[index]

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return len(self) / self.sampling_rate


@dataclass(eq=False)
class FeatureVector:
    """Features of one analysis frame, stamped with the frame start time (s)."""

    features: np.ndarray
    time_position: float
