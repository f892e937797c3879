"""Extractor configuration.

Durations are given in seconds and converted once to sample counts:
- frame_size = round(frame_duration * sampling_rate)
- hop_size = round(hop_duration * sampling_rate)
- fft_size = next power of two >= 2 * frame_size - 1 (linear autocorrelation)
"""

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from src.lpc_core import WindowType, resolve_window_type, next_power_of_two
from src.utils.errors import ConfigurationError


def duration_to_samples(duration: float, sampling_rate: int) -> int:
    """Convert seconds to a sample count, rounding half up."""
    return int(duration * sampling_rate + 0.5)


@dataclass(frozen=True)
class ExtractorConfig:
    """LPCC extractor configuration."""

    sampling_rate: int
    feature_count: int

    # Framing (seconds)
    frame_duration: float = 0.0256
    hop_duration: float = 0.010

    # Post-processing of each frame
    lifter_size: int = 22  # 0 disables liftering
    pre_emphasis: float = 0.0  # 0 disables pre-emphasis
    window: WindowType = WindowType.RECTANGULAR

    def __post_init__(self):
        try:
            window = resolve_window_type(self.window)
        except ValueError as e:
            raise ConfigurationError(str(e)) from None
        object.__setattr__(self, 'window', window)

        if self.sampling_rate <= 0:
            raise ConfigurationError(f"sampling_rate must be positive, got {self.sampling_rate}")
        if self.feature_count <= 0:
            raise ConfigurationError(f"feature_count must be positive, got {self.feature_count}")
        if self.frame_size <= 0:
            raise ConfigurationError(
                f"frame_duration {self.frame_duration}s gives {self.frame_size} samples "
                f"at {self.sampling_rate} Hz"
            )
        if self.hop_size <= 0:
            raise ConfigurationError(
                f"hop_duration {self.hop_duration}s gives {self.hop_size} samples "
                f"at {self.sampling_rate} Hz"
            )
        if self.order >= self.frame_size:
            raise ConfigurationError(
                f"Predictor order {self.order} needs a frame longer than {self.frame_size} samples"
            )
        if self.lifter_size < 0:
            raise ConfigurationError(f"lifter_size must be >= 0, got {self.lifter_size}")
        if self.pre_emphasis < 0:
            raise ConfigurationError(f"pre_emphasis must be >= 0, got {self.pre_emphasis}")

    @property
    def order(self) -> int:
        """LPC predictor order (one per requested feature)."""
        return self.feature_count

    @property
    def frame_size(self) -> int:
        """Analysis frame length in samples."""
        return duration_to_samples(self.frame_duration, self.sampling_rate)

    @property
    def hop_size(self) -> int:
        """Hop length in samples."""
        return duration_to_samples(self.hop_duration, self.sampling_rate)

    @property
    def fft_size(self) -> int:
        """Zero-padded block size for linear autocorrelation."""
        return next_power_of_two(2 * self.frame_size - 1)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['window'] = self.window.value
        return d

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'ExtractorConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {sorted(unknown)}")
        missing = {'sampling_rate', 'feature_count'} - set(config)
        if missing:
            raise ConfigurationError(f"Missing config keys: {sorted(missing)}")
        return cls(**config)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'ExtractorConfig':
        """Load a config from a YAML file (optionally under an `lpcc` key)."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        if 'lpcc' in data:
            data = data['lpcc']
        return cls.from_dict(data)

    def to_yaml(self, path: Union[str, Path]) -> None:
        with open(path, 'w') as f:
            yaml.safe_dump({'lpcc': self.to_dict()}, f, sort_keys=False)
