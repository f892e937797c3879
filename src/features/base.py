"""
Base class for frame-based feature extractors.
"""

import os
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

import numpy as np

from src.features.config import duration_to_samples
from src.features.signal import Signal, FeatureVector
from src.utils.errors import ConfigMismatchError, ConfigurationError
from src.utils.logging import get_logger

logger = get_logger(__name__)


class FeatureExtractor(ABC):
    """
    Base class for sliding-window feature extractors.

    Subclasses must implement:
    - feature_count / feature_descriptions
    - compute_from(): Extract feature vectors from a sample range
    - parallel_copy(): Independent extractor with the same configuration

    Frame/hop bookkeeping and the parallel driver are provided here.
    """

    def __init__(
        self,
        sampling_rate: int,
        frame_duration: float,
        hop_duration: float
    ):
        """
        Initialize extractor.

        Args:
            sampling_rate: Expected sampling rate of input signals (Hz)
            frame_duration: Analysis frame length in seconds
            hop_duration: Distance between frame starts in seconds
        """
        self.sampling_rate = sampling_rate
        self.frame_duration = frame_duration
        self.hop_duration = hop_duration
        self.frame_size = duration_to_samples(frame_duration, sampling_rate)
        self.hop_size = duration_to_samples(hop_duration, sampling_rate)

        if self.frame_size <= 0 or self.hop_size <= 0:
            raise ConfigurationError(
                f"Frame/hop sizes must be positive, got {self.frame_size}/{self.hop_size}"
            )

    @property
    @abstractmethod
    def feature_count(self) -> int:
        """Length of each feature vector."""
        pass

    @property
    @abstractmethod
    def feature_descriptions(self) -> List[str]:
        """Short label of each feature."""
        pass

    @abstractmethod
    def compute_from(
        self,
        signal: Signal,
        start_sample: int = 0,
        end_sample: Optional[int] = None
    ) -> List[FeatureVector]:
        """
        Extract feature vectors from signal[start_sample:end_sample].

        Args:
            signal: Input signal (not modified)
            start_sample: First sample of the range
            end_sample: End of the range, exclusive (defaults to len(signal))

        Returns:
            Feature vectors in time order
        """
        pass

    @abstractmethod
    def parallel_copy(self) -> 'FeatureExtractor':
        """New extractor with identical configuration and its own state."""
        pass

    def is_parallelizable(self) -> bool:
        """True if parallel_copy() instances may run concurrently."""
        return False

    def compute(self, signal: Signal) -> List[FeatureVector]:
        """Extract feature vectors from the whole signal."""
        return self.compute_from(signal, 0, len(signal))

    def check_input(
        self,
        signal: Signal,
        start_sample: int = 0,
        end_sample: Optional[int] = None
    ) -> Tuple[int, int]:
        """
        Validate signal and range before any computation.

        Returns:
            (start_sample, end_sample) with the default end filled in

        Raises:
            ConfigMismatchError: signal sampling rate differs from the extractor's
            ValueError: range outside [0, len(signal)]
        """
        if signal.sampling_rate != self.sampling_rate:
            raise ConfigMismatchError(self.sampling_rate, signal.sampling_rate)

        if end_sample is None:
            end_sample = len(signal)
        if not 0 <= start_sample <= end_sample <= len(signal):
            raise ValueError(
                f"Invalid sample range [{start_sample}, {end_sample}) "
                f"for signal of length {len(signal)}"
            )
        return start_sample, end_sample

    def frame_count(self, start_sample: int, end_sample: int) -> int:
        """Number of frames i = start, start + hop, ... with i + frame_size < end."""
        span = end_sample - start_sample - self.frame_size
        if span <= 0:
            return 0
        return (span - 1) // self.hop_size + 1

    def split_ranges(
        self,
        start_sample: int,
        end_sample: int,
        n_parts: int
    ) -> List[Tuple[int, int]]:
        """
        Split a sample range into sub-ranges holding contiguous groups of frames.

        Each sub-range yields exactly the frames the full range yields at the
        same positions, so concatenated results equal the serial result.
        """
        n_frames = self.frame_count(start_sample, end_sample)
        if n_frames == 0:
            return []

        ranges = []
        for group in np.array_split(np.arange(n_frames), min(n_parts, n_frames)):
            first = start_sample + int(group[0]) * self.hop_size
            last = start_sample + int(group[-1]) * self.hop_size
            ranges.append((first, last + self.frame_size + 1))
        return ranges

    def parallel_compute_from(
        self,
        signal: Signal,
        start_sample: int = 0,
        end_sample: Optional[int] = None,
        n_workers: Optional[int] = None,
        show_progress: bool = False
    ) -> List[FeatureVector]:
        """
        Extract features using one parallel copy of this extractor per worker.

        The frame range is split into contiguous groups, each processed by its
        own copy in a thread pool; results are concatenated in time order.
        Non-parallelizable extractors run serially.

        Args:
            signal: Input signal (shared read-only by all workers)
            start_sample: First sample of the range
            end_sample: End of the range, exclusive
            n_workers: Number of workers (defaults to the CPU count)
            show_progress: If True, show progress bar
        """
        start_sample, end_sample = self.check_input(signal, start_sample, end_sample)

        if n_workers is None:
            n_workers = os.cpu_count() or 1

        if not self.is_parallelizable() or n_workers <= 1:
            return self.compute_from(signal, start_sample, end_sample)

        ranges = self.split_ranges(start_sample, end_sample, n_workers)
        if len(ranges) <= 1:
            return self.compute_from(signal, start_sample, end_sample)

        extractors = [self.parallel_copy() for _ in ranges]
        logger.debug(f"Extracting {len(ranges)} chunks with {len(extractors)} parallel copies")

        with ThreadPoolExecutor(max_workers=len(ranges)) as executor:
            futures = [
                executor.submit(extractor.compute_from, signal, first, last)
                for extractor, (first, last) in zip(extractors, ranges)
            ]

            iterator = futures
            if show_progress:
                from rich.progress import track
                iterator = track(futures, description="Extracting features...")

            chunks = [future.result() for future in iterator]

        return [vector for chunk in chunks for vector in chunk]
