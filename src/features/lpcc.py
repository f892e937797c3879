"""
Linear Prediction Cepstral Coefficients (LPCC) extractor.

Each frame goes through:
    1. (optional) pre-emphasis
    2. (optional) analysis window
    3. autocorrelation via FFT cross-correlation
    4. Levinson-Durbin recursion -> LPC coefficients, residual energy
    5. LPC -> cepstrum recursion
    6. (optional) liftering

All intermediate buffers are allocated once per extractor and reused, so the
only allocation per frame is the emitted feature vector.
"""

import numpy as np
from numba import jit
from typing import List, Optional, Union

from src.features.base import FeatureExtractor
from src.features.config import ExtractorConfig
from src.features.signal import Signal, FeatureVector
from src.lpc_core import (
    WindowType,
    window_samples,
    lifter_coeffs,
    apply_window,
    cross_correlate,
    levinson_durbin,
    lpc_to_cepstrum,
)
from src.utils.logging import get_logger, log_config

logger = get_logger(__name__)


@jit(nopython=True, cache=True, nogil=True)
def _pre_emphasis_inplace(block: np.ndarray, count: int, coeff: float, prev: float) -> None:
    """y[k] = x[k] - coeff * x[k-1], with x[-1] = prev."""
    for k in range(count):
        x = block[k]
        block[k] = x - coeff * prev
        prev = x


class LpccExtractor(FeatureExtractor):
    """
    LPCC feature extractor.

    The LPC order equals the number of requested features. One instance owns
    mutable scratch buffers and must not be used from several threads at once;
    use `parallel_copy()` (or `parallel_compute_from()`) for concurrent work.

    Examples
    --------
    >>> extractor = LpccExtractor(16000, 13, window='hamming', pre_emphasis=0.97)
    >>> vectors = extractor.compute(Signal(samples, 16000))
    >>> vectors[0].features.shape  # (13,)
    """

    def __init__(
        self,
        sampling_rate: int,
        feature_count: int,
        frame_duration: float = 0.0256,
        hop_duration: float = 0.010,
        lifter_size: int = 22,
        pre_emphasis: float = 0.0,
        window: Union[str, WindowType] = WindowType.RECTANGULAR
    ):
        self.config = ExtractorConfig(
            sampling_rate=sampling_rate,
            feature_count=feature_count,
            frame_duration=frame_duration,
            hop_duration=hop_duration,
            lifter_size=lifter_size,
            pre_emphasis=pre_emphasis,
            window=window,
        )
        super().__init__(sampling_rate, frame_duration, hop_duration)

        config = self.config
        self._feature_count = config.feature_count
        self._order = config.order
        self._fft_size = config.fft_size
        self._window = config.window
        self._pre_emphasis = float(config.pre_emphasis)
        self._lifter_size = config.lifter_size

        self._window_samples = None
        if self._window is not WindowType.RECTANGULAR:
            self._window_samples = window_samples(self._window, self.frame_size)

        self._lifter_coeffs = None
        if self._lifter_size > 0:
            self._lifter_coeffs = lifter_coeffs(self._feature_count, self._lifter_size)

        # Scratch buffers, reused across frames
        self._block_real = np.zeros(self._fft_size)
        self._block_imag = np.zeros(self._fft_size)
        self._reversed_real = np.zeros(self._fft_size)
        self._reversed_imag = np.zeros(self._fft_size)
        self._cc = np.zeros(self.frame_size)
        self._lpc = np.zeros(self._order + 1)

        log_config(logger, {**config.to_dict(),
                            'frame_size': self.frame_size,
                            'hop_size': self.hop_size,
                            'fft_size': self._fft_size}, title="LPCC extractor")

    @classmethod
    def from_config(cls, config: ExtractorConfig) -> 'LpccExtractor':
        return cls(
            config.sampling_rate,
            config.feature_count,
            frame_duration=config.frame_duration,
            hop_duration=config.hop_duration,
            lifter_size=config.lifter_size,
            pre_emphasis=config.pre_emphasis,
            window=config.window,
        )

    @property
    def feature_count(self) -> int:
        return self._feature_count

    @property
    def feature_descriptions(self) -> List[str]:
        return [f"lpcc{i}" for i in range(self._feature_count)]

    def compute_from(
        self,
        signal: Signal,
        start_sample: int = 0,
        end_sample: Optional[int] = None
    ) -> List[FeatureVector]:
        """
        Compute LPCC vectors for frames starting in [start_sample, end_sample).

        Frames start at start_sample, start_sample + hop_size, ... as long as
        start + frame_size < end_sample.

        Args:
            signal: Input signal; its sampling rate must match the extractor's
            start_sample: First sample of the range
            end_sample: End of the range, exclusive (defaults to len(signal))

        Returns:
            One FeatureVector per frame, in time order (empty if the range is
            shorter than a frame)
        """
        start_sample, end_sample = self.check_input(signal, start_sample, end_sample)

        samples = signal.samples
        n_samples = samples.shape[0]
        frame_size = self.frame_size
        hop_size = self.hop_size

        feature_vectors = []

        prev_sample = samples[start_sample - 1] if start_sample > 0 else 0.0

        i = start_sample
        while i + frame_size < end_sample:
            # Zero all blocks; the tail beyond frame_size stays zero so the
            # FFT correlation is linear, not circular.
            self._block_real.fill(0.0)
            self._block_imag.fill(0.0)
            self._reversed_real.fill(0.0)
            self._reversed_imag.fill(0.0)

            self._block_real[:frame_size] = samples[i:i + frame_size]

            # 0) pre-emphasis
            if self._pre_emphasis > 0.0:
                _pre_emphasis_inplace(self._block_real, frame_size, self._pre_emphasis, prev_sample)
                # Carry-over is the unfiltered sample preceding the next frame
                next_prev = i + hop_size - 1
                if next_prev < n_samples:
                    prev_sample = samples[next_prev]

            # 1) window
            if self._window_samples is not None:
                apply_window(self._block_real, self._window_samples)

            # 2) autocorrelation
            self._reversed_real[:frame_size] = self._block_real[:frame_size]
            cross_correlate(
                self._block_real, self._block_imag,
                self._reversed_real, self._reversed_imag,
                self._cc, frame_size
            )

            # 3) Levinson-Durbin
            self._lpc.fill(0.0)
            err = levinson_durbin(self._cc, self._lpc, self._order)

            # 4) LPC -> LPCC
            lpcc = lpc_to_cepstrum(self._lpc, err, self._feature_count)

            # 5) liftering
            if self._lifter_coeffs is not None:
                np.multiply(lpcc, self._lifter_coeffs, out=lpcc)

            feature_vectors.append(FeatureVector(lpcc, i / self.sampling_rate))

            i += hop_size

        logger.debug(f"Extracted {len(feature_vectors)} LPCC vectors "
                     f"from samples [{start_sample}, {end_sample})")
        return feature_vectors

    def is_parallelizable(self) -> bool:
        return True

    def parallel_copy(self) -> 'LpccExtractor':
        return LpccExtractor.from_config(self.config)
