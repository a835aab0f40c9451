import logging
import threading
from dataclasses import dataclass

import numpy as np

from .binner import LogarithmicBinner
from .config import AnalyzerConfig
from .equalizer import ShelfEqualizer
from .peaks import PeakTracker
from .transform import SpectralTransform

logger = logging.getLogger(__name__)


def _frozen_copy(values: np.ndarray) -> np.ndarray:
    copy = np.array(values, dtype=np.float64)
    copy.setflags(write=False)
    return copy


@dataclass(frozen=True)
class SpectrumFrame:
    """Immutable bars/peaks snapshot handed to the renderer"""

    timestamp_ms: int
    bars: np.ndarray
    peaks: np.ndarray

    @classmethod
    def capture(cls, timestamp_ms: int, bars, peaks) -> "SpectrumFrame":
        return cls(timestamp_ms, _frozen_copy(bars), _frozen_copy(peaks))


class SpectrumPipeline:
    """
    Block in, SpectrumFrame out.

    window -> FFT -> dB -> shelf EQ -> log bars -> peak hold

    Not reentrant: one capture thread calls process_block. Other threads
    only ever see the SpectrumFrame copies it returns.
    """

    def __init__(self, config: AnalyzerConfig):
        self.config = config
        self.transform = SpectralTransform(config)
        self.equalizer = ShelfEqualizer(
            config.eq_shelves, config.sample_rate, config.fft_size
        )
        self.binner = LogarithmicBinner(config)
        self.peak_tracker = PeakTracker(
            config.bar_count, config.peak_hold_ms, config.min_db
        )

        self.magnitudes_db = np.zeros(config.bin_count)
        self.bars = np.full(config.bar_count, config.min_db, dtype=np.float64)

        self._busy = threading.Lock()
        self._latest = SpectrumFrame.capture(0, self.bars, self.peak_tracker.peaks)

    def reset(self):
        """Back to the startup state: bars and peaks at min_db"""
        with self._busy:
            self.bars.fill(self.config.min_db)
            self.peak_tracker.reset()
            self._latest = SpectrumFrame.capture(
                0, self.bars, self.peak_tracker.peaks
            )

    def process_block(self, block: np.ndarray, now_ms: int) -> SpectrumFrame:
        if not self._busy.acquire(blocking=False):
            raise RuntimeError("SpectrumPipeline.process_block is not reentrant")
        try:
            self.magnitudes_db = self.transform.compute(block)
            self.equalizer.apply(self.magnitudes_db)
            self.binner.aggregate(self.magnitudes_db, out=self.bars)
            peaks = self.peak_tracker.update(self.bars, now_ms)

            frame = SpectrumFrame.capture(now_ms, self.bars, peaks)
            self._latest = frame
            return frame
        finally:
            self._busy.release()

    def snapshot(self) -> SpectrumFrame:
        return self._latest
