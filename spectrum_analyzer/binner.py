"""
Logarithmic bar aggregation.

Linear FFT bins are spread over bar_count log-spaced bars between min_freq
and Nyquist. Each bar is the plain mean of the dB values that land in it.
Known approximation: this is a mean of decibels, not of power, so it
under-reads bars that mix loud and quiet bins.

Bars that receive no bins (low bars, where one FFT bin spans several bars)
copy the bar to their left from the same pass. An empty first bar gets
min_db.
"""

import numpy as np

from .config import AnalyzerConfig


class LogarithmicBinner:
    def __init__(self, config: AnalyzerConfig):
        self.bar_count = config.bar_count
        self.min_freq = config.min_freq
        self.min_db = config.min_db
        self.sample_rate = config.sample_rate
        self.fft_size = config.fft_size
        self._bar_index = None
        self._bin_mask = None

    def bar_indices(self, bin_count: int):
        """Returns (bin_mask, bar_index) for the bins that land on a bar"""
        if self._bar_index is None or len(self._bin_mask) != bin_count:
            freqs = np.arange(bin_count) * self.sample_rate / self.fft_size

            min_log_freq = np.log10(self.min_freq)
            max_log_freq = np.log10(self.sample_rate / 2)
            log_range = max_log_freq - min_log_freq

            # Bin 0 is DC, skip it and anything below min_freq
            usable = np.zeros(bin_count, dtype=bool)
            usable[1:] = freqs[1:] >= self.min_freq

            bar_index = np.full(bin_count, -1, dtype=np.int64)
            log_freq = np.log10(freqs[usable])
            bar_index[usable] = np.floor(
                (log_freq - min_log_freq) / log_range * self.bar_count
            ).astype(np.int64)

            mask = usable & (bar_index >= 0) & (bar_index < self.bar_count)
            self._bin_mask = mask
            self._bar_index = bar_index[mask]
        return self._bin_mask, self._bar_index

    def hit_counts(self, bin_count: int) -> np.ndarray:
        _, bar_index = self.bar_indices(bin_count)
        return np.bincount(bar_index, minlength=self.bar_count)

    def aggregate(self, bins_db: np.ndarray, out: np.ndarray = None) -> np.ndarray:
        """
        Average bins_db into bars.

        out, if given, is filled in place and returned. Every bar is
        overwritten, so its previous contents never leak through.
        """
        bins_db = np.asarray(bins_db, dtype=np.float64)
        mask, bar_index = self.bar_indices(len(bins_db))

        sums = np.bincount(bar_index, weights=bins_db[mask], minlength=self.bar_count)
        counts = np.bincount(bar_index, minlength=self.bar_count)

        if out is None:
            out = np.empty(self.bar_count, dtype=np.float64)

        # Ascending order: an empty bar copies the bar just written
        for k in range(self.bar_count):
            if counts[k] > 0:
                out[k] = sums[k] / counts[k]
            elif k > 0:
                out[k] = out[k - 1]
            else:
                out[k] = self.min_db
        return out
