import numpy as np


class ShelfEqualizer:
    """Cumulative high shelves in the dB domain"""

    def __init__(self, shelves, sample_rate: int, fft_size: int):
        self.shelves = tuple(shelves)
        self.sample_rate = sample_rate
        self.fft_size = fft_size
        self._gain = None

    def gain_curve(self, bin_count: int) -> np.ndarray:
        """Total gain per bin: sum of every shelf at or below the bin frequency"""
        if self._gain is None or len(self._gain) != bin_count:
            freqs = np.arange(bin_count) * self.sample_rate / self.fft_size
            gain = np.zeros(bin_count)
            for shelf in self.shelves:
                gain[freqs >= shelf.freq_hz] += shelf.gain_db
            gain.setflags(write=False)
            self._gain = gain
        return self._gain

    def apply(self, bins_db: np.ndarray) -> None:
        """Add shelf gains to bins_db in place. bins_db must be a float ndarray."""
        if not isinstance(bins_db, np.ndarray):
            raise TypeError(
                f"bins_db must be a numpy array to be updated in place, got {type(bins_db).__name__}"
            )
        if not self.shelves:
            return
        np.add(bins_db, self.gain_curve(len(bins_db)), out=bins_db)


def apply_shelves(bins_db: np.ndarray, shelves, sample_rate: int, fft_size: int):
    """One-off form of ShelfEqualizer.apply"""
    ShelfEqualizer(shelves, sample_rate, fft_size).apply(bins_db)
