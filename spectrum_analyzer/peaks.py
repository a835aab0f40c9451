import numpy as np


class PeakTracker:
    """
    Per-bar peak hold.

    A value at or above the held peak replaces it immediately. A lower value
    replaces it only once the peak is older than hold_ms.
    """

    def __init__(self, bar_count: int, hold_ms: int, initial_db: float):
        self.bar_count = bar_count
        self.hold_ms = hold_ms
        self.initial_db = initial_db
        self.peaks = np.full(bar_count, initial_db, dtype=np.float64)
        self.timestamps = np.zeros(bar_count, dtype=np.int64)

    def reset(self):
        self.peaks.fill(self.initial_db)
        self.timestamps.fill(0)

    def update(self, values: np.ndarray, now_ms: int) -> np.ndarray:
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (self.bar_count,):
            raise ValueError(
                f"expected {self.bar_count} bar values, got shape {values.shape}"
            )

        rising = values >= self.peaks
        expired = (now_ms - self.timestamps) > self.hold_ms
        replace = rising | expired

        self.peaks[replace] = values[replace]
        self.timestamps[replace] = now_ms
        return self.peaks
