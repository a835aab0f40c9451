import numpy as np

from .config import EPSILON, AnalyzerConfig
from .window import hann_window


class SpectralTransform:
    """Window a block and turn it into N/2 magnitudes in dB"""

    def __init__(self, config: AnalyzerConfig):
        self.fft_size = config.fft_size
        self.bin_count = config.bin_count
        self.window = hann_window(config.fft_size)

    def apply_window(self, block: np.ndarray) -> np.ndarray:
        block = np.asarray(block, dtype=np.float64)
        if block.shape != (self.fft_size,):
            raise ValueError(
                f"expected a block of {self.fft_size} samples, got shape {block.shape}"
            )
        return block * self.window

    def transform(self, windowed: np.ndarray) -> np.ndarray:
        """Returns magnitudes_db for bins 0 .. N/2 - 1"""
        spectrum = np.fft.rfft(windowed, n=self.fft_size)[: self.bin_count]

        real = spectrum.real.copy()
        imag = spectrum.imag.copy()
        # DC and the last kept bin are treated as purely real
        imag[0] = 0.0
        imag[-1] = 0.0

        magnitude = np.sqrt(real * real + imag * imag)
        # Avoid log(0) by adding small epsilon
        return 20 * np.log10(magnitude + EPSILON)

    def compute(self, block: np.ndarray) -> np.ndarray:
        return self.transform(self.apply_window(block))
