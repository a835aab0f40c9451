import numpy as np

from .errors import ConfigError


def hann_window(size: int) -> np.ndarray:
    """Hann window, zero at both ends: 0.5 * (1 - cos(2*pi*i / (size - 1)))"""
    if size < 2:
        raise ConfigError(f"window size must be >= 2, got {size}")
    window = np.hanning(size)
    window.setflags(write=False)
    return window
