"""
Analyzer configuration.

One immutable object built at startup and passed to every component.
"""

import math
import os
from dataclasses import dataclass, field

from .errors import ConfigError

EPSILON = 1e-6


@dataclass(frozen=True)
class EqShelf:
    """High shelf: gain_db is added to every bin at or above freq_hz"""

    freq_hz: float
    gain_db: float


DEFAULT_SHELVES = (
    EqShelf(400.0, 2.0),
    EqShelf(1000.0, 2.0),
    EqShelf(5000.0, 2.0),
)


@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Configuration for the spectrum analyzer.

    Attributes:
        sample_rate: Capture rate in Hz
        fft_size: Samples per block (N)
        bar_count: Number of log-spaced display bars (B)
        input_gain: Linear gain applied to samples before windowing
        peak_hold_ms: How long a peak is held before it may fall
        min_db: Bottom of the display range, also the empty first bar value
        max_db: Top of the display range
        min_freq: Lowest frequency mapped onto the bars
        eq_shelves: Cumulative high shelves applied in the dB domain
        sample_width: Bytes per captured sample (16-bit PCM)
    """

    sample_rate: int = 44100
    fft_size: int = 2048
    bar_count: int = 100
    input_gain: float = 0.01
    peak_hold_ms: int = 1000
    min_db: float = -60.0
    max_db: float = 20.0
    min_freq: float = 20.0
    eq_shelves: tuple = field(default=DEFAULT_SHELVES)
    sample_width: int = 2

    def __post_init__(self):
        # Lists are accepted but stored as a tuple so the config stays hashable
        object.__setattr__(self, "eq_shelves", tuple(self.eq_shelves))

        if self.fft_size < 2:
            raise ConfigError(f"fft_size must be >= 2, got {self.fft_size}")
        if self.bar_count < 1:
            raise ConfigError(f"bar_count must be >= 1, got {self.bar_count}")
        if self.sample_rate <= 0:
            raise ConfigError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.min_freq <= 0:
            raise ConfigError(f"min_freq must be positive, got {self.min_freq}")
        if self.min_freq >= self.nyquist:
            raise ConfigError(
                f"min_freq {self.min_freq} Hz is not below Nyquist ({self.nyquist} Hz)"
            )
        if self.min_db >= self.max_db:
            raise ConfigError(
                f"display range is empty: min_db={self.min_db} max_db={self.max_db}"
            )
        if self.peak_hold_ms < 0:
            raise ConfigError(f"peak_hold_ms must be >= 0, got {self.peak_hold_ms}")
        if self.input_gain <= 0:
            raise ConfigError(f"input_gain must be positive, got {self.input_gain}")

    @property
    def bin_count(self) -> int:
        return self.fft_size // 2

    @property
    def bin_width(self) -> float:
        return self.sample_rate / self.fft_size

    @property
    def nyquist(self) -> float:
        return self.sample_rate / 2

    @property
    def block_seconds(self) -> float:
        return self.fft_size / self.sample_rate

    @property
    def floor_db(self) -> float:
        """Level of a silent bin before EQ"""
        return 20 * math.log10(EPSILON)

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        """
        Create config from environment variables.

        Environment Variables:
            SPECTRUM_SAMPLE_RATE: Capture rate in Hz
            SPECTRUM_FFT_SIZE: Samples per block
            SPECTRUM_BARS: Number of bars
            SPECTRUM_INPUT_GAIN: Linear input gain
            SPECTRUM_PEAK_HOLD_MS: Peak hold duration
            SPECTRUM_MIN_DB: Bottom of display range
            SPECTRUM_MAX_DB: Top of display range
        """
        env = {
            "sample_rate": ("SPECTRUM_SAMPLE_RATE", int),
            "fft_size": ("SPECTRUM_FFT_SIZE", int),
            "bar_count": ("SPECTRUM_BARS", int),
            "input_gain": ("SPECTRUM_INPUT_GAIN", float),
            "peak_hold_ms": ("SPECTRUM_PEAK_HOLD_MS", int),
            "min_db": ("SPECTRUM_MIN_DB", float),
            "max_db": ("SPECTRUM_MAX_DB", float),
        }
        kwargs = {}
        for name, (var, cast) in env.items():
            raw = os.getenv(var)
            if raw is None or raw == "":
                continue
            try:
                kwargs[name] = cast(raw)
            except ValueError:
                raise ConfigError(f"{var}={raw!r} is not a valid {cast.__name__}")
        return cls(**kwargs)
