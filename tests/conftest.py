"""
Pytest fixtures for spectrum analyzer tests.
"""
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from spectrum_analyzer import AnalyzerConfig


@pytest.fixture
def config():
    """Default analyzer configuration (44.1 kHz, 2048-point FFT, 100 bars)."""
    return AnalyzerConfig()


@pytest.fixture
def flat_config():
    """Default configuration without EQ shelves."""
    return AnalyzerConfig(eq_shelves=())


@pytest.fixture
def tiny_config():
    """8-point FFT at 8 kHz with 4 bars, small enough to check by hand."""
    return AnalyzerConfig(sample_rate=8000, fft_size=8, bar_count=4, eq_shelves=())


@pytest.fixture
def sine_block(config):
    """1 kHz sine at full scale times the input gain."""
    t = np.arange(config.fft_size) / config.sample_rate
    return np.sin(2 * np.pi * 1000.0 * t) * config.input_gain
