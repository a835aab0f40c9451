from .binner import LogarithmicBinner
from .config import AnalyzerConfig, EqShelf
from .equalizer import ShelfEqualizer, apply_shelves
from .errors import AnalyzerError, CaptureError, ConfigError
from .peaks import PeakTracker
from .pipeline import SpectrumFrame, SpectrumPipeline
from .transform import SpectralTransform
from .window import hann_window

__all__ = [
    "AnalyzerConfig",
    "EqShelf",
    "hann_window",
    "SpectralTransform",
    "ShelfEqualizer",
    "apply_shelves",
    "LogarithmicBinner",
    "PeakTracker",
    "SpectrumFrame",
    "SpectrumPipeline",
    "AnalyzerError",
    "CaptureError",
    "ConfigError",
]
