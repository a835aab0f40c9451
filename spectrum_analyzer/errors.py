class AnalyzerError(Exception):
    """Base class for spectrum analyzer errors"""


class ConfigError(AnalyzerError, ValueError):
    """Invalid startup configuration"""


class CaptureError(AnalyzerError, RuntimeError):
    """Audio device could not be opened or read"""
