from .spectrum_view import SpectrumView

__all__ = ["SpectrumView"]
