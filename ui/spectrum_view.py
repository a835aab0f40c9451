import math

import numpy as np
import pyqtgraph as pg
from PyQt6.QtWidgets import QVBoxLayout, QWidget

from spectrum_analyzer import AnalyzerConfig, SpectrumFrame

BAR_BRUSH = pg.mkBrush(26, 255, 26, 166)  # green, 65% opacity
PEAK_PEN = pg.mkPen("#ff0000", width=1.5)
ZERO_DB_PEN = pg.mkPen("#0000ff", width=1)
NO_PEN = pg.mkPen(None)


def clamp_db(values, min_db: float, max_db: float) -> np.ndarray:
    return np.clip(np.asarray(values, dtype=np.float64), min_db, max_db)


def bar_position(freq: float, config: AnalyzerConfig) -> float:
    """Horizontal position of freq in bar units (0 .. bar_count)"""
    if freq < config.min_freq:
        return 0.0
    min_log_freq = math.log10(config.min_freq)
    log_range = math.log10(config.nyquist) - min_log_freq
    return (math.log10(freq) - min_log_freq) / log_range * config.bar_count


def format_freq(freq: float) -> str:
    if freq < 1000:
        return f"{freq:.0f}"
    return f"{freq / 1000:.0f}k"


def frequency_ticks(config: AnalyzerConfig):
    """
    Tick levels for the frequency axis as (major, minor).

    Major ticks are labelled at 1 and 5 of every decade. Minor ticks at
    2-4 and 6-9 only draw a grid line. Both stay within min_freq..Nyquist.
    """
    major, minor = [], []
    decade = 10.0
    while decade <= config.nyquist:
        for step in range(1, 10):
            freq = decade * step
            if not config.min_freq <= freq <= config.nyquist:
                continue
            if step in (1, 5):
                major.append((bar_position(freq, config), format_freq(freq)))
            else:
                minor.append((bar_position(freq, config), ""))
        decade *= 10
    return major, minor


def db_ticks(config: AnalyzerConfig) -> list[tuple[float, str]]:
    ticks = []
    db = config.min_db
    while db <= config.max_db:
        ticks.append((db, f"{db:+3.0f} dB"))
        db += 10
    return ticks


class SpectrumView(QWidget):
    """Bar graph of a SpectrumFrame with red peak-hold lines"""

    def __init__(self, config: AnalyzerConfig, parent=None):
        super().__init__(parent)
        self.config = config
        self.x = np.arange(config.bar_count) + 0.5
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.plot = pg.PlotWidget()
        self.plot.setMenuEnabled(False)
        self.plot.setMouseEnabled(x=False, y=False)
        self.plot.hideButtons()
        self.plot.setXRange(0, self.config.bar_count, padding=0)
        self.plot.setYRange(self.config.min_db, self.config.max_db, padding=0)
        self.plot.showGrid(x=True, y=True, alpha=0.3)

        self.plot.getAxis("bottom").setTicks(list(frequency_ticks(self.config)))
        self.plot.getAxis("left").setTicks([db_ticks(self.config)])
        self.plot.setLabel("left", "Magnitude (dB)")
        self.plot.setLabel("bottom", "Frequency (Hz)")

        self.plot.addItem(pg.InfiniteLine(pos=0.0, angle=0, pen=ZERO_DB_PEN))

        empty = np.zeros(self.config.bar_count)
        self.bar_item = pg.BarGraphItem(
            x=self.x,
            y0=np.full(self.config.bar_count, self.config.min_db),
            height=empty,
            width=1.0,
            brush=BAR_BRUSH,
            pen=NO_PEN,
        )
        self.peak_item = pg.BarGraphItem(
            x=self.x,
            y0=np.full(self.config.bar_count, self.config.min_db),
            height=empty,
            width=1.0,
            brush=pg.mkBrush(None),
            pen=PEAK_PEN,
        )
        self.plot.addItem(self.bar_item)
        self.plot.addItem(self.peak_item)

        layout.addWidget(self.plot)

    def set_frame(self, frame: SpectrumFrame):
        min_db, max_db = self.config.min_db, self.config.max_db
        bars = clamp_db(frame.bars, min_db, max_db)
        peaks = clamp_db(frame.peaks, min_db, max_db)

        self.bar_item.setOpts(height=bars - min_db)
        # Peaks sitting on the floor or the ceiling are not drawn
        visible = (peaks > min_db) & (peaks < max_db)
        pens = [PEAK_PEN if v else NO_PEN for v in visible]
        self.peak_item.setOpts(y0=peaks, pens=pens)
