import argparse
import logging
import sys

import pyqtgraph as pg
from PyQt6.QtCore import QThreadPool
from PyQt6.QtWidgets import (
    QApplication,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QHBoxLayout,
    QWidget,
    QFrame,
    QLabel,
)

from audio_signal import CaptureController, PyAudioSource
from io_manager import AudioDeviceManager, DeviceSelector
from spectrum_analyzer import AnalyzerConfig, ConfigError, SpectrumFrame, SpectrumPipeline

from .spectrum_view import SpectrumView

logger = logging.getLogger(__name__)

# Seconds to wait for capture workers on window close
WORKER_JOIN_TIMEOUT = 2.0


class MainWindow(QMainWindow):
    def __init__(self, config: AnalyzerConfig, device_index: int = None):
        super().__init__()
        self.setWindowTitle("Real-Time Spectrum Analyzer")
        self.resize(1200, 680)

        self.config = config
        self.pipeline = SpectrumPipeline(config)

        self.threadpool = QThreadPool()
        self.capture = CaptureController(self.pipeline, self.threadpool, parent=self)
        self.capture.frame_ready.connect(self._on_frame)
        self.capture.error.connect(self._on_audio_error)
        self.capture.started.connect(self._on_capture_started)

        self.device_manager = AudioDeviceManager()
        self._setup_ui()

        if device_index is not None and not self.device_selector.set_input_device_index(
            device_index
        ):
            logger.warning("Input device %s not found, using preferred device", device_index)

        self.device_selector.device_changed.connect(self._on_device_changed)

        self.start_btn.setChecked(True)
        self.toggle_audio(True)

    def _setup_ui(self):
        central = QWidget()
        central.setStyleSheet("background-color: #000000;")
        main_layout = QVBoxLayout(central)
        main_layout.setSpacing(10)
        main_layout.setContentsMargins(10, 10, 10, 10)

        pg.setConfigOptions(antialias=True)

        self.device_selector = DeviceSelector(self.device_manager)
        main_layout.addWidget(self.device_selector)

        self.spectrum_view = SpectrumView(self.config)
        main_layout.addWidget(self.spectrum_view, stretch=1)

        # Control bar at bottom
        control_bar = QFrame()
        control_bar.setStyleSheet("""
            QFrame {
                background-color: #1a1a1a;
                border: 2px solid #333333;
                border-radius: 8px;
            }
        """)
        control_layout = QHBoxLayout(control_bar)
        control_layout.setContentsMargins(15, 10, 15, 10)

        self.start_btn = QPushButton("▶ Start Audio")
        self.start_btn.setCheckable(True)
        self.start_btn.clicked.connect(self.toggle_audio)
        self.start_btn.setStyleSheet("""
            QPushButton {
                padding: 12px 30px;
                font-size: 15px;
                font-weight: bold;
                background-color: #333333;
                color: white;
                border: 2px solid #555555;
                border-radius: 6px;
                min-width: 150px;
            }
            QPushButton:checked {
                background-color: #4CAF50;
                border-color: #4CAF50;
            }
            QPushButton:hover {
                background-color: #444444;
            }
        """)
        control_layout.addWidget(self.start_btn)

        self.status_label = QLabel("Ready")
        self.status_label.setStyleSheet("color: #888888; font-size: 13px;")
        control_layout.addWidget(self.status_label)

        control_layout.addStretch()

        self.info_label = QLabel(
            f"{self.config.sample_rate} Hz | {self.config.fft_size} samples"
        )
        self.info_label.setStyleSheet("color: #00ff88; font-size: 12px;")
        control_layout.addWidget(self.info_label)

        main_layout.addWidget(control_bar)

        self.setCentralWidget(central)

    def _on_device_changed(self):
        if self.capture.is_active:
            logger.info("Input device changed, restarting capture")
            self._start_worker()

    def toggle_audio(self, checked):
        if checked:
            self._start_worker()
        else:
            self.capture.stop()
            self.start_btn.setText("▶ Start Audio")
            self.status_label.setText("Stopped")
            self.status_label.setStyleSheet("color: #888888; font-size: 13px;")

    def _start_worker(self):
        device_index = self.device_selector.get_input_device_index()
        if device_index < 0:
            device_index = None

        self.capture.start(PyAudioSource(self.config, device_index))

        self.start_btn.setText("■ Stop Audio")
        if self.capture.is_switching:
            self.status_label.setText("Switching device...")
            self.status_label.setStyleSheet("color: #ffaa00; font-size: 13px;")
        logger.info("Capture requested on device %s", device_index)

    def _on_capture_started(self):
        self.spectrum_view.set_frame(self.pipeline.snapshot())
        self.status_label.setText("Running...")
        self.status_label.setStyleSheet("color: #00ff88; font-size: 13px;")

    def _on_frame(self, frame: SpectrumFrame):
        self.spectrum_view.set_frame(frame)

    def _on_audio_error(self, error_msg: str):
        logger.error("Audio error: %s", error_msg)
        self.start_btn.setChecked(False)
        self.start_btn.setText("▶ Start Audio")
        self.status_label.setText(f"Error: {error_msg[:30]}...")
        self.status_label.setStyleSheet("color: #ff4444; font-size: 13px;")

    def closeEvent(self, event):
        self.capture.shutdown(WORKER_JOIN_TIMEOUT)
        self.threadpool.waitForDone(1000)
        self.device_manager.terminate()
        event.accept()


def list_devices():
    manager = AudioDeviceManager()
    try:
        preferred = manager.get_preferred_input_device()
        for device_idx, name in manager.get_input_devices():
            marker = "*" if device_idx == preferred else " "
            print(f"{marker} {device_idx:3d}  {name}")
    finally:
        manager.terminate()


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="spectrum-analyzer",
        description="Real-time audio spectrum analyzer with log-spaced bars and peak hold",
        epilog="Analyzer settings are read from SPECTRUM_* environment variables.",
    )
    parser.add_argument(
        "--device", "-d",
        type=int,
        default=None,
        help="PyAudio input device index (default: auto-select)",
    )
    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="List input devices and exit (* marks the auto-selected one)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    if args.list_devices:
        list_devices()
        return 0

    try:
        config = AnalyzerConfig.from_env()
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    app = QApplication(sys.argv[:1])

    # Dark theme for pyqtgraph
    pg.setConfigOption("background", "#000000")
    pg.setConfigOption("foreground", "#969696")

    window = MainWindow(config, device_index=args.device)
    window.show()
    return app.exec()
