import logging

import pyaudio
from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QPushButton,
    QLabel,
    QGridLayout,
    QComboBox,
    QGroupBox,
)

logger = logging.getLogger(__name__)

# Virtual audio cables, preferred over everything else
CABLE_HINTS = ("cable", "vb-audio")
# Loopback / "what you hear" devices
MIX_HINTS = ("mix", "stereo", "quel che senti")


def pick_preferred_device(devices: list[tuple[int, str]]):
    """
    Choose the input device to start with.

    Virtual cable first, then a stereo-mix style loopback, then whatever
    comes first. Returns the device index or None for an empty list.
    """
    preferred = None
    fallback = None
    for device_idx, name in devices:
        name_lower = name.lower()
        if any(hint in name_lower for hint in CABLE_HINTS):
            preferred = device_idx
        if preferred is None and any(hint in name_lower for hint in MIX_HINTS):
            fallback = device_idx

    if preferred is not None:
        return preferred
    if fallback is not None:
        return fallback
    if devices:
        return devices[0][0]
    return None


class AudioDeviceManager:
    def __init__(self):
        self._p = pyaudio.PyAudio()

    def get_device_count(self) -> int:
        return self._p.get_device_count()

    def get_device_info(self, index: int) -> dict:
        return self._p.get_device_info_by_index(index)

    def get_input_devices(self) -> list[tuple[int, str]]:
        devices = []
        for i in range(self.get_device_count()):
            try:
                info = self.get_device_info(i)
            except OSError as e:
                logger.debug("Skipping device %d: %s", i, e)
                continue
            if info["maxInputChannels"] > 0:
                name = f"{info['name']} ({int(info['defaultSampleRate'])} Hz)"
                devices.append((i, name))
        return devices

    def get_default_input_device(self) -> int:
        try:
            return self._p.get_default_input_device_info()["index"]
        except IOError:
            return -1

    def get_preferred_input_device(self) -> int:
        devices = self.get_input_devices()
        choice = pick_preferred_device(devices)
        if choice is None:
            return self.get_default_input_device()
        return choice

    def terminate(self):
        self._p.terminate()


class DeviceSelector(QGroupBox):
    """Widget for selecting the capture device"""

    device_changed = pyqtSignal()  # Emitted when the selected device changes

    def __init__(self, device_manager: AudioDeviceManager = None, parent=None):
        super().__init__("Input", parent)

        self.device_manager = device_manager or AudioDeviceManager()

        self._setup_ui()
        self._populate_devices()

    def _setup_ui(self):
        layout = QGridLayout(self)
        layout.setSpacing(10)

        combo_style = """
            QComboBox {
                background-color: #3a3a3a;
                color: white;
                border: 1px solid #555555;
                border-radius: 4px;
                padding: 5px 10px;
                font-size: 12px;
            }
            QComboBox:hover {
                border-color: #00ff88;
            }
            QComboBox QAbstractItemView {
                background-color: #2a2a2a;
                color: white;
                selection-background-color: #00ff88;
                selection-color: black;
                border: 1px solid #555555;
            }
        """

        input_label = QLabel("Input Device:")
        input_label.setStyleSheet("color: white; font-weight: bold;")
        layout.addWidget(input_label, 0, 0)

        self.input_combo = QComboBox()
        self.input_combo.setMinimumWidth(400)
        self.input_combo.currentIndexChanged.connect(self._on_device_changed)
        self.input_combo.setStyleSheet(combo_style)
        layout.addWidget(self.input_combo, 0, 1)

        refresh_btn = QPushButton("Refresh Devices")
        refresh_btn.clicked.connect(self._populate_devices)
        refresh_btn.setStyleSheet("""
            QPushButton {
                background-color: #3a3a3a;
                color: white;
                border: 1px solid #555555;
                border-radius: 4px;
                padding: 8px 15px;
            }
            QPushButton:hover {
                background-color: #4a4a4a;
                border-color: #00ff88;
            }
        """)
        layout.addWidget(refresh_btn, 0, 2)

        self.setStyleSheet("""
            QGroupBox {
                color: #00ff88;
                font-weight: bold;
                border: 2px solid #333333;
                border-radius: 8px;
                margin-top: 10px;
                padding-top: 10px;
            }
            QGroupBox::title {
                subcontrol-origin: margin;
                left: 10px;
                padding: 0 5px;
            }
        """)

    def _populate_devices(self):
        """Refresh device list, keeping the current choice if it still exists"""
        current_input = self.get_input_device_index()

        self.input_combo.blockSignals(True)
        self.input_combo.clear()

        input_devices = self.device_manager.get_input_devices()
        preferred = pick_preferred_device(input_devices)
        preferred_idx = 0

        for i, (device_idx, name) in enumerate(input_devices):
            self.input_combo.addItem(name, device_idx)
            if device_idx == preferred:
                preferred_idx = i

        idx = self.input_combo.findData(current_input) if current_input >= 0 else -1
        self.input_combo.setCurrentIndex(idx if idx >= 0 else preferred_idx)

        self.input_combo.blockSignals(False)
        logger.debug("Found %d input devices", len(input_devices))

        if self.get_input_device_index() != current_input:
            self.device_changed.emit()

    def _on_device_changed(self):
        self.device_changed.emit()

    def get_input_device_index(self) -> int:
        """Returns the PyAudio device index for the selected input"""
        if self.input_combo.currentIndex() < 0:
            return -1
        return self.input_combo.currentData()

    def set_input_device_index(self, device_idx: int) -> bool:
        idx = self.input_combo.findData(device_idx)
        if idx < 0:
            return False
        self.input_combo.setCurrentIndex(idx)
        return True
