"""
Tests for automatic input device selection.
"""

import pytest

pytest.importorskip("PyQt6")
pytest.importorskip("pyaudio")

from io_manager import pick_preferred_device


class TestPickPreferredDevice:
    def test_empty_list(self):
        assert pick_preferred_device([]) is None

    def test_first_device_by_default(self):
        devices = [(3, "Built-in Microphone"), (5, "USB Headset")]
        assert pick_preferred_device(devices) == 3

    def test_virtual_cable_preferred(self):
        devices = [
            (0, "Microphone"),
            (1, "Stereo Mix (Realtek)"),
            (2, "CABLE Output (VB-Audio Virtual Cable)"),
        ]
        assert pick_preferred_device(devices) == 2

    def test_stereo_mix_fallback(self):
        devices = [(0, "Microphone"), (4, "Stereo Mix (Realtek)")]
        assert pick_preferred_device(devices) == 4

    def test_italian_loopback_name(self):
        devices = [(0, "Microfono"), (7, "Quel che senti (Realtek)")]
        assert pick_preferred_device(devices) == 7

    def test_case_insensitive(self):
        devices = [(0, "Microphone"), (1, "vb-audio point")]
        assert pick_preferred_device(devices) == 1
