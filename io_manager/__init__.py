from .device_manager import AudioDeviceManager, DeviceSelector, pick_preferred_device

__all__ = ["AudioDeviceManager", "DeviceSelector", "pick_preferred_device"]
