import logging
import threading
import time

import numpy as np
import pyaudio
from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSlot, pyqtSignal

from spectrum_analyzer import AnalyzerConfig, CaptureError, SpectrumPipeline

logger = logging.getLogger(__name__)


def decode_pcm16(raw: bytes, gain: float) -> np.ndarray:
    """Little-endian signed 16-bit PCM -> float samples scaled by gain"""
    samples = np.frombuffer(raw, dtype="<i2").astype(np.float64)
    return samples / 32768.0 * gain


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class PyAudioSource:
    """Blocking mono 16-bit capture of fft_size-sample blocks"""

    def __init__(self, config: AnalyzerConfig, device_index: int = None):
        self.config = config
        self.device_index = device_index
        self._p = None
        self._stream = None

    def open(self):
        try:
            self._p = pyaudio.PyAudio()
            self._stream = self._p.open(
                format=pyaudio.paInt16,
                channels=1,
                rate=self.config.sample_rate,
                input=True,
                output=False,
                input_device_index=self.device_index,
                frames_per_buffer=self.config.fft_size,
            )
        except (OSError, ValueError) as e:
            self.close()
            raise CaptureError(f"cannot open input device {self.device_index}: {e}")
        logger.info(
            "Opened input device %s at %d Hz, %d-sample blocks",
            self.device_index,
            self.config.sample_rate,
            self.config.fft_size,
        )

    def read_block(self):
        """Returns one block of samples, or None if the read came back short"""
        if self._stream is None:
            raise CaptureError("input stream is not open")
        try:
            raw = self._stream.read(self.config.fft_size, exception_on_overflow=False)
        except OSError as e:
            raise CaptureError(f"read from input device failed: {e}")

        expected = self.config.fft_size * self.config.sample_width
        if len(raw) < expected:
            logger.debug("Dropping short read: %d of %d bytes", len(raw), expected)
            return None
        return decode_pcm16(raw, self.config.input_gain)

    def close(self):
        if self._stream:
            try:
                self._stream.stop_stream()
                self._stream.close()
            except OSError as e:
                logger.warning("Error closing input stream: %s", e)
            self._stream = None
        if self._p:
            self._p.terminate()
            self._p = None


# Signals need to be in a QObject
class AudioSignals(QObject):
    """Signals for thread-safe communication from audio worker"""

    frame_ready = pyqtSignal(object)  # SpectrumFrame
    error = pyqtSignal(str)
    stopped = pyqtSignal()


class AudioIO(QRunnable):
    """
    Capture loop: read a block, run the pipeline, emit the frame.

    Stops when stop() is called or the source fails. stopped is emitted
    after run() has closed the source; CaptureController waits for it
    before handing the pipeline to another worker.
    """

    def __init__(self, pipeline: SpectrumPipeline, source, clock=monotonic_ms):
        super().__init__()
        self.setAutoDelete(False)
        self.pipeline = pipeline
        self.source = source
        self.clock = clock
        self.is_running = True
        self.signals = AudioSignals()
        self.blocks_processed = 0
        self._finished = threading.Event()

    @pyqtSlot()
    def run(self):
        try:
            self.source.open()
            while self.is_running:
                block = self.source.read_block()
                if block is None:
                    continue
                frame = self.pipeline.process_block(block, self.clock())
                self.blocks_processed += 1
                self.signals.frame_ready.emit(frame)
        except CaptureError as e:
            logger.error("Capture stopped: %s", e)
            self.signals.error.emit(str(e))
        except Exception as e:
            logger.exception("Capture loop crashed")
            self.signals.error.emit(str(e))
        finally:
            self.source.close()
            self.is_running = False
            logger.info("Capture loop ended after %d blocks", self.blocks_processed)
            self._finished.set()
            self.signals.stopped.emit()

    @pyqtSlot()
    def stop(self):
        self.is_running = False

    def wait(self, timeout: float = None) -> bool:
        """Block until run() has returned. False on timeout."""
        return self._finished.wait(timeout)


class CaptureController(QObject):
    """
    Owns the capture worker for one pipeline.

    start() with a new source stops the current worker and launches the next
    one only after the old run() has returned, so the pipeline and the audio
    device are never used by two workers at once. Lives on the GUI thread.
    """

    frame_ready = pyqtSignal(object)  # SpectrumFrame
    error = pyqtSignal(str)
    started = pyqtSignal()

    def __init__(self, pipeline: SpectrumPipeline, threadpool: QThreadPool = None,
                 clock=monotonic_ms, parent=None):
        super().__init__(parent)
        self.pipeline = pipeline
        self.threadpool = threadpool or QThreadPool.globalInstance()
        self.clock = clock
        self.worker = None
        self._retiring = []  # stopped but still inside run()
        self._pending = None  # source waiting for the retiring workers

    @property
    def is_active(self) -> bool:
        return self.worker is not None or self._pending is not None

    @property
    def is_switching(self) -> bool:
        return bool(self._retiring)

    def start(self, source):
        """Capture from source, replacing whatever runs now"""
        self._pending = source
        self._retire_worker()
        self._launch_pending()

    def stop(self):
        self._pending = None
        self._retire_worker()

    def shutdown(self, timeout: float) -> bool:
        """Stop and block until every worker has left run(). False on timeout."""
        self.stop()
        self._retiring = [w for w in self._retiring if not w.wait(timeout)]
        if self._retiring:
            logger.warning(
                "%d capture worker(s) did not stop within %.1fs", len(self._retiring), timeout
            )
            return False
        return True

    def _retire_worker(self):
        worker = self.worker
        self.worker = None
        if worker is None:
            return
        worker.signals.frame_ready.disconnect(self.frame_ready)
        worker.signals.error.disconnect(self.error)
        worker.stop()
        if self.threadpool.tryTake(worker):
            # Never started, so no stream was opened
            return
        if not worker.wait(0):
            self._retiring.append(worker)
            logger.debug("Waiting for capture worker to finish its block")

    def _launch_pending(self):
        if self._pending is None or self.worker is not None or self._retiring:
            return
        source, self._pending = self._pending, None

        self.pipeline.reset()
        worker = AudioIO(self.pipeline, source, clock=self.clock)
        worker.signals.frame_ready.connect(self.frame_ready)
        worker.signals.error.connect(self.error)
        worker.signals.stopped.connect(self._on_worker_stopped)
        self.worker = worker
        self.threadpool.start(worker)
        self.started.emit()

    @pyqtSlot()
    def _on_worker_stopped(self):
        self._retiring = [w for w in self._retiring if not w.wait(0)]
        if self.worker is not None and self.worker.wait(0):
            # Ended on its own after an error
            self.worker = None
        self._launch_pending()
