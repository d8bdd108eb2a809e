"""
Thermal camera read through OpenCV VideoCapture (USB device or stream)
"""
import time

import cv2

from .base import BaseCamera, ThermalFrame, gray_to_temperature


class VideoThermalCamera(BaseCamera):
    """
    Grey-level video from a thermal core, mapped to temperature linearly.

    `source` is a device index ("0") or a stream URL (rtsp://...).
    """

    def __init__(self, source: str = "0", resolution=(384, 288),
                 min_temp: float = 0.0, max_temp: float = 550.0):
        self.source = source
        self.resolution = tuple(resolution)
        self.min_temp = min_temp
        self.max_temp = max_temp
        self.cap = None
        self.frame_count = 0

    def connect(self) -> bool:
        try:
            target = int(self.source)
        except ValueError:
            target = self.source

        self.cap = cv2.VideoCapture(target)
        if not self.cap.isOpened():
            print(f"[Video] Failed to open source: {self.source}")
            self.cap = None
            return False
        print(f"[Video] Connected - {self.source}")
        return True

    def capture(self) -> ThermalFrame:
        if self.cap is None:
            raise RuntimeError("Camera not connected")

        ok, frame = self.cap.read()
        if not ok or frame is None:
            raise IOError(f"Failed to capture frame from {self.source}")

        self.frame_count += 1
        temps = gray_to_temperature(frame, self.min_temp, self.max_temp, self.resolution)
        return self._make_frame(temps, self.frame_count, time.time(), source=self.source)

    def get_resolution(self) -> tuple:
        return self.resolution

    def disconnect(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        print("[Video] Disconnected")
