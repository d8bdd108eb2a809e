"""
Thermal frames replayed from a grey-scale image file
"""
import time
from pathlib import Path

import cv2

from .base import BaseCamera, ThermalFrame, gray_to_temperature


class ImageFileCamera(BaseCamera):
    """Reads the same radiometric snapshot on every capture"""

    def __init__(self, image_path: str, resolution=(384, 288),
                 min_temp: float = 20.0, max_temp: float = 500.0):
        """
        Args:
            image_path: Grey-scale thermal image
            resolution: Frames are resized to this (width, height)
            min_temp: Temperature of grey level 0
            max_temp: Temperature of grey level 255
        """
        self.image_path = Path(image_path)
        self.resolution = tuple(resolution)
        self.min_temp = min_temp
        self.max_temp = max_temp
        self.connected = False
        self.frame_count = 0

    def connect(self) -> bool:
        if not self.image_path.exists():
            print(f"[ImageFile] Image not found: {self.image_path}")
            return False
        self.connected = True
        print(f"[ImageFile] Connected - {self.image_path.name}")
        return True

    def capture(self) -> ThermalFrame:
        if not self.connected:
            raise RuntimeError("Camera not connected")

        # Re-read each time so the file can be swapped while running
        gray = cv2.imread(str(self.image_path), cv2.IMREAD_GRAYSCALE)
        if gray is None:
            raise IOError(f"Could not load image from {self.image_path}")

        self.frame_count += 1
        temps = gray_to_temperature(gray, self.min_temp, self.max_temp, self.resolution)
        return self._make_frame(temps, self.frame_count, time.time(),
                                source=str(self.image_path))

    def get_resolution(self) -> tuple:
        return self.resolution

    def disconnect(self):
        self.connected = False
        print("[ImageFile] Disconnected")
