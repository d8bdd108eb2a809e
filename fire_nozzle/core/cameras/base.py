"""
Abstract camera interface for thermal frame sources
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple

import cv2
import numpy as np


@dataclass
class ThermalFrame:
    """Thermal camera frame data"""
    temperature_array: np.ndarray  # 2D array of temperatures (Celsius)
    timestamp: float
    frame_number: int
    min_temp: float
    max_temp: float
    resolution: tuple  # (width, height)
    metadata: dict


def gray_to_temperature(gray: np.ndarray,
                        min_temp: float,
                        max_temp: float,
                        target_size: Tuple[int, int]) -> np.ndarray:
    """
    Map an 8-bit grey image onto a temperature range

    Args:
        gray: Grey-scale image (0..255), or BGR which is converted first
        min_temp: Temperature of grey level 0
        max_temp: Temperature of grey level 255
        target_size: Output size (width, height)

    Returns:
        float32 temperature matrix of shape (height, width)
    """
    if gray.ndim == 3:
        gray = cv2.cvtColor(gray, cv2.COLOR_BGR2GRAY)
    if (gray.shape[1], gray.shape[0]) != tuple(target_size):
        gray = cv2.resize(gray, tuple(target_size), interpolation=cv2.INTER_LINEAR)

    scale = (max_temp - min_temp) / 255.0
    return gray.astype(np.float32) * np.float32(scale) + np.float32(min_temp)


class BaseCamera(ABC):
    """Abstract base class for all thermal frame sources"""

    @abstractmethod
    def connect(self) -> bool:
        """Connect to camera"""
        pass

    @abstractmethod
    def capture(self) -> ThermalFrame:
        """Capture a frame"""
        pass

    @abstractmethod
    def get_resolution(self) -> tuple:
        """Get camera resolution (width, height)"""
        pass

    @abstractmethod
    def disconnect(self):
        """Disconnect from camera"""
        pass

    def _make_frame(self, temps: np.ndarray, frame_number: int, timestamp: float,
                    **metadata) -> ThermalFrame:
        return ThermalFrame(
            temperature_array=temps,
            timestamp=timestamp,
            frame_number=frame_number,
            min_temp=float(np.min(temps)),
            max_temp=float(np.max(temps)),
            resolution=(temps.shape[1], temps.shape[0]),
            metadata=metadata
        )
