"""
Simulated thermal camera for testing detection algorithms
"""
import time
from typing import Tuple

import numpy as np

from ..config_models import SimulationConfig
from .base import BaseCamera, ThermalFrame


def ambient_field(resolution: Tuple[int, int], ambient_temp: float = 25.0,
                  noise_std: float = 0.0, rng: np.random.Generator = None) -> np.ndarray:
    """Background field of shape (height, width)"""
    width, height = resolution
    field = np.full((height, width), ambient_temp, dtype=np.float32)
    if noise_std > 0:
        rng = rng if rng is not None else np.random.default_rng()
        field += rng.normal(0.0, noise_std, (height, width)).astype(np.float32)
    return field


def add_fire_disc(field: np.ndarray, center: Tuple[float, float], radius: float,
                  peak_temp: float, edge_temp: float = None) -> np.ndarray:
    """
    Paint a circular fire region into a field (in place)

    Args:
        field: Temperature field to modify
        center: (x, y) pixel centre
        radius: Disc radius in pixels
        peak_temp: Temperature at the centre
        edge_temp: Temperature at the rim. None gives a uniform disc.

    Returns:
        The same field, for chaining
    """
    height, width = field.shape
    ys, xs = np.ogrid[:height, :width]
    dist = np.sqrt((xs - center[0]) ** 2 + (ys - center[1]) ** 2)
    inside = dist <= radius

    if edge_temp is None:
        field[inside] = peak_temp
    else:
        # Linear falloff towards the rim
        ramp = peak_temp - (peak_temp - edge_temp) * (dist / max(radius, 1e-6))
        field[inside] = np.maximum(field[inside], ramp[inside])
    return field


class SimulatedFireCamera(BaseCamera):
    """Simulated thermal camera with synthetic fire scenes"""

    def __init__(self, resolution=(384, 288), config: SimulationConfig = None):
        """
        Initialize simulated fire camera

        Args:
            resolution: Camera resolution (width, height)
            config: Scene parameters (ambient, noise, fire sizes/temps)
        """
        self.resolution = tuple(resolution)
        self.config = config if config is not None else SimulationConfig()
        self.connected = False
        self.frame_count = 0
        self.rng = np.random.default_rng(self.config.seed)
        self.fires = []

    def connect(self) -> bool:
        """Connect to simulated camera"""
        self.connected = True
        print(f"[Thermal Sim] Connected - {self.resolution[0]}x{self.resolution[1]}")
        return True

    def capture(self) -> ThermalFrame:
        """Generate synthetic thermal frame"""
        if not self.connected:
            raise RuntimeError("Camera not connected")

        self.frame_count += 1
        cfg = self.config
        frame = ambient_field(self.resolution, cfg.ambient_temp, cfg.noise_std, self.rng)

        self.fires = []
        if self.rng.random() < cfg.fire_probability:
            self._add_fires(frame)

        return self._make_frame(frame, self.frame_count, time.time(),
                                fires=list(self.fires))

    def _add_fires(self, frame: np.ndarray):
        """Place one or more fires with hot cores and cooler rims"""
        cfg = self.config
        width, height = self.resolution
        count = int(self.rng.integers(1, cfg.max_fires + 1))

        for _ in range(count):
            radius = int(self.rng.integers(cfg.fire_radius_range[0], cfg.fire_radius_range[1] + 1))
            x = float(self.rng.uniform(radius, width - radius))
            y = float(self.rng.uniform(radius, height - radius))
            peak = float(self.rng.uniform(*cfg.fire_temp_range))
            add_fire_disc(frame, (x, y), radius, peak, edge_temp=cfg.ambient_temp + 150.0)
            self.fires.append({'center': (x, y), 'radius': radius, 'peak_temp': peak})

    def get_resolution(self) -> tuple:
        """Get camera resolution"""
        return self.resolution

    def disconnect(self):
        """Disconnect from camera"""
        self.connected = False
        print("[Thermal Sim] Disconnected")
