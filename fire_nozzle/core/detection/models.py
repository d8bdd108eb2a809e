"""
Per-frame detection data structures
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..geometry import Point3


@dataclass(eq=False)
class HotSpot:
    """A contiguous hot region that survived denoising and area filtering"""
    id: int  # sequential per frame
    pixel_centroid: Tuple[float, float]
    approx_world_position: Point3
    pixel_area: int  # pixels
    peak_temperature: float  # °C
    boundary: np.ndarray  # (N, 2) outer contour points, x/y order

    @property
    def bounding_box(self) -> Tuple[int, int, int, int]:
        """(x, y, w, h) of the boundary"""
        xs = self.boundary[:, 0]
        ys = self.boundary[:, 1]
        x_min, y_min = int(xs.min()), int(ys.min())
        return (x_min, y_min, int(xs.max()) - x_min + 1, int(ys.max()) - y_min + 1)

    @property
    def severity(self) -> float:
        return float(self.pixel_area) * float(self.peak_temperature)

    def __str__(self) -> str:
        return (f"HotSpot(id={self.id}, "
                f"center=({self.pixel_centroid[0]:.1f}, {self.pixel_centroid[1]:.1f}), "
                f"area={self.pixel_area}px, peak={self.peak_temperature:.1f}°C)")


@dataclass
class SprayTarget:
    """Aim point formed by one or more nearby hotspots"""
    id: int  # sequential per clustering pass, formation order
    aim_pixel_point: Tuple[float, float]
    approx_world_aim_point: Point3
    member_hotspot_ids: Tuple[int, ...]
    severity: float

    def __str__(self) -> str:
        return (f"SprayTarget(id={self.id}, "
                f"aim=({self.aim_pixel_point[0]:.1f}, {self.aim_pixel_point[1]:.1f}), "
                f"members={list(self.member_hotspot_ids)}, severity={self.severity:.0f})")
