"""
Geometry utilities for pixel projection and 3D distances
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .config_models import CameraIntrinsics

# Returned by distance_3d when either point has no valid projection
MAX_DISTANCE = math.inf


@dataclass(frozen=True)
class Point3:
    """Approximate 3D position in the camera frame"""
    x: float  # meters (right of optical axis)
    y: float  # meters (below optical axis)
    z: float  # meters along optical axis, 0 = no valid estimate

    @property
    def is_valid(self) -> bool:
        return self.z != 0.0

    def __str__(self) -> str:
        return f"Point3(x={self.x:.2f}, y={self.y:.2f}, z={self.z:.2f})"


ORIGIN = Point3(0.0, 0.0, 0.0)


def project_pixel_to_approx_world(
    pixel: Tuple[float, float],
    intrinsics: Optional[CameraIntrinsics],
    plane_distance: float
) -> Point3:
    """
    Project a pixel onto a plane at a fixed distance from the camera

    Args:
        pixel: (x, y) pixel coordinates
        intrinsics: Pinhole intrinsics (fx, fy, cx, cy)
        plane_distance: Assumed distance to the fire plane (m)

    Returns:
        Point3 on the plane. Missing or zero-focal intrinsics return the
        raw pixel coordinates with z=0, which marks the point as invalid.
    """
    px, py = float(pixel[0]), float(pixel[1])
    if intrinsics is None or not intrinsics.is_valid:
        return Point3(px, py, 0.0)

    x = (px - intrinsics.principal_point_x) * plane_distance / intrinsics.focal_length_x
    y = (py - intrinsics.principal_point_y) * plane_distance / intrinsics.focal_length_y
    return Point3(x, y, float(plane_distance))


def distance_3d(a: Point3, b: Point3) -> float:
    """Euclidean distance, or MAX_DISTANCE if either point is invalid"""
    if not a.is_valid or not b.is_valid:
        return MAX_DISTANCE
    dx = a.x - b.x
    dy = a.y - b.y
    dz = a.z - b.z
    return math.sqrt(dx**2 + dy**2 + dz**2)
