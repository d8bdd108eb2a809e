"""
Test pixel projection and 3D distance helpers
"""
import math

from fire_nozzle.core.config_models import CameraIntrinsics
from fire_nozzle.core.geometry import (
    MAX_DISTANCE, ORIGIN, Point3, distance_3d, project_pixel_to_approx_world
)


def _intrinsics(fx=500.0, fy=400.0, cx=320.0, cy=240.0):
    return CameraIntrinsics(width=640, height=480, focal_length_x=fx, focal_length_y=fy,
                            principal_point_x=cx, principal_point_y=cy)


def test_projection_onto_plane():
    point = project_pixel_to_approx_world((420.0, 140.0), _intrinsics(), 8.0)
    assert math.isclose(point.x, 1.6)
    assert math.isclose(point.y, -2.0)
    assert point.z == 8.0
    assert point.is_valid


def test_principal_point_projects_to_axis():
    point = project_pixel_to_approx_world((320.0, 240.0), _intrinsics(), 5.0)
    assert point == Point3(0.0, 0.0, 5.0)


def test_zero_focal_length_degrades_to_pixel_coords():
    for intrinsics in (_intrinsics(fx=0.0), _intrinsics(fy=0.0), None):
        point = project_pixel_to_approx_world((12.5, 33.0), intrinsics, 8.0)
        assert point == Point3(12.5, 33.0, 0.0)
        assert not point.is_valid


def test_distance_3d():
    assert distance_3d(Point3(0, 0, 8), Point3(3, 4, 8)) == 5.0
    assert distance_3d(Point3(1, 1, 8), Point3(1, 1, 8)) == 0.0


def test_distance_with_invalid_point_is_sentinel():
    valid = Point3(0.0, 0.0, 8.0)
    broken = Point3(0.0, 0.0, 0.0)
    assert distance_3d(valid, broken) == MAX_DISTANCE
    assert distance_3d(broken, valid) == MAX_DISTANCE
    # Even identical broken points are never "close"
    assert distance_3d(broken, broken) == MAX_DISTANCE
    assert not MAX_DISTANCE < float("inf")
    assert not ORIGIN.is_valid
