"""
Test hotspot segmentation on synthetic temperature fields
"""
import numpy as np
import pytest

from fire_nozzle.core.cameras.simulated import add_fire_disc, ambient_field
from fire_nozzle.core.config_models import CameraIntrinsics
from fire_nozzle.core.detection.hotspot_segmenter import segment_hotspots
from fire_nozzle.core.errors import DataFormatError

RESOLUTION = (384, 288)
THRESHOLD = 250.0
PLANE = 8.0
INTRINSICS = CameraIntrinsics(width=384, height=288, focal_length_x=535.0, focal_length_y=535.0,
                              principal_point_x=192.0, principal_point_y=144.0)


def _segment(field, min_area=30, intrinsics=INTRINSICS, **kwargs):
    return segment_hotspots(field, intrinsics, PLANE, THRESHOLD, min_area, **kwargs)


def test_nothing_above_threshold():
    field = ambient_field(RESOLUTION)
    add_fire_disc(field, (100, 100), 20, 249.9)
    assert _segment(field) == []


def test_speckle_is_removed():
    field = ambient_field(RESOLUTION)
    field[50, 50] = 400.0
    field[120, 300] = 400.0
    field[200, 10:12] = 400.0
    assert _segment(field, min_area=0) == []


def test_single_disc_features():
    field = ambient_field(RESOLUTION)
    add_fire_disc(field, (200.0, 100.0), 12, 300.0)

    spots = _segment(field)
    assert len(spots) == 1
    spot = spots[0]
    print(f"Segmented: {spot}")

    assert spot.id == 0
    assert abs(spot.pixel_centroid[0] - 200.0) < 1e-6
    assert abs(spot.pixel_centroid[1] - 100.0) < 1e-6
    assert spot.peak_temperature == 300.0
    # Roughly pi * r^2 after the morphology pass
    assert 380 < spot.pixel_area < 500

    world = spot.approx_world_position
    assert world.z == PLANE
    assert abs(world.x - (200.0 - 192.0) * PLANE / 535.0) < 1e-6
    assert abs(world.y - (100.0 - 144.0) * PLANE / 535.0) < 1e-6

    assert spot.boundary.ndim == 2 and spot.boundary.shape[1] == 2
    x, y, w, h = spot.bounding_box
    assert x <= 200 < x + w and y <= 100 < y + h


def test_peak_is_max_inside_region():
    field = ambient_field(RESOLUTION)
    add_fire_disc(field, (150, 150), 15, 412.5, edge_temp=300.0)
    # A hotter speck elsewhere must not leak into the region's peak
    field[10, 10] = 999.0

    spots = _segment(field)
    assert len(spots) == 1
    assert spots[0].peak_temperature == 412.5


def test_min_area_is_inclusive():
    field = ambient_field(RESOLUTION)
    add_fire_disc(field, (80, 80), 6, 320.0)
    area = _segment(field, min_area=0)[0].pixel_area

    assert len(_segment(field, min_area=area)) == 1
    assert _segment(field, min_area=area + 1) == []


def test_small_regions_are_dropped():
    field = ambient_field(RESOLUTION)
    add_fire_disc(field, (60, 60), 4, 320.0)
    add_fire_disc(field, (250, 200), 14, 320.0)

    spots = _segment(field, min_area=100)
    assert len(spots) == 1
    assert all(spot.pixel_area >= 100 for spot in spots)
    assert abs(spots[0].pixel_centroid[0] - 250.0) < 1e-6


def test_ids_are_sequential():
    field = ambient_field(RESOLUTION)
    for center in ((50, 50), (200, 60), (320, 240)):
        add_fire_disc(field, center, 10, 300.0)

    spots = _segment(field)
    assert [spot.id for spot in spots] == [0, 1, 2]


def test_closing_bridges_narrow_gap():
    field = ambient_field(RESOLUTION)
    field[100:120, 100:130] = 300.0
    field[100:120, 115] = 25.0  # one-pixel cold seam

    spots = _segment(field)
    assert len(spots) == 1


def test_invalid_intrinsics_still_segments():
    field = ambient_field(RESOLUTION)
    add_fire_disc(field, (200.0, 100.0), 12, 300.0)
    broken = INTRINSICS.model_copy(update={'focal_length_x': 0.0})

    for intrinsics in (broken, None):
        spots = _segment(field, intrinsics=intrinsics)
        assert len(spots) == 1
        world = spots[0].approx_world_position
        assert world.z == 0.0
        assert abs(world.x - 200.0) < 1e-6 and abs(world.y - 100.0) < 1e-6


@pytest.mark.parametrize("field", [
    None,
    np.zeros((0, 0), dtype=np.float32),
    np.zeros(10, dtype=np.float32),
    np.zeros((4, 4, 3), dtype=np.float32),
    np.array([[1.0, np.nan], [3.0, 4.0]]),
    "not a field",
])
def test_malformed_field_raises(field):
    with pytest.raises(DataFormatError):
        _segment(field)


def test_double_precision_threshold_and_peak():
    field = np.full((288, 384), 25.0, dtype=np.float64)
    field[40:70, 40:70] = THRESHOLD - 1e-8
    assert _segment(field) == []

    field[150:180, 200:230] = 300.1
    spots = _segment(field)
    assert len(spots) == 1
    assert spots[0].peak_temperature == 300.1
    assert spots[0].peak_temperature == field.max()
    assert spots[0].severity == spots[0].pixel_area * 300.1


def test_integer_field_is_accepted():
    field = np.full((288, 384), 25, dtype=np.int16)
    field[100:130, 100:130] = 320
    spots = _segment(field)
    assert len(spots) == 1
    assert spots[0].peak_temperature == 320.0


@pytest.mark.parametrize("field", [
    np.ones((20, 20), dtype=bool),
    np.ones((20, 20), dtype=np.complex128),
    np.array([["a", "b"], ["c", "d"]]),
])
def test_non_numeric_dtype_raises(field):
    with pytest.raises(DataFormatError):
        _segment(field)
