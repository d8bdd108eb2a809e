"""
Test grouping of hotspots into ranked spray targets
"""
import numpy as np

from fire_nozzle.core.detection.models import HotSpot
from fire_nozzle.core.detection.target_clusterer import cluster_hotspots
from fire_nozzle.core.geometry import ORIGIN, Point3

MAX_DISTANCE = 1.0


def _spot(spot_id, world_x, area=50, peak=300.0, z=8.0, centroid=None):
    return HotSpot(
        id=spot_id,
        pixel_centroid=centroid if centroid is not None else (100.0 + world_x * 10, 50.0),
        approx_world_position=Point3(world_x, 0.0, z),
        pixel_area=area,
        peak_temperature=peak,
        boundary=np.zeros((1, 2), dtype=np.int32)
    )


def _member_sets(targets):
    return [set(t.member_hotspot_ids) for t in targets]


def test_empty_input():
    assert cluster_hotspots([], MAX_DISTANCE) == []


def test_output_partitions_input():
    spots = [_spot(i, x, area=10 + i) for i, x in enumerate([0.0, 0.5, 3.0, 3.2, 7.0, 0.9, 12.0])]
    targets = cluster_hotspots(spots, MAX_DISTANCE)

    all_ids = [i for t in targets for i in t.member_hotspot_ids]
    assert sorted(all_ids) == [s.id for s in spots]
    assert len(all_ids) == len(set(all_ids))
    assert all(t.member_hotspot_ids for t in targets)


def test_severity_and_ranking():
    spots = [
        _spot(0, 0.0, area=40, peak=300.0),
        _spot(1, 0.4, area=20, peak=280.0),
        _spot(2, 5.0, area=100, peak=450.0),
        _spot(3, 10.0, area=10, peak=260.0),
    ]
    targets = cluster_hotspots(spots, MAX_DISTANCE)
    by_id = {s.id: s for s in spots}

    for target in targets:
        expected = sum(by_id[i].pixel_area * by_id[i].peak_temperature
                       for i in target.member_hotspot_ids)
        assert target.severity == expected

    severities = [t.severity for t in targets]
    assert severities == sorted(severities, reverse=True)
    assert _member_sets(targets) == [{2}, {0, 1}, {3}]


def test_grouping_is_relative_to_seed_only():
    # B is close to both, but C is only close to B, never to the seed A
    chain = [_spot(0, 0.0), _spot(1, 0.9), _spot(2, 1.7)]
    targets = cluster_hotspots(chain, MAX_DISTANCE)
    assert sorted(_member_sets(targets), key=min) == [{0, 1}, {2}]

    # Same geometry with B processed first merges everything
    middle_first = [_spot(0, 0.9), _spot(1, 0.0), _spot(2, 1.7)]
    targets = cluster_hotspots(middle_first, MAX_DISTANCE)
    assert _member_sets(targets) == [{0, 1, 2}]


def test_distance_must_be_strictly_below_limit():
    targets = cluster_hotspots([_spot(0, 0.0), _spot(1, 1.0)], MAX_DISTANCE)
    assert len(targets) == 2


def test_aggregated_aim_points():
    spots = [_spot(0, 0.0, centroid=(10.0, 20.0)), _spot(1, 0.5, centroid=(30.0, 40.0))]
    targets = cluster_hotspots(spots, MAX_DISTANCE)

    assert len(targets) == 1
    assert targets[0].aim_pixel_point == (20.0, 30.0)
    assert targets[0].approx_world_aim_point == Point3(0.25, 0.0, 8.0)


def test_broken_projections_never_merge():
    spots = [_spot(0, 5.0, z=0.0), _spot(1, 5.0, z=0.0)]
    targets = cluster_hotspots(spots, MAX_DISTANCE)

    assert len(targets) == 2
    assert all(t.approx_world_aim_point == ORIGIN for t in targets)


def test_equal_severity_keeps_formation_order():
    spots = [_spot(0, 0.0), _spot(1, 5.0), _spot(2, 10.0)]
    targets = cluster_hotspots(spots, MAX_DISTANCE)
    assert [t.id for t in targets] == [0, 1, 2]
    assert [t.member_hotspot_ids for t in targets] == [(0,), (1,), (2,)]


def test_repeated_calls_are_independent():
    spots = [_spot(0, 0.0), _spot(1, 0.5), _spot(2, 4.0)]
    first = cluster_hotspots(spots, MAX_DISTANCE)
    second = cluster_hotspots(spots, MAX_DISTANCE)
    assert first == second
