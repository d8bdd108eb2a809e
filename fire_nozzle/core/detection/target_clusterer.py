"""
Proximity grouping of hotspots into ranked spray targets
"""
from typing import List, Sequence

from ..geometry import ORIGIN, Point3, distance_3d
from .models import HotSpot, SprayTarget


def cluster_hotspots(hotspots: Sequence[HotSpot],
                     max_grouping_distance: float) -> List[SprayTarget]:
    """
    Group hotspots around seeds and rank the groups by severity

    Hotspots are visited in id order. Each one not yet grouped seeds a new
    group and pulls in every later ungrouped hotspot closer than
    `max_grouping_distance` to the seed itself. Distances to members that
    were already admitted are not checked, so this is not a transitive
    closure: A-B-C in a chain only merge if B is the seed.

    The input is not modified; the visited set belongs to this call.

    Returns:
        Targets sorted by descending severity. Ties keep formation order.
    """
    ordered = sorted(hotspots, key=lambda h: h.id)
    visited = set()
    targets = []

    for i, seed in enumerate(ordered):
        if seed.id in visited:
            continue
        visited.add(seed.id)
        members = [seed]

        for candidate in ordered[i + 1:]:
            if candidate.id in visited:
                continue
            distance = distance_3d(seed.approx_world_position, candidate.approx_world_position)
            if distance < max_grouping_distance:
                visited.add(candidate.id)
                members.append(candidate)

        targets.append(_aggregate(len(targets), members))

    # sorted() is stable, equal severities stay in formation order
    return sorted(targets, key=lambda t: t.severity, reverse=True)


def _aggregate(target_id: int, members: List[HotSpot]) -> SprayTarget:
    """Combine group members into a single aim point"""
    count = len(members)
    sum_px = sum(m.pixel_centroid[0] for m in members)
    sum_py = sum(m.pixel_centroid[1] for m in members)
    sum_x = sum(m.approx_world_position.x for m in members)
    sum_y = sum(m.approx_world_position.y for m in members)
    sum_z = sum(m.approx_world_position.z for m in members)

    # No member had a valid projection
    if sum_z == 0.0:
        world_aim = ORIGIN
    else:
        world_aim = Point3(sum_x / count, sum_y / count, sum_z / count)

    return SprayTarget(
        id=target_id,
        aim_pixel_point=(sum_px / count, sum_py / count),
        approx_world_aim_point=world_aim,
        member_hotspot_ids=tuple(m.id for m in members),
        severity=sum(m.severity for m in members)
    )
