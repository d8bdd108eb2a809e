"""
Debug rendering of hotspots and ranked spray targets
"""
from typing import List, Optional

import cv2
import numpy as np

from .aiming.resolver import GimbalAngles
from .detection.models import HotSpot, SprayTarget


def visualize_results(temperature_field: np.ndarray,
                      hotspots: List[HotSpot],
                      targets: List[SprayTarget],
                      temperature_threshold: float,
                      command: Optional[GimbalAngles] = None) -> np.ndarray:
    """
    Create a BGR visualization of one frame's results

    Hotspot boundaries are green with red centroids, the raw (undenoised)
    threshold outline is white, targets are magenta circles labelled
    T1..Tn in rank order with black boxes around their members.
    """
    normalized = cv2.normalize(temperature_field, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
    visual = cv2.applyColorMap(normalized, cv2.COLORMAP_JET)

    for spot in hotspots:
        cv2.drawContours(visual, [spot.boundary.reshape(-1, 1, 2).astype(np.int32)], -1, (0, 255, 0), 1)
        cx, cy = spot.pixel_centroid
        cv2.circle(visual, (int(round(cx)), int(round(cy))), 3, (0, 0, 255), -1)

    raw_mask = (temperature_field >= temperature_threshold).astype(np.uint8)
    raw_contours, _ = cv2.findContours(raw_mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    cv2.drawContours(visual, raw_contours, -1, (255, 255, 255), 1)

    spots_by_id = {spot.id: spot for spot in hotspots}
    for rank, target in enumerate(targets, start=1):
        ax, ay = (int(round(v)) for v in target.aim_pixel_point)
        cv2.circle(visual, (ax, ay), 8, (255, 0, 255), 2)
        cv2.putText(visual, f"T{rank}", (ax + 10, ay),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 0), 2)

        for spot_id in target.member_hotspot_ids:
            spot = spots_by_id.get(spot_id)
            if spot is not None:
                x, y, w, h = spot.bounding_box
                cv2.rectangle(visual, (x, y), (x + w - 1, y + h - 1), (0, 0, 0), 1)

    if command is not None:
        cv2.putText(visual, f"Az {command.azimuth_degrees:.2f}  Pitch {command.pitch_degrees:.2f}",
                    (10, 20), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

    return visual
