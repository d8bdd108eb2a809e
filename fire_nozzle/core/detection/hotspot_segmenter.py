"""
Temperature threshold segmentation of fire hotspots
"""
from typing import List, Optional

import cv2
import numpy as np
from scipy import ndimage

from ..config_models import CameraIntrinsics
from ..errors import DataFormatError
from ..geometry import project_pixel_to_approx_world
from .models import HotSpot

# 8-connectivity
CONNECTIVITY = np.ones((3, 3), dtype=int)


def check_temperature_field(field) -> np.ndarray:
    """
    Return the field as a 2D floating point array or raise DataFormatError

    Floating input keeps its own precision so the threshold test and the
    peak temperature see the caller's exact samples. Integer input is
    widened to float64.
    """
    if field is None:
        raise DataFormatError("Temperature field is missing")
    try:
        temps = np.asarray(field)
    except (TypeError, ValueError) as e:
        raise DataFormatError(f"Temperature field is not numeric: {e}") from e

    if np.issubdtype(temps.dtype, np.integer):
        temps = temps.astype(np.float64)
    elif not np.issubdtype(temps.dtype, np.floating):
        raise DataFormatError(f"Temperature field is not numeric: dtype {temps.dtype}")

    if temps.ndim != 2:
        raise DataFormatError(f"Temperature field must be 2D, got shape {temps.shape}")
    if temps.size == 0:
        raise DataFormatError("Temperature field is empty")
    if not np.all(np.isfinite(temps)):
        raise DataFormatError("Temperature field contains non-finite samples")
    return temps


def denoise_mask(mask: np.ndarray, kernel_size: int = 5) -> np.ndarray:
    """Opening removes speckle, closing then bridges small gaps"""
    kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (kernel_size, kernel_size))
    mask = cv2.morphologyEx(mask, cv2.MORPH_OPEN, kernel)
    mask = cv2.morphologyEx(mask, cv2.MORPH_CLOSE, kernel)
    return mask


def segment_hotspots(field,
                     intrinsics: Optional[CameraIntrinsics],
                     plane_distance: float,
                     temperature_threshold: float,
                     min_area_pixels: int,
                     kernel_size: int = 5) -> List[HotSpot]:
    """
    Find hotspots in a temperature field

    Args:
        field: 2D array of temperatures (°C), rows x columns
        intrinsics: Camera intrinsics used to project centroids. Invalid
            intrinsics do not stop segmentation, the hotspots just get
            z=0 world positions.
        plane_distance: Assumed distance to the fire plane (m)
        temperature_threshold: Samples >= this are considered hot
        min_area_pixels: Smallest component kept (inclusive)
        kernel_size: Size of the elliptical morphology kernel

    Returns:
        Hotspots with sequential ids starting at 0

    Raises:
        DataFormatError: if the field is missing, empty or malformed
    """
    temps = check_temperature_field(field)

    hot_mask = (temps >= temperature_threshold).astype(np.uint8)
    if not hot_mask.any():
        return []
    hot_mask = denoise_mask(hot_mask, kernel_size)

    labeled_array, num_features = ndimage.label(hot_mask, structure=CONNECTIVITY)
    if num_features == 0:
        return []

    index = np.arange(1, num_features + 1)
    areas = np.bincount(labeled_array.ravel(), minlength=num_features + 1)
    peaks = ndimage.maximum(temps, labels=labeled_array, index=index)
    slices = ndimage.find_objects(labeled_array)

    hotspots = []
    for label_id in index:
        area = int(areas[label_id])
        if area < min_area_pixels:
            continue

        rows, cols = slices[label_id - 1]
        blob_mask = (labeled_array[rows, cols] == label_id).astype(np.uint8)

        moments = cv2.moments(blob_mask, binaryImage=True)
        if moments["m00"] == 0:
            continue
        centroid = (cols.start + moments["m10"] / moments["m00"],
                    rows.start + moments["m01"] / moments["m00"])

        # Pad so contours touching the crop edge are traced completely
        padded = np.pad(blob_mask, 1)
        contours, _ = cv2.findContours(padded, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE,
                                       offset=(cols.start - 1, rows.start - 1))
        boundary = max(contours, key=len).reshape(-1, 2)

        hotspots.append(HotSpot(
            id=len(hotspots),
            pixel_centroid=centroid,
            approx_world_position=project_pixel_to_approx_world(centroid, intrinsics, plane_distance),
            pixel_area=area,
            peak_temperature=float(peaks[label_id - 1]),
            boundary=boundary
        ))

    return hotspots
