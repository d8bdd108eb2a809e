"""Hotspot segmentation and spray target clustering"""

from .models import HotSpot, SprayTarget
from .hotspot_segmenter import segment_hotspots, check_temperature_field
from .target_clusterer import cluster_hotspots

__all__ = ['HotSpot', 'SprayTarget', 'segment_hotspots',
           'check_temperature_field', 'cluster_hotspots']
