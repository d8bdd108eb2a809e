"""
Per-frame targeting pipeline: segment -> cluster -> resolve.

Every call works on fresh per-frame collections; nothing carries over to
the next frame except the settings object and the degraded-geometry
warning flag.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .aiming.resolver import GimbalAngles, resolve_gimbal_angles
from .config_models import Settings
from .detection.hotspot_segmenter import check_temperature_field, segment_hotspots
from .detection.models import HotSpot, SprayTarget
from .detection.target_clusterer import cluster_hotspots
from .errors import ConfigurationError, DataFormatError, FireAimError
from .logger import SessionLogger


@dataclass
class FrameResult:
    """Everything one frame produced"""
    frame_number: int
    current_attitude: GimbalAngles
    command: GimbalAngles
    actuate: bool = False  # False: keep the actuator where it is
    hotspots: List[HotSpot] = field(default_factory=list)
    targets: List[SprayTarget] = field(default_factory=list)
    error: Optional[FireAimError] = None

    @property
    def top_target(self) -> Optional[SprayTarget]:
        return self.targets[0] if self.targets else None


class FrameProcessor:
    """Runs the three pipeline stages on one temperature field at a time"""

    def __init__(self, settings: Settings, logger: SessionLogger = None):
        self.settings = settings
        self.logger = logger
        self._geometry_warned = False

    def update_settings(self, settings: Settings):
        """Swap configuration. Only call between frames."""
        self.settings = settings
        self._geometry_warned = False
        self._log("Settings reloaded", "info")

    def process(self, temperature_field, current_attitude: GimbalAngles,
                frame_number: int = 0) -> FrameResult:
        """
        Process one frame

        Args:
            temperature_field: 2D temperature array (°C)
            current_attitude: Gimbal feedback at capture time
            frame_number: Used for logging only

        Returns:
            FrameResult. On any pipeline error the command is the
            current attitude and `actuate` is False.
        """
        cfg = self.settings
        result = FrameResult(frame_number=frame_number,
                             current_attitude=current_attitude,
                             command=current_attitude)

        try:
            temps = check_temperature_field(temperature_field)
            expected = tuple(cfg.camera.resolution)
            actual = (temps.shape[1], temps.shape[0])
            if actual != expected:
                raise DataFormatError(f"Frame size {actual} does not match session size {expected}")

            self._check_geometry()
            result.hotspots = segment_hotspots(
                temps,
                cfg.camera.intrinsics,
                cfg.detection.assumed_plane_distance_m,
                cfg.detection.temperature_threshold,
                cfg.detection.min_area_pixels,
                cfg.detection.kernel_size
            )
        except DataFormatError as e:
            self._log(f"Frame {frame_number}: data format error: {e}", "error")
            result.error = e
            return result

        result.targets = cluster_hotspots(result.hotspots, cfg.grouping.max_grouping_distance_m)
        if not result.targets:
            self._log(f"Frame {frame_number}: no spray targets", "debug")
            return result

        top = result.targets[0]
        try:
            result.command = resolve_gimbal_angles(
                top.aim_pixel_point,
                actual[0], actual[1],
                cfg.camera.hfov_degrees,
                cfg.camera.vfov_degrees,
                current_attitude.azimuth_degrees,
                current_attitude.pitch_degrees,
                cfg.gimbal.nozzle_offset_azimuth_degrees,
                cfg.gimbal.nozzle_offset_pitch_degrees,
                cfg.gimbal.pitch_polarity
            )
        except ConfigurationError as e:
            self._log(f"Frame {frame_number}: configuration error, holding attitude: {e}", "error")
            result.command = e.fallback
            result.error = e
            return result

        result.actuate = True
        self._log(f"Frame {frame_number}: {len(result.hotspots)} hotspots, "
                  f"{len(result.targets)} targets, primary {top} -> {result.command}", "info")
        return result

    def _check_geometry(self):
        """Warn once per settings when projection will degrade to z=0"""
        intrinsics = self.settings.camera.intrinsics
        if self._geometry_warned or (intrinsics is not None and intrinsics.is_valid):
            return
        self._geometry_warned = True
        self._log("Camera intrinsics missing or zero focal length: world positions "
                  "degraded, hotspots will not be grouped", "warning")

    def _log(self, message: str, level: str = "info"):
        if self.logger:
            self.logger.log(message, level)
