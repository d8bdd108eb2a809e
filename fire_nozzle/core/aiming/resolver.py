"""
Converts a target pixel into an absolute gimbal setpoint.

The pixel-to-angle mapping is linear in the offset from the image centre
(small-angle approximation). It matches the tangent-based pinhole angle
at the centre and at the frame edges and deviates in between. The error
grows with the field of view, so keep to moderate-FOV optics (well under
~60 degrees).
"""
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

from ..errors import ConfigurationError


class PitchPolarity(IntEnum):
    """Sign linking image row direction to actuator pitch direction"""
    DOWN_RAISES_PITCH = 1  # target below centre -> larger pitch
    DOWN_LOWERS_PITCH = -1


@dataclass(frozen=True)
class GimbalAngles:
    """Absolute actuator orientation (degrees)"""
    azimuth_degrees: float
    pitch_degrees: float

    def __str__(self) -> str:
        return f"GimbalAngles(az={self.azimuth_degrees:.3f}, pitch={self.pitch_degrees:.3f})"


def resolve_gimbal_angles(target_pixel: Tuple[float, float],
                          image_width: int,
                          image_height: int,
                          hfov_degrees: float,
                          vfov_degrees: float,
                          current_azimuth: float,
                          current_pitch: float,
                          nozzle_azimuth_offset: float,
                          nozzle_pitch_offset: float,
                          pitch_polarity: int = PitchPolarity.DOWN_RAISES_PITCH) -> GimbalAngles:
    """
    Compute the gimbal setpoint that points the nozzle at a pixel

    Args:
        target_pixel: (x, y) aim point in the image
        image_width, image_height: Frame size in pixels
        hfov_degrees, vfov_degrees: Camera field of view
        current_azimuth, current_pitch: Gimbal feedback (degrees)
        nozzle_azimuth_offset, nozzle_pitch_offset: Fixed angle between
            the camera axis and the nozzle axis, from calibration
        pitch_polarity: See PitchPolarity

    Returns:
        Absolute GimbalAngles. No clamping or wrap-around is applied,
        mechanical limits are the caller's concern.

    Raises:
        ConfigurationError: on non-positive size or FOV. `fallback` holds
            the current attitude unchanged.
    """
    current = GimbalAngles(current_azimuth, current_pitch)
    for name, value in (("image_width", image_width), ("image_height", image_height),
                        ("hfov_degrees", hfov_degrees), ("vfov_degrees", vfov_degrees)):
        if not (math.isfinite(value) and value > 0):
            raise ConfigurationError(f"{name} must be positive, got {value}", fallback=current)
    if pitch_polarity not in (1, -1):
        raise ConfigurationError(f"pitch_polarity must be +1 or -1, got {pitch_polarity}",
                                 fallback=current)

    center_x = image_width / 2.0
    center_y = image_height / 2.0

    horizontal_offset = ((target_pixel[0] - center_x) / center_x) * (hfov_degrees / 2.0)
    vertical_offset = ((target_pixel[1] - center_y) / center_y) * (vfov_degrees / 2.0) * pitch_polarity

    return GimbalAngles(
        azimuth_degrees=current_azimuth + horizontal_offset - nozzle_azimuth_offset,
        pitch_degrees=current_pitch + vertical_offset - nozzle_pitch_offset
    )
