"""Pixel-to-angle resolution and gimbal interfaces"""

from .resolver import GimbalAngles, PitchPolarity, resolve_gimbal_angles
from .gimbal import BaseGimbal, SimulatedGimbal

__all__ = ['GimbalAngles', 'PitchPolarity', 'resolve_gimbal_angles',
           'BaseGimbal', 'SimulatedGimbal']
