"""
Gimbal actuator interfaces.

The actuator runs its own motion-control loop; this side only reads its
attitude feedback and hands it setpoints.
"""
from abc import ABC, abstractmethod
from typing import List

from ..config_models import GimbalConfig, GimbalLimits
from .resolver import GimbalAngles


def clamp_to_limits(angles: GimbalAngles, limits: GimbalLimits) -> GimbalAngles:
    """Keep a setpoint inside the mechanical range of the gimbal"""
    return GimbalAngles(
        azimuth_degrees=max(limits.min_azimuth, min(limits.max_azimuth, angles.azimuth_degrees)),
        pitch_degrees=max(limits.min_pitch, min(limits.max_pitch, angles.pitch_degrees))
    )


class BaseGimbal(ABC):
    """Abstract base class for all gimbals"""

    @abstractmethod
    def get_attitude(self) -> GimbalAngles:
        """Current azimuth/pitch feedback"""
        pass

    @abstractmethod
    def command(self, angles: GimbalAngles) -> GimbalAngles:
        """Send a setpoint, returns what was actually sent"""
        pass


class SimulatedGimbal(BaseGimbal):
    """
    Simulation of the gimbal.
    """

    def __init__(self, config: GimbalConfig):
        self.config = config
        self._attitude = GimbalAngles(config.initial_azimuth, config.initial_pitch)
        self.commands: List[GimbalAngles] = []
        print(f"[SimulatedGimbal] Initialized at {self._attitude}.")

    def get_attitude(self) -> GimbalAngles:
        return self._attitude

    def command(self, angles: GimbalAngles) -> GimbalAngles:
        sent = clamp_to_limits(angles, self.config.limits)
        if sent != angles:
            print(f"[SimulatedGimbal] Setpoint {angles} clamped to {sent}.")
        self.commands.append(sent)

        # Instant move, the real actuator settles on its own
        if self.config.follow_commands:
            self._attitude = sent
        return sent
