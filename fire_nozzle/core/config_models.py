"""
Pydantic models for validating the nozzle_config.yaml file.
"""
from typing import Literal, Optional, Tuple
from pydantic import BaseModel, Field, field_validator, model_validator

# --- Camera Intrinsics ---

class CameraIntrinsics(BaseModel):
    width: int
    height: int
    # Zero focal length is accepted: projection then degrades to Z=0 points
    focal_length_x: float
    focal_length_y: float
    principal_point_x: float
    principal_point_y: float

    @property
    def is_valid(self) -> bool:
        """True when the focal lengths allow a pinhole projection"""
        return self.focal_length_x != 0 and self.focal_length_y != 0

# --- Camera Model ---

class SimulationConfig(BaseModel):
    ambient_temp: float = 25.0
    noise_std: float = 2.0
    fire_probability: float = 0.8
    max_fires: int = 3
    fire_radius_range: Tuple[int, int] = (6, 18)
    fire_temp_range: Tuple[float, float] = (260.0, 480.0)
    seed: Optional[int] = None

class ThermalCameraConfig(BaseModel):
    type: Literal["simulated", "image_file", "video"] = "simulated"
    resolution: Tuple[int, int] = (384, 288)
    hfov_degrees: float = Field(39.5, gt=0)
    vfov_degrees: float = Field(30.1, gt=0)
    intrinsics: Optional[CameraIntrinsics] = None

    # Grey level 0..255 is mapped linearly onto [min_temp, max_temp]
    image_path: Optional[str] = None
    source: str = "0"
    min_temp: float = 20.0
    max_temp: float = 500.0

    simulation: SimulationConfig = Field(default_factory=SimulationConfig)

    @field_validator("resolution")
    @classmethod
    def _positive_resolution(cls, value):
        if value[0] <= 0 or value[1] <= 0:
            raise ValueError("resolution must be positive (width, height)")
        return value

# --- Detection Models ---

class DetectionConfig(BaseModel):
    temperature_threshold: float = 250.0
    min_area_pixels: int = Field(30, ge=0)
    kernel_size: int = Field(5, ge=1)
    assumed_plane_distance_m: float = Field(8.0, gt=0)

    @field_validator("kernel_size")
    @classmethod
    def _odd_kernel(cls, value):
        if value % 2 == 0:
            raise ValueError("kernel_size must be odd")
        return value

class GroupingConfig(BaseModel):
    max_grouping_distance_m: float = Field(1.0, gt=0)

# --- Gimbal Models ---

class GimbalLimits(BaseModel):
    min_azimuth: float = -170.0
    max_azimuth: float = 170.0
    min_pitch: float = -30.0
    max_pitch: float = 90.0

class GimbalConfig(BaseModel):
    type: Literal["simulated"] = "simulated"
    nozzle_offset_azimuth_degrees: float = 0.0
    nozzle_offset_pitch_degrees: float = 0.0
    # +1: a target below the image centre raises pitch, -1: lowers it
    pitch_polarity: Literal[1, -1] = 1
    initial_azimuth: float = 0.0
    initial_pitch: float = 0.0
    follow_commands: bool = False
    limits: GimbalLimits = Field(default_factory=GimbalLimits)

# --- Other Component Models ---

class LoopConfig(BaseModel):
    poll_interval_s: float = Field(0.5, ge=0)
    max_frames: int = Field(0, ge=0)  # 0 = run until stopped
    display: bool = False

class LoggingConfig(BaseModel):
    log_dir: str = "logs"
    max_logs: int = 50
    log_to_console: bool = True
    console_level: Literal["debug", "info", "warning", "error"] = "info"
    telemetry: bool = True

# --- Top-Level Settings Model ---

class Settings(BaseModel):
    """The root model for the entire nozzle_config.yaml."""
    camera: ThermalCameraConfig = Field(default_factory=ThermalCameraConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    grouping: GroupingConfig = Field(default_factory=GroupingConfig)
    gimbal: GimbalConfig = Field(default_factory=GimbalConfig)
    loop: LoopConfig = Field(default_factory=LoopConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def _intrinsics_match_resolution(self):
        intrinsics = self.camera.intrinsics
        if intrinsics is not None:
            calibrated = (intrinsics.width, intrinsics.height)
            if calibrated != tuple(self.camera.resolution):
                raise ValueError(f"camera.intrinsics calibrated for {calibrated}, "
                                 f"but camera.resolution is {tuple(self.camera.resolution)}")
        return self
