"""
Main entry point for the fire suppression nozzle targeting loop.

Each iteration acquires a thermal frame, finds and ranks spray targets,
and sends the gimbal a setpoint for the most severe one.

Usage:
    fire-nozzle
    fire-nozzle --config my_config.yaml --frames 20
    fire-nozzle --image testImage/02.jpg --display
"""

import sys
import time
import argparse
import traceback
from pathlib import Path

import cv2
import yaml
from pydantic import ValidationError

from .core.aiming.gimbal import BaseGimbal, SimulatedGimbal
from .core.cameras.base import BaseCamera
from .core.cameras.image_file import ImageFileCamera
from .core.cameras.simulated import SimulatedFireCamera
from .core.cameras.video import VideoThermalCamera
from .core.config_models import Settings
from .core.errors import ConfigurationError
from .core.logger import SessionLogger
from .core.pipeline import FrameProcessor
from .core.telemetry_logger import TelemetryLogger
from .core.visualization import visualize_results

DEFAULT_CONFIG = Path(__file__).parent / "config" / "nozzle_config.yaml"


def load_config(config_path=DEFAULT_CONFIG) -> Settings:
    """Load and validate configuration."""
    config_file = Path(config_path)
    try:
        with open(config_file, 'r') as f:
            config_data = yaml.safe_load(f) or {}
        return Settings(**config_data)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found at {config_file}") from e
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigurationError(f"Error validating configuration file {config_file}:\n{e}") from e


def create_camera(config: Settings) -> BaseCamera:
    """Create the frame source selected in the configuration."""
    cam_cfg = config.camera
    if cam_cfg.type == 'simulated':
        return SimulatedFireCamera(resolution=cam_cfg.resolution, config=cam_cfg.simulation)
    if cam_cfg.type == 'image_file':
        if not cam_cfg.image_path:
            raise ConfigurationError("camera.image_path is required for type 'image_file'")
        return ImageFileCamera(cam_cfg.image_path, cam_cfg.resolution,
                               cam_cfg.min_temp, cam_cfg.max_temp)
    if cam_cfg.type == 'video':
        return VideoThermalCamera(cam_cfg.source, cam_cfg.resolution,
                                  cam_cfg.min_temp, cam_cfg.max_temp)
    raise ConfigurationError(f"Unknown camera type in config: '{cam_cfg.type}'")


def create_gimbal(config: Settings) -> BaseGimbal:
    """Create the gimbal interface selected in the configuration."""
    if config.gimbal.type == 'simulated':
        return SimulatedGimbal(config.gimbal)
    raise ConfigurationError(f"Unknown gimbal type in config: '{config.gimbal.type}'")


def run_loop(config: Settings, camera: BaseCamera, gimbal: BaseGimbal,
             logger: SessionLogger, telemetry: TelemetryLogger = None,
             stats: dict = None) -> dict:
    """
    Poll frames until max_frames, 'q'/ESC or Ctrl+C

    A frame that fails anywhere is logged and skipped; nothing is retried
    and nothing carries over to the next frame.

    Returns:
        Session statistics, updated in place when `stats` is given
    """
    processor = FrameProcessor(config, logger)
    if stats is None:
        stats = {}
    for key in ('Frames processed', 'Commands sent', 'Frame errors'):
        stats.setdefault(key, 0)
    loop_cfg = config.loop

    while loop_cfg.max_frames == 0 or stats['Frames processed'] < loop_cfg.max_frames:
        stats['Frames processed'] += 1
        try:
            frame = camera.capture()
            result = processor.process(frame.temperature_array, gimbal.get_attitude(),
                                       frame.frame_number)
            if result.error is not None:
                stats['Frame errors'] += 1
            if result.actuate:
                gimbal.command(result.command)
                stats['Commands sent'] += 1
            if telemetry:
                telemetry.log_frame(result)

            if loop_cfg.display:
                visual = visualize_results(frame.temperature_array, result.hotspots, result.targets,
                                           config.detection.temperature_threshold,
                                           result.command if result.actuate else None)
                cv2.imshow("Fire Detection Visual Output", visual)
                key = cv2.waitKey(max(1, int(loop_cfg.poll_interval_s * 1000))) & 0xFF
                if key in (ord('q'), 27):
                    logger.log("Quit requested from display window", "info")
                    break
                continue
        except Exception as e:
            stats['Frame errors'] += 1
            logger.log(f"Frame abandoned: {e}", "error")
            logger.log(traceback.format_exc(), "debug")

        if loop_cfg.poll_interval_s > 0:
            time.sleep(loop_cfg.poll_interval_s)

    return stats


def _non_negative_int(value: str) -> int:
    """argparse type for frame counts"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def main(argv=None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Fire suppression nozzle targeting")
    parser.add_argument('--config', type=str, default=str(DEFAULT_CONFIG),
                        help="Path to nozzle_config.yaml")
    parser.add_argument('--frames', type=_non_negative_int, default=None,
                        help="Stop after this many frames (0 = run until stopped)")
    parser.add_argument('--image', type=str, default=None,
                        help="Replay a grey-scale thermal image instead of the configured camera")
    parser.add_argument('--display', action='store_true',
                        help="Show the annotated frames")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"FATAL: {e}")
        return 1

    if args.frames is not None:
        config.loop.max_frames = args.frames
    if args.display:
        config.loop.display = True
    if args.image:
        config.camera.type = 'image_file'
        config.camera.image_path = args.image

    logger = SessionLogger(log_dir=config.logging.log_dir,
                           max_logs=config.logging.max_logs,
                           log_to_console=config.logging.log_to_console,
                           console_level=config.logging.console_level)
    telemetry = TelemetryLogger(log_dir=f"{config.logging.log_dir}/telemetry") \
        if config.logging.telemetry else None

    camera = None
    stats = {}
    try:
        camera = create_camera(config)
        gimbal = create_gimbal(config)
        if not camera.connect():
            raise ConnectionError("Failed to connect to thermal camera.")

        logger.log_settings(config)
        logger.log("Vision processing for fire suppression started", "info")

        run_loop(config, camera, gimbal, logger, telemetry, stats)

    except KeyboardInterrupt:
        logger.log("Shutting down...", "info")
    except Exception as e:
        logger.log(f"Fatal error: {e}", "error")
        traceback.print_exc()
        return 1
    finally:
        if camera is not None:
            camera.disconnect()
        if telemetry:
            telemetry.close()
        if config.loop.display:
            cv2.destroyAllWindows()
        if stats:
            logger.log_summary(stats)

    return 0


if __name__ == "__main__":
    sys.exit(main())
