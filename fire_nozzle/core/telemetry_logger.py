"""
Telemetry Logger for writing machine-readable per-frame logs (CSV).
"""
import csv
import time
from pathlib import Path
from datetime import datetime

from .pipeline import FrameResult


class TelemetryLogger:
    """Logs one row per processed frame to a CSV file."""

    HEADER = [
        'timestamp',
        'frame_number',
        'hotspot_count',
        'target_count',
        'top_target_px',
        'top_target_py',
        'top_target_severity',
        'current_azimuth',
        'current_pitch',
        'command_azimuth',
        'command_pitch',
        'actuate',
        'error'
    ]

    def __init__(self, log_dir: str = "logs/telemetry"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file_path = self.log_dir / f"telemetry_{timestamp}.csv"

        self.file_handle = open(self.log_file_path, 'w', newline='')
        self.writer = csv.DictWriter(self.file_handle, fieldnames=self.HEADER)
        self.writer.writeheader()
        self.file_handle.flush()

        print(f"[TelemetryLogger] Logging machine-readable data to: {self.log_file_path}")

    def log_frame(self, result: FrameResult):
        """
        Writes a single frame result to the CSV.

        Args:
            result: Output of FrameProcessor.process for one frame
        """
        top = result.targets[0] if result.targets else None

        row = {
            'timestamp': f"{time.time():.3f}",
            'frame_number': result.frame_number,
            'hotspot_count': len(result.hotspots),
            'target_count': len(result.targets),
            'top_target_px': f"{top.aim_pixel_point[0]:.2f}" if top else 'N/A',
            'top_target_py': f"{top.aim_pixel_point[1]:.2f}" if top else 'N/A',
            'top_target_severity': f"{top.severity:.1f}" if top else 'N/A',
            'current_azimuth': f"{result.current_attitude.azimuth_degrees:.3f}",
            'current_pitch': f"{result.current_attitude.pitch_degrees:.3f}",
            'command_azimuth': f"{result.command.azimuth_degrees:.3f}",
            'command_pitch': f"{result.command.pitch_degrees:.3f}",
            'actuate': int(result.actuate),
            'error': type(result.error).__name__ if result.error else ''
        }

        # Write and flush to ensure data is saved
        self.writer.writerow(row)
        self.file_handle.flush()

    def close(self):
        """Closes the log file handle."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None
            print("[TelemetryLogger] Log file closed.")
