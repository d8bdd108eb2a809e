"""
Per-session targeting log

One numbered log file per run of the nozzle loop plus a shared index with
a line per finished session. Every line goes to the file; the console
only shows lines at or above `console_level`.
"""

import re
import time
from collections import Counter
from datetime import datetime
from pathlib import Path

LEVELS = ('debug', 'info', 'warning', 'error')

COLORS = {
    'error': '\033[91m',    # Red
    'warning': '\033[93m',  # Yellow
    'info': '\033[0m',      # Default
    'debug': '\033[90m'     # Gray
}
RESET = '\033[0m'

INDEX_COLUMNS = (('Ended', 19), ('Session', 7), ('Duration s', 10), ('Frames', 6),
                 ('Commands', 8), ('Frame errors', 12), ('Warnings', 8), ('Errors', 6),
                 ('Log File', 0))


class SessionLogger:
    """Targeting session logger with numbered log files and a session index"""

    def __init__(self, log_dir: str = "logs", max_logs: int = 0,
                 unit_id: str = "nozzle", log_to_console: bool = True,
                 console_level: str = "info"):
        """
        Args:
            log_dir: Directory to store log files
            max_logs: Session logs to keep, oldest removed first (0 = unlimited)
            unit_id: Name of the nozzle unit, used in file names
            log_to_console: Echo lines to stdout
            console_level: Lowest level echoed to stdout
        """
        if console_level not in LEVELS:
            raise ValueError(f"console_level must be one of {LEVELS}, got '{console_level}'")

        self.log_dir = Path(log_dir)
        self.max_logs = max_logs
        self.unit_id = unit_id
        self.log_to_console = log_to_console
        self.console_level = console_level
        self.level_counts = Counter()

        self._name_pattern = re.compile(rf"^{re.escape(unit_id)}_session_(\d+)_")
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.started = time.monotonic()
        self.session_number = max(self._existing_sessions(), default=0) + 1
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"{unit_id}_session_{self.session_number:04d}_{stamp}.log"
        self.index_file = self.log_dir / f"{unit_id}_session_index.txt"

        with open(self.log_file, 'w') as f:
            f.write(f"# {unit_id} targeting session {self.session_number}\n"
                    f"# started {datetime.now():%Y-%m-%d %H:%M:%S}\n\n")

        if self.max_logs > 0:
            self._cleanup_old_logs()

    def _existing_sessions(self) -> dict:
        """Session number -> log path for this unit's logs in log_dir"""
        sessions = {}
        for path in self.log_dir.glob(f"{self.unit_id}_session_*.log"):
            match = self._name_pattern.match(path.name)
            if match:
                sessions[int(match.group(1))] = path
        return sessions

    def _cleanup_old_logs(self):
        sessions = self._existing_sessions()
        for number in sorted(sessions)[:-self.max_logs]:
            sessions[number].unlink()
            print(f"Removed old log: {sessions[number].name}")

    def log(self, message: str, level: str = "info"):
        """Log a message; unknown levels are recorded as info"""
        level = level if level in LEVELS else 'info'
        self.level_counts[level] += 1
        line = f"{datetime.now():%H:%M:%S.%f}"[:-3] + f" {level.upper():<7} {message}"

        with open(self.log_file, "a") as f:
            f.write(line + "\n")

        if self.log_to_console and LEVELS.index(level) >= LEVELS.index(self.console_level):
            print(f"{COLORS[level]}{line}{RESET}")

    def log_settings(self, settings):
        """Record the calibration the session runs with"""
        cam, gimbal = settings.camera, settings.gimbal
        intrinsics = cam.intrinsics
        lines = [
            f"camera: {cam.type} {cam.resolution[0]}x{cam.resolution[1]}, "
            f"FOV {cam.hfov_degrees} x {cam.vfov_degrees} deg",
            "intrinsics: " + (f"fx={intrinsics.focal_length_x} fy={intrinsics.focal_length_y} "
                              f"cx={intrinsics.principal_point_x} cy={intrinsics.principal_point_y}"
                              if intrinsics is not None else "none"),
            f"detection: threshold {settings.detection.temperature_threshold} C, "
            f"min area {settings.detection.min_area_pixels} px, "
            f"plane {settings.detection.assumed_plane_distance_m} m",
            f"grouping: {settings.grouping.max_grouping_distance_m} m",
            f"nozzle offset: az {gimbal.nozzle_offset_azimuth_degrees}, "
            f"pitch {gimbal.nozzle_offset_pitch_degrees}, polarity {gimbal.pitch_polarity:+d}",
        ]
        for line in lines:
            self.log(f"[settings] {line}", "info")

    def log_summary(self, stats: dict):
        """Log the session statistics and append the session to the index"""
        duration = time.monotonic() - self.started
        self.log("-" * 40, "info")
        for key, value in stats.items():
            self.log(f"{key}: {value}", "info")
        self.log(f"Warnings: {self.level_counts['warning']}, "
                 f"Errors: {self.level_counts['error']}, "
                 f"Duration: {duration:.1f}s", "info")
        self._update_index(stats, duration)

    def _update_index(self, stats: dict, duration: float):
        values = (
            f"{datetime.now():%Y-%m-%d %H:%M:%S}",
            self.session_number,
            f"{duration:.1f}",
            stats.get('Frames processed', '-'),
            stats.get('Commands sent', '-'),
            stats.get('Frame errors', '-'),
            self.level_counts['warning'],
            self.level_counts['error'],
            self.log_file.name,
        )
        new_index = not self.index_file.exists()
        with open(self.index_file, 'a') as f:
            if new_index:
                f.write(self._index_line(name for name, _ in INDEX_COLUMNS))
            f.write(self._index_line(values))

    @staticmethod
    def _index_line(cells) -> str:
        padded = (str(cell).ljust(width) for cell, (_, width) in zip(cells, INDEX_COLUMNS))
        return " | ".join(padded).rstrip() + "\n"

    def get_log_path(self) -> Path:
        return self.log_file
