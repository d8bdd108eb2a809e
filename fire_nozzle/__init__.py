"""
Thermal fire targeting for a gimbal-mounted suppression nozzle.
"""

__version__ = "0.3.0"
