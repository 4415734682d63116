"""Storage module for logkeeper.

Contains the rotation engine for the active file and the retention
sweeper for rotated files.
"""

from logkeeper.storage.retention import start_sweep, sweep
from logkeeper.storage.rotation import RotationEngine, day_stamp, record_day

__all__ = ["RotationEngine", "day_stamp", "record_day", "start_sweep", "sweep"]
