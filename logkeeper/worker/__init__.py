"""Worker module for logkeeper.

Contains the background loops owned by a logger instance: the periodic
flush daemon and the signal-triggered shutdown hook.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from logkeeper.worker.daemon import FlushDaemon
from logkeeper.worker.shutdown import ShutdownHook, shutdown_signals

__all__ = ["FlushDaemon", "ShutdownHook", "shutdown_signals"]
