"""Configuration module for logkeeper.

Loads default logger settings from environment variables or .env file.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from logkeeper.config.settings import LogKeeperSettings

__all__ = ["LogKeeperSettings"]
