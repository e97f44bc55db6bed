"""
Configuration Module

Engine settings loaded from the environment.
"""

from medicare_nlu.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
