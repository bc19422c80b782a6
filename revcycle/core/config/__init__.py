"""
Configuration package.

This package contains application configuration and settings.
"""

from revcycle.core.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
