"""Configuration management for circbuf.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Tolerance and corner probing settings
- BufferConfig: Join, cap and internal corner styles
- ProcessingConfig: Worker process settings
- LoggingConfig: Logging settings
- BufferSettings: Main application settings
"""

from circbuf.config.settings import (
    BufferConfig,
    BufferSettings,
    CapStyle,
    GeometryConfig,
    InternalCornerStyle,
    JoinStyle,
    LoggingConfig,
    ProcessingConfig,
    get_default_settings,
)

__all__ = [
    "BufferConfig",
    "BufferSettings",
    "CapStyle",
    "GeometryConfig",
    "InternalCornerStyle",
    "JoinStyle",
    "LoggingConfig",
    "ProcessingConfig",
    "get_default_settings",
]
