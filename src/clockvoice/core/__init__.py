"""Core modules for ClockVoice.

Configuration, logging and the error hierarchy shared by every component.
"""

from .config_manager import AppConfig, ConfigManager
from .error_handler import (
    ClockVoiceError,
    ConfigurationError,
    ResolverError,
    CaptureError,
    RequestBuildError,
    ErrorHandler,
    ErrorSeverity
)
from .logging_manager import LoggingManager

__all__ = [
    "AppConfig",
    "ConfigManager",
    "ClockVoiceError",
    "ConfigurationError",
    "ResolverError",
    "CaptureError",
    "RequestBuildError",
    "ErrorHandler",
    "ErrorSeverity",
    "LoggingManager"
]
