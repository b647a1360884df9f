"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based configuration management
- logging_config.py : Centralized logging setup
- exceptions.py     : Error hierarchy rendered by the API layer
- audit.py          : Request audit middleware and pipeline audit sink
- validators.py     : Input sanitization helpers
"""
from symposium.core.config import get_settings, Settings
from symposium.core.logging_config import setup_logging, get_logger, LoggerMixin

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "LoggerMixin",
]
