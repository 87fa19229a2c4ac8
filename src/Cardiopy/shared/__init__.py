# src/Cardiopy/shared/__init__.py
"""
Shared utilities for the Cardiopy package.

This module contains:
- Constants and per-user locations
- Logging configuration
- The exception hierarchy
"""
from . import constants
from . import error_handling
from . import logging_config

from .logging_config import get_logger, setup_logging

__all__ = ['constants', 'error_handling', 'logging_config', 'get_logger', 'setup_logging']
