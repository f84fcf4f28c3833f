"""
Utility Module for Invoice Renderer.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Custom exceptions
    - File helpers
"""

from .logger import setup_logger, get_logger
from .helpers import ensure_directory, get_file_extension, safe_filename, format_file_size

__all__ = [
    'setup_logger',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'safe_filename',
    'format_file_size'
]
