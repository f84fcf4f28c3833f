"""
Output Handler Module for Invoice Renderer.

This module provides functionality for:
    - Saving rendered PDF documents
    - Default filename and output directory handling

Author: ML Engineering Team
"""

from .handler import OutputHandler

__all__ = ['OutputHandler']
