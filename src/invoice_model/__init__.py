"""
Invoice Model Module for Invoice Renderer.

This module provides the immutable snapshot the renderer consumes:
    - Invoice: parties, items, logo and date
    - LineItem: one billable row

Author: ML Engineering Team
"""

from .invoice import Invoice, LineItem, decode_logo, to_decimal

__all__ = ['Invoice', 'LineItem', 'decode_logo', 'to_decimal']
