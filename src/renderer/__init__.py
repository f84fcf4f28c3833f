"""
Renderer Module for Invoice Renderer.

This module turns an invoice snapshot into a paginated PDF:
    - Header, logo and party blocks at fixed positions
    - Totals derived from the items on every render
    - Item table with explicit page breaks and repeated header row
    - PDF encoding with deterministic output

Author: ML Engineering Team
"""

from .engine import InvoiceRenderer, RenderedDocument
from .settings import LayoutSettings, TableColumn
from .table import ItemTable, TableGeometry, TableLayoutResult, TablePaginator
from .totals import compute_totals, format_currency, format_quantity, grand_total, line_total
from .encoder import DocumentEncoder

__all__ = [
    'InvoiceRenderer',
    'RenderedDocument',
    'LayoutSettings',
    'TableColumn',
    'ItemTable',
    'TableGeometry',
    'TableLayoutResult',
    'TablePaginator',
    'DocumentEncoder',
    'compute_totals',
    'format_currency',
    'format_quantity',
    'grand_total',
    'line_total',
]
