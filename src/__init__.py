"""
Invoice Renderer - Source Package.

This package contains all core modules for rendering invoice data into
paginated PDF documents. Each module has a single responsibility.

Modules:
    - invoice_model: Immutable invoice snapshot (parties, items, logo)
    - renderer: Header layout, totals, table pagination, PDF encoding
    - output_handler: Saving rendered documents
    - utils: Logging, exceptions and file helpers

Architecture:
    Invoice snapshot → Renderer (header → table → totals → footer) → PDF bytes → Output
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'invoice_model',
    'renderer',
    'output_handler',
    'utils'
]
