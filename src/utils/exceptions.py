"""
Custom Exceptions Module.

This module defines all custom exceptions used throughout the invoice
renderer. Using specific exceptions allows callers to tell a bad logo
apart from a failed document assembly and react accordingly.

Exception Hierarchy:
    InvoiceRenderingError (base)
    ├── ConfigurationError
    ├── InvoiceDataError
    ├── InvalidImageError
    ├── EncodingFailureError
    └── OutputError
"""


class InvoiceRenderingError(Exception):
    """
    Base exception for all invoice rendering errors.

    All custom exceptions in this system inherit from this class,
    allowing for easy catching of all system-specific errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# SETUP ERRORS
# =============================================================================

class ConfigurationError(InvoiceRenderingError):
    """
    Raised when the document settings describe an impossible layout.

    Example:
        >>> raise ConfigurationError("table.row_height", 0, "must be positive")
    """

    def __init__(self, setting: str, value, reason: str = None):
        message = f"Invalid document setting '{setting}'"
        details = {"setting": setting, "value": value, "reason": reason}
        super().__init__(message, details)


class InvoiceDataError(InvoiceRenderingError):
    """Raised when invoice input cannot be turned into a snapshot."""

    def __init__(self, field: str, value, reason: str = None):
        message = f"Invalid invoice data for field '{field}'"
        details = {"field": field, "value": value, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# RENDER ERRORS
# =============================================================================

class InvalidImageError(InvoiceRenderingError):
    """Raised when the logo bytes cannot be decoded or placed."""

    def __init__(self, reason: str = None, size: int = None):
        message = "Logo image could not be decoded"
        details = {"reason": reason, "size": size}
        super().__init__(message, details)


class EncodingFailureError(InvoiceRenderingError):
    """Raised when the final document cannot be assembled."""

    def __init__(self, reason: str = None, page_count: int = None):
        message = "Document encoding failed"
        details = {"reason": reason, "page_count": page_count}
        super().__init__(message, details)


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(InvoiceRenderingError):
    """Raised when a rendered document cannot be saved."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Failed to save document: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


# Export all exceptions
__all__ = [
    'InvoiceRenderingError',
    'ConfigurationError',
    'InvoiceDataError',
    'InvalidImageError',
    'EncodingFailureError',
    'OutputError',
]
