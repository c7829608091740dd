"""
Error types for the near-duplicate detector.

Configuration and document-source failures are fatal and surface immediately.
Empty token sets are not errors; they are handled by the Signature Engine.
"""

from typing import Any, Dict, Optional


class NearDupError(Exception):
    """
    Base exception for all near-duplicate detector errors.

    Carries a human readable message plus a details mapping for structured
    reporting.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.

        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(NearDupError):
    """
    Raised when run parameters are invalid.

    Always raised before any document is read.
    """

    def __init__(self, message: str,
                 parameter: Optional[str] = None,
                 value: Any = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration error.

        Args:
            message: Error message
            parameter: Name of the offending parameter
            value: Rejected value
            details: Additional error context
        """
        super().__init__(message, details)
        self.parameter = parameter
        self.value = value

        self.details.update({
            'parameter': parameter,
            'value': value
        })


class DocumentSourceError(NearDupError):
    """
    Raised when the document source is missing, unreadable or runs out early.
    """

    def __init__(self, message: str,
                 path: Optional[str] = None,
                 position: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize document source error.

        Args:
            message: Error message
            path: Source location, when file backed
            position: Cursor position at the time of failure
            details: Additional error context
        """
        super().__init__(message, details)
        self.path = path
        self.position = position

        self.details.update({
            'path': path,
            'position': position
        })


__all__ = [
    'NearDupError',
    'ConfigurationError',
    'DocumentSourceError',
]
