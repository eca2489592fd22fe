"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries. Absence of data (no policy for a
sector, no resolved tickets, a zero previous-period value) is never an
exception; only structurally invalid requests are.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class InvalidWindowException(ValidationException):
    """Raised when a reporting window does not end after it starts."""

    def __init__(self, start, end, details: Optional[dict] = None):
        self.start = start
        self.end = end
        super().__init__(
            f"Window end {end} must be after start {start}",
            details or {"start": str(start), "end": str(end)}
        )
