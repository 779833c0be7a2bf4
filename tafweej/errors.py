"""
Error Types

Domain exceptions raised by the stores, the density model and the route
calculator. The API layer maps each type to an HTTP status:

    ConfigurationError -> 500
    ValidationError    -> 400
    NotFoundError      -> 500 (kept for client compatibility)
    NoRouteError       -> 500 (kept for client compatibility)
    PersistenceError   -> 500 on writes, fallback on reads
"""

from typing import Iterable


class CrowdMonitorError(Exception):
    """Base class for all service errors."""
    pass


class ConfigurationError(CrowdMonitorError):
    """Raised when the row store client is not configured."""

    def __init__(self, message: str = "Service role key not configured"):
        super().__init__(message)


class ValidationError(CrowdMonitorError):
    """Raised when a request is missing required fields."""

    def __init__(self, missing: Iterable[str], message: str = "Missing required fields"):
        self.missing = list(missing)
        super().__init__(message)


class NotFoundError(CrowdMonitorError):
    """Raised when a stored record does not exist."""
    pass


class NoRouteError(NotFoundError):
    """Raised when two locations share no direct edge."""

    def __init__(self, message: str = "No direct route available between these locations"):
        super().__init__(message)


class PersistenceError(CrowdMonitorError):
    """Raised when a row store operation fails."""
    pass
