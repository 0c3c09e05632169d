"""Shared domain components.

This module exports the exception kernel and time helpers used across
domain boundaries.
"""

from nexus.domain.shared.exceptions import (
    ConflictError,
    DomainException,
    ErrorCode,
    ErrorKind,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from nexus.domain.shared.time import utc_now

__all__ = [
    # Error codes
    "ErrorCode",
    "ErrorKind",
    # Base exception
    "DomainException",
    # Exception categories
    "ConflictError",
    "InternalError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
    # Utilities
    "utc_now",
]
