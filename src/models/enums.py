"""
Enum definitions for the User Directory Backend
"""

from enum import Enum


class ErrorType(str, Enum):
    """
    Failure categories reported by the service layer.

    - VALIDATION_ERROR: field constraints failed
    - DUPLICATE_EMAIL: another user already holds the normalized email
    - INVALID_IDENTIFIER: the id is not a well-formed UUID
    - RESOURCE_NOT_FOUND: no user exists for a well-formed id
    - DATABASE_ERROR: unexpected failure in the store
    """
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    DATABASE_ERROR = "DATABASE_ERROR"
