"""
Core exceptions package.

This package contains all exceptions raised by the security layer.
"""

from revcycle.core.exceptions.base_exceptions import BaseApplicationError
from revcycle.core.exceptions.security_exceptions import (
    AuditLogError,
    AuthorizationError,
    EncryptionError,
    KeyManagementError,
    PermissionDeniedError,
    RoleNotFoundError,
    SecurityError,
)

__all__ = [
    "AuditLogError",
    "AuthorizationError",
    "BaseApplicationError",
    "EncryptionError",
    "KeyManagementError",
    "PermissionDeniedError",
    "RoleNotFoundError",
    "SecurityError",
]
