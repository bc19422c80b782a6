"""
Security-related exceptions.

Authorization failures carry the permission names, roles, or resource
identifiers that were missing. Permission names are not secret, so they are
safe to expose to API clients. Cryptographic errors only ever carry generic
messages.
"""

from typing import Any

from revcycle.core.exceptions.base_exceptions import BaseApplicationError


class AuthorizationError(BaseApplicationError):
    """Base class for permission-category errors."""

    def __init__(
        self,
        message: str = "Not authorized to perform this action",
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str = "AUTHORIZATION_ERROR",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class PermissionDeniedError(AuthorizationError):
    """Raised when a user lacks the permission, role, or ownership an action needs."""

    def __init__(
        self,
        message: str = "Permission denied",
        required_permissions: list[str] | None = None,
        required_roles: list[str] | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
        user_id: str | None = None,
        code: str = "PERMISSION_DENIED",
    ) -> None:
        self.required_permissions = list(required_permissions or [])
        self.required_roles = list(required_roles or [])
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.user_id = user_id

        detail: dict[str, Any] = {}
        if self.required_permissions:
            detail["required_permissions"] = self.required_permissions
        if self.required_roles:
            detail["required_roles"] = self.required_roles
        if resource_type:
            detail["resource_type"] = resource_type
        if resource_id:
            detail["resource_id"] = resource_id

        super().__init__(message=message, detail=detail or None, code=code)

    @classmethod
    def insufficient_permissions(
        cls, message: str, permissions: list[str], user_id: str | None = None
    ) -> "PermissionDeniedError":
        return cls(
            message,
            required_permissions=permissions,
            user_id=user_id,
            code="INSUFFICIENT_PERMISSIONS",
        )

    @classmethod
    def resource_access_denied(
        cls,
        message: str,
        resource_type: str | None,
        resource_id: str,
        user_id: str | None = None,
    ) -> "PermissionDeniedError":
        return cls(
            message,
            resource_type=resource_type,
            resource_id=resource_id,
            user_id=user_id,
            code="RESOURCE_ACCESS_DENIED",
        )

    @classmethod
    def role_required(
        cls, message: str, roles: list[str], user_id: str | None = None
    ) -> "PermissionDeniedError":
        return cls(
            message,
            required_roles=roles,
            user_id=user_id,
            code="ROLE_REQUIRED",
        )


class RoleNotFoundError(AuthorizationError):
    """Raised by mutating RBAC operations when the target role does not exist."""

    def __init__(self, role_id: str) -> None:
        self.role_id = role_id
        super().__init__(
            message=f"Role with ID {role_id} not found",
            detail={"required_permissions": ["USERS:UPDATE"]},
            code="ROLE_NOT_FOUND",
        )


class SecurityError(BaseApplicationError):
    """Base class for internal security failures; surfaced to clients generically."""

    def __init__(
        self,
        message: str = "Security error",
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str = "SECURITY_ERROR",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class EncryptionError(SecurityError):
    """Raised when encryption or decryption fails."""

    def __init__(
        self,
        message: str = "Encryption operation failed",
        operation: str | None = None,
        code: str = "ENCRYPTION_ERROR",
    ) -> None:
        self.operation = operation
        super().__init__(
            message=message,
            detail={"operation": operation} if operation else None,
            code=code,
        )


class KeyManagementError(SecurityError):
    """Raised when an encryption key cannot be loaded, saved, or rotated."""

    def __init__(
        self,
        message: str = "Encryption key operation failed",
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str = "KEY_MANAGEMENT_ERROR",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class AuditLogError(BaseApplicationError):
    """Raised by audit log queries. Audit writes never raise to callers."""

    def __init__(
        self,
        message: str = "Audit log operation failed",
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str = "AUDIT_LOG_ERROR",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)
