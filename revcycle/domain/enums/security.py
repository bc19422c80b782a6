"""Roles, permission categories and actions, and masking levels."""

from enum import Enum


class UserRole(str, Enum):
    """System roles. Every role is created at bootstrap and flagged non-deletable."""

    ADMINISTRATOR = "administrator"
    FINANCIAL_MANAGER = "financial_manager"
    BILLING_SPECIALIST = "billing_specialist"
    PROGRAM_MANAGER = "program_manager"
    READ_ONLY = "read_only"


class PermissionCategory(str, Enum):
    """Top-level areas of the application that permissions are granted over."""

    USERS = "users"
    CLIENTS = "clients"
    SERVICES = "services"
    CLAIMS = "claims"
    BILLING = "billing"
    PAYMENTS = "payments"
    REPORTS = "reports"
    SETTINGS = "settings"
    SYSTEM = "system"


class PermissionAction(str, Enum):
    """Operations a permission grants within a category."""

    CREATE = "create"
    READ = "read"
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"
    EXPORT = "export"
    IMPORT = "import"
    SUBMIT = "submit"
    APPROVE = "approve"


class MaskingLevel(str, Enum):
    """How much of a sensitive value is hidden."""

    NONE = "none"
    PARTIAL = "partial"
    FULL = "full"
