"""Audit trail enumerations."""

from enum import Enum


class AuditEventType(str, Enum):
    """Types of audit events that can be logged."""

    # Data events
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    # Authentication events
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    FAILED_LOGIN = "FAILED_LOGIN"
    PASSWORD_CHANGE = "PASSWORD_CHANGE"
    PASSWORD_RESET = "PASSWORD_RESET"

    # Workflow events
    EXPORT = "EXPORT"
    IMPORT = "IMPORT"
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"

    SYSTEM = "SYSTEM"


class AuditResourceType(str, Enum):
    """Kinds of resources an audit event can refer to."""

    USER = "USER"
    CLIENT = "CLIENT"
    SERVICE = "SERVICE"
    CLAIM = "CLAIM"
    PAYMENT = "PAYMENT"
    AUTHORIZATION = "AUTHORIZATION"
    PROGRAM = "PROGRAM"
    PAYER = "PAYER"
    FACILITY = "FACILITY"
    REPORT = "REPORT"
    SETTING = "SETTING"
    ROLE = "ROLE"
    PERMISSION = "PERMISSION"
    DOCUMENT = "DOCUMENT"
    SYSTEM = "SYSTEM"


class AuditSeverity(str, Enum):
    """Severity levels for audit events."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# Event types reported by the security audit query.
SECURITY_EVENT_TYPES = (
    AuditEventType.LOGIN,
    AuditEventType.LOGOUT,
    AuditEventType.FAILED_LOGIN,
    AuditEventType.PASSWORD_CHANGE,
    AuditEventType.PASSWORD_RESET,
)

ELEVATED_SEVERITIES = (
    AuditSeverity.WARNING,
    AuditSeverity.ERROR,
    AuditSeverity.CRITICAL,
)

# Resource types whose reads count as data access for compliance review.
DATA_ACCESS_RESOURCE_TYPES = (
    AuditResourceType.CLIENT,
    AuditResourceType.SERVICE,
    AuditResourceType.CLAIM,
    AuditResourceType.PAYMENT,
    AuditResourceType.AUTHORIZATION,
    AuditResourceType.DOCUMENT,
)
