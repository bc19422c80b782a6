"""
Root of the revcycle exception hierarchy.

Every error raised by the security layer carries a human-readable message,
an optional machine-readable code, and optional structured detail.
"""

from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all revcycle errors.

    Attributes:
        message: A human-readable error message
        detail: Structured context, safe to return to API clients
        code: An error code for machine processing
    """

    def __init__(
        self,
        message: str,
        detail: str | list[str] | dict[str, Any] | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message
        self.detail = detail
        self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} - {self.detail}" if self.detail else self.message

    def to_dict(self) -> dict[str, Any]:
        """Response body for API clients."""
        return {"message": self.message, "code": self.code, "detail": self.detail}
