"""FastAPI dependencies."""

from revcycle.presentation.dependencies.authorization import (
    get_authorization_manager,
    get_current_user,
    register_security_exception_handlers,
    require_permission,
)

__all__ = [
    "get_authorization_manager",
    "get_current_user",
    "register_security_exception_handlers",
    "require_permission",
]
