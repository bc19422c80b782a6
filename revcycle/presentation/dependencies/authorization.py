"""
FastAPI adapters for the authorization manager.

Authentication is handled upstream: whatever authenticates the request is
expected to place an ``AuthenticatedUser`` on ``request.state.user``. The
security container is read from ``app.state.security``.
"""

import logging
from collections.abc import Awaitable, Callable

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from revcycle.core.exceptions.security_exceptions import (
    AuthorizationError,
    PermissionDeniedError,
    SecurityError,
)
from revcycle.domain.entities.user import AuthenticatedUser
from revcycle.infrastructure.security.authorization.authorization_manager import (
    AuthorizationManager,
)

logger = logging.getLogger(__name__)


def get_current_user(request: Request) -> AuthenticatedUser:
    user = getattr(request.state, "user", None)
    if user is None:
        raise PermissionDeniedError("Authentication required", code="AUTHENTICATION_REQUIRED")
    return user


def get_authorization_manager(request: Request) -> AuthorizationManager:
    return request.app.state.security.authorization


def require_permission(permission_name: str) -> Callable[..., AuthenticatedUser]:
    """
    Build a dependency that lets the request through only with ``permission_name``.

    Usage:
        @router.get("/claims", dependencies=[Depends(require_permission("CLAIMS:READ"))])
    """

    def dependency(
        user: AuthenticatedUser = Depends(get_current_user),
        authorization: AuthorizationManager = Depends(get_authorization_manager),
    ) -> AuthenticatedUser:
        authorization.enforce_permission(user, permission_name)
        return user

    return dependency


def register_security_exception_handlers(app: FastAPI) -> None:
    """Map authorization failures to 403 and other security failures to 500."""

    async def authorization_error_handler(
        request: Request, exc: AuthorizationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content=exc.to_dict(),
        )

    async def security_error_handler(request: Request, exc: SecurityError) -> JSONResponse:
        logger.error(f"Security error while handling {request.url.path}: {exc.code}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal security error", "code": exc.code},
        )

    handlers: dict[type[Exception], Callable[..., Awaitable[JSONResponse]]] = {
        AuthorizationError: authorization_error_handler,
        SecurityError: security_error_handler,
    }
    for exc_class, handler in handlers.items():
        app.add_exception_handler(exc_class, handler)
