import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from revcycle.infrastructure.logging.context import reset_correlation_id, set_correlation_id

CORRELATION_ID_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Binds a correlation ID to each request.

    - A valid UUID in the 'X-Correlation-ID' header is used as is.
    - Otherwise a new UUIDv4 is generated.
    - The ID is bound to the logging context for the duration of the request
      and stored in request.state.correlation_id.
    - The ID is echoed in the response headers.
    """

    def __init__(self, app: ASGIApp, header_name: str = CORRELATION_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(self.header_name)

        try:
            if correlation_id:
                uuid.UUID(correlation_id)
            else:
                correlation_id = str(uuid.uuid4())
        except (ValueError, TypeError):
            correlation_id = str(uuid.uuid4())

        request.state.correlation_id = correlation_id
        token = set_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)

        response.headers[self.header_name] = correlation_id
        return response
