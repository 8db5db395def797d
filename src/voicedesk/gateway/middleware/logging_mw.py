"""LoggingMiddleware -- echo gateway 请求级日志

会话客户端每次调用后端都会带上 X-Request-ID，gateway 沿用该值，
缺失时生成 ULID；request_id 绑定到 structlog contextvars 并写回响应头，
客户端与 gateway 两侧的日志可按同一 request_id 关联。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

from voicedesk.core.config import REQUEST_ID_HEADER


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(ULID())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            endpoint=request.url.path,
        )
        log = structlog.get_logger()

        start_time = time.monotonic()
        response = await call_next(request)
        duration_ms = int((time.monotonic() - start_time) * 1000)

        fields = {
            "method": request.method,
            "status_code": response.status_code,
            "authenticated": "authorization" in request.headers,
            "duration_ms": duration_ms,
        }
        if response.status_code >= 400:
            await log.awarning("gateway_request_rejected", **fields)
        else:
            await log.ainfo("gateway_request_completed", **fields)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
