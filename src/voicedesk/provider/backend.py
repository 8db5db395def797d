"""后端 HTTP 调用公共逻辑

统一处理 bearer token 与 request_id 注入、耗时日志与错误包装：
网络错误、非 2xx 响应一律包装为 RemoteError。
"""

import time
from typing import Any

import httpx
import structlog
from ulid import ULID

from voicedesk.core.config import REQUEST_ID_HEADER

from .config import SessionConfig
from .exceptions import RemoteError

log = structlog.get_logger()


def create_http_client(
    config: SessionConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """按配置创建共享的 httpx.AsyncClient

    Args:
        config: 会话配置
        transport: 可选 transport（测试时注入 MockTransport / ASGITransport）
    """
    return httpx.AsyncClient(
        base_url=config.api_base_url.rstrip("/"),
        timeout=config.timeout_s,
        transport=transport,
    )


async def post_json(
    http_client: httpx.AsyncClient,
    path: str,
    payload: dict[str, Any],
    token: str | None = None,
) -> httpx.Response:
    """POST JSON 到后端并校验状态码

    Raises:
        RemoteError: 网络错误或非 2xx 响应
    """
    request_id = str(ULID())
    headers = {REQUEST_ID_HEADER: request_id}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    start_time = time.monotonic()
    try:
        response = await http_client.post(path, json=payload, headers=headers)
    except httpx.HTTPError as e:
        duration_ms = int((time.monotonic() - start_time) * 1000)
        log.error(
            "backend_call_failed",
            path=path,
            request_id=request_id,
            error=str(e),
            error_type=type(e).__name__,
            duration_ms=duration_ms,
        )
        raise RemoteError(endpoint=path, original_error=e) from e

    duration_ms = int((time.monotonic() - start_time) * 1000)
    if not response.is_success:
        log.error(
            "backend_call_rejected",
            path=path,
            request_id=request_id,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        raise RemoteError(endpoint=path, status_code=response.status_code)

    log.debug(
        "backend_call_completed",
        path=path,
        request_id=request_id,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    return response
