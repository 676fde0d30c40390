"""LoggingMiddleware -- 请求级 request_id 与耗时日志

调用方（如 TRTC 回调）带来的 X-Request-ID 会被沿用，否则生成 ULID。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

REQUEST_ID_HEADER = "X-Request-ID"
# 超出长度的外部 ID 不可信，改为自行生成
MAX_INBOUND_REQUEST_ID_LENGTH = 128


def resolve_request_id(inbound: str | None) -> str:
    if inbound and len(inbound) <= MAX_INBOUND_REQUEST_ID_LENGTH:
        return inbound
    return str(ULID())


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        log = structlog.get_logger()
        started = time.monotonic()

        response = await call_next(request)

        duration_ms = int((time.monotonic() - started) * 1000)
        if response.status_code >= 500:
            await log.awarning(
                "request_failed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
        else:
            await log.ainfo(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
