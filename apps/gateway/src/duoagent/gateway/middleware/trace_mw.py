"""TraceMiddleware -- 为任务操作绑定 trace_id

trace_id 由路径中的 task_id 生成：/api/tasks/{task_id}[/cancel] 或 /api/stream/task/{task_id}。
task_id 是不透明字符串（ULID 或外部会话 ID），不按长度过滤。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


def extract_task_id(path: str) -> str | None:
    """从请求路径提取 task_id，不是任务路由时返回 None"""
    parts = [p for p in path.split("/") if p]
    # ["api", "tasks", "{id}", ...] / ["api", "stream", "task", "{id}"]
    if len(parts) >= 3 and parts[0] == "api" and parts[1] == "tasks":
        return parts[2]
    if len(parts) >= 4 and parts[:3] == ["api", "stream", "task"]:
        return parts[3]
    return None


class TraceMiddleware(BaseHTTPMiddleware):
    """任务级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        task_id = extract_task_id(request.url.path)
        if task_id:
            structlog.contextvars.bind_contextvars(
                task_id=task_id,
                trace_id=f"trace-{task_id}",
            )

        return await call_next(request)
