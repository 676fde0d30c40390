"""SSE 任务更新流路由

GET /api/stream/task/{task_id}: SSE 实时推送指定任务的状态与 Artifact 更新。
支持历史重放、实时推送、Last-Event-ID 断线重连、心跳保活。
"""

import asyncio

from duoagent.core.config import SSE_HEARTBEAT_INTERVAL
from duoagent.core.models import TaskUpdate
from fastapi import APIRouter, Depends, Request
from sse_starlette.sse import EventSourceResponse

from ..deps import get_sse_hub, get_task_service
from ..errors import task_not_found
from ..services.sse_hub import RESYNC, SSEHub
from ..services.task_service import TaskService

router = APIRouter()


def _to_sse(update: TaskUpdate) -> dict:
    """将 TaskUpdate 转换为 SSE 事件"""
    return {
        "id": str(update.seq),
        "event": update.kind.value,
        "data": update.model_dump_json(),
    }


def _parse_last_event_id(value: str | None) -> int:
    if not value:
        return 0
    try:
        return max(int(value), 0)
    except ValueError:
        return 0


@router.get("/api/stream/task/{task_id}")
async def stream_task_updates(
    task_id: str,
    request: Request,
    service: TaskService = Depends(get_task_service),
    sse_hub: SSEHub = Depends(get_sse_hub),
):
    """SSE 更新流端点

    1. 先订阅 SSEHub，避免重放与实时之间丢更新
    2. 推送历史更新（Last-Event-ID 之后）
    3. 实时推送新更新，按 seq 去重
    4. 终态更新携带 final: true 后结束
    5. 心跳保活
    6. 队列溢出后按 last_seq 从日志补齐
    """
    task = await service.get_task(task_id)
    if task is None:
        return task_not_found(task_id)

    after_seq = _parse_last_event_id(request.headers.get("last-event-id"))

    async def update_generator():
        queue = await sse_hub.subscribe(task_id)
        try:
            last_seq = after_seq
            for update in service.get_updates(task_id, after_seq=after_seq):
                yield _to_sse(update)
                last_seq = update.seq
                if update.final:
                    return

            while True:
                try:
                    update = await asyncio.wait_for(
                        queue.get(), timeout=SSE_HEARTBEAT_INTERVAL
                    )
                except TimeoutError:
                    yield {"comment": "heartbeat"}
                    continue

                if update is RESYNC:
                    # 队列溢出丢失的更新从日志补齐
                    for missed in service.get_updates(task_id, after_seq=last_seq):
                        yield _to_sse(missed)
                        last_seq = missed.seq
                        if missed.final:
                            return
                    continue

                if update.seq <= last_seq:
                    continue
                yield _to_sse(update)
                last_seq = update.seq
                if update.final:
                    return
        finally:
            await sse_hub.unsubscribe(task_id, queue)

    return EventSourceResponse(update_generator())
