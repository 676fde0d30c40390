"""任务取消路由

POST /api/tasks/{task_id}/cancel
- 200: 已取消，返回 canceled 状态
- 404: 任务不存在
- 409: 任务已在终态
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..deps import get_task_service
from ..errors import TASK_ALREADY_TERMINAL, error_response, task_not_found
from ..services.task_service import TaskService

router = APIRouter()


class CancelResponse(BaseModel):
    task_id: str
    state: str


@router.post("/api/tasks/{task_id}/cancel", response_model=CancelResponse)
async def cancel_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    """取消非终态的任务

    流式任务在下一个增量前停止；非流式任务的模型调用不可中断，
    其后续结果会被丢弃。
    """
    try:
        task = await service.cancel_task(task_id)
    except ValueError as e:
        return error_response(409, TASK_ALREADY_TERMINAL, str(e))

    if task is None:
        return task_not_found(task_id)
    return CancelResponse(task_id=task.task_id, state=task.status.state.value)
