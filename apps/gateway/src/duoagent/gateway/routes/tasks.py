"""任务查询路由

GET /api/tasks: 任务列表查询，支持 state 筛选。
GET /api/tasks/{task_id}: 任务详情查询，含状态历史和 artifacts。
"""

from duoagent.core.models import TaskState
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..deps import get_task_service
from ..errors import task_not_found
from ..services.task_service import TaskService

router = APIRouter()


class TaskSummary(BaseModel):
    """任务摘要（列表项）"""

    task_id: str
    created_at: str
    updated_at: str
    state: str
    is_streaming: bool
    artifact_count: int


class TaskListResponse(BaseModel):
    """任务列表响应"""

    tasks: list[TaskSummary]


@router.get("/api/tasks", response_model=TaskListResponse)
async def list_tasks(
    state: TaskState | None = Query(default=None, description="按状态筛选"),
    service: TaskService = Depends(get_task_service),
):
    """查询任务列表，按 created_at 倒序"""
    tasks = await service.list_tasks(state)

    return TaskListResponse(
        tasks=[
            TaskSummary(
                task_id=t.task_id,
                created_at=t.created_at.isoformat(),
                updated_at=t.updated_at.isoformat(),
                state=t.status.state.value,
                is_streaming=t.is_streaming,
                artifact_count=len(t.artifacts),
            )
            for t in tasks
        ]
    )


@router.get("/api/tasks/{task_id}")
async def get_task_detail(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    """查询任务详情"""
    task = await service.get_task(task_id)

    if task is None:
        return task_not_found(task_id)

    return {"task": task.model_dump(mode="json")}
