"""消息接收路由

POST /api/message: 接收用户消息，创建 Task，后台启动处理流水线。
"""

from duoagent.core.models import Message
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from ..deps import get_task_service
from ..services.task_service import TaskService

router = APIRouter()


class MessageRequest(BaseModel):
    """消息接收请求体"""

    message: Message = Field(description="用户消息")
    task_id: str | None = Field(
        default=None,
        min_length=1,
        description="调用方指定的任务 ID（如语音会话 ID），缺省时服务端生成",
    )
    stream: bool = Field(default=False, description="是否以流式方式产出结果")


class MessageResponse(BaseModel):
    """消息接收响应"""

    task_id: str
    state: str
    created: bool


@router.post("/api/message", response_model=MessageResponse)
async def receive_message(
    body: MessageRequest,
    service: TaskService = Depends(get_task_service),
):
    """接收用户消息，创建 Task

    - 新任务返回 201 Created，并在后台启动流水线
    - task_id 已存在返回 200 OK，不重复处理
    """
    task_id, created = await service.create_task(
        body.message,
        streaming=body.stream,
        task_id=body.task_id,
    )

    if created:
        service.start(task_id, body.message)

    task = await service.get_task(task_id)
    return JSONResponse(
        status_code=201 if created else 200,
        content=MessageResponse(
            task_id=task_id,
            state=task.status.state.value,
            created=created,
        ).model_dump(),
    )
