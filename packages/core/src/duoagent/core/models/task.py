"""Task Domain Model

Task 由外部运行时创建，流水线只通过 TaskHandle 修改其状态和 Artifact 序列。
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from .artifact import Artifact
from .enums import TaskState
from .message import Message


class TaskStatus(BaseModel):
    """某一时刻的任务状态快照"""

    state: TaskState = Field(description="生命周期状态")
    message: Message | None = Field(default=None, description="附带的 agent 消息")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="状态变更时间",
    )


class Task(BaseModel):
    """Task 数据模型"""

    task_id: str = Field(description="任务标识（不透明字符串）")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")
    is_streaming: bool = Field(default=False, description="是否为流式请求")
    status: TaskStatus = Field(
        default_factory=lambda: TaskStatus(state=TaskState.VALIDATING),
        description="当前状态",
    )
    history: list[TaskStatus] = Field(default_factory=list, description="状态流转历史")
    artifacts: list[Artifact] = Field(default_factory=list, description="已产出的 Artifact")
