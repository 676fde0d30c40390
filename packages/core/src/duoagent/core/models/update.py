"""TaskUpdate Domain Model

运行时把每次状态变更和 Artifact 追加记录为一条 TaskUpdate，
seq 在同一 task 内从 1 开始严格单调递增，用于 SSE 推送与重放。
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from .artifact import Artifact
from .enums import UpdateKind
from .task import TaskStatus


class TaskUpdate(BaseModel):
    """任务更新事件"""

    task_id: str = Field(description="关联的 Task ID")
    seq: int = Field(ge=1, description="任务内序号，严格单调递增")
    ts: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="事件时间戳",
    )
    kind: UpdateKind = Field(description="更新类型")
    status: TaskStatus | None = Field(default=None, description="kind=status 时的状态")
    artifact: Artifact | None = Field(default=None, description="kind=artifact 时的产物")
    final: bool = Field(default=False, description="任务是否已到达终态")
