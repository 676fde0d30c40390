"""Artifact Domain Model

一个 Artifact 是任务输出的一个有序单元，流式响应中对应一个 chunk。
index 在同一任务内从 0 开始单调递增；append 表示内容拼接到前一个 chunk 之后；
last_chunk 只在关闭序列的那个 Artifact 上为 True。
"""

from typing import Any

from pydantic import BaseModel, Field

from .message import Part


class Artifact(BaseModel):
    """Artifact 数据模型"""

    index: int = Field(ge=0, description="任务内序号，从 0 开始")
    name: str | None = Field(default=None, description="产物名称")
    description: str | None = Field(default=None, description="产物描述")
    parts: list[Part] = Field(default_factory=list, description="Parts 数组")
    append: bool | None = Field(
        default=None,
        description="True 表示内容拼接到前一个 Artifact 之后",
    )
    last_chunk: bool | None = Field(
        default=None,
        description="True 表示这是序列中的最后一个 Artifact",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="时间戳、累计长度、模型、是否流式、chunk 序号等",
    )
