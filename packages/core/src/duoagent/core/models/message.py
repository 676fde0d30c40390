"""Message Domain Model

消息由有序的 parts 组成，part 是以 type 字段区分的联合类型。
流水线只构造 agent 消息，只读取入站消息的第一个文本 part。
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from .enums import MessageRole


class TextPart(BaseModel):
    """文本 Part"""

    type: Literal["text"] = "text"
    text: str = Field(description="文本内容")


class FilePart(BaseModel):
    """文件 Part（inline base64 或 URI 引用）"""

    type: Literal["file"] = "file"
    name: str | None = Field(default=None, description="文件名")
    mime_type: str | None = Field(default=None, description="MIME 类型")
    uri: str | None = Field(default=None, description="文件引用 URI")
    content: str | None = Field(default=None, description="base64 编码内容")


class DataPart(BaseModel):
    """结构化数据 Part"""

    type: Literal["data"] = "data"
    data: dict[str, Any] = Field(default_factory=dict, description="结构化数据")


Part = Annotated[TextPart | FilePart | DataPart, Field(discriminator="type")]


class Message(BaseModel):
    """消息 -- 有序 parts + 作者角色"""

    role: MessageRole = Field(default=MessageRole.USER, description="消息作者")
    parts: list[Part] = Field(default_factory=list, description="Parts 数组")
    metadata: dict[str, Any] | None = Field(default=None, description="附加元数据")


def new_agent_message(text: str) -> Message:
    """构造只含一个文本 part 的 agent 消息"""
    return Message(role=MessageRole.AGENT, parts=[TextPart(text=text)])


def extract_text(message: Message) -> str:
    """提取消息中第一个文本 part 的内容

    Returns:
        第一个 TextPart 的文本；没有文本 part 时返回空字符串
    """
    for part in message.parts:
        if isinstance(part, TextPart):
            return part.text
    return ""
