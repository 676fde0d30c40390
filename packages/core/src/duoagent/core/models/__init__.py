"""duoagent Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .artifact import Artifact
from .enums import (
    DEFAULT_INTENT,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    Intent,
    MessageRole,
    PartType,
    TaskState,
    UpdateKind,
    validate_transition,
)
from .message import (
    DataPart,
    FilePart,
    Message,
    Part,
    TextPart,
    extract_text,
    new_agent_message,
)
from .task import Task, TaskStatus
from .update import TaskUpdate

__all__ = [
    # 枚举
    "TaskState",
    "Intent",
    "DEFAULT_INTENT",
    "MessageRole",
    "PartType",
    "UpdateKind",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "validate_transition",
    # Message
    "Message",
    "Part",
    "TextPart",
    "FilePart",
    "DataPart",
    "extract_text",
    "new_agent_message",
    # Artifact
    "Artifact",
    # Task
    "Task",
    "TaskStatus",
    # Update
    "TaskUpdate",
]
