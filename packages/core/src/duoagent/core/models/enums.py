"""枚举定义

包含 TaskState 状态机、Intent 人设选择、MessageRole、PartType、UpdateKind 枚举，
以及 VALID_TRANSITIONS 合法流转映射和 TERMINAL_STATES 终态集合。
"""

from enum import StrEnum


class TaskState(StrEnum):
    """Task 生命周期状态"""

    # 瞬态
    VALIDATING = "validating"
    WORKING = "working"

    # 终态
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"


# 合法状态流转；WORKING -> WORKING 用于流式进度消息
VALID_TRANSITIONS: dict[TaskState, set[TaskState]] = {
    TaskState.VALIDATING: {
        TaskState.WORKING,
        TaskState.FAILED,
        TaskState.CANCELED,
    },
    TaskState.WORKING: {
        TaskState.WORKING,
        TaskState.COMPLETED,
        TaskState.FAILED,
        TaskState.CANCELED,
    },
    # 终态不可再流转
    TaskState.COMPLETED: set(),
    TaskState.FAILED: set(),
    TaskState.CANCELED: set(),
}

TERMINAL_STATES: set[TaskState] = {
    TaskState.COMPLETED,
    TaskState.FAILED,
    TaskState.CANCELED,
}


class Intent(StrEnum):
    """人设选择 -- 意图识别的唯一合法输出"""

    XIAOMEI = "XiaoMei"
    XIAOSHUAI = "XiaoShuai"


# 识别结果不在枚举内时的兜底人设
DEFAULT_INTENT: Intent = Intent.XIAOMEI


class MessageRole(StrEnum):
    """消息作者"""

    USER = "user"
    AGENT = "agent"


class PartType(StrEnum):
    """Message / Artifact Part 类型"""

    TEXT = "text"
    FILE = "file"
    DATA = "data"


class UpdateKind(StrEnum):
    """TaskUpdate 类型"""

    STATUS = "status"
    ARTIFACT = "artifact"


def validate_transition(from_state: TaskState, to_state: TaskState) -> bool:
    """验证状态流转是否合法

    Args:
        from_state: 当前状态
        to_state: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_state, set())
    return to_state in allowed
