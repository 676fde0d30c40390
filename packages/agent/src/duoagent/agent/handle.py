"""TaskHandle Protocol -- 任务运行时暴露给流水线的能力接口

使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Protocol

from duoagent.core.models import Artifact, Message, TaskState


class TaskHandle(Protocol):
    """任务运行时能力

    update_status / add_artifact 失败时抛出异常（约定为 ReportingError），
    流水线只记录日志，不重试。
    """

    def is_streaming_request(self) -> bool:
        """当前请求是否为流式请求"""
        ...

    async def update_status(
        self,
        state: TaskState,
        message: Message | None = None,
    ) -> None:
        """替换当前状态，可附带一条 agent 消息"""
        ...

    async def add_artifact(self, artifact: Artifact) -> None:
        """追加一个 Artifact"""
        ...


class VoiceUpdater(Protocol):
    """语音后端能力 -- 按人设切换 task 对应会话的音色"""

    async def set_voice(self, task_id: str, persona) -> None:
        ...
