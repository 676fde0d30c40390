"""TaskHandle 上报封装 -- 失败只记录日志，不中断任务"""

import structlog
from duoagent.core.models import Artifact, Message, TaskState

from .handle import TaskHandle

log = structlog.get_logger()


async def report_status(
    handle: TaskHandle,
    task_id: str,
    state: TaskState,
    message: Message | None = None,
) -> bool:
    """更新任务状态

    Returns:
        True 如果上报成功
    """
    try:
        await handle.update_status(state, message)
    except Exception as e:
        log.warning(
            "task_status_update_failed",
            task_id=task_id,
            state=state.value,
            error=str(e),
            error_type=type(e).__name__,
        )
        return False
    return True


async def report_artifact(handle: TaskHandle, task_id: str, artifact: Artifact) -> bool:
    """追加 Artifact

    Returns:
        True 如果追加成功
    """
    try:
        await handle.add_artifact(artifact)
    except Exception as e:
        log.warning(
            "task_artifact_append_failed",
            task_id=task_id,
            artifact_index=artifact.index,
            last_chunk=bool(artifact.last_chunk),
            error=str(e),
            error_type=type(e).__name__,
        )
        return False
    return True
