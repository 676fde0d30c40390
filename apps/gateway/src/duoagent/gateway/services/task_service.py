"""TaskService -- 内存任务运行时

负责任务创建、启动流水线、取消、查询；
MemoryTaskHandle 是流水线看到的 TaskHandle 实现。
不做持久化：进程退出后任务记录随之消失；
内存中最多保留 max_retained 条记录，超出时淘汰最早的已终态任务。
"""

import asyncio
from datetime import UTC, datetime

import structlog
from duoagent.agent import PipelineError, ReportingError, TaskProcessor
from duoagent.core.config import MAX_RETAINED_TASKS, MESSAGE_PREVIEW_LENGTH
from duoagent.core.models import (
    TERMINAL_STATES,
    Artifact,
    Message,
    Task,
    TaskState,
    TaskStatus,
    TaskUpdate,
    UpdateKind,
    extract_text,
    new_agent_message,
    validate_transition,
)
from ulid import ULID

from .sse_hub import SSEHub

log = structlog.get_logger()

CANCELED_BY_USER_TEXT = "Task canceled by user."


class TaskNotFoundError(ReportingError):
    """任务不存在"""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id {task_id} does not exist")
        self.task_id = task_id


class TaskStatusConflictError(ReportingError):
    """非法状态流转，或在终态任务上追加 Artifact"""

    def __init__(self, task_id: str, current: TaskState, action: str) -> None:
        super().__init__(f"Task {task_id} in state {current} cannot {action}")
        self.task_id = task_id
        self.current = current


class MemoryTaskHandle:
    """TaskHandle 实现 -- 所有修改委托给 TaskService"""

    def __init__(self, service: "TaskService", task_id: str, streaming: bool) -> None:
        self._service = service
        self._task_id = task_id
        self._streaming = streaming

    def is_streaming_request(self) -> bool:
        return self._streaming

    async def update_status(
        self,
        state: TaskState,
        message: Message | None = None,
    ) -> None:
        await self._service.apply_status(self._task_id, state, message)

    async def add_artifact(self, artifact: Artifact) -> None:
        await self._service.append_artifact(self._task_id, artifact)


class TaskService:
    """任务业务服务（进程内单例，由 lifespan 创建）"""

    def __init__(
        self,
        processor: TaskProcessor | None,
        sse_hub: SSEHub | None = None,
        max_retained: int = MAX_RETAINED_TASKS,
    ) -> None:
        self._processor = processor
        self._sse_hub = sse_hub
        self._max_retained = max_retained
        self._tasks: dict[str, Task] = {}
        self._updates: dict[str, list[TaskUpdate]] = {}
        self._cancel_events: dict[str, asyncio.Event] = {}
        self._runners: dict[str, asyncio.Task] = {}

    async def create_task(
        self,
        message: Message,
        streaming: bool,
        task_id: str | None = None,
    ) -> tuple[str, bool]:
        """创建任务（初始状态 validating）

        Args:
            message: 用户消息（仅用于日志预览，处理由 start() 触发）
            streaming: 是否为流式请求
            task_id: 调用方指定的任务 ID（如 TRTC 会话 ID），None 时生成 ULID

        Returns:
            (task_id, created) -- created=False 表示该 ID 已存在
        """
        if task_id is not None and task_id in self._tasks:
            return task_id, False

        task_id = task_id or str(ULID())
        now = datetime.now(UTC)
        initial = TaskStatus(state=TaskState.VALIDATING, timestamp=now)
        self._tasks[task_id] = Task(
            task_id=task_id,
            created_at=now,
            updated_at=now,
            is_streaming=streaming,
            status=initial,
            history=[initial],
        )
        self._updates[task_id] = []
        await self._record(task_id, UpdateKind.STATUS, status=initial)
        self._evict_finished()

        log.info(
            "task_created",
            task_id=task_id,
            streaming=streaming,
            text_preview=extract_text(message)[:MESSAGE_PREVIEW_LENGTH],
        )
        return task_id, True

    def start(self, task_id: str, message: Message) -> asyncio.Task:
        """在后台 asyncio task 中运行流水线"""
        if self._processor is None:
            raise RuntimeError("TaskService has no processor configured")

        task = self._tasks[task_id]
        cancel_event = asyncio.Event()
        handle = MemoryTaskHandle(self, task_id, task.is_streaming)
        self._cancel_events[task_id] = cancel_event
        runner = asyncio.create_task(
            self._run(task_id, message, handle, cancel_event),
            name=f"task-{task_id}",
        )
        self._runners[task_id] = runner
        return runner

    async def _run(
        self,
        task_id: str,
        message: Message,
        handle: MemoryTaskHandle,
        cancel_event: asyncio.Event,
    ) -> None:
        try:
            await self._processor.process(task_id, message, handle, cancel_event)
        except PipelineError as e:
            # 流水线已将任务推进到终态，这里只记录
            log.info(
                "task_run_terminated",
                task_id=task_id,
                error_type=type(e).__name__,
            )
        except asyncio.CancelledError:
            log.info("task_run_cancelled", task_id=task_id)
            raise
        except Exception:
            log.exception("task_run_crashed", task_id=task_id)
        finally:
            self._cancel_events.pop(task_id, None)
            self._runners.pop(task_id, None)

    async def cancel_task(self, task_id: str) -> Task | None:
        """取消任务

        立即推进到 canceled，并通知正在运行的流水线停止读取。

        Returns:
            更新后的 Task，如果任务不存在返回 None

        Raises:
            ValueError: 任务已在终态
        """
        task = self._tasks.get(task_id)
        if task is None:
            return None

        if task.status.state in TERMINAL_STATES:
            raise ValueError(f"Task is already in terminal state: {task.status.state}")

        await self.apply_status(
            task_id, TaskState.CANCELED, new_agent_message(CANCELED_BY_USER_TEXT)
        )
        cancel_event = self._cancel_events.get(task_id)
        if cancel_event is not None:
            cancel_event.set()

        log.info("task_cancel_requested", task_id=task_id)
        return await self.get_task(task_id)

    async def apply_status(
        self,
        task_id: str,
        state: TaskState,
        message: Message | None = None,
    ) -> None:
        """替换任务状态

        重复设置当前终态视为幂等操作。

        Raises:
            TaskNotFoundError: 任务不存在
            TaskStatusConflictError: 非法流转
        """
        task = self._get_or_raise(task_id)
        current = task.status.state
        if state == current and state in TERMINAL_STATES:
            return
        if not validate_transition(current, state):
            raise TaskStatusConflictError(task_id, current, f"transition to {state}")

        status = TaskStatus(state=state, message=message)
        task.status = status
        task.history.append(status)
        task.updated_at = status.timestamp

        await self._record(
            task_id,
            UpdateKind.STATUS,
            status=status,
            final=state in TERMINAL_STATES,
        )

    async def append_artifact(self, task_id: str, artifact: Artifact) -> None:
        """追加 Artifact

        Raises:
            TaskNotFoundError: 任务不存在
            TaskStatusConflictError: 任务已在终态
        """
        task = self._get_or_raise(task_id)
        if task.status.state in TERMINAL_STATES:
            raise TaskStatusConflictError(task_id, task.status.state, "accept artifacts")

        task.artifacts.append(artifact)
        task.updated_at = datetime.now(UTC)
        await self._record(task_id, UpdateKind.ARTIFACT, artifact=artifact)

    async def _record(
        self,
        task_id: str,
        kind: UpdateKind,
        status: TaskStatus | None = None,
        artifact: Artifact | None = None,
        final: bool = False,
    ) -> TaskUpdate:
        """记录一条 TaskUpdate 并广播"""
        updates = self._updates[task_id]
        update = TaskUpdate(
            task_id=task_id,
            seq=len(updates) + 1,
            kind=kind,
            status=status,
            artifact=artifact,
            final=final,
        )
        updates.append(update)
        if self._sse_hub:
            await self._sse_hub.broadcast(task_id, update)
        return update

    def _evict_finished(self) -> None:
        """超出保留上限时，按创建顺序淘汰已终态且不在运行的任务"""
        excess = len(self._tasks) - self._max_retained
        if excess <= 0:
            return

        evicted = []
        for task_id, task in list(self._tasks.items()):
            if len(evicted) == excess:
                break
            if task.status.state in TERMINAL_STATES and task_id not in self._runners:
                del self._tasks[task_id]
                self._updates.pop(task_id, None)
                evicted.append(task_id)

        if evicted:
            log.info("task_records_evicted", count=len(evicted), retained=len(self._tasks))

    def _get_or_raise(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def get_task(self, task_id: str) -> Task | None:
        """查询任务详情（返回副本）"""
        task = self._tasks.get(task_id)
        return task.model_copy(deep=True) if task is not None else None

    async def list_tasks(self, state: str | None = None) -> list[Task]:
        """查询任务列表，按 created_at 倒序"""
        tasks = [
            t for t in self._tasks.values() if state is None or t.status.state == state
        ]
        # 创建时间相同时后创建的排在前面
        tasks.reverse()
        tasks.sort(key=lambda t: t.created_at, reverse=True)
        return [t.model_copy(deep=True) for t in tasks]

    @property
    def running_count(self) -> int:
        """正在运行的流水线数量"""
        return len(self._runners)

    def get_updates(self, task_id: str, after_seq: int = 0) -> list[TaskUpdate]:
        """查询 seq 大于 after_seq 的历史更新（SSE 重放）"""
        return [u for u in self._updates.get(task_id, []) if u.seq > after_seq]

    async def wait_for(self, task_id: str) -> None:
        """等待任务的后台流水线结束（未在运行时立即返回）"""
        runner = self._runners.get(task_id)
        if runner is not None:
            await asyncio.wait({runner})

    async def shutdown(self) -> None:
        """停止所有运行中的流水线"""
        runners = list(self._runners.values())
        for runner in runners:
            runner.cancel()
        if runners:
            await asyncio.wait(runners)
        log.info("task_service_shutdown", cancelled=len(runners))
