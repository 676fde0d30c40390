"""SSEHub -- 进程内任务更新广播

每个订阅者持有一个有界 asyncio.Queue。消费过慢导致队列溢出时，
队列被清空并放入 RESYNC（None），订阅方据此从 TaskService 的更新日志重放。
"""

import asyncio
from collections import defaultdict

import structlog
from duoagent.core.models import TaskUpdate

log = structlog.get_logger()

# 队列中的重放信号
RESYNC = None


class SSEHub:
    def __init__(self, queue_maxsize: int = 256) -> None:
        self._subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)
        self._queue_maxsize = queue_maxsize

    async def subscribe(self, task_id: str) -> asyncio.Queue:
        """订阅任务更新

        Returns:
            队列，元素为 TaskUpdate 或 RESYNC
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers[task_id].add(queue)
        return queue

    async def unsubscribe(self, task_id: str, queue: asyncio.Queue) -> None:
        subscribers = self._subscribers.get(task_id)
        if subscribers is None:
            return
        subscribers.discard(queue)
        if not subscribers:
            del self._subscribers[task_id]

    def subscriber_count(self, task_id: str) -> int:
        return len(self._subscribers.get(task_id, ()))

    async def broadcast(self, task_id: str, update: TaskUpdate) -> None:
        for queue in self._subscribers.get(task_id, ()):
            try:
                queue.put_nowait(update)
            except asyncio.QueueFull:
                self._overflow(task_id, queue)

    @staticmethod
    def _overflow(task_id: str, queue: asyncio.Queue) -> None:
        dropped = queue.qsize()
        while not queue.empty():
            queue.get_nowait()
        queue.put_nowait(RESYNC)
        log.warning("sse_subscriber_overflow", task_id=task_id, dropped=dropped)
