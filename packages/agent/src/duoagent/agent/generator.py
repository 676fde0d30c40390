"""ResponseGenerator -- 按人设生成回复

非流式：一次补全请求，返回完整内容。
流式：逐个读取 content 增量，每个非空增量对应一条 working 状态消息和一个 Artifact；
正常结束后追加一个空内容的 last_chunk Artifact（至少有一个增量时），再推进到 completed。
"""

import asyncio
import time

import structlog
from duoagent.core.models import (
    Artifact,
    Intent,
    TaskState,
    TextPart,
    new_agent_message,
)
from duoagent.provider import ProviderError

from .errors import CancellationError, GenerationError
from .handle import TaskHandle
from .intent import IntentClassifier
from .personas import PersonaRegistry
from .reporting import report_artifact, report_status

log = structlog.get_logger()


class ResponseGenerator:
    """回复生成器"""

    def __init__(
        self,
        llm_client,
        classifier: IntentClassifier,
        personas: PersonaRegistry,
    ) -> None:
        """
        Args:
            llm_client: 提供 complete() / stream() 的模型客户端
            classifier: 意图识别器（每个任务生成前调用一次）
            personas: 人设注册表
        """
        self._llm = llm_client
        self._classifier = classifier
        self._personas = personas

    @property
    def model_name(self) -> str:
        return getattr(self._llm, "model_name", "")

    def _build_messages(self, intent: Intent, text: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self._personas.system_prompt(intent)},
            {"role": "user", "content": text},
        ]

    async def _resolve_intent(self, task_id: str, text: str) -> Intent:
        result = await self._classifier.classify(text, task_id)
        log.info(
            "task_persona_resolved",
            task_id=task_id,
            intent=result.intent.value,
            is_fallback=result.is_fallback,
        )
        return result.intent

    async def generate(self, task_id: str, text: str) -> str:
        """非流式生成，返回完整回复

        Raises:
            ClassificationError: 意图识别失败
            GenerationError: 补全请求失败或响应中没有 choice
        """
        intent = await self._resolve_intent(task_id, text)

        try:
            result = await self._llm.complete(self._build_messages(intent, text))
        except ProviderError as e:
            raise GenerationError(f"failed to create completion request: {e}") from e

        log.info(
            "task_completion_received",
            task_id=task_id,
            content_length=len(result.content),
            duration_ms=result.duration_ms,
        )
        return result.content

    async def stream(
        self,
        task_id: str,
        text: str,
        handle: TaskHandle,
        cancel_event: asyncio.Event | None = None,
    ) -> int:
        """流式生成，边读边产出 Artifact

        每轮先检查取消信号，再读取下一个增量。

        Returns:
            非空增量（content Artifact）的数量

        Raises:
            ClassificationError: 意图识别失败
            GenerationError: 建立流或读取流失败
            CancellationError: 读取过程中收到取消信号
        """
        intent = await self._resolve_intent(task_id, text)
        model_name = self.model_name

        stream = self._llm.stream(self._build_messages(intent, text))
        chunk_index = 0
        total_length = 0
        start_time = time.monotonic()
        first_token_received = False

        try:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    log.info(
                        "task_stream_canceled",
                        task_id=task_id,
                        chunks_sent=chunk_index,
                    )
                    raise CancellationError(f"task {task_id} canceled during streaming")

                try:
                    content = await anext(stream)
                except StopAsyncIteration:
                    break
                except ProviderError as e:
                    raise GenerationError(
                        f"failed to receive streaming response: {e}"
                    ) from e

                if not content:
                    continue

                if not first_token_received:
                    log.info(
                        "time_to_first_token",
                        task_id=task_id,
                        elapsed_ms=int((time.monotonic() - start_time) * 1000),
                    )
                    first_token_received = True

                chunk_size = len(content.encode("utf-8"))
                total_length += chunk_size

                log.debug(
                    "task_chunk_sending",
                    task_id=task_id,
                    chunk=chunk_index + 1,
                    chunk_size=chunk_size,
                )

                await report_status(
                    handle, task_id, TaskState.WORKING, new_agent_message(content)
                )
                await report_artifact(
                    handle,
                    task_id,
                    Artifact(
                        index=chunk_index,
                        name=f"Chunk {chunk_index + 1}",
                        description="Streaming chunk from model",
                        parts=[TextPart(text=content)],
                        append=chunk_index > 0,
                        metadata={
                            "timestamp": time.time_ns(),
                            "chunk_size": chunk_size,
                            "chunk_index": chunk_index,
                            "total_length": total_length,
                            "model": model_name,
                            "is_streaming": True,
                        },
                    ),
                )

                chunk_index += 1
        finally:
            await stream.aclose()

        if chunk_index > 0:
            await report_artifact(
                handle,
                task_id,
                Artifact(
                    index=chunk_index - 1,
                    name=f"Chunk {chunk_index}",
                    description="Final chunk from model",
                    parts=[],
                    last_chunk=True,
                    metadata={
                        "timestamp": time.time_ns(),
                        "total_chunks": chunk_index,
                        "total_length": total_length,
                        "model": model_name,
                        "is_streaming": True,
                        "is_last_chunk": True,
                    },
                ),
            )

        await report_status(
            handle,
            task_id,
            TaskState.COMPLETED,
            new_agent_message(f"Processing complete. Received {chunk_index} chunks."),
        )
        log.info(
            "task_stream_completed",
            task_id=task_id,
            chunks=chunk_index,
            total_length=total_length,
        )
        return chunk_index
