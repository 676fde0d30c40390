"""TaskProcessor -- 任务生命周期驱动

流程：
1. 提取文本；为空则 validating -> failed，抛出 ValidationError
2. validating -> working，发送与模式对应的开始消息
3. 流式：ResponseGenerator.stream() 负责 Artifact 序列和 completed
   非流式：ResponseGenerator.generate() 返回完整回复，由此处写 Artifact 和 completed
4. 识别/生成失败 -> failed；取消 -> canceled；错误继续向上抛出
"""

import asyncio
import time

import structlog
from duoagent.core.config import MESSAGE_PREVIEW_LENGTH
from duoagent.core.models import (
    Artifact,
    Message,
    TaskState,
    TextPart,
    extract_text,
    new_agent_message,
)

from .errors import CancellationError, PipelineError, ValidationError
from .generator import ResponseGenerator
from .handle import TaskHandle
from .reporting import report_artifact, report_status

log = structlog.get_logger()

EMPTY_TEXT_ERROR = "input message must contain text"
STREAMING_START_TEXT = "Starting to process your streaming request..."
BATCH_START_TEXT = "Processing your text..."
BATCH_COMPLETE_TEXT = "Processing complete. Model response received."
CANCELED_TEXT = "Task canceled."


def _raise_if_canceled(
    task_id: str, cancel_event: asyncio.Event | None, stage: str
) -> None:
    if cancel_event is not None and cancel_event.is_set():
        log.info("task_canceled_before_stage", task_id=task_id, stage=stage)
        raise CancellationError(f"task {task_id} canceled before {stage}")


class TaskProcessor:
    """任务处理器 -- 外部运行时对每个任务调用一次 process()"""

    def __init__(self, generator: ResponseGenerator) -> None:
        self._generator = generator

    async def process(
        self,
        task_id: str,
        message: Message,
        handle: TaskHandle,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        """处理一个任务

        Args:
            task_id: 任务 ID
            message: 入站消息
            handle: 运行时提供的任务能力
            cancel_event: 取消信号，流式读取每轮检查一次

        Raises:
            ValidationError: 消息中没有文本
            ClassificationError: 意图识别失败
            GenerationError: 回复生成失败
            CancellationError: 生成前、流式读取中或非流式结果返回时已收到取消信号
        """
        text = extract_text(message)
        if not text:
            error = ValidationError(EMPTY_TEXT_ERROR)
            log.warning("task_validation_failed", task_id=task_id, error=str(error))
            await report_status(
                handle, task_id, TaskState.FAILED, new_agent_message(str(error))
            )
            raise error

        streaming = handle.is_streaming_request()
        log.info(
            "task_processing_started",
            task_id=task_id,
            streaming=streaming,
            text_preview=text[:MESSAGE_PREVIEW_LENGTH],
        )

        await report_status(
            handle,
            task_id,
            TaskState.WORKING,
            new_agent_message(STREAMING_START_TEXT if streaming else BATCH_START_TEXT),
        )

        try:
            # 已取消的任务不再做意图识别，也不切换音色
            _raise_if_canceled(task_id, cancel_event, "generation")
            if streaming:
                await self._generator.stream(task_id, text, handle, cancel_event)
            else:
                await self._process_batch(task_id, text, handle, cancel_event)
        except CancellationError:
            await self._mark_canceled(task_id, handle)
            raise
        except asyncio.CancelledError:
            await self._mark_canceled(task_id, handle)
            raise
        except PipelineError as e:
            await self._mark_failed(task_id, handle, e)
            raise
        except Exception as e:
            log.exception("task_processing_crashed", task_id=task_id)
            await self._mark_failed(task_id, handle, e)
            raise

        log.info("task_processing_completed", task_id=task_id, streaming=streaming)

    async def _process_batch(
        self,
        task_id: str,
        text: str,
        handle: TaskHandle,
        cancel_event: asyncio.Event | None,
    ) -> None:
        content = await self._generator.generate(task_id, text)
        # 补全请求不可中断，期间收到的取消使结果被丢弃
        _raise_if_canceled(task_id, cancel_event, "result delivery")

        await report_artifact(
            handle,
            task_id,
            Artifact(
                index=0,
                name="Processed Text",
                description="Complete processed text from model",
                parts=[TextPart(text=content)],
                last_chunk=True,
                metadata={
                    "timestamp": time.time_ns(),
                    "total_length": len(content.encode("utf-8")),
                    "model": self._generator.model_name,
                    "is_streaming": False,
                },
            ),
        )
        await report_status(
            handle, task_id, TaskState.COMPLETED, new_agent_message(BATCH_COMPLETE_TEXT)
        )

    async def _mark_failed(self, task_id: str, handle: TaskHandle, error: Exception) -> None:
        log.error(
            "task_processing_failed",
            task_id=task_id,
            error=str(error),
            error_type=type(error).__name__,
        )
        await report_status(
            handle,
            task_id,
            TaskState.FAILED,
            new_agent_message(f"Failed to process request: {error}"),
        )

    async def _mark_canceled(self, task_id: str, handle: TaskHandle) -> None:
        log.info("task_processing_canceled", task_id=task_id)
        await report_status(
            handle, task_id, TaskState.CANCELED, new_agent_message(CANCELED_TEXT)
        )
