"""packages/agent 测试 fixtures -- 内存 TaskHandle、可编排的模型客户端、语音替身"""

import asyncio
from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest
from duoagent.agent import (
    INTENT_DETECTION_PROMPT,
    IntentClassifier,
    PersonaRegistry,
    ReportingError,
    ResponseGenerator,
    TaskProcessor,
)
from duoagent.core.models import Artifact, Message, TaskState
from duoagent.provider import ModelCallResult


class FakeLLM:
    """按调用类型返回预设结果的模型客户端

    system prompt 为意图识别提示词时返回 label，否则返回 reply；
    stream() 依次产出 deltas，随后可抛出 stream_error 或挂起。
    """

    model_name = "fake-model"

    def __init__(self) -> None:
        self.label = "XiaoMei"
        self.reply = "Hello there"
        self.deltas: list[str] = []
        self.classify_error: Exception | None = None
        self.complete_error: Exception | None = None
        self.stream_error: Exception | None = None
        self.hang_after_deltas = False
        self.complete_calls: list[list[dict[str, str]]] = []
        self.stream_calls: list[list[dict[str, str]]] = []
        self.stream_closed = False

    @property
    def call_count(self) -> int:
        return len(self.complete_calls) + len(self.stream_calls)

    async def complete(self, messages, **kwargs) -> ModelCallResult:
        self.complete_calls.append(messages)
        if messages[0]["content"] == INTENT_DETECTION_PROMPT:
            if self.classify_error is not None:
                raise self.classify_error
            return ModelCallResult(content=self.label, duration_ms=1)
        if self.complete_error is not None:
            raise self.complete_error
        return ModelCallResult(content=self.reply, model_name=self.model_name, duration_ms=1)

    async def stream(self, messages, **kwargs):
        self.stream_calls.append(messages)
        try:
            for delta in self.deltas:
                yield delta
            if self.stream_error is not None:
                raise self.stream_error
            if self.hang_after_deltas:
                await asyncio.Event().wait()
        finally:
            self.stream_closed = True


class FakeHandle:
    """记录所有上报的 TaskHandle"""

    def __init__(
        self,
        streaming: bool = False,
        fail_status: bool = False,
        fail_artifacts: bool = False,
        on_artifact: Callable[[Artifact], None] | None = None,
    ) -> None:
        self.streaming = streaming
        self.fail_status = fail_status
        self.fail_artifacts = fail_artifacts
        self.on_artifact = on_artifact
        self.statuses: list[tuple[TaskState, Message | None]] = []
        self.artifacts: list[Artifact] = []

    @property
    def states(self) -> list[TaskState]:
        return [state for state, _ in self.statuses]

    def is_streaming_request(self) -> bool:
        return self.streaming

    async def update_status(self, state: TaskState, message: Message | None = None) -> None:
        if self.fail_status:
            raise ReportingError("status backend unavailable")
        self.statuses.append((state, message))

    async def add_artifact(self, artifact: Artifact) -> None:
        if self.fail_artifacts:
            raise ReportingError("artifact backend unavailable")
        self.artifacts.append(artifact)
        if self.on_artifact is not None:
            self.on_artifact(artifact)


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def make_handle() -> Callable[..., FakeHandle]:
    """FakeHandle 工厂"""
    return FakeHandle


@pytest.fixture
def voice_updater() -> AsyncMock:
    voice = AsyncMock()
    voice.set_voice = AsyncMock(return_value=None)
    return voice


@pytest.fixture
def personas() -> PersonaRegistry:
    return PersonaRegistry()


@pytest.fixture
def classifier(fake_llm, personas, voice_updater) -> IntentClassifier:
    return IntentClassifier(fake_llm, personas, voice_updater=voice_updater)


@pytest.fixture
def generator(fake_llm, classifier, personas) -> ResponseGenerator:
    return ResponseGenerator(fake_llm, classifier, personas)


@pytest.fixture
def processor(generator) -> TaskProcessor:
    return TaskProcessor(generator)
