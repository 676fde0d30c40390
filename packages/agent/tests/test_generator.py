"""ResponseGenerator 单元测试

测试内容：
1. 流式：N 个非空增量 -> N 个内容 Artifact + 1 个 last_chunk Artifact
2. 流式：0 个增量 -> 无 Artifact，直接 completed
3. 流式：取消 / 读取失败
4. 非流式：人设提示词 + 完整回复
"""

import asyncio

import pytest
from duoagent.agent import CancellationError, GenerationError
from duoagent.core.models import Intent, TaskState, TextPart, extract_text
from duoagent.provider import ProviderError

TASK_ID = "task-gen-001"


class TestStreamArtifacts:
    """流式 Artifact 序列"""

    async def test_n_increments_produce_n_plus_one_artifacts(
        self, generator, fake_llm, make_handle
    ):
        fake_llm.deltas = ["Hel", "", "lo", " world"]
        handle = make_handle(streaming=True)

        count = await generator.stream(TASK_ID, "hi", handle)

        assert count == 3
        artifacts = handle.artifacts
        assert len(artifacts) == 4

        content = artifacts[:3]
        assert [a.index for a in content] == [0, 1, 2]
        assert [a.append for a in content] == [False, True, True]
        assert [a.name for a in content] == ["Chunk 1", "Chunk 2", "Chunk 3"]
        assert [a.parts[0].text for a in content] == ["Hel", "lo", " world"]
        assert all(a.last_chunk is None for a in content)
        assert all(a.metadata["is_streaming"] is True for a in content)
        assert [a.metadata["chunk_index"] for a in content] == [0, 1, 2]

        final = artifacts[3]
        assert final.last_chunk is True
        assert final.index == 2
        assert final.parts == []
        assert final.metadata["total_chunks"] == 3
        assert final.metadata["is_last_chunk"] is True

    async def test_status_per_increment_then_completed(
        self, generator, fake_llm, make_handle
    ):
        fake_llm.deltas = ["a", "b"]
        handle = make_handle(streaming=True)

        await generator.stream(TASK_ID, "hi", handle)

        assert handle.states == [TaskState.WORKING, TaskState.WORKING, TaskState.COMPLETED]
        assert [extract_text(m) for _, m in handle.statuses] == [
            "a",
            "b",
            "Processing complete. Received 2 chunks.",
        ]

    async def test_total_length_counts_utf8_bytes(self, generator, fake_llm, make_handle):
        fake_llm.deltas = ["你好", "!"]
        handle = make_handle(streaming=True)

        await generator.stream(TASK_ID, "hi", handle)

        assert handle.artifacts[0].metadata["chunk_size"] == 6
        assert handle.artifacts[1].metadata["total_length"] == 7
        assert handle.artifacts[1].metadata["model"] == "fake-model"

    async def test_zero_increments(self, generator, fake_llm, make_handle):
        """没有任何非空增量：不产出 Artifact，直接 completed"""
        fake_llm.deltas = ["", ""]
        handle = make_handle(streaming=True)

        count = await generator.stream(TASK_ID, "hi", handle)

        assert count == 0
        assert handle.artifacts == []
        assert handle.states == [TaskState.COMPLETED]
        assert extract_text(handle.statuses[0][1]) == "Processing complete. Received 0 chunks."

    async def test_uses_persona_prompt(self, generator, fake_llm, make_handle, personas):
        fake_llm.label = "XiaoShuai"
        fake_llm.deltas = ["ok"]

        await generator.stream(TASK_ID, "hi", make_handle(streaming=True))

        assert fake_llm.stream_calls == [
            [
                {"role": "system", "content": personas.system_prompt(Intent.XIAOSHUAI)},
                {"role": "user", "content": "hi"},
            ]
        ]

    async def test_artifact_failures_do_not_stop_stream(
        self, generator, fake_llm, make_handle
    ):
        """Artifact 上报失败只记录日志"""
        fake_llm.deltas = ["a", "b"]
        handle = make_handle(streaming=True, fail_artifacts=True)

        count = await generator.stream(TASK_ID, "hi", handle)

        assert count == 2
        assert handle.states[-1] == TaskState.COMPLETED


class TestStreamInterruption:
    """取消与读取失败"""

    async def test_cancel_after_k_increments(self, generator, fake_llm, make_handle):
        fake_llm.deltas = ["a", "b", "c", "d", "e"]
        cancel_event = asyncio.Event()

        def cancel_after_two(artifact):
            if artifact.index == 1:
                cancel_event.set()

        handle = make_handle(streaming=True, on_artifact=cancel_after_two)

        with pytest.raises(CancellationError):
            await generator.stream(TASK_ID, "hi", handle, cancel_event)

        assert len(handle.artifacts) == 2
        assert all(a.last_chunk is None for a in handle.artifacts)
        assert TaskState.COMPLETED not in handle.states
        assert fake_llm.stream_closed is True

    async def test_cancel_before_first_increment(self, generator, fake_llm, make_handle):
        fake_llm.deltas = ["a"]
        cancel_event = asyncio.Event()
        cancel_event.set()
        handle = make_handle(streaming=True)

        with pytest.raises(CancellationError):
            await generator.stream(TASK_ID, "hi", handle, cancel_event)

        assert handle.artifacts == []

    async def test_receive_failure_raises_generation_error(
        self, generator, fake_llm, make_handle
    ):
        fake_llm.deltas = ["a"]
        fake_llm.stream_error = ProviderError("connection reset")
        handle = make_handle(streaming=True)

        with pytest.raises(GenerationError, match="failed to receive streaming response"):
            await generator.stream(TASK_ID, "hi", handle)

        assert len(handle.artifacts) == 1
        assert TaskState.COMPLETED not in handle.states
        assert fake_llm.stream_closed is True


class TestGenerate:
    """非流式生成"""

    async def test_returns_reply_with_persona_prompt(self, generator, fake_llm, personas):
        fake_llm.label = "XiaoShuai"
        fake_llm.reply = "Yo!"

        content = await generator.generate(TASK_ID, "hello")

        assert content == "Yo!"
        assert len(fake_llm.complete_calls) == 2
        assert fake_llm.complete_calls[1][0] == {
            "role": "system",
            "content": personas.system_prompt(Intent.XIAOSHUAI),
        }

    async def test_provider_error_raises_generation_error(self, generator, fake_llm):
        fake_llm.complete_error = ProviderError("model unavailable")

        with pytest.raises(GenerationError, match="failed to create completion request"):
            await generator.generate(TASK_ID, "hello")

    async def test_text_part_type(self, generator, fake_llm, make_handle):
        fake_llm.deltas = ["x"]
        handle = make_handle(streaming=True)

        await generator.stream(TASK_ID, "hi", handle)

        assert isinstance(handle.artifacts[0].parts[0], TextPart)
