"""EchoMessageAdapter -- Echo 模式

不访问任何网络服务，返回最后一条 user message 的回声。
接口与 LiteLLMClient 一致，供离线运行和本地调试使用。
"""

import asyncio
import re
import time
from collections.abc import AsyncIterator

from .models import ModelCallResult, TokenUsage

_TOKEN_PATTERN = re.compile(r"\S+\s*")


class EchoMessageAdapter:
    """Echo 客户端，实现 complete() / stream() 接口"""

    model_name = "echo"

    async def complete(
        self,
        messages: list[dict[str, str]],
        **kwargs,
    ) -> ModelCallResult:
        """通过 Echo 模式处理 messages

        行为:
            1. 从 messages 中提取最后一条 user message 的 content
            2. 返回 "Echo: {content}" 格式的回声
            3. token_usage 按 word 简单估算
        """
        start_time = time.monotonic()

        user_content = self._extract_last_user_content(messages)

        # 模拟少量延迟
        await asyncio.sleep(0.01)

        response_text = f"Echo: {user_content}"
        prompt_tokens = len(user_content.split())
        completion_tokens = len(response_text.split())

        duration_ms = int((time.monotonic() - start_time) * 1000)

        return ModelCallResult(
            content=response_text,
            model_name=self.model_name,
            provider="echo",
            duration_ms=duration_ms,
            finish_reason="stop",
            token_usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )

    async def stream(
        self,
        messages: list[dict[str, str]],
        **kwargs,
    ) -> AsyncIterator[str]:
        """逐词产出回声，保留词后的空白"""
        user_content = self._extract_last_user_content(messages)
        for token in _TOKEN_PATTERN.findall(f"Echo: {user_content}"):
            await asyncio.sleep(0)
            yield token

    async def health_check(self) -> bool:
        return True

    @staticmethod
    def _extract_last_user_content(messages: list[dict[str, str]]) -> str:
        """从 messages 中提取最后一条 user message 的 content

        Returns:
            最后一条 user message 的 content，无 user 消息时返回 "(empty)"
        """
        for msg in reversed(messages):
            if msg.get("role") == "user":
                return msg.get("content", "")

        # 无 user 消息时的降级处理
        if messages:
            return messages[-1].get("content", "(empty)")
        return "(empty)"
