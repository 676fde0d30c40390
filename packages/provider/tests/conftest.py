"""Provider 包测试 fixtures"""

import pytest


@pytest.fixture
def sample_messages() -> list[dict[str, str]]:
    """单条用户消息（意图识别请求的最小形态）"""
    return [{"role": "user", "content": "Hi XiaoMei, good morning"}]


@pytest.fixture
def multi_turn_messages() -> list[dict[str, str]]:
    """人设 system prompt + 用户消息"""
    return [
        {"role": "system", "content": "Your name is XiaoShuai, a male assistant."},
        {"role": "user", "content": "Recommend a running route"},
        {"role": "assistant", "content": "Try the riverside path."},
        {"role": "user", "content": "How long is it?"},
    ]
