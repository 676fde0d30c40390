"""packages/voice 测试 fixtures"""

from types import SimpleNamespace

import pytest
from duoagent.voice.config import VoiceConfig
from pydantic import SecretStr


@pytest.fixture
def voice_config() -> VoiceConfig:
    return VoiceConfig(
        secret_id=SecretStr("trtc-id"),
        secret_key=SecretStr("trtc-key"),
        tts_app_id=1300000000,
        tts_secret_id=SecretStr("tts-id"),
        tts_secret_key=SecretStr("tts-key"),
    )


@pytest.fixture
def xiaoshuai_persona():
    """只需 voice_type 字段的人设替身"""
    return SimpleNamespace(voice_type=601008)
