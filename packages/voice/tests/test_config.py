"""VoiceConfig + load_voice_config 单元测试"""

import pytest
from duoagent.voice.config import VoiceConfig, load_voice_config

_ENV_VARS = (
    "DUOAGENT_VOICE_ENABLED",
    "TRTC_SECRET_ID",
    "TRTC_SECRET_KEY",
    "TRTC_REGION",
    "TRTC_ENDPOINT",
    "TTS_APP_ID",
    "TTS_SECRET_ID",
    "TTS_SECRET_KEY",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestVoiceConfig:
    def test_defaults(self):
        config = VoiceConfig()
        assert config.enabled is True
        assert config.region == "ap-guangzhou"
        assert config.endpoint == "trtc.tencentcloudapi.com"
        assert config.tts_speed == 1
        assert config.has_credentials is False


class TestLoadVoiceConfig:
    def test_default_when_no_env(self, clean_env):
        config = load_voice_config()
        assert config.enabled is True
        assert config.has_credentials is False

    def test_all_env_vars(self, clean_env):
        clean_env.setenv("TRTC_SECRET_ID", "id")
        clean_env.setenv("TRTC_SECRET_KEY", "key")
        clean_env.setenv("TRTC_REGION", "ap-shanghai")
        clean_env.setenv("TRTC_ENDPOINT", "trtc.internal.tencentcloudapi.com")
        clean_env.setenv("TTS_APP_ID", "1300000001")
        clean_env.setenv("TTS_SECRET_ID", "tts-id")
        clean_env.setenv("TTS_SECRET_KEY", "tts-key")

        config = load_voice_config()
        assert config.has_credentials is True
        assert config.region == "ap-shanghai"
        assert config.endpoint == "trtc.internal.tencentcloudapi.com"
        assert config.tts_app_id == 1300000001
        assert config.tts_secret_key.get_secret_value() == "tts-key"

    @pytest.mark.parametrize("value", ["false", "0", "off", "No"])
    def test_disable_voice(self, clean_env, value):
        clean_env.setenv("DUOAGENT_VOICE_ENABLED", value)
        assert load_voice_config().enabled is False

    def test_invalid_app_id_keeps_default(self, clean_env):
        """非法 TTS_APP_ID 不阻塞启动"""
        clean_env.setenv("TTS_APP_ID", "abc")
        assert load_voice_config().tts_app_id == 0
