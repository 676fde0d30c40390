"""VoiceConfig -- TRTC 语音后端配置加载"""

import os

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()


class VoiceConfig(BaseModel):
    """TRTC AI 对话 + TTS 配置 -- 从环境变量加载

    环境变量:
        TRTC_SECRET_ID / TRTC_SECRET_KEY: TRTC API 凭证
        TRTC_REGION: 地域（默认 ap-guangzhou）
        TRTC_ENDPOINT: 接入点（默认 trtc.tencentcloudapi.com）
        TTS_APP_ID / TTS_SECRET_ID / TTS_SECRET_KEY: 下发给 TTS 的凭证
        DUOAGENT_VOICE_ENABLED: 是否启用语音切换（默认 true）
    """

    enabled: bool = Field(default=True, description="是否启用语音切换")
    secret_id: SecretStr = Field(default=SecretStr(""), description="TRTC SecretId")
    secret_key: SecretStr = Field(default=SecretStr(""), description="TRTC SecretKey")
    region: str = Field(default="ap-guangzhou", description="TRTC 地域")
    endpoint: str = Field(
        default="trtc.tencentcloudapi.com",
        description="TRTC API 接入点",
    )
    tts_app_id: int = Field(default=0, ge=0, description="TTS AppId")
    tts_secret_id: SecretStr = Field(default=SecretStr(""), description="TTS SecretId")
    tts_secret_key: SecretStr = Field(default=SecretStr(""), description="TTS SecretKey")
    tts_speed: int = Field(default=1, description="TTS 语速")

    @property
    def has_credentials(self) -> bool:
        return bool(
            self.secret_id.get_secret_value() and self.secret_key.get_secret_value()
        )


def load_voice_config() -> VoiceConfig:
    """从环境变量加载 Voice 配置

    TTS_APP_ID 非法时记录 warning 并保持默认值 0。
    """
    kwargs: dict = {}

    if val := os.environ.get("DUOAGENT_VOICE_ENABLED"):
        kwargs["enabled"] = val.lower() not in ("0", "false", "no", "off")

    if val := os.environ.get("TRTC_SECRET_ID"):
        kwargs["secret_id"] = SecretStr(val)

    if val := os.environ.get("TRTC_SECRET_KEY"):
        kwargs["secret_key"] = SecretStr(val)

    if val := os.environ.get("TRTC_REGION"):
        kwargs["region"] = val

    if val := os.environ.get("TRTC_ENDPOINT"):
        kwargs["endpoint"] = val

    if val := os.environ.get("TTS_APP_ID"):
        try:
            kwargs["tts_app_id"] = int(val)
        except ValueError:
            log.warning(
                "invalid_tts_app_id_config",
                env_var="TTS_APP_ID",
                value=val,
                fallback=0,
            )

    if val := os.environ.get("TTS_SECRET_ID"):
        kwargs["tts_secret_id"] = SecretStr(val)

    if val := os.environ.get("TTS_SECRET_KEY"):
        kwargs["tts_secret_key"] = SecretStr(val)

    return VoiceConfig(**kwargs)
