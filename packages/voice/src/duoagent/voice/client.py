"""TRTCVoiceClient -- 根据人设切换 TRTC AI 对话的 TTS 音色

SDK 客户端在第一次调用时创建，由一把锁保证只创建一次，之后所有任务复用。
SDK 调用是同步的，放到线程池中执行，不阻塞事件循环。
"""

import asyncio
import json
import threading

import structlog
from tencentcloud.common import credential
from tencentcloud.common.exception.tencent_cloud_sdk_exception import (
    TencentCloudSDKException,
)
from tencentcloud.common.profile.client_profile import ClientProfile
from tencentcloud.common.profile.http_profile import HttpProfile
from tencentcloud.trtc.v20190722 import models, trtc_client

from .config import VoiceConfig
from .exceptions import VoiceUpdateError

log = structlog.get_logger()


class TRTCVoiceClient:
    """TRTC UpdateAIConversation 封装"""

    def __init__(self, config: VoiceConfig) -> None:
        self._config = config
        self._client: trtc_client.TrtcClient | None = None
        self._client_lock = threading.Lock()

    def _get_client(self) -> trtc_client.TrtcClient:
        """懒加载 SDK 客户端（线程安全，只创建一次）"""
        client = self._client
        if client is not None:
            return client

        with self._client_lock:
            if self._client is None:
                if not self._config.has_credentials:
                    log.warning("trtc_credentials_missing")

                cred = credential.Credential(
                    self._config.secret_id.get_secret_value(),
                    self._config.secret_key.get_secret_value(),
                )
                http_profile = HttpProfile()
                http_profile.endpoint = self._config.endpoint
                client_profile = ClientProfile()
                client_profile.httpProfile = http_profile

                self._client = trtc_client.TrtcClient(
                    cred, self._config.region, client_profile
                )
                log.info(
                    "trtc_client_initialized",
                    region=self._config.region,
                    endpoint=self._config.endpoint,
                )
            return self._client

    def build_tts_config(self, voice_type: int) -> str:
        """构造下发给 TRTC 的 TTSConfig JSON 字符串"""
        return json.dumps(
            {
                "TTSType": "tencent",
                "AppId": self._config.tts_app_id,
                "SecretId": self._config.tts_secret_id.get_secret_value(),
                "SecretKey": self._config.tts_secret_key.get_secret_value(),
                "VoiceType": voice_type,
                "Speed": self._config.tts_speed,
            }
        )

    async def set_voice(self, task_id: str, persona) -> None:
        """将 task_id 对应 AI 对话的 TTS 音色切换为 persona 的音色

        Args:
            task_id: TRTC AI 对话任务 ID
            persona: 目标人设（使用其 voice_type）

        Raises:
            VoiceUpdateError: SDK 返回错误或请求失败
        """
        tts_config = self.build_tts_config(persona.voice_type)
        await asyncio.to_thread(self._update_ai_conversation, task_id, tts_config)

    def _update_ai_conversation(self, task_id: str, tts_config: str) -> None:
        request = models.UpdateAIConversationRequest()
        request.TaskId = task_id
        request.TTSConfig = tts_config

        try:
            self._get_client().UpdateAIConversation(request)
        except TencentCloudSDKException as e:
            raise VoiceUpdateError(f"API error: {e}", task_id=task_id) from e
        except Exception as e:
            raise VoiceUpdateError(f"update failed: {e}", task_id=task_id) from e

    def close(self) -> None:
        """释放 SDK 客户端；之后的调用会重新创建"""
        with self._client_lock:
            self._client = None
