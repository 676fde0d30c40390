"""IntentClassifier -- 判断用户想和哪个助手对话

一次非流式调用 + 标签解析 + 兜底人设 + 尽力而为的音色切换。
音色切换的结果只进日志，不影响返回值。
"""

import structlog
from duoagent.core.config import MESSAGE_PREVIEW_LENGTH
from duoagent.core.models import DEFAULT_INTENT, Intent
from duoagent.provider import ProviderError
from pydantic import BaseModel, Field

from .errors import ClassificationError
from .handle import VoiceUpdater
from .personas import PersonaRegistry

log = structlog.get_logger()

# task_id 长度必须超过此值才会切换音色（短 ID 视为非 TRTC 会话）
VOICE_UPDATE_MIN_TASK_ID_LENGTH = 64

INTENT_DETECTION_PROMPT = '''You are an intent detection assistant. You need to determine which AI assistant the user wants to talk to.
Options are:
1. XiaoMei(小美): Female assistant, lively and cute personality, can solve female-related issues.
2. XiaoShuai(小帅): Male assistant, sunny and cheerful personality, can solve male-related issues.
Please only reply with "XiaoMei" or "XiaoShuai"'''


class IntentResult(BaseModel):
    """意图识别结果"""

    intent: Intent = Field(description="最终选定的人设")
    raw_label: str = Field(default="", description="模型返回的原始标签（已去除首尾空白）")
    is_fallback: bool = Field(default=False, description="原始标签不合法时为 True")


class IntentClassifier:
    """意图识别器"""

    def __init__(
        self,
        llm_client,
        personas: PersonaRegistry,
        voice_updater: VoiceUpdater | None = None,
    ) -> None:
        """
        Args:
            llm_client: 提供 complete(messages) 的模型客户端
            personas: 人设注册表
            voice_updater: 语音后端，None 表示不切换音色
        """
        self._llm = llm_client
        self._personas = personas
        self._voice = voice_updater

    async def classify(self, text: str, task_id: str) -> IntentResult:
        """识别意图

        Raises:
            ClassificationError: 识别请求失败
        """
        messages = [
            {"role": "system", "content": INTENT_DETECTION_PROMPT},
            {"role": "user", "content": text},
        ]
        try:
            response = await self._llm.complete(messages)
        except ProviderError as e:
            raise ClassificationError(f"intent detection failed: {e}") from e

        label = response.content.strip()
        try:
            result = IntentResult(intent=Intent(label), raw_label=label)
        except ValueError:
            log.warning(
                "intent_unrecognized_fallback",
                task_id=task_id,
                raw_label=label[:MESSAGE_PREVIEW_LENGTH],
                fallback=DEFAULT_INTENT.value,
            )
            result = IntentResult(intent=DEFAULT_INTENT, raw_label=label, is_fallback=True)
        else:
            log.info("intent_detected", task_id=task_id, intent=result.intent.value)

        await self._notify_voice(task_id, result.intent)
        return result

    async def _notify_voice(self, task_id: str, intent: Intent) -> None:
        """尽力而为地切换音色，不抛出任何异常"""
        if self._voice is None:
            log.debug("voice_update_disabled", task_id=task_id)
            return

        if len(task_id) <= VOICE_UPDATE_MIN_TASK_ID_LENGTH:
            log.info(
                "voice_update_skipped",
                task_id=task_id,
                intent=intent.value,
                reason="task_id_too_short",
                task_id_length=len(task_id),
            )
            return

        log.info("voice_update_started", task_id=task_id, intent=intent.value)
        try:
            await self._voice.set_voice(task_id, self._personas.get(intent))
        except Exception as e:
            log.warning(
                "voice_update_failed",
                task_id=task_id,
                intent=intent.value,
                error=str(e),
                error_type=type(e).__name__,
            )
        else:
            log.info("voice_update_succeeded", task_id=task_id, intent=intent.value)
