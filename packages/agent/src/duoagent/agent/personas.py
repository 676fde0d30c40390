"""PersonaRegistry -- 意图 -> 人设（系统提示词 + 音色）映射"""

from duoagent.core.models import Intent
from pydantic import BaseModel, Field

# TRTC 音色编号
VOICE_TYPE_XIAOMEI = 601005
VOICE_TYPE_XIAOSHUAI = 601008


class Persona(BaseModel):
    """单个人设配置"""

    intent: Intent = Field(description="对应的意图")
    display_name: str = Field(description="展示名称")
    system_prompt: str = Field(description="系统提示词（语气与人设）")
    voice_type: int = Field(description="TTS 音色编号")


def _get_default_personas() -> list[Persona]:
    """内置的两个人设"""
    return [
        Persona(
            intent=Intent.XIAOMEI,
            display_name="XiaoMei(小美)",
            system_prompt=(
                "You are an AI assistant named XiaoMei(小美). "
                "Keep the conversation casual, lively, and concise"
            ),
            voice_type=VOICE_TYPE_XIAOMEI,
        ),
        Persona(
            intent=Intent.XIAOSHUAI,
            display_name="XiaoShuai(小帅)",
            system_prompt=(
                "You are an AI assistant named XiaoShuai(小帅). "
                "Keep the conversation casual, humorous, and concise"
            ),
            voice_type=VOICE_TYPE_XIAOSHUAI,
        ),
    ]


class PersonaRegistry:
    """人设注册表

    启动时加载，运行期间不变。
    """

    def __init__(self, personas: list[Persona] | None = None) -> None:
        persona_list = personas if personas is not None else _get_default_personas()
        self._personas: dict[Intent, Persona] = {p.intent: p for p in persona_list}

    def get(self, intent: Intent) -> Persona:
        """按意图查询人设

        Raises:
            KeyError: 意图没有注册人设（枚举与注册表不一致）
        """
        try:
            return self._personas[intent]
        except KeyError as exc:
            raise KeyError(f"no persona registered for intent: {intent}") from exc

    def system_prompt(self, intent: Intent) -> str:
        return self.get(intent).system_prompt

    def list_all(self) -> list[Persona]:
        """列出所有人设（按枚举顺序）"""
        return [self._personas[i] for i in Intent if i in self._personas]
