"""PersonaRegistry 单元测试"""

import pytest
from duoagent.agent import Persona, PersonaRegistry
from duoagent.agent.personas import VOICE_TYPE_XIAOMEI, VOICE_TYPE_XIAOSHUAI
from duoagent.core.models import Intent


class TestPersonaRegistry:
    def test_every_intent_has_persona(self, personas):
        """枚举中的每个意图都有人设"""
        for intent in Intent:
            assert personas.get(intent).intent is intent

    def test_voice_types(self, personas):
        assert personas.get(Intent.XIAOMEI).voice_type == VOICE_TYPE_XIAOMEI == 601005
        assert personas.get(Intent.XIAOSHUAI).voice_type == VOICE_TYPE_XIAOSHUAI == 601008

    def test_system_prompts(self, personas):
        assert personas.system_prompt(Intent.XIAOMEI) == (
            "You are an AI assistant named XiaoMei(小美). "
            "Keep the conversation casual, lively, and concise"
        )
        assert personas.system_prompt(Intent.XIAOSHUAI) == (
            "You are an AI assistant named XiaoShuai(小帅). "
            "Keep the conversation casual, humorous, and concise"
        )

    def test_list_all_in_enum_order(self, personas):
        assert [p.intent for p in personas.list_all()] == [Intent.XIAOMEI, Intent.XIAOSHUAI]

    def test_missing_persona_raises(self):
        registry = PersonaRegistry(
            [
                Persona(
                    intent=Intent.XIAOMEI,
                    display_name="XiaoMei",
                    system_prompt="prompt",
                    voice_type=1,
                )
            ]
        )
        with pytest.raises(KeyError, match="XiaoShuai"):
            registry.get(Intent.XIAOSHUAI)
