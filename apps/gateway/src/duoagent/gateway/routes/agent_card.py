"""Agent Card 路由

GET /.well-known/agent.json: 描述本服务的能力、输入输出模式与技能示例。
"""

from duoagent.core.config import get_server_host, get_server_port
from fastapi import APIRouter
from pydantic import BaseModel, Field

router = APIRouter()

AGENT_NAME = "DuoAgent Persona Assistant"
AGENT_VERSION = "1.0.0"


class AgentProvider(BaseModel):
    name: str


class AgentCapabilities(BaseModel):
    streaming: bool = True
    state_transition_history: bool = True


class AgentSkill(BaseModel):
    id: str
    name: str
    description: str
    tags: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    input_modes: list[str] = Field(default_factory=lambda: ["text"])
    output_modes: list[str] = Field(default_factory=lambda: ["text"])


class AgentCard(BaseModel):
    """服务自描述卡片"""

    name: str
    description: str
    url: str
    version: str
    provider: AgentProvider
    capabilities: AgentCapabilities
    default_input_modes: list[str] = Field(default_factory=lambda: ["text"])
    default_output_modes: list[str] = Field(default_factory=lambda: ["text"])
    skills: list[AgentSkill]


def build_agent_card() -> AgentCard:
    """根据当前监听地址构建 Agent Card"""
    return AgentCard(
        name=AGENT_NAME,
        description=(
            "Routes each message to the XiaoMei or XiaoShuai persona, "
            "switches the voice of the live call, and streams the reply"
        ),
        url=f"http://{get_server_host()}:{get_server_port()}/",
        version=AGENT_VERSION,
        provider=AgentProvider(name="DuoAgent"),
        capabilities=AgentCapabilities(),
        skills=[
            AgentSkill(
                id="persona_chat",
                name="Persona Chat",
                description=(
                    "Input: Any text\n"
                    "Output: Persona reply delivered incrementally\n\n"
                    "Detects which assistant the user wants to talk to and "
                    "answers in that assistant's voice."
                ),
                tags=["text", "stream", "persona", "voice"],
                examples=[
                    "小美，今天穿什么好看？",
                    "小帅，推荐一个健身计划",
                    "Explain quantum computing in simple terms",
                ],
            ),
        ],
    )


@router.get("/.well-known/agent.json", response_model=AgentCard)
async def agent_card():
    """返回 Agent Card"""
    return build_agent_card()
