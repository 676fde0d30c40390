"""ProviderConfig -- Provider 配置加载

从环境变量加载配置，不硬编码模型名和服务地址。
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()


class ProviderConfig(BaseModel):
    """Provider 包配置 -- 从环境变量加载

    环境变量:
        OPENAI_MODEL: 模型标识（默认 gpt-3.5-turbo）
        OPENAI_BASE_URL: OpenAI 兼容接口地址
        OPENAI_API_KEY: 接口密钥
        DUOAGENT_LLM_MODE: LLM 运行模式（litellm/echo）
        DUOAGENT_LLM_TIMEOUT_S: 调用超时（秒，默认 30）
    """

    model: str = Field(default="gpt-3.5-turbo", description="模型标识")
    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI 兼容接口基础 URL",
    )
    api_key: SecretStr = Field(default=SecretStr(""), description="接口密钥")
    llm_mode: Literal["litellm", "echo"] = Field(
        default="litellm",
        description="LLM 运行模式：litellm / echo",
    )
    timeout_s: int = Field(default=30, ge=1, description="LLM 调用超时（秒）")


def load_provider_config() -> ProviderConfig:
    """从环境变量加载 Provider 配置

    环境变量映射:
        OPENAI_MODEL -> model (默认 "gpt-3.5-turbo")
        OPENAI_BASE_URL -> base_url (默认 "https://api.openai.com/v1")
        OPENAI_API_KEY -> api_key (默认 "")
        DUOAGENT_LLM_MODE -> llm_mode (默认 "litellm")
        DUOAGENT_LLM_TIMEOUT_S -> timeout_s (默认 30)

    Returns:
        ProviderConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("OPENAI_MODEL"):
        kwargs["model"] = val

    if val := os.environ.get("OPENAI_BASE_URL"):
        kwargs["base_url"] = val

    if val := os.environ.get("OPENAI_API_KEY"):
        kwargs["api_key"] = SecretStr(val)

    if val := os.environ.get("DUOAGENT_LLM_MODE"):
        kwargs["llm_mode"] = val

    if val := os.environ.get("DUOAGENT_LLM_TIMEOUT_S"):
        try:
            kwargs["timeout_s"] = int(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="DUOAGENT_LLM_TIMEOUT_S",
                value=val,
                fallback=30,
            )
            # 使用默认值，不阻塞启动

    return ProviderConfig(**kwargs)
