"""duoagent Provider -- LLM 调用抽象层

packages/provider 的公开接口导出。
"""

from .client import LiteLLMClient

# 配置
from .config import ProviderConfig, load_provider_config
from .echo_adapter import EchoMessageAdapter

# 异常
from .exceptions import EmptyResponseError, ProviderError, ProxyUnreachableError

# 数据模型
from .models import ModelCallResult, TokenUsage

__all__ = [
    "ModelCallResult",
    "TokenUsage",
    "LiteLLMClient",
    "EchoMessageAdapter",
    "ProviderConfig",
    "load_provider_config",
    "ProviderError",
    "ProxyUnreachableError",
    "EmptyResponseError",
]
