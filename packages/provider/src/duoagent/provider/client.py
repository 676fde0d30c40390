"""LiteLLMClient -- OpenAI 兼容接口调用封装

通过 litellm.acompletion() 调用模型服务，支持一次性补全与流式补全。
"""

import contextlib
import time
from collections.abc import AsyncIterator

import httpx
import structlog
from litellm import acompletion

from .exceptions import EmptyResponseError, ProviderError, ProxyUnreachableError
from .models import ModelCallResult, TokenUsage

log = structlog.get_logger()

# 健康检查超时（硬编码，应快速响应）
HEALTH_CHECK_TIMEOUT_S = 5

# 连接类异常类型集合（触发 ProxyUnreachableError）
_CONNECTION_ERROR_TYPES = (
    ConnectionError,
    OSError,
    TimeoutError,
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.TimeoutException,
)


def _is_connection_error(e: Exception) -> bool:
    """判断异常是否为连接类错误（服务不可达）"""
    if isinstance(e, _CONNECTION_ERROR_TYPES):
        return True
    # LiteLLM 的 APIConnectionError 也属于连接类错误
    error_name = type(e).__name__
    return error_name in ("APIConnectionError", "APITimeoutError")


def _parse_usage(response) -> TokenUsage:
    """从 LiteLLM 响应解析 token 使用数据，失败时返回全零"""
    try:
        usage = getattr(response, "usage", None)
        if usage is not None:
            return TokenUsage(
                prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(usage, "total_tokens", 0) or 0,
            )
    except Exception as e:
        log.debug("parse_usage_failed", error=str(e))

    return TokenUsage()


def _extract_model_info(response) -> tuple[str, str]:
    """从 LiteLLM 响应提取 (model_name, provider)"""
    model_name = ""
    provider = ""

    with contextlib.suppress(Exception):
        model_name = getattr(response, "model", "") or ""

    with contextlib.suppress(Exception):
        hidden = getattr(response, "_hidden_params", None)
        if hidden and isinstance(hidden, dict):
            provider = hidden.get("custom_llm_provider", "") or ""

    return model_name, provider


class LiteLLMClient:
    """OpenAI 兼容接口客户端

    所有请求以 ``openai/<model>`` 形式交给 LiteLLM，
    由 base_url 决定实际的服务端。
    """

    def __init__(
        self,
        model: str = "gpt-3.5-turbo",
        base_url: str = "https://api.openai.com/v1",
        api_key: str = "",
        timeout_s: int = 30,
    ) -> None:
        """初始化客户端

        Args:
            model: 模型标识
            base_url: OpenAI 兼容接口基础 URL
            api_key: 接口密钥
            timeout_s: 请求超时（秒）
        """
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout_s = timeout_s

    @property
    def model_name(self) -> str:
        """配置的模型标识（写入 Artifact metadata）"""
        return self._model

    def _call_kwargs(self, messages: list[dict[str, str]], **kwargs) -> dict:
        return {
            "model": f"openai/{self._model}",
            "messages": messages,
            "api_base": self._base_url,
            "api_key": self._api_key or "no-key",
            "timeout": self._timeout_s,
            **kwargs,
        }

    def _wrap_error(self, e: Exception) -> ProviderError:
        """区分连接类错误与业务错误"""
        if _is_connection_error(e):
            return ProxyUnreachableError(base_url=self._base_url, original_error=e)
        return ProviderError(message=f"LLM 调用失败: {e}", recoverable=True)

    async def complete(
        self,
        messages: list[dict[str, str]],
        **kwargs,
    ) -> ModelCallResult:
        """发送一次性 chat completion 请求

        Args:
            messages: 消息列表，格式 [{"role": "user", "content": "..."}]
            **kwargs: 其他 LiteLLM 支持的参数

        Returns:
            ModelCallResult

        Raises:
            ProxyUnreachableError: 连接失败或超时
            EmptyResponseError: 响应中没有 choice
            ProviderError: 服务返回错误（如模型不可用、配额耗尽）
        """
        start_time = time.monotonic()

        try:
            log.debug(
                "litellm_call_start",
                model=self._model,
                message_count=len(messages),
            )

            response = await acompletion(**self._call_kwargs(messages, **kwargs))

            if not response.choices:
                raise EmptyResponseError()

            duration_ms = int((time.monotonic() - start_time) * 1000)
            choice = response.choices[0]
            content = choice.message.content or ""
            model_name, provider = _extract_model_info(response)

            result = ModelCallResult(
                content=content,
                model_name=model_name or self._model,
                provider=provider,
                duration_ms=duration_ms,
                finish_reason=getattr(choice, "finish_reason", None) or "",
                token_usage=_parse_usage(response),
            )

            log.info(
                "litellm_call_completed",
                model=self._model,
                model_name=result.model_name,
                provider=provider,
                duration_ms=duration_ms,
                finish_reason=result.finish_reason,
            )

            return result

        except ProviderError:
            # 已包装的异常直接抛出
            raise
        except Exception as e:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            log.error(
                "litellm_call_failed",
                model=self._model,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=duration_ms,
            )
            raise self._wrap_error(e) from e

    async def stream(
        self,
        messages: list[dict[str, str]],
        **kwargs,
    ) -> AsyncIterator[str]:
        """发送流式 chat completion 请求，逐个产出 content 增量

        增量可能为空字符串（如只携带 role 的首个 chunk），由调用方过滤。
        没有 choice 的 chunk（如部分服务端末尾的 usage chunk）直接跳过。
        调用方可以提前 aclose() 终止读取。

        Raises:
            ProxyUnreachableError: 连接失败或超时
            ProviderError: 建立流或读取流失败
        """
        log.debug(
            "litellm_stream_start",
            model=self._model,
            message_count=len(messages),
        )
        try:
            response = await acompletion(
                **self._call_kwargs(messages, stream=True, **kwargs)
            )
        except Exception as e:
            log.error(
                "litellm_stream_open_failed",
                model=self._model,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise self._wrap_error(e) from e

        try:
            async for chunk in response:
                if not chunk.choices:
                    continue
                yield chunk.choices[0].delta.content or ""
        except Exception as e:
            log.error(
                "litellm_stream_recv_failed",
                model=self._model,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise self._wrap_error(e) from e
        finally:
            # 调用方提前 aclose() 或读取出错时，同时关闭上游 HTTP 流
            close = getattr(response, "aclose", None)
            if close is not None:
                await close()

    async def health_check(self) -> bool:
        """检查模型服务可达性

        发送 GET {base_url}/models 请求。

        Returns:
            True 如果服务可达，False 如果不可达或异常

        注意: 此方法不抛出异常，所有异常内部捕获并返回 False。
        """
        url = f"{self._base_url}/models"
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        try:
            async with httpx.AsyncClient() as http_client:
                resp = await http_client.get(
                    url, headers=headers, timeout=HEALTH_CHECK_TIMEOUT_S
                )
                return resp.status_code == 200
        except Exception as e:
            log.debug("health_check_failed", url=url, error=str(e))
            return False
