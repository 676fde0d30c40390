"""FastAPI 应用主文件

app 创建 + lifespan 管理：模型客户端 / 语音客户端 / 流水线组件初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from duoagent.agent import (
    IntentClassifier,
    PersonaRegistry,
    ResponseGenerator,
    TaskProcessor,
    VoiceUpdater,
)
from duoagent.provider import (
    EchoMessageAdapter,
    LiteLLMClient,
    ProviderConfig,
    load_provider_config,
)
from duoagent.voice import TRTCVoiceClient, load_voice_config
from fastapi import FastAPI

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import agent_card, cancel, health, message, stream, tasks
from .services.sse_hub import SSEHub
from .services.task_service import TaskService

log = structlog.get_logger()


def build_llm_client(provider_config: ProviderConfig):
    """根据配置选择模型客户端

    Raises:
        RuntimeError: litellm 模式下未配置 OPENAI_API_KEY
    """
    if provider_config.llm_mode == "echo":
        log.info("llm_client_initialized", mode="echo")
        return EchoMessageAdapter()

    api_key = provider_config.api_key.get_secret_value()
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is required")

    log.info(
        "llm_client_initialized",
        mode="litellm",
        model=provider_config.model,
        base_url=provider_config.base_url,
        timeout_s=provider_config.timeout_s,
    )
    return LiteLLMClient(
        model=provider_config.model,
        base_url=provider_config.base_url,
        api_key=api_key,
        timeout_s=provider_config.timeout_s,
    )


def build_task_service(
    llm_client,
    voice_updater: VoiceUpdater | None = None,
    sse_hub: SSEHub | None = None,
) -> TaskService:
    """装配流水线：personas -> classifier -> generator -> processor -> TaskService"""
    personas = PersonaRegistry()
    classifier = IntentClassifier(llm_client, personas, voice_updater=voice_updater)
    generator = ResponseGenerator(llm_client, classifier, personas)
    processor = TaskProcessor(generator)
    return TaskService(processor, sse_hub)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时装配组件，关闭时停止任务并释放语音客户端"""
    provider_config = load_provider_config()
    app.state.provider_config = provider_config
    llm_client = build_llm_client(provider_config)
    app.state.llm_client = llm_client

    voice_config = load_voice_config()
    voice_client: TRTCVoiceClient | None = None
    if voice_config.enabled:
        if not voice_config.has_credentials:
            log.warning("trtc_credentials_missing", region=voice_config.region)
        voice_client = TRTCVoiceClient(voice_config)
    else:
        log.info("voice_disabled")
    app.state.voice_client = voice_client

    app.state.sse_hub = SSEHub()
    app.state.task_service = build_task_service(
        llm_client,
        voice_updater=voice_client,
        sse_hub=app.state.sse_hub,
    )
    log.info("gateway_started", voice_enabled=voice_client is not None)

    yield

    await app.state.task_service.shutdown()
    if voice_client is not None:
        voice_client.close()
    log.info("gateway_stopped")


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="DuoAgent Gateway",
        version="1.0.0",
        description="双人设语音助手任务 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    setup_logfire(app)

    app.include_router(message.router, tags=["message"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(cancel.router, tags=["cancel"])
    app.include_router(stream.router, tags=["stream"])
    app.include_router(health.router, tags=["health"])
    app.include_router(agent_card.router, tags=["agent"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
