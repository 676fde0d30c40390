"""apps/gateway 测试配置 -- echo 模式的 FastAPI app + httpx AsyncClient"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from duoagent.provider import EchoMessageAdapter
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def app(monkeypatch):
    """创建测试用 FastAPI app 实例（手动初始化 app.state，绕过 lifespan）"""
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    from duoagent.gateway.main import build_task_service, create_app
    from duoagent.gateway.services.sse_hub import SSEHub

    application = create_app()
    llm_client = EchoMessageAdapter()
    application.state.llm_client = llm_client
    application.state.voice_client = None
    application.state.sse_hub = SSEHub()
    service = build_task_service(llm_client, sse_hub=application.state.sse_hub)
    application.state.task_service = service

    yield application

    await service.shutdown()


@pytest_asyncio.fixture
async def task_service(app):
    return app.state.task_service


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture(autouse=True)
def reset_sse_app_status():
    """sse-starlette 的退出事件绑定在首个事件循环上，每个测试前重置"""
    from sse_starlette.sse import AppStatus

    AppStatus.should_exit_event = None
