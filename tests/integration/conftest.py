"""集成测试共享 fixture -- 完整 app（中间件 + 路由）+ 可替换的模型/语音客户端"""

from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest.fixture(autouse=True)
def reset_sse_app_status():
    """sse-starlette 的退出事件绑定在首个事件循环上，每个测试前重置"""
    from sse_starlette.sse import AppStatus

    AppStatus.should_exit_event = None


@pytest_asyncio.fixture
async def make_client(monkeypatch) -> AsyncGenerator[Callable, None]:
    """按给定客户端装配 app，返回 (app, AsyncClient)"""
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    from duoagent.gateway.main import build_task_service, create_app
    from duoagent.gateway.services.sse_hub import SSEHub

    apps = []
    clients = []

    async def _make(llm_client, voice_client=None):
        app = create_app()
        app.state.llm_client = llm_client
        app.state.voice_client = voice_client
        app.state.sse_hub = SSEHub()
        app.state.task_service = build_task_service(
            llm_client, voice_updater=voice_client, sse_hub=app.state.sse_hub
        )
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        apps.append(app)
        clients.append(client)
        return app, client

    yield _make

    for client in clients:
        await client.aclose()
    for app in apps:
        await app.state.task_service.shutdown()
