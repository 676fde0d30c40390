"""依赖注入模块 -- 通过 FastAPI Depends 注入运行时单例

TaskService / SSEHub 通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request

from .services.sse_hub import SSEHub
from .services.task_service import TaskService


def get_task_service(request: Request) -> TaskService:
    """从 app.state 获取 TaskService 实例"""
    return request.app.state.task_service


def get_sse_hub(request: Request) -> SSEHub:
    """从 app.state 获取 SSEHub 实例"""
    return request.app.state.sse_hub
