"""配置常量模块 -- 可通过环境变量覆盖

包含服务监听地址、SSE 心跳间隔、日志预览截断长度等可配置常量。
"""

import os

import structlog

log = structlog.get_logger()

DEFAULT_SERVER_PORT = 8080


def get_server_host() -> str:
    """获取服务监听地址"""
    return os.environ.get("SERVER_HOST", "localhost")


def get_server_port() -> int:
    """获取服务监听端口，非法值回退到默认端口"""
    val = os.environ.get("SERVER_PORT")
    if not val:
        return DEFAULT_SERVER_PORT
    try:
        return int(val)
    except ValueError:
        log.warning(
            "invalid_port_config",
            env_var="SERVER_PORT",
            value=val,
            fallback=DEFAULT_SERVER_PORT,
        )
        return DEFAULT_SERVER_PORT


# SSE 心跳间隔（秒）
SSE_HEARTBEAT_INTERVAL: int = int(
    os.environ.get("DUOAGENT_SSE_HEARTBEAT_INTERVAL", "15")
)

# 日志中用户文本预览截断长度
MESSAGE_PREVIEW_LENGTH: int = 200

# 内存中保留的任务记录上限，超出时淘汰最早的已终态任务
MAX_RETAINED_TASKS: int = int(os.environ.get("DUOAGENT_MAX_RETAINED_TASKS", "1000"))
