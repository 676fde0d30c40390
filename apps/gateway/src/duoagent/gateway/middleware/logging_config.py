"""structlog 配置

DUOAGENT_LOG_FORMAT=json 输出单行 JSON，其余值使用控制台渲染。
第三方库（litellm / httpx / 腾讯云 SDK）的日志统一经 ProcessorFormatter 输出。
"""

import logging
import os

import structlog
from fastapi import FastAPI

# 这些库在 INFO 级别会逐请求打印
NOISY_LOGGERS = ("LiteLLM", "httpx", "httpcore", "tencentcloud_sdk_common")


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog + 标准库 logging

    Args:
        log_format: "json" 或 "dev"，None 时读取 DUOAGENT_LOG_FORMAT
        log_level: 日志级别名，None 时读取 DUOAGENT_LOG_LEVEL；无法识别时回落 INFO
    """
    log_format = log_format or os.environ.get("DUOAGENT_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("DUOAGENT_LOG_LEVEL", "INFO")
    level = logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        final: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        final = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final],
            foreign_pre_chain=pre_chain,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def setup_logfire(app: FastAPI) -> bool:
    """LOGFIRE_SEND_TO_LOGFIRE=true 时接入 Logfire（需要 apm extra）

    Returns:
        是否已启用；初始化失败时降级为纯本地日志并返回 False
    """
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return False

    try:
        import logfire

        logfire.configure(service_name="duoagent-gateway")
        logfire.instrument_fastapi(app)
    except Exception as e:
        structlog.get_logger().warning(
            "logfire_init_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        return False
    return True
