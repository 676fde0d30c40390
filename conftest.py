"""全局 pytest 配置 -- 日志上下文隔离"""

import pytest
import structlog


@pytest.fixture(autouse=True)
def clear_log_context():
    """每个测试前后清空 structlog contextvars，避免 request_id/trace_id 串扰"""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
