"""健康检查路由

GET /health: Liveness，永远 200。
GET /ready: Readiness；profile=llm/full 时额外探测模型端点。
"""

from enum import StrEnum

import structlog
from fastapi import APIRouter, Query, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


class ReadyProfile(StrEnum):
    CORE = "core"
    LLM = "llm"
    FULL = "full"


async def _probe_llm(llm_client) -> str:
    if llm_client is None:
        return "error: not initialized"
    try:
        healthy = await llm_client.health_check()
    except Exception as e:
        log.warning("health_check_error", error=str(e), error_type=type(e).__name__)
        healthy = False
    return "ok" if healthy else "unreachable"


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/ready")
async def ready(
    request: Request,
    profile: ReadyProfile = Query(
        default=ReadyProfile.CORE,
        description="core 仅检查运行时；llm/full 额外探测模型端点",
    ),
):
    """Readiness 检查

    voice 只报告 enabled / disabled，不影响就绪结果。
    """
    state = request.app.state
    task_service = getattr(state, "task_service", None)

    checks = {
        "task_service": "ok" if task_service is not None else "error: not initialized",
        "voice": "enabled" if getattr(state, "voice_client", None) is not None else "disabled",
        "llm": "skipped",
    }
    if profile is not ReadyProfile.CORE:
        checks["llm"] = await _probe_llm(getattr(state, "llm_client", None))

    all_ok = checks["task_service"] == "ok" and checks["llm"] in ("ok", "skipped")
    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "profile": profile.value,
            "checks": checks,
            "running_tasks": task_service.running_count if task_service is not None else 0,
        },
    )
