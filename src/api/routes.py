"""Skill invocation routes."""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from src.skills.dispatcher import SkillDispatcher
from src.skills.result import FailureReason, SkillResult

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["skills"])

FAILURE_STATUS: dict[FailureReason, int] = {
    FailureReason.MISSING_PARAMETER: 400,
    FailureReason.UNKNOWN_FUNCTION: 404,
    FailureReason.UPSTREAM_FETCH: 502,
    FailureReason.UPSTREAM_PARSE: 502,
}


class InvokeRequest(BaseModel):
    """Resolver invocation as sent by the front-end bridge."""

    function: str = Field(..., description="Resolver name (e.g., checkDuplicates)")
    payload: dict[str, Any] = Field(default_factory=dict, description="Named parameters")


def get_dispatcher(request: Request) -> SkillDispatcher:
    """Dispatcher attached to the running app."""
    return request.app.state.dispatcher


def _respond(name: str, result: SkillResult) -> dict[str, Any]:
    if result.success:
        return {"result": result.data}

    logger.warning("skill_failed", skill=name, reason=result.reason.value, error=result.error)
    raise HTTPException(
        status_code=FAILURE_STATUS.get(result.reason, 500),
        detail={"error": result.error, "reason": result.reason.value},
    )


@router.post("/")
async def invoke_resolver(
    request: InvokeRequest,
    dispatcher: SkillDispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    """Invoke a resolver by name."""
    logger.info("resolver_invoked", skill=request.function)
    result = await dispatcher.dispatch(request.function, request.payload)
    return _respond(request.function, result)


@router.get("/skills")
async def list_skills(dispatcher: SkillDispatcher = Depends(get_dispatcher)) -> dict[str, Any]:
    """List registered resolver names."""
    return {"skills": dispatcher.names}


@router.post("/skills/{name}")
async def invoke_skill(
    name: str,
    payload: Optional[dict[str, Any]] = Body(default=None),
    dispatcher: SkillDispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    """Invoke one skill with the request body as its payload."""
    logger.info("skill_invoked", skill=name)
    result = await dispatcher.dispatch(name, payload or {})
    return _respond(name, result)
