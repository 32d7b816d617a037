"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Request

from errors import ApiError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
async def ready(request: Request) -> dict:
    """Lightweight readiness check, no external calls."""
    return {
        "status": "ok",
        "service": "hackernews-mcp-server",
        "commit": request.app.state.settings.git_sha,
    }


@router.get("/health")
async def health(request: Request) -> dict:
    """Deep health check that verifies the item-graph API answers."""
    result = {
        "status": "ok",
        "service": "hackernews-mcp-server",
        "commit": request.app.state.settings.git_sha,
        "upstream": "not_tested",
    }

    try:
        max_item = await request.app.state.dispatcher.hn.get_max_item_id()
        result["upstream"] = "connected"
        result["max_item_id"] = max_item
    except ApiError as e:
        logger.exception("Upstream health check failed")
        result["upstream"] = "error"
        result["upstream_error"] = str(e)

    return result
