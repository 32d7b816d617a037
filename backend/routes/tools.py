"""Tool routes: list the tools and call one by name.

GET  /tools          → same descriptions the MCP list_tools returns
POST /tools/{name}   → JSON body is the tool's arguments
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Request

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/tools")
async def list_tools(request: Request) -> dict:
    return {"tools": request.app.state.dispatcher.list_tools()}


@router.post("/tools/{name}")
async def call_tool(name: str, request: Request, arguments: Any = Body(None)) -> dict:
    """Invoke a tool. Errors are rendered by the handlers in errors.py."""
    return await request.app.state.dispatcher.call_tool(name, arguments)
