"""MCP server entry point: Hacker News tools over stdio (or HTTP).

Run:
    hn-mcp                        # MCP over stdin/stdout
    hn-mcp --transport http       # FastAPI app via uvicorn

Logging goes to stderr. Stdout is the MCP message stream and must carry
nothing else.
"""

import argparse
import asyncio
import contextlib
import json
import logging
import os
import signal
import sys

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.shared.exceptions import McpError

from config import Settings, configure_logging, settings
from dispatcher import ToolDispatcher, build_dispatcher
from errors import HNServerError

logger = logging.getLogger(__name__)

SERVER_NAME = "hackernews-mcp-server"
SERVER_VERSION = "1.0.0"
SHUTDOWN_GRACE_SECONDS = 5.0

# NotFound is reported as invalid params: the caller asked for an id that
# does not name a resource of the requested kind.
_MCP_ERROR_CODES = {
    "VALIDATION_ERROR": types.INVALID_PARAMS,
    "NOT_FOUND": types.INVALID_PARAMS,
    "METHOD_NOT_FOUND": types.METHOD_NOT_FOUND,
}


def to_mcp_error(exc: HNServerError) -> McpError:
    """Convert a server error into an MCP protocol error."""
    return McpError(
        types.ErrorData(
            code=_MCP_ERROR_CODES.get(exc.code, types.INTERNAL_ERROR),
            message=f"{exc.code}: {exc.message}",
            data=exc.to_dict(),
        )
    )


def build_server(dispatcher: ToolDispatcher) -> Server:
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["inputSchema"],
            )
            for tool in dispatcher.list_tools()
        ]

    # Raw handler: an McpError raised here is sent as a JSON-RPC error with its
    # code and data (the call_tool decorator would wrap it in an isError result).
    # Arguments are checked by the dispatcher so every violation is reported.
    async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
        try:
            envelope = await dispatcher.call_tool(req.params.name, req.params.arguments)
        except HNServerError as e:
            raise to_mcp_error(e) from e
        return types.ServerResult(
            types.CallToolResult(
                content=[types.TextContent(type="text", text=json.dumps(envelope))],
                isError=False,
            )
        )

    server.request_handlers[types.CallToolRequest] = handle_call_tool

    return server


async def serve_stdio(config: Settings) -> None:
    """Serve MCP on stdin/stdout until EOF or SIGINT/SIGTERM."""
    dispatcher = build_dispatcher(config)
    server = build_server(dispatcher)

    loop = asyncio.get_running_loop()
    main_task = asyncio.current_task()
    signalled = False

    def on_signal() -> None:
        nonlocal signalled
        signalled = True
        main_task.cancel()
        # Backstop in case the transport never finishes cancelling
        loop.call_later(SHUTDOWN_GRACE_SECONDS, exit_now, 0)

    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops; Ctrl+C still raises KeyboardInterrupt there
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, on_signal)

    try:
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            logger.info("Hacker News MCP server running on stdio")
            await server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=SERVER_VERSION,
                    capabilities=server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )
    except asyncio.CancelledError:
        if not signalled:
            raise
        logger.info("Received shutdown signal, shutting down")
    finally:
        await dispatcher.aclose()

    if signalled:
        exit_now(0)


def exit_now(code: int) -> None:
    """Flush and exit without joining threads.

    The stdio transport reads stdin from a worker thread that only returns at
    EOF, so a normal interpreter exit would wait for the client to close the
    pipe.
    """
    logging.shutdown()
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(code)


def serve_http(config: Settings, host: str, port: int) -> None:
    import uvicorn

    from app import create_app

    uvicorn.run(create_app(config), host=host, port=port)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Hacker News MCP server")
    parser.add_argument("--transport", choices=["stdio", "http"], default="stdio")
    parser.add_argument("--host", default="127.0.0.1", help="Host for the http transport")
    parser.add_argument("--port", type=int, default=8000, help="Port for the http transport")
    args = parser.parse_args(argv)

    configure_logging(settings)

    problems = settings.validate()
    if problems:
        logger.error("Invalid configuration: %s", "; ".join(problems))
        return 1

    try:
        if args.transport == "http":
            serve_http(settings, args.host, args.port)
        else:
            asyncio.run(serve_stdio(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception:
        logger.exception("Server failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
