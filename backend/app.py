"""FastAPI application serving the Hacker News tools over plain HTTP."""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, configure_logging, settings
from dispatcher import ToolDispatcher, build_dispatcher
from errors import register_error_handlers

configure_logging(settings)

logger = logging.getLogger(__name__)


def create_app(config: Settings = settings, dispatcher: ToolDispatcher | None = None) -> FastAPI:
    app = FastAPI(title="Hacker News Tools API", version="1.0.0")
    app.state.settings = config
    # Built at startup when not injected, so importing this module opens no clients
    app.state.dispatcher = dispatcher

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if config.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.tools import router as tools_router

    app.include_router(health_router)
    app.include_router(tools_router)

    @app.on_event("startup")
    async def _startup() -> None:
        problems = config.validate()
        if problems:
            logger.warning("Configuration problems: %s", "; ".join(problems))
        if app.state.dispatcher is None:
            app.state.dispatcher = build_dispatcher(config)

    @app.on_event("shutdown")
    async def _close_clients() -> None:
        if app.state.dispatcher is not None:
            await app.state.dispatcher.aclose()

    return app


app = create_app()
