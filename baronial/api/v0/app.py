"""FastAPI application — baronial quote API v0."""
from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from baronial.api.v0 import quotes
from baronial.api.v0.errors import quote_error_handler, symbol_not_found_handler, unhandled_error_handler
from baronial.core.config import Settings, settings
from baronial.core.log_config import configure_logging
from baronial.core.quotes import QuoteStack, build_quote_stack
from baronial.core.quotes.errors import QuoteError, SymbolNotFound

VERSION = "0.1.0"

logger = structlog.get_logger()


def create_app(stack: QuoteStack | None = None, app_settings: Settings | None = None) -> FastAPI:
    """Build the app. When no stack is injected it is built from settings at startup,
    so a process without a quote source fails before serving traffic."""
    cfg = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(cfg.log_level)
        if app.state.quotes is None:
            app.state.quotes = build_quote_stack(cfg)
        logger.info("startup", version=VERSION, source=app.state.quotes.source.name)
        yield
        logger.info("shutdown")

    app = FastAPI(
        title="Baronial Normalize API",
        version=VERSION,
        description="Normalized stock quotes behind memory and file caches",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.quotes = stack

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=quotes.ACCEPTED_METHODS,
        allow_headers=["*"],
    )

    app.include_router(quotes.router, prefix=quotes.PREFIX)

    app.add_exception_handler(SymbolNotFound, symbol_not_found_handler)
    app.add_exception_handler(QuoteError, quote_error_handler)
    app.add_exception_handler(StarletteHTTPException, quotes.quote_http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": VERSION}

    return app


app = create_app()
