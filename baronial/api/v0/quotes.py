"""Quote endpoints — cache-first lookup and manual quote injection."""
from __future__ import annotations

import asyncio

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from baronial.api.v0.errors import error_response
from baronial.api.v0.models import ErrorBody, MethodNotAllowedBody, QuoteUpdate
from baronial.core.config import Settings
from baronial.core.quotes import QuoteStack
from baronial.core.quotes.errors import CacheRecordError, QuoteTimeout
from baronial.core.quotes.models import utc_now

router = APIRouter(tags=["Quotes"])
logger = structlog.get_logger()

ACCEPTED_METHODS = ["GET", "PUT"]
PREFIX = "/api/v0"
QUOTE_PATH = f"{PREFIX}/quote"

BAD_BODY = "could not read body of request as quote"
WRITE_FAILED = "failed to write quote"


def get_quote_stack(request: Request) -> QuoteStack:
    return request.app.state.quotes


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get(
    "/quote",
    responses={400: {"model": ErrorBody}, 404: {"model": ErrorBody}, 500: {"model": ErrorBody}},
)
async def get_quote(
    symbol: str | None = Query(None),
    stack: QuoteStack = Depends(get_quote_stack),
    settings: Settings = Depends(get_settings),
):
    """Current quote for a symbol — served from the nearest fresh cache layer."""
    if not symbol:
        return error_response(400, 'missing required query parameter, "symbol"')

    logger.info("quote.requested", symbol=symbol)
    try:
        quote = await asyncio.wait_for(
            stack.source.quote(symbol), timeout=settings.request_timeout_seconds
        )
    except asyncio.TimeoutError as exc:
        raise QuoteTimeout(
            f"timed out after {settings.request_timeout_seconds:g}s fetching quote for {symbol}"
        ) from exc
    return quote.to_wire()


@router.put(
    "/quote",
    status_code=204,
    responses={400: {"model": ErrorBody}, 500: {"model": ErrorBody}},
)
async def put_quote(
    request: Request,
    stack: QuoteStack = Depends(get_quote_stack),
    settings: Settings = Depends(get_settings),
):
    """Write a quote straight into the durable cache, bypassing providers and memory."""
    received_at = utc_now()

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > settings.max_body_bytes:
            return error_response(400, BAD_BODY, detail=f"body exceeds {settings.max_body_bytes} bytes")

    try:
        update = QuoteUpdate.model_validate_json(bytes(body))
    except ValidationError as exc:
        return error_response(400, BAD_BODY, detail=str(exc))

    if stack.file_cache is None:
        return error_response(500, WRITE_FAILED, detail="no durable quote cache is configured")

    quote = update.to_quote(received_at)
    try:
        await stack.file_cache.write_quote(quote)
    except CacheRecordError as exc:
        logger.error("quote.write_failed", symbol=quote.symbol, error=str(exc))
        return error_response(500, WRITE_FAILED, detail=str(exc))

    logger.info("quote.written", symbol=quote.symbol, refreshed_at=quote.last_refreshed.isoformat())
    return Response(status_code=204)


async def quote_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Any method other than GET or PUT on the quote path gets a JSON 405."""
    if exc.status_code != 405 or request.url.path != QUOTE_PATH:
        return await http_exception_handler(request, exc)
    body = MethodNotAllowedBody(
        error=f'"{request.method}" is not an accepted HTTP Method for this operation.',
        accepted=ACCEPTED_METHODS,
    )
    return JSONResponse(
        status_code=405,
        headers={"Allow": ", ".join(ACCEPTED_METHODS)},
        content=body.model_dump(),
    )
