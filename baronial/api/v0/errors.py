"""Global error handlers — every failure leaves as {"error": ...} JSON."""
import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

from baronial.core.quotes.errors import QuoteError, SymbolNotFound

logger = structlog.get_logger()


def error_response(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


async def symbol_not_found_handler(request: Request, exc: SymbolNotFound):
    return error_response(404, str(exc), symbol=exc.symbol)


async def quote_error_handler(request: Request, exc: QuoteError):
    return error_response(500, str(exc))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("request.failed", path=request.url.path, error=repr(exc))
    return error_response(500, "internal server error", detail=str(exc))
