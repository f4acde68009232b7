import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse

from journal_bridge import schemas
from journal_bridge.core.exceptions import JournalBridgeError

logger = logging.getLogger(__name__)

def error_response(exc: Exception) -> JSONResponse:
    """Error envelope returned with a server-error status."""
    message = str(exc) or "Unknown error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=schemas.ErrorResponse(message=message).model_dump(),
    )

async def journal_bridge_error_handler(request: Request, exc: JournalBridgeError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return error_response(exc)
