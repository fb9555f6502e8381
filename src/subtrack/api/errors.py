import logging
import time

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.subtrack.domain.enums import ErrorKind
from src.subtrack.domain.errors import SubscriptionError

logger = logging.getLogger("subtrack.http")

INTERNAL_ERROR = "internal error"

_KIND_STATUS = {
    ErrorKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE: status.HTTP_409_CONFLICT,
}

_KIND_MESSAGE = {
    ErrorKind.NOT_FOUND: "not found",
    ErrorKind.DUPLICATE: "already exists",
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def subscription_error_handler(request: Request, exc: SubscriptionError) -> JSONResponse:
    # Для INVALID_ARGUMENT отдаём деталь клиенту, для остальных — только вид ошибки
    message = exc.detail if exc.kind == ErrorKind.INVALID_ARGUMENT else _KIND_MESSAGE[exc.kind]
    return error_response(_KIND_STATUS[exc.kind], message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors or errors[0].get("type") == "json_invalid":
        return error_response(status.HTTP_400_BAD_REQUEST, "invalid json")

    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return error_response(status.HTTP_400_BAD_REQUEST, f"invalid {field or 'request'}: {first.get('msg')}")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def recover_middleware(request: Request, call_next):
    """
    Любое непредвиденное исключение -> лог с трейсом + 500 без деталей.
    """
    try:
        return await call_next(request)
    except Exception:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)


async def request_log_middleware(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request method=%s path=%s status=%s duration_ms=%.1f",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response
