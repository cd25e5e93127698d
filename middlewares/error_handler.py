import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from schemas.common import ErrorDetail, ErrorResponse
from utils.exceptions import ResultsError, StorageUnavailable

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str, headers=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "Invalid value").removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid input"


def add_error_handlers(app: FastAPI):
    @app.exception_handler(ResultsError)
    async def results_error_handler(request: Request, exc: ResultsError):
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return _error_response(exc.status_code, exc.code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, "VALIDATION_FAILED", _validation_message(exc))

    @app.exception_handler(OperationalError)
    async def storage_error_handler(request: Request, exc: OperationalError):
        logger.error(f"DB 연결 오류: {request.method} {request.url.path} - {exc}")
        err = StorageUnavailable()
        return _error_response(err.status_code, err.code, err.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
        return _error_response(500, "INTERNAL_ERROR", "Server error")
