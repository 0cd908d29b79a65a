import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from services.export_service import ExportError
from services.results_service import ResultsNotFound
from services.score_store import AssignmentAccessError, ScoreValidationError
from services.sms_service import SMSError

logger = logging.getLogger(__name__)

_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    502: "UPSTREAM_ERROR",
}


def _now_iso():
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def error_body(status_code: int, message, code: str = None) -> dict:
    return {
        "success": False,
        "error": {"code": code or _ERROR_CODES.get(status_code, "INTERNAL_ERROR"), "message": message},
        "generated_at": _now_iso(),
    }


def add_error_handlers(app: FastAPI):
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # 필드별 상세 오류는 message 에 그대로 전달
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg")}
            for e in exc.errors()
        ]
        return JSONResponse(status_code=422, content=error_body(422, errors))

    @app.exception_handler(ScoreValidationError)
    async def score_validation_handler(request: Request, exc: ScoreValidationError):
        return JSONResponse(status_code=400, content=error_body(400, str(exc), "INVALID_SCORE"))

    @app.exception_handler(AssignmentAccessError)
    async def assignment_access_handler(request: Request, exc: AssignmentAccessError):
        return JSONResponse(status_code=403, content=error_body(403, str(exc)))

    @app.exception_handler(ResultsNotFound)
    async def results_not_found_handler(request: Request, exc: ResultsNotFound):
        return JSONResponse(status_code=404, content=error_body(404, str(exc)))

    @app.exception_handler(SMSError)
    async def sms_error_handler(request: Request, exc: SMSError):
        logger.error("SMS gateway failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=502, content=error_body(502, str(exc), "SMS_FAILED"))

    @app.exception_handler(ExportError)
    async def export_error_handler(request: Request, exc: ExportError):
        return JSONResponse(status_code=500, content=error_body(500, str(exc), "EXPORT_FAILED"))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=error_body(500, str(exc), "INTERNAL_ERROR"))
