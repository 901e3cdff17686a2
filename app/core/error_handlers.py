"""
全局异常处理
把业务异常、请求绑定错误和未知异常统一转换为错误响应：
{status, error, message, timestamp, details?}
"""

from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppError

_HTTP_ERROR_LABELS = {
    400: "请求错误",
    404: "资源未找到",
    405: "请求方法不支持",
    409: "数据冲突",
}

_LOC_SOURCES = {"body", "query", "path", "header", "cookie"}


def error_body(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "status": status_code,
        "error": error,
        "message": message,
        "timestamp": datetime.now().isoformat(),
    }
    if details:
        body["details"] = details
    return body


def _field_path(loc: Sequence[Union[str, int]]) -> str:
    """("body", 0, "email") -> "[0].email"；("query", "page") -> "page" """
    parts = list(loc)
    if parts and parts[0] in _LOC_SOURCES:
        parts = parts[1:]
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path or "body"


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.error, exc.message, exc.details),
    )


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    details: Dict[str, str] = {}
    for err in exc.errors():
        details.setdefault(_field_path(err.get("loc") or ()), str(err.get("msg") or "参数不合法"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(status.HTTP_400_BAD_REQUEST, "参数验证失败", "请求参数不符合要求", details),
    )


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(
            exc.status_code,
            _HTTP_ERROR_LABELS.get(exc.status_code, "请求错误"),
            str(exc.detail),
        ),
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    logger.opt(exception=exc).error(
        "未处理的异常: {} {} (request_id={})", request.method, request.url.path, request_id
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "系统内部错误",
            "服务器发生未知错误，请稍后重试",
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """在应用上注册全部异常处理器"""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
