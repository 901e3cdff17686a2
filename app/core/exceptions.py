"""
业务异常定义

服务层和校验层只抛出这里定义的异常，由 app.core.error_handlers
统一转换为 HTTP 状态码和错误响应体。
"""

from typing import Dict, Optional


class AppError(Exception):
    """所有业务异常的基类"""

    status_code: int = 500
    error: str = "系统内部错误"

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailure(AppError):
    """请求体结构或字段约束不满足"""

    status_code = 400
    error = "参数验证失败"

    def __init__(self, details: Dict[str, str], message: str = "请求参数不符合要求"):
        super().__init__(message, details)


class NotFound(AppError):
    """引用的记录不存在"""

    status_code = 404
    error = "资源未找到"


class Conflict(AppError):
    """邮箱唯一性冲突"""

    status_code = 409
    error = "数据冲突"


class BadArgument(AppError):
    """查询参数或路径参数不合法（枚举无法解析、排序字段非法等）"""

    status_code = 400
    error = "参数错误"


__all__ = [
    "AppError",
    "ValidationFailure",
    "NotFound",
    "Conflict",
    "BadArgument",
]
