"""
通用响应模型
所有接口成功时返回 {success, message, data}
"""

from typing import Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """统一成功响应"""
    success: bool = Field(True, description="请求是否成功")
    message: str = Field("", description="响应消息")
    data: Optional[T] = Field(None, description="响应数据")


class ApiErrorResponse(BaseModel):
    """统一错误响应（由全局异常处理器生成，这里只用于 OpenAPI 文档）"""
    status: int
    error: str
    message: str
    timestamp: str
    details: Optional[Dict[str, str]] = None
