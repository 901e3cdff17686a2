"""
项目所有Pydantic Schema定义
按功能模块组织在子目录中

导入结构示例：
    from app.schemas.common import ApiResponse
    from app.schemas.students import StudentCreate, StudentResponse
"""

from .common import ApiResponse, ApiErrorResponse
from .students import *

__all__ = [
    "ApiResponse",
    "ApiErrorResponse",

    # 学生Schema
    "StudentBase",
    "StudentCreate",
    "StudentUpdate",
    "StudentResponse",
    "StudentPage",
    "MajorCount",
]
