"""
学生Schema模块
"""

from .student import (
    StudentBase,
    StudentCreate,
    StudentUpdate,
    StudentResponse,
    StudentPage,
    MajorCount,
)

__all__ = [
    "StudentBase",
    "StudentCreate",
    "StudentUpdate",
    "StudentResponse",
    "StudentPage",
    "MajorCount",
]
