"""
学生管理模块 API 端点
"""

from fastapi import APIRouter
from .students import router as students_router

router = APIRouter()
router.include_router(students_router, prefix="/students", tags=["students"])
