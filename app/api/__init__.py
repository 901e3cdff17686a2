"""
API 路由注册
"""

from fastapi import APIRouter
from app.api.endpoints.students import router as students_router

api_router = APIRouter()

# 注册各个模块的路由（/students 前缀在模块内部声明）
api_router.include_router(students_router)
