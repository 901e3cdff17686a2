"""
学生信息管理后端主入口
FastAPI 应用配置和启动
"""

import sys
import uuid
from datetime import datetime
from typing import Any, Dict

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.config import settings
from app.core.error_handlers import register_exception_handlers
from app.db.database import AsyncSessionLocal, close_db, init_db
from app.api import api_router

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理
    - 启动时：按配置创建数据库表
    - 关闭时：释放数据库连接
    """
    logger.info("应用启动中...")

    if settings.DEBUG or settings.AUTO_CREATE_TABLES:
        logger.info("创建数据库表（仅开发环境/首次部署可选，生产请使用 Alembic 迁移）...")
        await init_db()

    logger.info("应用启动完成")
    yield
    logger.info("应用关闭中...")

    await close_db()
    logger.info("应用已关闭")


# 创建 FastAPI 应用实例
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="学生信息管理后端 API 服务",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        return response


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = rid
        with logger.contextualize(request_id=rid):
            response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response


# 配置 CORS
if settings.DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^http://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
elif settings.CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIdMiddleware)

# 注册全局异常处理
register_exception_handlers(app)

# 注册 API 路由
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """根路径，返回应用信息"""
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "description": "学生信息管理后端 API 服务",
        "docs": "/docs" if settings.DEBUG else None,
        "health": "/health",
        "students": f"{settings.API_PREFIX}/students",
    }


@app.get("/health")
async def health_check():
    """数据库不可用时返回 503"""
    db_status = "healthy"
    try:
        async with AsyncSessionLocal() as db:
            r = await db.execute(text("SELECT 1"))
            db_status = "healthy" if r.scalar() == 1 else "unhealthy"
    except Exception as e:
        logger.warning(f"数据库健康检查失败: {e}")
        db_status = "unhealthy"

    body: Dict[str, Any] = {
        "status": db_status,
        "checks": {"database": db_status},
        "system": {
            "service": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "timestamp": datetime.now().isoformat(),
            "debug_mode": settings.DEBUG,
        },
    }
    if db_status != "healthy":
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
    return body


@app.get("/ping")
async def ping():
    """简单的 ping 接口，用于测试"""
    return {"message": "pong"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.BACKEND_RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )
