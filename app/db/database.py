"""
数据库配置和连接管理
SQLAlchemy 异步引擎和会话管理
"""

from typing import Any, AsyncGenerator, Dict

from loguru import logger
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.core.config import settings


class Base(DeclarativeBase):
    """SQLAlchemy 基类"""
    pass


# 确保 DATABASE_URL 不为 None
if not settings.DATABASE_URL:
    raise ValueError("DATABASE_URL 未配置。请检查 .env 文件中的数据库配置。")


def _engine_options() -> Dict[str, Any]:
    """按数据库类型返回引擎参数"""
    if settings.is_sqlite:
        # SQLite 仅用于本地调试和测试；内存库需要所有会话共享同一连接
        options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if make_url(settings.DATABASE_URL).database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": settings.POSTGRES_MAX_CONNECTIONS,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT_SECONDS,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "connect_args": {
            "server_settings": {
                "client_encoding": "utf8",
                "statement_timeout": str(settings.POSTGRES_STATEMENT_TIMEOUT),
            }
        },
    }


# 创建异步引擎
engine: AsyncEngine = create_async_engine(
    str(settings.DATABASE_URL),
    echo=settings.SQLALCHEMY_ECHO,
    **_engine_options(),
)

# 创建异步会话工厂
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话的依赖函数
    在 FastAPI 依赖注入中使用
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """
    创建所有表（仅开发环境或显式开启 AUTO_CREATE_TABLES 时使用）

    生产环境请使用 Alembic 迁移：python -m alembic upgrade head
    """
    # 导入模型，确保所有表都注册到 Base.metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("数据库表已就绪")


async def close_db() -> None:
    """关闭数据库连接"""
    await engine.dispose()
