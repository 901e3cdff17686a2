"""
应用配置管理
从环境变量加载配置，提供类型安全的配置访问
"""

import json
from pathlib import Path
from typing import List, Optional, Union
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, model_validator

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """应用配置类，从环境变量加载所有配置"""

    # ==================== 项目信息 ====================
    PROJECT_NAME: str = Field(default="Student CRUD")
    VERSION: str = Field(default="1.0.0")
    API_PREFIX: str = Field(default="/api")

    # ==================== 服务器配置 ====================
    BACKEND_HOST: str = Field(default="0.0.0.0")
    BACKEND_PORT: int = Field(default=8080)
    BACKEND_RELOAD: bool = Field(default=True)  # 开发模式热重载

    # ==================== 调试配置 ====================
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # ==================== CORS 配置 ====================
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:8080", "http://127.0.0.1:8080"])

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """解析CORS_ORIGINS，支持JSON字符串或列表"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # ==================== 数据库配置 ====================
    POSTGRES_USER: str = Field(default="admin")
    POSTGRES_PASSWORD: str = Field(default="change_me")
    POSTGRES_DB: str = Field(default="student_db")
    POSTGRES_HOST: str = Field(default="127.0.0.1")
    POSTGRES_PORT: str = Field(default="5432")
    POSTGRES_MAX_CONNECTIONS: int = Field(default=20)
    DB_MAX_OVERFLOW: int = Field(default=20)
    DB_POOL_TIMEOUT_SECONDS: int = Field(default=30)
    POSTGRES_STATEMENT_TIMEOUT: int = Field(default=30000)
    DATABASE_DRIVER: str = Field(default="asyncpg")

    # 数据库URL - 优先使用环境变量中的值（本地调试/测试可用 sqlite+aiosqlite://）
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info) -> Optional[str]:
        """构建数据库连接 URL"""
        if v:
            return v

        values = info.data
        driver = values.get("DATABASE_DRIVER", "asyncpg")
        username = values.get("POSTGRES_USER")
        password = values.get("POSTGRES_PASSWORD")
        host = values.get("POSTGRES_HOST")
        port = values.get("POSTGRES_PORT")
        db = values.get("POSTGRES_DB")

        if all([driver, username, password, host, port, db]):
            return f"postgresql+{driver}://{username}:{password}@{host}:{port}/{db}"
        return None

    # ==================== 数据库调试配置 ====================
    SQLALCHEMY_ECHO: bool = Field(default=False)
    AUTO_CREATE_TABLES: bool = Field(default=False)

    # ==================== 学生相关配置 ====================
    STUDENT_PAGE_SIZE_DEFAULT: int = Field(default=10)          # 默认分页大小
    STUDENT_PAGE_SIZE_MAX: int = Field(default=100)             # 最大分页大小

    @model_validator(mode="after")
    def validate_security_settings(self):
        if "POSTGRES_MAX_CONNECTIONS" not in self.model_fields_set:
            self.POSTGRES_MAX_CONNECTIONS = 20 if self.DEBUG else 50
        if "DB_MAX_OVERFLOW" not in self.model_fields_set:
            self.DB_MAX_OVERFLOW = 10 if self.DEBUG else 20
        if "DB_POOL_TIMEOUT_SECONDS" not in self.model_fields_set:
            self.DB_POOL_TIMEOUT_SECONDS = 15 if self.DEBUG else 30
        self.LOG_LEVEL = (self.LOG_LEVEL or "INFO").upper()

        if self.DEBUG:
            return self

        if self.DATABASE_URL and self.DATABASE_URL.startswith("postgresql"):
            if not self.POSTGRES_PASSWORD or self.POSTGRES_PASSWORD.strip() in {"", "change_me"}:
                raise ValueError("POSTGRES_PASSWORD 未配置或仍为默认值，请在 .env 中设置为安全值")

        return self

    @property
    def is_sqlite(self) -> bool:
        return bool(self.DATABASE_URL) and self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = str(PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False  # 环境变量不区分大小写
        extra = "ignore"  # 忽略额外的环境变量


# 创建全局配置实例
settings = Settings()
