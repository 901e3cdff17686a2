"""
数据库模型定义
"""

from app.db.database import Base

# 学生信息表
from .student import Gender, Student

__all__ = [
    "Base",
    "Gender",
    "Student",
]
