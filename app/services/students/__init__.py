"""
学生服务模块
"""

from app.services.students.student import StudentService
from app.services.students.validator import ensure_valid, validate_student

__all__ = ["StudentService", "ensure_valid", "validate_student"]
