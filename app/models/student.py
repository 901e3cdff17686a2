"""
学生信息表模型 - students
"""

import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String, UniqueConstraint
from app.db.database import Base


class Gender(str, enum.Enum):
    """学生性别（以枚举名称存储）"""

    MALE = "MALE"
    FEMALE = "FEMALE"

    @property
    def display_name(self) -> str:
        return {"MALE": "男", "FEMALE": "女"}[self.value]


class Student(Base):
    """学生表模型 - students"""
    __tablename__ = "students"
    __table_args__ = (
        UniqueConstraint("email", name="uq_students_email"),
    )

    # 主键（数据库自增，分配后不再改变）
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # 基本信息
    name = Column(String(50), nullable=False, comment="学生姓名")
    age = Column(Integer, nullable=False, comment="年龄")
    gender = Column(
        Enum(Gender, name="student_gender", native_enum=False, length=10),
        nullable=False,
        comment="性别（MALE/FEMALE）",
    )
    major = Column(String(100), nullable=False, index=True, comment="专业")
    class_name = Column(String(50), nullable=False, index=True, comment="班级")
    email = Column(String(100), nullable=False, comment="邮箱（全局唯一）")

    # 时间戳：创建时间只写一次，更新时间由服务层在每次更新时刷新
    create_time = Column(DateTime, nullable=False, comment="创建时间")
    update_time = Column(DateTime, nullable=False, comment="更新时间")

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}', email='{self.email}')>"
