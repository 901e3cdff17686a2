"""
学生相关的 Pydantic 模型
只负责请求体的结构绑定（字段类型），字段约束由 app.services.students.validator 校验
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.student import Gender


class StudentBase(BaseModel):
    """学生基础模型（JSON 使用驼峰字段名，同时接受下划线字段名）"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    name: Optional[str] = Field(None, description="学生姓名")
    age: Optional[int] = Field(None, description="年龄")
    gender: Optional[Gender] = Field(None, description="性别 MALE/FEMALE")
    major: Optional[str] = Field(None, description="专业")
    class_name: Optional[str] = Field(None, description="班级")
    email: Optional[str] = Field(None, description="邮箱")


class StudentCreate(StudentBase):
    """学生创建模型，所有字段必填（由校验层判定）"""
    pass


class StudentUpdate(StudentBase):
    """学生部分更新模型，只应用请求中出现的字段"""

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class StudentResponse(BaseModel):
    """学生响应模型"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    name: str
    age: int
    gender: Gender
    major: str
    class_name: str
    email: str
    create_time: datetime
    update_time: datetime


class StudentPage(BaseModel):
    """分页响应模型"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: List[StudentResponse]
    total: int
    page: int
    size: int
    total_pages: int


class MajorCount(BaseModel):
    """按专业统计的人数"""
    major: str
    count: int
