"""
学生服务 - CRUD操作与业务规则

邮箱唯一性采用“先查后写”：服务层先查询给出友好的冲突信息，
数据库唯一约束 uq_students_email 才是最终保证，提交时的
IntegrityError 同样转换为 Conflict。
"""

import math
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadArgument, Conflict, NotFound, ValidationFailure
from app.models.student import Gender, Student
from app.repositories import student as store
from app.schemas.students import StudentCreate
from app.services.students.validator import API_FIELD_NAMES, ensure_valid, validate_student

# 允许排序的字段：对外字段名和模型字段名都可以使用
SORTABLE_FIELDS = {
    "id": Student.id,
    "name": Student.name,
    "age": Student.age,
    "gender": Student.gender,
    "major": Student.major,
    "className": Student.class_name,
    "class_name": Student.class_name,
    "email": Student.email,
    "createTime": Student.create_time,
    "create_time": Student.create_time,
    "updateTime": Student.update_time,
    "update_time": Student.update_time,
}

SORT_DIRECTIONS = ("ASC", "DESC")

# 分页偏移量上限（page * size 不能超出数据库整数范围）
MAX_OFFSET = 2**31 - 1

# 部分更新时允许修改的字段
UPDATABLE_FIELDS = tuple(API_FIELD_NAMES)


class StudentService:
    """学生服务类 - 提供学生的CRUD、查询和统计操作"""

    # ========================================
    # 增
    # ========================================

    @staticmethod
    async def create(db: AsyncSession, student_data: StudentCreate) -> Student:
        """
        创建学生

        邮箱已存在时抛出 Conflict
        """
        data = student_data.model_dump()
        ensure_valid(data)

        if await store.exists_by_email(db, data["email"]):
            logger.warning(f"创建学生失败，邮箱已存在: {data['email']}")
            raise Conflict(f"邮箱 {data['email']} 已存在，请使用其他邮箱")

        now = datetime.now()
        student = Student(**{k: data[k] for k in UPDATABLE_FIELDS}, create_time=now, update_time=now)
        try:
            student = await store.insert(db, student)
        except IntegrityError:
            logger.warning(f"创建学生时触发唯一约束: {data['email']}")
            raise Conflict(f"邮箱 {data['email']} 已存在，请使用其他邮箱")

        logger.info(f"学生已创建: id={student.id}, email={student.email}")
        return student

    @staticmethod
    async def create_many(db: AsyncSession, students_data: List[StudentCreate]) -> List[Student]:
        """
        批量创建学生（全部成功或全部失败）

        任何一条校验失败、邮箱已存在或批内邮箱重复，整批拒绝且不写入任何数据
        """
        records = [item.model_dump() for item in students_data]

        errors: Dict[str, str] = {}
        for index, record in enumerate(records):
            for field, message in validate_student(record).items():
                errors[f"[{index}].{field}"] = message
        if errors:
            raise ValidationFailure(errors)

        seen = set()
        for record in records:
            if record["email"] in seen:
                raise Conflict(f"邮箱 {record['email']} 在批量数据中重复，批量保存失败")
            seen.add(record["email"])

        taken = await store.existing_emails(db, seen)
        for record in records:
            if record["email"] in taken:
                logger.warning(f"批量创建失败，邮箱已存在: {record['email']}")
                raise Conflict(f"邮箱 {record['email']} 已存在，批量保存失败")

        now = datetime.now()
        students = [
            Student(**{k: record[k] for k in UPDATABLE_FIELDS}, create_time=now, update_time=now)
            for record in records
        ]
        try:
            students = await store.insert_many(db, students)
        except IntegrityError:
            logger.warning("批量创建学生时触发唯一约束，整批回滚")
            raise Conflict("存在重复的邮箱，批量保存失败")

        logger.info(f"批量创建学生 {len(students)} 名")
        return students

    # ========================================
    # 查
    # ========================================

    @staticmethod
    async def find_by_id(db: AsyncSession, student_id: int) -> Optional[Student]:
        return await store.get(db, student_id)

    @staticmethod
    async def get_by_id(db: AsyncSession, student_id: int) -> Student:
        """根据ID获取学生，不存在时抛出 NotFound"""
        student = await store.get(db, student_id)
        if not student:
            raise NotFound(f"ID为 {student_id} 的学生不存在")
        return student

    @staticmethod
    async def list_all(db: AsyncSession) -> List[Student]:
        return await store.list_all(db)

    @staticmethod
    async def list_paged(
        db: AsyncSession,
        page: int = 0,
        size: int = 10,
        sort_by: str = "id",
        sort_direction: str = "ASC",
    ) -> Dict[str, Any]:
        """
        分页查询学生

        page 从 0 开始；sort_by 只能是学生字段，sort_direction 为 ASC/DESC（不区分大小写）
        """
        if page < 0:
            raise BadArgument("页码不能小于0")
        if size <= 0:
            raise BadArgument("每页数量必须大于0")
        if page * size > MAX_OFFSET:
            raise BadArgument(f"页码超出范围: {page}")

        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise BadArgument(f"不支持的排序字段: {sort_by}")
        direction = (sort_direction or "").upper()
        if direction not in SORT_DIRECTIONS:
            raise BadArgument(f"不支持的排序方向: {sort_direction}，只能是 ASC 或 DESC")

        order = column.asc() if direction == "ASC" else column.desc()
        items, total = await store.list_page(db, offset=page * size, limit=size, order_by=(order,))
        return {
            "items": items,
            "total": total,
            "page": page,
            "size": size,
            "total_pages": math.ceil(total / size) if total else 0,
        }

    @staticmethod
    async def find_by_email(db: AsyncSession, email: str) -> Optional[Student]:
        return await store.get_by_email(db, email)

    @staticmethod
    async def find_by_name_contains(db: AsyncSession, name: str) -> List[Student]:
        return await store.find_by_name_contains(db, name)

    @staticmethod
    async def find_by_class_name(db: AsyncSession, class_name: str) -> List[Student]:
        return await store.find_where(db, Student.class_name == class_name)

    @staticmethod
    async def find_by_major(db: AsyncSession, major: str) -> List[Student]:
        return await store.find_where(db, Student.major == major)

    @staticmethod
    async def find_by_gender(db: AsyncSession, gender: Gender) -> List[Student]:
        return await store.find_by_gender(db, gender)

    @staticmethod
    async def find_by_age_range(db: AsyncSession, min_age: int, max_age: int) -> List[Student]:
        """年龄在 [min_age, max_age] 之间（含边界），min_age > max_age 时结果为空"""
        return await store.find_by_age_between(db, min_age, max_age)

    @staticmethod
    async def find_by_class_and_major(db: AsyncSession, class_name: str, major: str) -> List[Student]:
        return await store.find_where(db, Student.class_name == class_name, Student.major == major)

    @staticmethod
    async def search_by_keyword(db: AsyncSession, keyword: str) -> List[Student]:
        """姓名或邮箱包含关键字"""
        return await store.find_by_keyword(db, keyword)

    @staticmethod
    async def list_class_ordered_by_name(db: AsyncSession, class_name: str) -> List[Student]:
        return await store.find_where(
            db, Student.class_name == class_name, order_by=(Student.name.asc(),)
        )

    @staticmethod
    async def find_oldest_by_major(db: AsyncSession, major: str) -> List[Student]:
        """某专业中年龄最大的学生（并列时全部返回）"""
        return await store.find_oldest_by_major(db, major)

    @staticmethod
    async def find_by_create_time_range(db: AsyncSession, start_date: date, end_date: date) -> List[Student]:
        if start_date > end_date:
            raise BadArgument("开始日期不能晚于结束日期")
        return await store.find_created_between(db, start_date, end_date)

    # ========================================
    # 改
    # ========================================

    @staticmethod
    async def update(db: AsyncSession, student_id: int, changes: Mapping[str, Any]) -> Student:
        """
        部分更新学生

        changes 只包含请求中出现的字段；未出现的字段保持不变
        """
        student = await StudentService.get_by_id(db, student_id)

        changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        ensure_valid(changes, partial=True)

        email = changes.get("email")
        if email is not None and email != student.email:
            other = await store.get_by_email(db, email)
            if other is not None and other.id != student_id:
                logger.warning(f"更新学生失败，邮箱已被占用: id={student_id}, email={email}")
                raise Conflict(f"邮箱 {email} 已被其他学生使用")

        for field, value in changes.items():
            setattr(student, field, value)
        student.update_time = max(datetime.now(), student.create_time)

        try:
            student = await store.save(db, student)
        except IntegrityError:
            logger.warning(f"更新学生时触发唯一约束: id={student_id}, email={email}")
            raise Conflict(f"邮箱 {email} 已被其他学生使用")

        logger.info(f"学生已更新: id={student_id}, fields={sorted(changes)}")
        return student

    # ========================================
    # 删
    # ========================================

    @staticmethod
    async def delete(db: AsyncSession, student_id: int) -> None:
        """删除学生，不存在时抛出 NotFound"""
        if not await store.exists_by_id(db, student_id):
            raise NotFound(f"ID为 {student_id} 的学生不存在，无法删除")
        await store.delete_by_id(db, student_id)
        logger.info(f"学生已删除: id={student_id}")

    @staticmethod
    async def delete_many(db: AsyncSession, student_ids: List[int]) -> int:
        """
        批量删除学生（尽力而为）

        不存在的ID直接跳过，返回实际删除的数量
        """
        deleted = 0
        for student_id in student_ids:
            if await store.exists_by_id(db, student_id):
                deleted += await store.delete_by_id(db, student_id)
        logger.info(f"批量删除学生: 请求 {len(student_ids)} 个, 实际删除 {deleted} 个")
        return deleted

    # ========================================
    # 统计
    # ========================================

    @staticmethod
    async def count(db: AsyncSession) -> int:
        return await store.count_where(db)

    @staticmethod
    async def count_by_class_name(db: AsyncSession, class_name: str) -> int:
        return await store.count_where(db, Student.class_name == class_name)

    @staticmethod
    async def count_by_major(db: AsyncSession, major: str) -> int:
        return await store.count_where(db, Student.major == major)

    @staticmethod
    async def count_grouped_by_major(db: AsyncSession) -> List[Dict[str, Any]]:
        rows = await store.count_grouped_by_major(db)
        return [{"major": major, "count": count} for major, count in rows]

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        return await store.exists_by_email(db, email)

    @staticmethod
    async def record_exists(db: AsyncSession, student_id: int) -> bool:
        return await store.exists_by_id(db, student_id)
