"""
学生数据访问层（students 表）

只做单表读写，不包含业务规则。写操作各自在一个事务内提交，
提交失败时回滚并把原始异常（如唯一约束冲突的 IntegrityError）继续抛出，
由服务层转换为业务异常。
"""

from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from sqlalchemy import ColumnElement, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.student import Gender, Student


async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise


# ---------- 单条读取 ----------

async def get(db: AsyncSession, student_id: int) -> Optional[Student]:
    result = await db.execute(select(Student).where(Student.id == student_id))
    return result.scalar_one_or_none()


async def get_by_email(db: AsyncSession, email: str) -> Optional[Student]:
    result = await db.execute(select(Student).where(Student.email == email))
    return result.scalar_one_or_none()


async def exists_by_id(db: AsyncSession, student_id: int) -> bool:
    result = await db.execute(select(Student.id).where(Student.id == student_id))
    return result.scalar_one_or_none() is not None


async def exists_by_email(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(Student.id).where(Student.email == email).limit(1))
    return result.scalar_one_or_none() is not None


async def existing_emails(db: AsyncSession, emails: Iterable[str]) -> Set[str]:
    """返回给定邮箱中已经存在于表中的那些"""
    emails = list(emails)
    if not emails:
        return set()
    result = await db.execute(select(Student.email).where(Student.email.in_(emails)))
    return set(result.scalars().all())


# ---------- 列表查询 ----------

async def find_where(
    db: AsyncSession,
    *conditions: ColumnElement[bool],
    order_by: Sequence[ColumnElement] = (),
) -> List[Student]:
    stmt = select(Student).where(*conditions).order_by(*order_by, Student.id.asc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_all(db: AsyncSession) -> List[Student]:
    return await find_where(db)


async def list_page(
    db: AsyncSession,
    *,
    offset: int,
    limit: int,
    order_by: Sequence[ColumnElement],
) -> Tuple[List[Student], int]:
    total = await count_where(db)
    result = await db.execute(
        select(Student).order_by(*order_by, Student.id.asc()).offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total


async def find_by_keyword(db: AsyncSession, keyword: str) -> List[Student]:
    """姓名或邮箱包含关键字（不区分大小写）"""
    return await find_where(
        db,
        or_(
            Student.name.icontains(keyword, autoescape=True),
            Student.email.icontains(keyword, autoescape=True),
        ),
    )


async def find_by_name_contains(db: AsyncSession, name: str) -> List[Student]:
    return await find_where(db, Student.name.icontains(name, autoescape=True))


async def find_by_gender(db: AsyncSession, gender: Gender) -> List[Student]:
    return await find_where(db, Student.gender == gender)


async def find_by_age_between(db: AsyncSession, min_age: int, max_age: int) -> List[Student]:
    return await find_where(db, Student.age.between(min_age, max_age))


async def find_oldest_by_major(db: AsyncSession, major: str) -> List[Student]:
    max_age = (
        select(func.max(Student.age))
        .where(Student.major == major)
        .scalar_subquery()
    )
    return await find_where(db, Student.major == major, Student.age == max_age)


async def find_created_between(db: AsyncSession, start: date, end: date) -> List[Student]:
    """创建日期落在 [start, end] 内，按创建时间倒序"""
    lower = datetime.combine(start, time.min)
    upper = datetime.combine(end + timedelta(days=1), time.min)
    return await find_where(
        db,
        Student.create_time >= lower,
        Student.create_time < upper,
        order_by=(Student.create_time.desc(),),
    )


# ---------- 统计 ----------

async def count_where(db: AsyncSession, *conditions: ColumnElement[bool]) -> int:
    result = await db.execute(select(func.count(Student.id)).where(*conditions))
    return int(result.scalar_one() or 0)


async def count_grouped_by_major(db: AsyncSession) -> List[Tuple[str, int]]:
    result = await db.execute(
        select(Student.major, func.count(Student.id))
        .group_by(Student.major)
        .order_by(Student.major.asc())
    )
    return [(major, int(count)) for major, count in result.all()]


# ---------- 写操作 ----------

async def insert(db: AsyncSession, student: Student) -> Student:
    db.add(student)
    await _commit(db)
    await db.refresh(student)
    return student


async def insert_many(db: AsyncSession, students: List[Student]) -> List[Student]:
    """批量插入，单事务提交：要么全部成功，要么全部回滚"""
    db.add_all(students)
    await _commit(db)
    for student in students:
        await db.refresh(student)
    return students


async def save(db: AsyncSession, student: Student) -> Student:
    await _commit(db)
    await db.refresh(student)
    return student


async def delete_by_id(db: AsyncSession, student_id: int) -> int:
    """删除一条记录，返回实际删除的行数"""
    result = await db.execute(delete(Student).where(Student.id == student_id))
    await _commit(db)
    return result.rowcount or 0
