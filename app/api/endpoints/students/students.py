"""
学生管理 API 端点
提供学生的增删改查、条件查询和统计，所有成功响应都包装为 {success, message, data}

错误不在这里处理：服务层抛出的业务异常由 app.core.error_handlers 统一转换
"""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import BadArgument, NotFound
from app.db.database import get_db
from app.models.student import Gender, Student
from app.schemas.common import ApiResponse
from app.schemas.students import (
    MajorCount,
    StudentCreate,
    StudentPage,
    StudentResponse,
    StudentUpdate,
)
from app.services.students import StudentService

router = APIRouter()


def _ok(message: str, data: Any = None) -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data}


def _students(rows: List[Student]) -> List[StudentResponse]:
    return [StudentResponse.model_validate(r) for r in rows]


def _parse_gender(value: str) -> Gender:
    try:
        return Gender(value.strip().upper())
    except ValueError:
        raise BadArgument(f"无法解析的性别: {value}，只能是 MALE 或 FEMALE")


# ========================================
# 增
# ========================================

@router.post("", response_model=ApiResponse[StudentResponse], status_code=status.HTTP_201_CREATED)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """
    添加新学生

    邮箱已存在时返回 409
    """
    student = await StudentService.create(db, payload)
    return _ok("学生添加成功", StudentResponse.model_validate(student))


@router.post("/batch", response_model=ApiResponse[List[StudentResponse]], status_code=status.HTTP_201_CREATED)
async def create_students_batch(
    payload: List[StudentCreate],
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """
    批量添加学生

    全部成功或全部失败：任意一条邮箱冲突时整批拒绝
    """
    students = await StudentService.create_many(db, payload)
    return _ok(f"批量添加成功，共添加 {len(students)} 名学生", _students(students))


# ========================================
# 查
# ========================================

@router.get("", response_model=ApiResponse[List[StudentResponse]])
async def list_students(db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """获取所有学生"""
    students = await StudentService.list_all(db)
    return _ok("获取学生列表成功", _students(students))


@router.get("/page", response_model=ApiResponse[StudentPage])
async def list_students_paged(
    page: int = Query(0, ge=0, description="页码（从0开始）"),
    size: int = Query(
        settings.STUDENT_PAGE_SIZE_DEFAULT, ge=1, le=settings.STUDENT_PAGE_SIZE_MAX, description="每页数量"
    ),
    sort_by: str = Query("id", alias="sortBy", description="排序字段"),
    sort_direction: str = Query("ASC", alias="sortDirection", description="排序方向 ASC/DESC"),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """
    分页查询学生

    示例：GET /api/students/page?page=0&size=10&sortBy=name&sortDirection=ASC
    """
    result = await StudentService.list_paged(
        db, page=page, size=size, sort_by=sort_by, sort_direction=sort_direction
    )
    result["items"] = _students(result["items"])
    return _ok("分页查询成功", StudentPage(**result))


@router.get("/email/{email}", response_model=ApiResponse[StudentResponse])
async def get_student_by_email(email: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """根据邮箱查找学生，不存在时返回 404"""
    student = await StudentService.find_by_email(db, email)
    if not student:
        raise NotFound(f"未找到邮箱为 {email} 的学生")
    return _ok("根据邮箱查找学生成功", StudentResponse.model_validate(student))


@router.get("/class/{class_name}/major/{major}", response_model=ApiResponse[List[StudentResponse]])
async def get_students_by_class_and_major(
    class_name: str,
    major: str,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    students = await StudentService.find_by_class_and_major(db, class_name, major)
    return _ok(f"根据班级和专业查找学生成功，共找到 {len(students)} 名学生", _students(students))


@router.get("/class/{class_name}/sorted", response_model=ApiResponse[List[StudentResponse]])
async def get_class_students_sorted(class_name: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """班级学生，按姓名升序"""
    students = await StudentService.list_class_ordered_by_name(db, class_name)
    return _ok(f"获取班级学生成功，共 {len(students)} 名学生", _students(students))


@router.get("/class/{class_name}", response_model=ApiResponse[List[StudentResponse]])
async def get_students_by_class_name(class_name: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    students = await StudentService.find_by_class_name(db, class_name)
    return _ok(f"根据班级查找学生成功，共找到 {len(students)} 名学生", _students(students))


@router.get("/major/{major}/oldest", response_model=ApiResponse[List[StudentResponse]])
async def get_oldest_students_by_major(major: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """某专业年龄最大的学生"""
    students = await StudentService.find_oldest_by_major(db, major)
    return _ok(f"查找专业年龄最大的学生成功，共找到 {len(students)} 名学生", _students(students))


@router.get("/major/{major}", response_model=ApiResponse[List[StudentResponse]])
async def get_students_by_major(major: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    students = await StudentService.find_by_major(db, major)
    return _ok(f"根据专业查找学生成功，共找到 {len(students)} 名学生", _students(students))


@router.get("/gender/{gender}", response_model=ApiResponse[List[StudentResponse]])
async def get_students_by_gender(gender: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """
    根据性别查找学生

    gender 只能是 MALE / FEMALE，无法解析时返回 400
    """
    parsed = _parse_gender(gender)
    students = await StudentService.find_by_gender(db, parsed)
    return _ok(
        f"根据性别（{parsed.display_name}）查找学生成功，共找到 {len(students)} 名学生", _students(students)
    )


@router.get("/age-range", response_model=ApiResponse[List[StudentResponse]])
async def get_students_by_age_range(
    min_age: int = Query(..., alias="minAge", description="最小年龄"),
    max_age: int = Query(..., alias="maxAge", description="最大年龄"),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    students = await StudentService.find_by_age_range(db, min_age, max_age)
    return _ok(f"根据年龄范围查找学生成功，共找到 {len(students)} 名学生", _students(students))


@router.get("/search", response_model=ApiResponse[List[StudentResponse]])
async def search_students(
    keyword: str = Query(..., description="搜索关键字（匹配姓名或邮箱）"),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    students = await StudentService.search_by_keyword(db, keyword)
    return _ok(f"搜索学生成功，共找到 {len(students)} 名学生", _students(students))


@router.get("/name-search", response_model=ApiResponse[List[StudentResponse]])
async def search_students_by_name(
    name: str = Query(..., description="姓名关键字"),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    students = await StudentService.find_by_name_contains(db, name)
    return _ok(f"根据姓名搜索学生成功，共找到 {len(students)} 名学生", _students(students))


@router.get("/created-between", response_model=ApiResponse[List[StudentResponse]])
async def get_students_created_between(
    start_date: date = Query(..., alias="startDate", description="开始日期 YYYY-MM-DD"),
    end_date: date = Query(..., alias="endDate", description="结束日期 YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """按创建日期范围查找学生，最新创建的在前"""
    students = await StudentService.find_by_create_time_range(db, start_date, end_date)
    return _ok(f"根据创建日期查找学生成功，共找到 {len(students)} 名学生", _students(students))


# ========================================
# 统计
# ========================================

@router.get("/count", response_model=ApiResponse[int])
async def get_student_count(db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    return _ok("获取学生总数成功", await StudentService.count(db))


@router.get("/count/class/{class_name}", response_model=ApiResponse[int])
async def get_student_count_by_class(class_name: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    return _ok("获取班级学生数量成功", await StudentService.count_by_class_name(db, class_name))


@router.get("/count/major/{major}", response_model=ApiResponse[int])
async def get_student_count_by_major(major: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    return _ok("获取专业学生数量成功", await StudentService.count_by_major(db, major))


@router.get("/statistics/major", response_model=ApiResponse[List[MajorCount]])
async def get_major_statistics(db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """各专业学生人数"""
    return _ok("获取专业统计成功", await StudentService.count_grouped_by_major(db))


@router.get("/email-exists", response_model=ApiResponse[bool])
async def check_email_exists(
    email: str = Query(..., description="邮箱地址"),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    exists = await StudentService.email_exists(db, email)
    return _ok("邮箱已存在" if exists else "邮箱可用", exists)


@router.get("/exists/{student_id}", response_model=ApiResponse[bool])
async def check_student_exists(student_id: int, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    exists = await StudentService.record_exists(db, student_id)
    return _ok("学生存在" if exists else "学生不存在", exists)


# ========================================
# 删（批量删除需在 /{student_id} 之前注册）
# ========================================

@router.delete("/batch", response_model=ApiResponse[int])
async def delete_students_batch(
    ids: List[int] = Body(..., description="要删除的学生ID列表"),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """
    批量删除学生

    不存在的ID会被跳过，data 为实际删除的数量
    """
    deleted = await StudentService.delete_many(db, ids)
    return _ok(f"批量删除成功，共删除 {deleted} 名学生", deleted)


# ========================================
# 按ID操作
# ========================================

@router.get("/{student_id}", response_model=ApiResponse[StudentResponse])
async def get_student(student_id: int, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """根据ID获取学生"""
    student = await StudentService.get_by_id(db, student_id)
    return _ok("获取学生信息成功", StudentResponse.model_validate(student))


@router.put("/{student_id}", response_model=ApiResponse[StudentResponse])
async def update_student(
    student_id: int,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """
    更新学生信息（部分更新）

    只修改请求体中出现的字段，例如 {"age": 21} 只会改年龄
    """
    student = await StudentService.update(db, student_id, payload.changes())
    return _ok("学生信息更新成功", StudentResponse.model_validate(student))


@router.delete("/{student_id}", response_model=ApiResponse[Optional[Any]])
async def delete_student(student_id: int, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    await StudentService.delete(db, student_id)
    return _ok("学生删除成功")
