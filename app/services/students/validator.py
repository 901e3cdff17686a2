"""
学生字段校验

纯函数：输入候选记录（字段名 -> 值），返回 字段名 -> 错误信息 的映射，
映射为空表示校验通过。不修改输入，也不访问数据库。
"""

from typing import Any, Dict, Mapping

from email_validator import EmailNotValidError, validate_email

from app.core.exceptions import ValidationFailure
from app.models.student import Gender

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
AGE_MIN = 15
AGE_MAX = 30
MAJOR_MAX_LENGTH = 100
CLASS_NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 100

# 模型字段名 -> 对外（JSON）字段名
API_FIELD_NAMES = {
    "name": "name",
    "age": "age",
    "gender": "gender",
    "major": "major",
    "class_name": "className",
    "email": "email",
}

REQUIRED_FIELDS = tuple(API_FIELD_NAMES)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_name(value: Any) -> str:
    if _is_blank(value):
        return "学生姓名不能为空"
    if not isinstance(value, str) or not NAME_MIN_LENGTH <= len(value.strip()) <= NAME_MAX_LENGTH:
        return f"学生姓名长度必须在{NAME_MIN_LENGTH}-{NAME_MAX_LENGTH}个字符之间"
    return ""


def _check_age(value: Any) -> str:
    if value is None:
        return "年龄不能为空"
    if isinstance(value, bool) or not isinstance(value, int):
        return "年龄必须是整数"
    if value < AGE_MIN:
        return f"年龄不能小于{AGE_MIN}岁"
    if value > AGE_MAX:
        return f"年龄不能大于{AGE_MAX}岁"
    return ""


def _check_gender(value: Any) -> str:
    if value is None:
        return "性别不能为空"
    if isinstance(value, Gender) or value in Gender.__members__:
        return ""
    return "性别必须是 MALE 或 FEMALE"


def _check_major(value: Any) -> str:
    if _is_blank(value):
        return "专业不能为空"
    if not isinstance(value, str) or len(value) > MAJOR_MAX_LENGTH:
        return f"专业名称不能超过{MAJOR_MAX_LENGTH}个字符"
    return ""


def _check_class_name(value: Any) -> str:
    if _is_blank(value):
        return "班级不能为空"
    if not isinstance(value, str) or len(value) > CLASS_NAME_MAX_LENGTH:
        return f"班级名称不能超过{CLASS_NAME_MAX_LENGTH}个字符"
    return ""


def _check_email(value: Any) -> str:
    if _is_blank(value):
        return "邮箱不能为空"
    if not isinstance(value, str):
        return "邮箱格式不正确"
    if len(value) > EMAIL_MAX_LENGTH:
        return f"邮箱长度不能超过{EMAIL_MAX_LENGTH}个字符"
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return "邮箱格式不正确"
    return ""


_CHECKS = {
    "name": _check_name,
    "age": _check_age,
    "gender": _check_gender,
    "major": _check_major,
    "class_name": _check_class_name,
    "email": _check_email,
}


def validate_student(data: Mapping[str, Any], partial: bool = False) -> Dict[str, str]:
    """
    校验学生字段

    partial=False（创建）：所有字段都必须出现并满足约束；
    partial=True（部分更新）：只校验出现在 data 中的字段，显式传 None 视为清空，同样报错。
    """
    errors: Dict[str, str] = {}
    for field in REQUIRED_FIELDS:
        if partial and field not in data:
            continue
        message = _CHECKS[field](data.get(field))
        if message:
            errors[API_FIELD_NAMES[field]] = message
    return errors


def ensure_valid(data: Mapping[str, Any], partial: bool = False) -> None:
    """校验失败时抛出 ValidationFailure"""
    errors = validate_student(data, partial=partial)
    if errors:
        raise ValidationFailure(errors)
