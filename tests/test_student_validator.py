from app.models.student import Gender
from app.services.students.validator import validate_student


def _valid(**overrides):
    data = {
        "name": "Zhang",
        "age": 20,
        "gender": Gender.MALE,
        "major": "CS",
        "class_name": "CS-1",
        "email": "z@x.com",
    }
    data.update(overrides)
    return data


def test_valid_record_has_no_errors():
    assert validate_student(_valid()) == {}


def test_create_requires_every_field():
    errors = validate_student({})
    assert set(errors) == {"name", "age", "gender", "major", "className", "email"}
    assert errors["name"] == "学生姓名不能为空"
    assert errors["age"] == "年龄不能为空"
    assert errors["gender"] == "性别不能为空"


def test_age_boundaries():
    assert validate_student(_valid(age=15)) == {}
    assert validate_student(_valid(age=30)) == {}
    assert validate_student(_valid(age=14)) == {"age": "年龄不能小于15岁"}
    assert validate_student(_valid(age=31)) == {"age": "年龄不能大于30岁"}


def test_age_rejects_bool():
    assert "age" in validate_student(_valid(age=True))


def test_name_length_and_blank():
    assert validate_student(_valid(name="Z")) == {"name": "学生姓名长度必须在2-50个字符之间"}
    assert validate_student(_valid(name="Z" * 51)) == {"name": "学生姓名长度必须在2-50个字符之间"}
    assert validate_student(_valid(name="Zh")) == {}
    assert validate_student(_valid(name="   ")) == {"name": "学生姓名不能为空"}


def test_major_and_class_name_limits():
    assert validate_student(_valid(major="M" * 100)) == {}
    assert validate_student(_valid(major="M" * 101)) == {"major": "专业名称不能超过100个字符"}
    assert validate_student(_valid(class_name="C" * 51)) == {"className": "班级名称不能超过50个字符"}
    assert validate_student(_valid(class_name="")) == {"className": "班级不能为空"}


def test_email_shape_and_length():
    assert validate_student(_valid(email="not-an-email")) == {"email": "邮箱格式不正确"}
    assert validate_student(_valid(email="a@")) == {"email": "邮箱格式不正确"}
    long_email = "a" * 95 + "@x.com"
    assert validate_student(_valid(email=long_email)) == {"email": "邮箱长度不能超过100个字符"}


def test_gender_accepts_enum_name_string():
    assert validate_student(_valid(gender="FEMALE")) == {}
    assert validate_student(_valid(gender="OTHER")) == {"gender": "性别必须是 MALE 或 FEMALE"}


def test_partial_only_checks_supplied_fields():
    assert validate_student({"age": 21}, partial=True) == {}
    assert validate_student({"age": 40}, partial=True) == {"age": "年龄不能大于30岁"}
    assert validate_student({}, partial=True) == {}


def test_partial_explicit_null_is_rejected():
    assert validate_student({"name": None}, partial=True) == {"name": "学生姓名不能为空"}


def test_validator_does_not_mutate_input():
    data = _valid(name="  Zhang  ")
    before = dict(data)
    validate_student(data)
    assert data == before
