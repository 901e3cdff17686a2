"""
邮箱唯一约束兜底：跳过服务层预检查后，提交时的唯一约束冲突同样返回 409，且数据不变
"""

from app.models.student import Gender
from app.repositories import student as store

BASE = "/api/students"


async def _no_email(*_args, **_kwargs):
    return False


async def _no_owner(*_args, **_kwargs):
    return None


async def _no_taken(*_args, **_kwargs):
    return set()


def _count(client) -> int:
    return client.get(f"{BASE}/count").json()["data"]


def test_create_conflict_from_unique_constraint(client, create_student, make_payload, monkeypatch):
    create_student(email="dup@example.com")
    monkeypatch.setattr(store, "exists_by_email", _no_email)

    r = client.post(BASE, json=make_payload(email="dup@example.com"))
    assert r.status_code == 409
    assert "dup@example.com" in r.json()["message"]
    assert _count(client) == 1


def test_update_conflict_from_unique_constraint(client, create_student, monkeypatch):
    create_student(email="a@example.com")
    target = create_student(email="b@example.com")
    monkeypatch.setattr(store, "get_by_email", _no_owner)

    r = client.put(f"{BASE}/{target['id']}", json={"email": "a@example.com", "age": 29})
    assert r.status_code == 409
    assert r.json()["error"] == "数据冲突"

    assert client.get(f"{BASE}/{target['id']}").json()["data"] == target


def test_batch_create_conflict_from_unique_constraint(client, create_student, make_payload, monkeypatch):
    create_student(email="taken@example.com")
    monkeypatch.setattr(store, "existing_emails", _no_taken)

    batch = [make_payload(), make_payload(email="taken@example.com")]
    r = client.post(f"{BASE}/batch", json=batch)
    assert r.status_code == 409
    assert _count(client) == 1


def test_gender_display_name():
    assert Gender.MALE.display_name == "男"
    assert Gender.FEMALE.display_name == "女"
