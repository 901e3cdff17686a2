import os

# 测试使用内存 SQLite，必须在导入应用之前设置
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DEBUG"] = "true"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from main import app

BASE = "/api/students"


@pytest.fixture
def client():
    # 每个测试一个新客户端：lifespan 建表，退出时释放连接，内存库随之清空
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_payload():
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {
            "name": f"Student{counter['n']}",
            "age": 20,
            "gender": "MALE",
            "major": "CS",
            "className": "CS-1",
            "email": f"s{counter['n']}@example.com",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def create_student(client, make_payload):
    def _create(**overrides):
        r = client.post(BASE, json=make_payload(**overrides))
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _create
