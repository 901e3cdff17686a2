"""
对运行中的服务做一次学生接口冒烟测试

    BASE_URL=http://localhost:8080/api python scripts/smoke_students.py
"""

import os
import time
from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class Env:
    base_url: str


def env() -> Env:
    return Env(base_url=os.environ.get("BASE_URL", "http://localhost:8080/api").rstrip("/"))


def ok(msg: str):
    print(f"[OK] {msg}", flush=True)


def expect(r: httpx.Response, status_code: int):
    if r.status_code != status_code:
        raise RuntimeError(f"{r.request.method} {r.request.url} -> {r.status_code}, expected {status_code}: {r.text}")
    return r.json()


def students_crud(client: httpx.Client, url: str):
    stamp = int(time.time())
    email = f"smoke-{stamp}@example.com"
    payload = {
        "name": "Smoke",
        "age": 20,
        "gender": "MALE",
        "major": "CS",
        "className": f"SMOKE-{stamp}",
        "email": email,
    }
    body = expect(client.post(f"{url}/students", json=payload, timeout=30), 201)
    student_id = body["data"]["id"]
    ok(f"students create id={student_id}")

    expect(client.post(f"{url}/students", json=payload, timeout=30), 409)
    ok("students duplicate email -> 409")

    expect(client.get(f"{url}/students/{student_id}", timeout=30), 200)
    ok("students get")

    expect(client.get(f"{url}/students/page", params={"page": 0, "size": 5, "sortBy": "name"}, timeout=30), 200)
    ok("students page")

    body = expect(client.get(f"{url}/students/search", params={"keyword": f"smoke-{stamp}"}, timeout=30), 200)
    if len(body["data"]) != 1:
        raise RuntimeError(f"search expected 1 result: {body}")
    ok("students search")

    body = expect(client.put(f"{url}/students/{student_id}", json={"age": 21}, timeout=30), 200)
    if body["data"]["age"] != 21:
        raise RuntimeError(f"update did not apply: {body}")
    ok("students update")

    body = expect(client.request("DELETE", f"{url}/students/batch", json=[student_id, -1], timeout=30), 200)
    if body["data"] != 1:
        raise RuntimeError(f"batch delete expected 1: {body}")
    ok("students batch delete")

    expect(client.get(f"{url}/students/{student_id}", timeout=30), 404)
    ok("students get after delete -> 404")


def main() -> int:
    e = env()
    with httpx.Client(follow_redirects=True) as client:
        students_crud(client, e.base_url)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
