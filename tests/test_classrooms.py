import re

import pytest
from fastapi import HTTPException

from app.modules.classrooms.codes import generate_classroom_code, normalize_classroom_code
from app.modules.classrooms.service import ALREADY_JOINED, CLASSROOM_NOT_FOUND


def test_generated_code_is_six_uppercase_alphanumerics():
    for _ in range(50):
        assert re.fullmatch(r"[A-Z0-9]{6}", generate_classroom_code())


def test_normalize_code_trims_and_uppercases():
    assert normalize_classroom_code("  ab12cd ") == "AB12CD"


def test_create_classroom_enrols_creator(client, accounts, db):
    teacher = accounts.create("tina", "teacher")
    response = client.post("/api/v1/classrooms", json={"name": "  Biology  ", "subject": ""}, headers=teacher)

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Biology"
    assert body["subject"] is None
    assert body["member_count"] == 1
    assert re.fullmatch(r"[A-Z0-9]{6}", body["classroom_code"])
    members = db.rows("classroom_members", classroom_id=body["id"])
    assert [(m["user_id"], m["role"]) for m in members] == [(accounts.ids["tina"], "teacher")]


def test_create_classroom_requires_name(client, accounts, db):
    teacher = accounts.create("tina", "teacher")
    response = client.post("/api/v1/classrooms", json={"name": "   "}, headers=teacher)
    assert response.status_code == 422
    assert db.rows("classrooms") == []


def test_students_cannot_create_classrooms(client, accounts):
    student = accounts.create("sam", "student")
    response = client.post("/api/v1/classrooms", json={"name": "Biology"}, headers=student)
    assert response.status_code == 403


def test_failed_membership_insert_removes_classroom(client, accounts, db):
    teacher = accounts.create("tina", "teacher")
    db.failures.add(("classroom_members", "insert"))

    response = client.post("/api/v1/classrooms", json={"name": "Biology"}, headers=teacher)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to create classroom"
    assert db.rows("classrooms") == []


def test_join_unknown_code_is_not_found_and_writes_nothing(client, accounts, db):
    student = accounts.create("sam", "student")
    response = client.post("/api/v1/classrooms/join", json={"classroom_code": "ZZZZZZ"}, headers=student)

    assert response.status_code == 404
    assert response.json()["detail"] == CLASSROOM_NOT_FOUND
    assert db.rows("classroom_members") == []


def test_join_accepts_lowercase_code(client, accounts):
    teacher = accounts.create("tina", "teacher")
    student = accounts.create("sam", "student")
    code = client.post("/api/v1/classrooms", json={"name": "Biology"}, headers=teacher).json()["classroom_code"]

    response = client.post("/api/v1/classrooms/join", json={"classroom_code": f" {code.lower()} "}, headers=student)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == 'Successfully joined "Biology"'
    assert body["membership"]["role"] == "student"
    assert body["classroom"]["member_count"] == 2


def test_join_create_then_rejoin_scenario(client, accounts, db):
    teacher = accounts.create("tina", "teacher")
    student = accounts.create("sam", "student")
    code = client.post("/api/v1/classrooms", json={"name": "Grade 5 Math"}, headers=teacher).json()["classroom_code"]

    first = client.post("/api/v1/classrooms/join", json={"classroom_code": code}, headers=student)
    assert first.status_code == 201
    listed = client.get("/api/v1/classrooms", headers=student).json()
    assert [c["name"] for c in listed] == ["Grade 5 Math"]

    again = client.post("/api/v1/classrooms/join", json={"classroom_code": code}, headers=student)
    assert again.status_code == 409
    assert again.json()["detail"] == ALREADY_JOINED
    assert len(db.rows("classroom_members", user_id=accounts.ids["sam"])) == 1
    assert client.get("/api/v1/classrooms", headers=student).json() == listed


def test_unique_violation_on_insert_maps_to_conflict(client, accounts, db, monkeypatch):
    from app.modules.classrooms.service import ClassroomService
    from app.core.session import session_registry

    teacher = accounts.create("tina", "teacher")
    accounts.create("sam", "student")
    code = client.post("/api/v1/classrooms", json={"name": "Biology"}, headers=teacher).json()["classroom_code"]
    classroom = db.rows("classrooms")[0]
    # membership written between the pre-check and the insert
    original_table = db.table
    checks = {"done": False}

    def racing_table(name):
        query = original_table(name)
        if name == "classroom_members" and not checks["done"]:
            checks["done"] = True
            db.tables["classroom_members"].append({
                "id": "race", "classroom_id": classroom["id"],
                "user_id": accounts.ids["sam"], "role": "student", "joined_at": db.now()
            })
            # pre-check sees nothing, insert hits the constraint
            query.eq("user_id", "__nobody__")
        return query

    monkeypatch.setattr(db, "table", racing_table)
    session = session_registry.get(accounts.tokens["sam"])
    with pytest.raises(HTTPException) as exc:
        ClassroomService(db).join_classroom(code, session)
    assert exc.value.status_code == 409
    assert exc.value.detail == ALREADY_JOINED


def test_teacher_lists_all_classrooms_others_only_memberships(client, accounts):
    tina = accounts.create("tina", "teacher")
    tom = accounts.create("tom", "teacher")
    student = accounts.create("sam", "student")
    client.post("/api/v1/classrooms", json={"name": "Biology"}, headers=tina)
    code = client.post("/api/v1/classrooms", json={"name": "History"}, headers=tom).json()["classroom_code"]
    client.post("/api/v1/classrooms/join", json={"classroom_code": code}, headers=student)

    assert [c["name"] for c in client.get("/api/v1/classrooms", headers=tina).json()] == ["History", "Biology"]
    assert [c["name"] for c in client.get("/api/v1/classrooms", headers=student).json()] == ["History"]


def test_members_and_detail_require_access(client, accounts, classroom):
    outsider = accounts.create("olga", "student")
    student = accounts.headers("sam")

    members = client.get(f"/api/v1/classrooms/{classroom['id']}/members", headers=student)
    assert members.status_code == 200
    assert {m["role"] for m in members.json()} == {"teacher", "student", "parent"}
    assert client.get(f"/api/v1/classrooms/{classroom['id']}", headers=outsider).status_code == 403
    assert client.get("/api/v1/classrooms/missing", headers=student).status_code == 404


def test_only_creator_updates_classroom(client, accounts, classroom):
    other = accounts.create("tom", "teacher")
    url = f"/api/v1/classrooms/{classroom['id']}"

    assert client.put(url, json={"name": "Algebra"}, headers=other).status_code == 403
    updated = client.put(url, json={"name": "Algebra"}, headers=accounts.headers("tina"))
    assert updated.status_code == 200
    assert updated.json()["name"] == "Algebra"
    assert updated.json()["member_count"] == 3
