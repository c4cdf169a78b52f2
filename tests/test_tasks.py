def test_create_and_list_tasks_newest_first(client, accounts):
    student = accounts.create("sam", "student")
    client.post("/api/v1/tasks", json={"title": "Read chapter 3"}, headers=student)
    client.post("/api/v1/tasks", json={"title": "  Math worksheet ", "due_date": "2026-11-02"}, headers=student)

    tasks = client.get("/api/v1/tasks", headers=student).json()
    assert [t["title"] for t in tasks] == ["Math worksheet", "Read chapter 3"]
    assert tasks[0]["due_date"] == "2026-11-02"
    assert not any(t["completed"] for t in tasks)


def test_blank_title_is_rejected_before_the_store(client, accounts, db):
    student = accounts.create("sam", "student")
    response = client.post("/api/v1/tasks", json={"title": "  "}, headers=student)
    assert response.status_code == 422
    assert "Please enter a task title" in response.text
    assert db.rows("tasks") == []


def test_toggle_twice_restores_state(client, accounts):
    student = accounts.create("sam", "student")
    task_id = client.post("/api/v1/tasks", json={"title": "Practice piano"}, headers=student).json()["id"]

    first = client.post(f"/api/v1/tasks/{task_id}/toggle", headers=student)
    assert first.json()["completed"] is True
    second = client.post(f"/api/v1/tasks/{task_id}/toggle", headers=student)
    assert second.json()["completed"] is False


def test_delete_removes_task_from_list(client, accounts):
    student = accounts.create("sam", "student")
    keep = client.post("/api/v1/tasks", json={"title": "Keep"}, headers=student).json()["id"]
    drop = client.post("/api/v1/tasks", json={"title": "Drop"}, headers=student).json()["id"]

    assert client.delete(f"/api/v1/tasks/{drop}", headers=student).status_code == 204
    assert [t["id"] for t in client.get("/api/v1/tasks", headers=student).json()] == [keep]


def test_tasks_are_private_to_their_owner(client, accounts):
    sam = accounts.create("sam", "student")
    sue = accounts.create("sue", "student")
    task_id = client.post("/api/v1/tasks", json={"title": "Diary"}, headers=sam).json()["id"]

    assert client.get("/api/v1/tasks", headers=sue).json() == []
    assert client.post(f"/api/v1/tasks/{task_id}/toggle", headers=sue).status_code == 404
    assert client.put(f"/api/v1/tasks/{task_id}", json={"title": "Mine"}, headers=sue).status_code == 404
    assert client.delete(f"/api/v1/tasks/{task_id}", headers=sue).status_code == 404


def test_update_task_fields(client, accounts):
    student = accounts.create("sam", "student")
    task_id = client.post("/api/v1/tasks", json={"title": "Essay"}, headers=student).json()["id"]

    updated = client.put(f"/api/v1/tasks/{task_id}", json={"description": "500 words", "completed": True}, headers=student)
    assert updated.status_code == 200
    assert updated.json()["description"] == "500 words"
    assert updated.json()["completed"] is True
    assert client.put(f"/api/v1/tasks/{task_id}", json={"title": " "}, headers=student).status_code == 422


def test_null_for_required_task_fields_is_rejected_before_the_store(client, accounts, db):
    student = accounts.create("sam", "student")
    task_id = client.post("/api/v1/tasks", json={"title": "Essay"}, headers=student).json()["id"]

    for body in ({"completed": None}, {"title": None}):
        assert client.put(f"/api/v1/tasks/{task_id}", json=body, headers=student).status_code == 422
    row = db.rows("tasks", id=task_id)[0]
    assert row["completed"] is False
    assert row["title"] == "Essay"

    cleared = client.put(f"/api/v1/tasks/{task_id}", json={"due_date": None}, headers=student)
    assert cleared.status_code == 200
