def test_get_and_update_my_profile(client, accounts):
    student = accounts.create("sam", "student")

    profile = client.get("/api/v1/profiles/me", headers=student)
    assert profile.status_code == 200
    assert profile.json()["email"] == "sam@example.com"
    assert profile.json()["role"] == "student"

    updated = client.put("/api/v1/profiles/me", json={"first_name": " Samuel "}, headers=student)
    assert updated.status_code == 200
    assert updated.json()["first_name"] == "Samuel"
    assert updated.json()["last_name"] == "Tester"


def test_profile_summary_visibility(client, accounts, classroom):
    outsider = accounts.create("olga", "student")
    sam = accounts.ids["sam"]

    assert client.get(f"/api/v1/profiles/{sam}", headers=accounts.headers("pat")).status_code == 200
    assert client.get(f"/api/v1/profiles/{sam}", headers=accounts.headers("tina")).status_code == 200
    assert client.get(f"/api/v1/profiles/{sam}", headers=outsider).status_code == 403
    teacher = client.get(f"/api/v1/profiles/{accounts.ids['tina']}", headers=outsider)
    assert teacher.status_code == 200
    assert teacher.json()["role"] == "teacher"
    assert client.get("/api/v1/profiles/unknown", headers=outsider).status_code == 404
