import pytest

from tests.conftest import PASSWORD

GUARDED = ["/dashboard", "/dashboard/classrooms", "/dashboard/messages", "/dashboard/calendar"]


@pytest.mark.parametrize("path", GUARDED)
def test_guarded_pages_redirect_anonymous_to_auth(client, path):
    response = client.get(path, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/auth"


def test_stale_cookie_counts_as_anonymous(client):
    client.cookies.set("access_token", "expired")
    response = client.get("/dashboard", follow_redirects=False)
    assert response.status_code == 303


def test_landing_and_auth_pages(client, accounts):
    assert client.get("/").json()["page"] == "landing"
    auth = client.get("/auth").json()
    assert auth["roles"] == ["teacher", "student", "parent"]

    student = accounts.create("sam", "student")
    for path in ("/", "/auth"):
        response = client.get(path, headers=student, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"


def test_login_cookie_opens_dashboard(client, accounts, classroom):
    client.post("/api/v1/auth/login", json={"email": "sam@example.com", "password": PASSWORD})

    page = client.get("/dashboard")
    assert page.status_code == 200
    body = page.json()
    assert body["user"]["id"] == accounts.ids["sam"]
    assert body["dashboard"]["role"] == "student"


def test_classrooms_and_messages_pages(client, accounts, classroom):
    tina = accounts.headers("tina")
    client.post("/api/v1/messages", json={
        "message": "Welcome!", "message_type": "announcement", "classroom_id": classroom["id"]
    }, headers=tina)

    classrooms = client.get("/dashboard/classrooms", headers=accounts.headers("pat")).json()
    assert [c["name"] for c in classrooms["classrooms"]] == ["Grade 5 Math"]
    messages = client.get("/dashboard/messages", headers=accounts.headers("pat")).json()
    assert [m["message"] for m in messages["messages"]] == ["Welcome!"]
    assert [c["id"] for c in messages["classrooms"]] == [classroom["id"]]


def test_calendar_page(client, accounts):
    teacher = accounts.create("tina", "teacher")
    client.post("/api/v1/events", json={"title": "Quiz", "event_date": "2026-11-05T09:00:00Z", "event_type": "exam"}, headers=teacher)
    client.post("/api/v1/events", json={"title": "Trip", "event_date": "2026-12-01T09:00:00Z", "event_type": "other"}, headers=teacher)
    client.post("/api/v1/tasks", json={"title": "Mark quizzes"}, headers=teacher)

    page = client.get("/dashboard/calendar", params={"month": "2026-11"}, headers=teacher).json()
    assert page["month"] == "2026-11"
    assert [e["title"] for e in page["events"]] == ["Quiz", "Trip"]
    assert [e["title"] for e in page["month_events"]] == ["Quiz"]
    assert [t["title"] for t in page["tasks"]] == ["Mark quizzes"]
    assert client.get("/dashboard/calendar", params={"month": "bad"}, headers=teacher).status_code == 422


def test_unknown_path_is_not_found(client):
    response = client.get("/no/such/page")
    assert response.status_code == 404
    assert response.json() == {"page": "not_found", "path": "/no/such/page", "detail": "Page not found"}


def test_health_endpoints(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/ready").json() == {"status": "ready"}
    assert client.get("/health").headers["X-Frame-Options"] == "DENY"
