from app.modules.messages.service import is_message_visible


def _announce(client, headers, classroom_id, text):
    return client.post("/api/v1/messages", json={
        "message": text, "message_type": "announcement", "classroom_id": classroom_id
    }, headers=headers)


def _private(client, headers, receiver_id, text, classroom_id=None):
    return client.post("/api/v1/messages", json={
        "message": text, "message_type": "private", "receiver_id": receiver_id, "classroom_id": classroom_id
    }, headers=headers)


def test_message_visibility_rules():
    announcement = {"sender_id": "t", "message_type": "announcement", "classroom_id": "c1"}
    private = {"sender_id": "s", "receiver_id": "t", "message_type": "private", "classroom_id": "c1"}

    assert is_message_visible(announcement, "p", ["c1"])
    assert not is_message_visible(announcement, "p", ["c2"])
    assert is_message_visible(private, "s", [])
    assert is_message_visible(private, "t", [])
    assert not is_message_visible(private, "p", ["c1"])


def test_announcement_reaches_classroom_members_only(client, accounts, classroom):
    outsider = accounts.create("olga", "student")
    sent = _announce(client, accounts.headers("tina"), classroom["id"], "Field trip on Friday")

    assert sent.status_code == 201
    body = sent.json()
    assert body["receiver_id"] is None
    assert body["sender"]["first_name"] == "Tina"
    assert body["classroom_name"] == "Grade 5 Math"
    for name in ("sam", "pat"):
        feed = client.get("/api/v1/messages", headers=accounts.headers(name)).json()
        assert [m["id"] for m in feed] == [body["id"]]
    assert client.get("/api/v1/messages", headers=outsider).json() == []


def test_private_message_visible_to_its_two_parties(client, accounts, classroom):
    sent = _private(client, accounts.headers("sam"), accounts.ids["tina"], "Can I hand in late?")
    assert sent.status_code == 201
    message_id = sent.json()["id"]

    assert [m["id"] for m in client.get("/api/v1/messages", headers=accounts.headers("tina")).json()] == [message_id]
    assert [m["id"] for m in client.get("/api/v1/messages", headers=accounts.headers("sam")).json()] == [message_id]
    assert client.get("/api/v1/messages", headers=accounts.headers("pat")).json() == []


def test_feed_is_newest_first(client, accounts, classroom):
    tina = accounts.headers("tina")
    first = _announce(client, tina, classroom["id"], "first").json()["id"]
    second = _private(client, accounts.headers("sam"), accounts.ids["tina"], "second").json()["id"]
    third = _announce(client, tina, classroom["id"], "third").json()["id"]

    feed = client.get("/api/v1/messages", headers=accounts.headers("sam")).json()
    assert [m["id"] for m in feed] == [third, second, first]


def test_send_validation(client, accounts, classroom):
    sam = accounts.headers("sam")
    assert _private(client, sam, accounts.ids["sam"], "hi me").status_code == 400
    assert _private(client, sam, "nobody", "hello?").status_code == 404
    assert client.post("/api/v1/messages", json={"message": "hi", "message_type": "announcement"}, headers=sam).status_code == 422
    assert client.post("/api/v1/messages", json={"message": "hi", "message_type": "private"}, headers=sam).status_code == 422
    assert _announce(client, sam, classroom["id"], "   ").status_code == 422


def test_non_member_cannot_post_to_classroom(client, accounts, classroom):
    outsider = accounts.create("olga", "student")
    assert _announce(client, outsider, classroom["id"], "hello").status_code == 403


def test_classroom_thread_oldest_first_hides_others_private(client, accounts, classroom):
    tina = accounts.headers("tina")
    hello = _announce(client, tina, classroom["id"], "Welcome").json()["id"]
    private = _private(client, accounts.headers("sam"), accounts.ids["tina"], "question", classroom_id=classroom["id"]).json()["id"]
    bye = _announce(client, tina, classroom["id"], "See you").json()["id"]

    url = f"/api/v1/messages/classrooms/{classroom['id']}"
    assert [m["id"] for m in client.get(url, headers=accounts.headers("sam")).json()] == [hello, private, bye]
    assert [m["id"] for m in client.get(url, headers=accounts.headers("pat")).json()] == [hello, bye]


def test_recipients(client, accounts, classroom):
    student_view = client.get("/api/v1/messages/recipients", headers=accounts.headers("sam")).json()
    assert [(r["user_id"], r["role"]) for r in student_view] == [(accounts.ids["tina"], "teacher")]

    teacher_view = client.get(
        "/api/v1/messages/recipients", params={"classroom_id": classroom["id"]}, headers=accounts.headers("tina")
    ).json()
    assert {r["user_id"] for r in teacher_view} == {accounts.ids["sam"], accounts.ids["pat"]}
    assert client.get("/api/v1/messages/recipients", headers=accounts.headers("tina")).json() == []
