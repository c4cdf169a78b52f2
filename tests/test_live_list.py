from app.modules.realtime.feed import extract_record
from app.modules.realtime.reconcile import LiveList


def _row(id, at):
    return {"id": id, "created_at": at}


def test_snapshot_replaces_contents():
    live = LiveList(sort_key=lambda r: r["created_at"])
    assert live.apply_snapshot(live.next_generation(), [_row("b", 2), _row("a", 1)])
    assert [r["id"] for r in live.items()] == ["a", "b"]


def test_stale_snapshot_is_dropped():
    live = LiveList()
    older = live.next_generation()
    newer = live.next_generation()

    assert live.apply_snapshot(newer, [_row("new", 2)])
    assert not live.apply_snapshot(older, [_row("old", 1)])
    assert [r["id"] for r in live.items()] == ["new"]
    assert live.generation == newer


def test_merge_is_idempotent_by_primary_key():
    live = LiveList()
    assert live.merge(_row("a", 1))
    assert not live.merge(_row("a", 1))
    assert live.merge({"id": "a", "created_at": 1, "message": "edited"})
    assert len(live) == 1


def test_merge_during_fetch_survives_that_fetch():
    live = LiveList(sort_key=lambda r: r["created_at"])
    live.apply_snapshot(live.next_generation(), [_row("a", 1)])

    in_flight = live.next_generation()
    live.merge(_row("b", 2))
    # the fetch started before b was inserted
    live.apply_snapshot(in_flight, [_row("a", 1)])

    assert [r["id"] for r in live.items()] == ["a", "b"]


def test_merge_before_fetch_is_superseded_by_it():
    live = LiveList()
    live.merge(_row("ghost", 1))
    live.apply_snapshot(live.next_generation(), [_row("a", 1)])
    assert "ghost" not in live


def test_items_sorted_and_limited():
    live = LiveList(sort_key=lambda r: r["created_at"], reverse=True, limit=2)
    for i in range(4):
        live.merge(_row(str(i), i))
    assert [r["id"] for r in live.items()] == ["3", "2"]


def test_remove():
    live = LiveList()
    live.merge(_row("a", 1))
    assert live.remove("a")
    assert not live.remove("a")


def test_extract_record_handles_both_payload_shapes():
    record = {"id": "m1"}
    assert extract_record({"data": {"type": "INSERT", "record": record}}) == record
    assert extract_record({"eventType": "INSERT", "new": record}) == record
    assert extract_record({"data": {"type": "DELETE"}}) is None
    assert extract_record(None) is None
