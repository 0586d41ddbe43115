from conftest import as_user, days_ago
from fynd.models.match import Match
from fynd.modules.matches.service import recompute_all


def _wallets(make_item):
    found = make_item(
        owner="finder",
        category="found",
        title="Black leather wallet",
        description="Found a black leather wallet near the bus stop",
        item_type="wallet",
        latitude=31.77,
        longitude=35.21,
        created_at=days_ago(2),
    )
    lost = make_item(
        owner="loser",
        category="lost",
        title="Lost black wallet",
        description="Black leather wallet with cards",
        item_type="wallet",
        latitude=31.775,
        longitude=35.215,
        created_at=days_ago(0),
    )
    return lost, found


def test_compute_pair_persists_match(client, make_item):
    lost, found = _wallets(make_item)
    resp = client.post(
        "/api/v1/matches/compute",
        json={"lostItemId": lost.id, "foundItemId": found.id},
        headers=as_user("loser"),
    )
    assert resp.status_code == 200
    match = resp.get_json()["match"]
    assert match["score"] > 50
    assert match["strong"] is True
    assert set(match["reasons"]) == {"category", "keywords", "location", "date"}
    assert match["status"] == "pending"
    assert Match.query.count() == 1


def test_compute_pair_validates_categories(client, make_item):
    lost, found = _wallets(make_item)
    resp = client.post(
        "/api/v1/matches/compute",
        json={"lostItemId": found.id, "foundItemId": lost.id},
        headers=as_user("loser"),
    )
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "lostItemId"
    assert Match.query.count() == 0

    resp = client.post(
        "/api/v1/matches/compute",
        json={"lostItemId": lost.id, "foundItemId": 9999},
        headers=as_user("loser"),
    )
    assert resp.status_code == 404


def test_recompute_keeps_viewer_status(client, make_item):
    lost, found = _wallets(make_item)
    mid = client.post(
        "/api/v1/matches/compute",
        json={"lostItemId": lost.id, "foundItemId": found.id},
        headers=as_user("loser"),
    ).get_json()["match"]["id"]

    resp = client.patch(f"/api/v1/matches/{mid}", json={"status": "contacted"}, headers=as_user("loser"))
    assert resp.status_code == 200
    assert resp.get_json()["match"]["status"] == "contacted"

    resp = client.post("/api/v1/matches/recompute", headers=as_user("loser"))
    assert resp.get_json() == {"queued": False, "written": 1}
    match = Match.query.one()
    assert match.status == "contacted"


def test_pending_is_not_a_settable_status(client, make_item):
    lost, found = _wallets(make_item)
    mid = client.post(
        "/api/v1/matches/compute",
        json={"lostItemId": lost.id, "foundItemId": found.id},
        headers=as_user("loser"),
    ).get_json()["match"]["id"]
    resp = client.patch(f"/api/v1/matches/{mid}", json={"status": "pending"}, headers=as_user("loser"))
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "status"


def test_recompute_skips_weak_pairs(app, make_item):
    _wallets(make_item)
    make_item(owner="x", category="found", title="Gold ring", item_type="jewelry", created_at=days_ago(90))
    make_item(owner="y", category="lost", title="Old resolved", status="resolved")

    assert recompute_all(min_score=30) == 1
    assert Match.query.count() == 1


def test_list_matches_hides_dismissed(client, make_item):
    lost, found = _wallets(make_item)
    recompute_all(min_score=30)
    mid = Match.query.one().id

    body = client.get(f"/api/v1/matches?itemId={found.id}").get_json()
    assert [m["id"] for m in body["matches"]] == [mid]
    assert body["matches"][0]["lostItem"]["id"] == lost.id

    client.patch(f"/api/v1/matches/{mid}", json={"status": "dismissed"}, headers=as_user("finder"))
    assert client.get(f"/api/v1/matches?itemId={found.id}").get_json()["matches"] == []
    body = client.get(f"/api/v1/matches?itemId={lost.id}&includeDismissed=1").get_json()
    assert len(body["matches"]) == 1


def test_suggestions_are_not_persisted(client, make_item):
    lost, found = _wallets(make_item)
    make_item(owner="z", category="found", title="Green umbrella", created_at=days_ago(100))

    body = client.get(f"/api/v1/matches/suggestions?itemId={lost.id}").get_json()
    assert [s["item"]["id"] for s in body["suggestions"]] == [found.id]
    assert body["suggestions"][0]["strong"] is True
    assert Match.query.count() == 0

    # Works from the found side too
    body = client.get(f"/api/v1/matches/suggestions?itemId={found.id}").get_json()
    assert [s["item"]["id"] for s in body["suggestions"]] == [lost.id]


def test_recompute_can_be_queued(client, app, monkeypatch):
    from fynd.tasks.jobs import matching

    class FakeResult:
        id = "task-123"

    monkeypatch.setattr(matching.recompute_matches, "delay", lambda *a, **kw: FakeResult())
    app.config["MATCH_RECOMPUTE_ASYNC"] = True
    resp = client.post("/api/v1/matches/recompute", headers=as_user("u1"))
    assert resp.status_code == 202
    assert resp.get_json() == {"queued": True, "taskId": "task-123"}


def test_matches_require_item_id(client):
    resp = client.get("/api/v1/matches")
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "itemId"


def test_only_item_owners_update_match_status(client, make_item):
    lost, found = _wallets(make_item)
    mid = client.post(
        "/api/v1/matches/compute",
        json={"lostItemId": lost.id, "foundItemId": found.id},
        headers=as_user("stranger"),
    ).get_json()["match"]["id"]

    resp = client.patch(f"/api/v1/matches/{mid}", json={"status": "dismissed"}, headers=as_user("stranger"))
    assert resp.status_code == 403
    assert Match.query.one().status == "pending"
    body = client.get(f"/api/v1/matches?itemId={lost.id}").get_json()
    assert [m["id"] for m in body["matches"]] == [mid]

    resp = client.patch(f"/api/v1/matches/{mid}", json={"status": "viewed"}, headers=as_user("finder"))
    assert resp.status_code == 200
    assert resp.get_json()["match"]["status"] == "viewed"
