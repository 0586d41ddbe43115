from conftest import as_user
from fynd.extensions import db as _db
from fynd.models.enums import NotificationKind
from fynd.models.item import Item
from fynd.models.notification import Notification
from fynd.models.verification import Verification

PHOTOS = ["photos/1.jpg", "photos/2.jpg", "photos/3.jpg"]
REVIEWER = as_user("rev-1", role="moderator")


def _submit(client, item_id, user="owner-1", photos=PHOTOS, notes=None):
    return client.post(
        "/api/v1/verifications",
        json={"itemId": item_id, "photos": photos, "notes": notes},
        headers=as_user(user),
    )


def test_single_photo_is_rejected(client, make_item):
    item = make_item(owner="owner-1")
    resp = _submit(client, item.id, photos=["photos/1.jpg"])
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["field"] == "photos"
    assert Verification.query.count() == 0
    assert _db.session.get(Item, item.id).verification_status is None


def test_too_many_photos_is_rejected(client, make_item):
    item = make_item(owner="owner-1")
    resp = _submit(client, item.id, photos=[f"p/{i}.jpg" for i in range(6)])
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "photos"


def test_three_photos_creates_pending_request(client, make_item):
    item = make_item(owner="owner-1")
    resp = _submit(client, item.id, notes="Serial number visible on photo 2")
    assert resp.status_code == 201
    body = resp.get_json()["verification"]
    assert body["status"] == "pending"
    assert body["photos"] == PHOTOS
    refreshed = _db.session.get(Item, item.id)
    assert refreshed.verification_status == "pending"
    assert refreshed.verified is False


def test_second_submission_while_pending_conflicts(client, make_item):
    item = make_item(owner="owner-1")
    assert _submit(client, item.id).status_code == 201
    resp = _submit(client, item.id)
    assert resp.status_code == 409
    assert resp.get_json()["code"] == "verification_pending"
    assert Verification.query.filter_by(item_id=item.id).count() == 1


def test_only_owner_can_submit(client, make_item):
    item = make_item(owner="owner-1")
    resp = _submit(client, item.id, user="stranger")
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "owner"


def test_resolved_item_cannot_be_verified(client, make_item):
    item = make_item(owner="owner-1", status="resolved")
    resp = _submit(client, item.id)
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "status"


def test_reviewer_approves(client, make_item):
    item = make_item(owner="owner-1")
    vid = _submit(client, item.id).get_json()["verification"]["id"]

    resp = client.post(f"/api/v1/verifications/{vid}/decision", json={"status": "approved"}, headers=REVIEWER)
    assert resp.status_code == 200
    body = resp.get_json()["verification"]
    assert body["status"] == "approved"
    assert body["reviewerUserId"] == "rev-1"
    refreshed = _db.session.get(Item, item.id)
    assert refreshed.verified is True
    assert refreshed.verification_status == "approved"
    kinds = [n.kind for n in Notification.query.filter_by(user_id="owner-1")]
    assert kinds == [NotificationKind.VERIFICATION_APPROVED]

    # Verified items take no further requests
    resp = _submit(client, item.id)
    assert resp.status_code == 409
    assert resp.get_json()["code"] == "already_verified"


def test_rejection_allows_resubmission(client, make_item):
    item = make_item(owner="owner-1")
    vid = _submit(client, item.id).get_json()["verification"]["id"]

    resp = client.post(
        f"/api/v1/verifications/{vid}/decision",
        json={"status": "rejected", "notes": "Photos are blurry"},
        headers=REVIEWER,
    )
    assert resp.status_code == 200
    refreshed = _db.session.get(Item, item.id)
    assert refreshed.verified is False
    assert refreshed.verification_status == "rejected"
    kinds = [n.kind for n in Notification.query.filter_by(user_id="owner-1")]
    assert kinds == [NotificationKind.VERIFICATION_REJECTED]

    assert _submit(client, item.id).status_code == 201

    resp = client.post(f"/api/v1/verifications/{vid}/decision", json={"status": "approved"}, headers=REVIEWER)
    assert resp.status_code == 409
    assert resp.get_json()["code"] == "verification_decided"


def test_decision_requires_reviewer_role(client, make_item):
    item = make_item(owner="owner-1")
    vid = _submit(client, item.id).get_json()["verification"]["id"]

    resp = client.post(f"/api/v1/verifications/{vid}/decision", json={"status": "approved"}, headers=as_user("owner-1"))
    assert resp.status_code == 403
    assert _db.session.get(Verification, vid).status == "pending"


def test_list_verifications_visibility(client, make_item):
    item = make_item(owner="owner-1")
    _submit(client, item.id)

    assert client.get(f"/api/v1/verifications?itemId={item.id}", headers=as_user("stranger")).status_code == 403
    owner_view = client.get(f"/api/v1/verifications?itemId={item.id}", headers=as_user("owner-1")).get_json()
    assert len(owner_view["verifications"]) == 1
    reviewer_view = client.get(f"/api/v1/verifications?itemId={item.id}", headers=REVIEWER).get_json()
    assert len(reviewer_view["verifications"]) == 1

    resp = client.get("/api/v1/verifications", headers=REVIEWER)
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "itemId"


def test_two_photos_are_enough(client, make_item):
    item = make_item(owner="owner-1")
    resp = _submit(client, item.id, photos=["p/1.jpg", "p/2.jpg"])
    assert resp.status_code == 201


def test_five_photos_are_accepted(client, make_item):
    item = make_item(owner="owner-1")
    resp = _submit(client, item.id, photos=[f"p/{i}.jpg" for i in range(5)])
    assert resp.status_code == 201
    assert len(resp.get_json()["verification"]["photos"]) == 5


def test_repeated_photo_counts_once(client, make_item):
    item = make_item(owner="owner-1")
    resp = _submit(client, item.id, photos=["p/a.jpg", "p/a.jpg"])
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "photos"
    assert Verification.query.count() == 0

    resp = _submit(client, item.id, photos=["p/a.jpg", "p/b.jpg", "p/a.jpg"])
    assert resp.status_code == 201
    assert resp.get_json()["verification"]["photos"] == ["p/a.jpg", "p/b.jpg"]
