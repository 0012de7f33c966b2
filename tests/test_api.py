"""HTTP API: status codes, error shape, hire flow end to end."""

import pytest
from fastapi.testclient import TestClient

from gigflow.api.main import create_app

OWNER = {"X-User-Id": "client-1"}
FREE1 = {"X-User-Id": "free-1"}
FREE2 = {"X-User-Id": "free-2"}


@pytest.fixture
def client(settings, temp_db_path):
    app = create_app(settings, db_path=temp_db_path)
    with TestClient(app) as c:
        yield c


def _post_gig(client, **overrides):
    body = {"title": "Logo design", "description": "Bakery branding", "budget": 800}
    body.update(overrides)
    r = client.post("/gigs", json=body, headers=OWNER)
    assert r.status_code == 201, r.text
    return r.json()


def _bid(client, gig_id, headers, price=500):
    return client.post("/bids", json={"gig_id": gig_id, "message": "I can do it", "price": price}, headers=headers)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_hire_flow(client):
    gig = _post_gig(client)
    assert gig["status"] == "open"
    b1 = _bid(client, gig["gig_id"], FREE1, 500)
    b2 = _bid(client, gig["gig_id"], FREE2, 700)
    assert b1.status_code == 201 and b2.status_code == 201
    assert b1.json()["status"] == "pending"

    listed = client.get("/bids", params={"gig_id": gig["gig_id"]}).json()
    assert listed["total"] == 2
    assert [b["bid_id"] for b in listed["bids"]] == [b1.json()["bid_id"], b2.json()["bid_id"]]

    r = client.patch(f"/bids/{b1.json()['bid_id']}/hire", headers=OWNER)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["message"] == "Freelancer hired successfully"
    assert body["freelancer_id"] == "free-1"
    assert body["rejected_count"] == 1

    statuses = [b["status"] for b in client.get("/bids", params={"gig_id": gig["gig_id"]}).json()["bids"]]
    assert statuses == ["hired", "rejected"]
    assert client.get(f"/gigs/{gig['gig_id']}").json()["status"] == "assigned"

    again = client.patch(f"/bids/{b2.json()['bid_id']}/hire", headers=OWNER)
    assert again.status_code == 409
    assert again.json()["code"] == "gig_already_assigned"

    late = _bid(client, gig["gig_id"], {"X-User-Id": "free-3"})
    assert late.status_code == 409
    assert late.json()["code"] == "gig_not_open"

    client.app.state.marketplace.dispatcher.drain(timeout=5)
    notes = client.get("/notifications", headers=FREE1).json()
    assert notes["unread_count"] == 1
    assert notes["notifications"][0]["gig_id"] == gig["gig_id"]
    assert client.get("/notifications", headers=FREE2).json()["notifications"] == []


def test_mutations_require_identity(client):
    r = client.post("/gigs", json={"title": "t", "description": "d", "budget": 10})
    assert r.status_code == 401
    assert r.json() == {"detail": "Authentication required", "code": "unauthenticated"}


def test_only_owner_may_hire(client):
    gig = _post_gig(client)
    bid = _bid(client, gig["gig_id"], FREE1).json()
    r = client.patch(f"/bids/{bid['bid_id']}/hire", headers=FREE2)
    assert r.status_code == 403
    assert r.json()["code"] == "not_gig_owner"
    assert client.get(f"/gigs/{gig['gig_id']}").json()["status"] == "open"


def test_validation_and_duplicate_errors(client):
    gig = _post_gig(client)
    bad = _bid(client, gig["gig_id"], FREE1, price=0)
    assert bad.status_code == 422
    assert bad.json()["code"] == "validation_error"

    assert _bid(client, gig["gig_id"], FREE1).status_code == 201
    dup = _bid(client, gig["gig_id"], FREE1, price=450)
    assert dup.status_code == 409
    assert dup.json()["code"] == "duplicate_bid"

    bad_gig = client.post("/gigs", json={"title": "", "description": "d", "budget": 10}, headers=OWNER)
    assert bad_gig.status_code == 422


def test_malformed_body_uses_error_shape(client):
    gig = _post_gig(client)
    r = client.post("/bids", json={"gig_id": gig["gig_id"], "message": "hi", "price": "abc"}, headers=FREE1)
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "validation_error"
    assert "price" in body["detail"]
    assert client.get("/gigs", params={"status": "closed"}).json()["code"] == "validation_error"


def test_not_found_errors(client):
    r = client.patch("/bids/missing/hire", headers=OWNER)
    assert r.status_code == 404
    assert r.json()["code"] == "bid_not_found"
    r = client.get("/gigs/missing")
    assert r.status_code == 404
    assert r.json()["code"] == "gig_not_found"
    r = client.patch("/notifications/missing/read", headers=FREE1)
    assert r.status_code == 404


def test_gig_listing_filters(client):
    first = _post_gig(client, title="Logo design")
    _post_gig(client, title="Website", description="Portfolio with blog")
    bid = _bid(client, first["gig_id"], FREE1).json()
    client.patch(f"/bids/{bid['bid_id']}/hire", headers=OWNER)

    open_gigs = client.get("/gigs", params={"status": "open"}).json()
    assert [g["title"] for g in open_gigs["gigs"]] == ["Website"]
    assert client.get("/gigs", params={"search": "BLOG"}).json()["total"] == 1
    assert client.get("/gigs", params={"status": "closed"}).status_code == 422
    assert client.get("/gigs/mine", headers=OWNER).json()["total"] == 2
    page = client.get("/gigs", params={"limit": 1, "offset": 1}).json()
    assert page["total"] == 2
    assert [g["title"] for g in page["gigs"]] == ["Logo design"]
    mine = client.get("/bids/mine", headers=FREE1).json()
    assert [b["status"] for b in mine["bids"]] == ["hired"]


def test_notification_read_and_clear(client):
    gig = _post_gig(client)
    bid = _bid(client, gig["gig_id"], FREE1).json()
    client.patch(f"/bids/{bid['bid_id']}/hire", headers=OWNER)
    client.app.state.marketplace.dispatcher.drain(timeout=5)

    note = client.get("/notifications", headers=FREE1).json()["notifications"][0]
    assert note["read"] is False
    r = client.patch(f"/notifications/{note['notification_id']}/read", headers=FREE1)
    assert r.status_code == 200
    assert client.get("/notifications", headers=FREE1).json()["unread_count"] == 0
    assert client.patch("/notifications/read-all", headers=FREE1).json() == {"updated": 0}
    assert client.delete("/notifications", headers=FREE1).json() == {"updated": 1}
