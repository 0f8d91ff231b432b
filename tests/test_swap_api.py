"""
HTTP tests for the swap request, review, credit and notification routes.
"""

from skill_swap import models
from skill_swap.models.swap import SwapStatus
from skill_swap.services import swap_service


def _create(client, headers, receiver_id, **overrides):
    body = {"receiver_id": receiver_id, "skill_offered": "Guitar", "skill_requested": "Spanish"}
    body.update(overrides)
    return client.post("/swap-requests", json=body, headers=headers)


# ======================
# SWAP REQUESTS
# ======================

def test_request_accept_and_duplicate_flow(client, make_user, auth_headers):
    alice, bob = make_user("Alice"), make_user("Bob")

    created = _create(client, auth_headers(alice), bob.id)
    assert created.status_code == 201
    swap = created.json()["swap_request"]
    assert swap["status"] == "PENDING"
    assert swap["requester"]["name"] == "Alice"

    accepted = client.post(f"/swap-requests/{swap['id']}/accept", headers=auth_headers(bob))
    assert accepted.status_code == 200
    assert accepted.json()["swap_request"]["status"] == "ACCEPTED"
    assert accepted.json()["email_sent"] is False

    again = _create(client, auth_headers(alice), bob.id)
    assert again.status_code == 400
    assert again.json()["error"].startswith("A pending request already exists")


def test_requires_authentication(client, make_user):
    bob = make_user()
    response = _create(client, {}, bob.id)
    assert response.status_code == 401


def test_invalid_token_is_rejected(client, make_user):
    bob = make_user()
    response = _create(client, {"Authorization": "Bearer not-a-jwt"}, bob.id)
    assert response.status_code == 401


def test_suspended_user_is_forbidden(client, make_user, auth_headers):
    suspended = make_user(status=models.UserStatus.SUSPENDED)
    bob = make_user()

    response = _create(client, auth_headers(suspended), bob.id)

    assert response.status_code == 403


def test_body_validation(client, make_user, auth_headers):
    alice, bob = make_user(), make_user()
    headers = auth_headers(alice)

    assert _create(client, headers, bob.id, duration=5).status_code == 400
    assert _create(client, headers, bob.id, skill_offered=" ").status_code == 400
    assert _create(client, headers, bob.id, message="x" * 501).status_code == 400
    assert _create(client, headers, bob.id, format="TELEPATHY").status_code == 400


def test_missing_field_answers_400_with_error_body(client, make_user, auth_headers):
    alice, bob = make_user(), make_user()

    response = client.post("/swap-requests", json={"receiver_id": bob.id}, headers=auth_headers(alice))

    assert response.status_code == 400
    body = response.json()
    assert set(body) == {"error"}
    assert body["error"].startswith("skill_offered")


def test_auth_failures_use_error_body(client, make_user, auth_headers):
    bob = make_user()
    suspended = make_user(status=models.UserStatus.SUSPENDED)

    missing_token = _create(client, {}, bob.id)
    assert missing_token.status_code == 401
    assert missing_token.json() == {"error": "Not authenticated"}

    bad_token = _create(client, {"Authorization": "Bearer not-a-jwt"}, bob.id)
    assert bad_token.status_code == 401
    assert bad_token.json() == {"error": "Could not validate credentials"}
    assert bad_token.headers["www-authenticate"] == "Bearer"

    blocked = _create(client, auth_headers(suspended), bob.id)
    assert blocked.status_code == 403
    assert blocked.json() == {"error": "Account is suspended"}


def test_route_level_http_errors_use_error_body(client, make_user, auth_headers):
    user = make_user()

    profile = client.get("/users/9999")
    assert profile.status_code == 404
    assert profile.json() == {"error": "User not found"}

    skill = client.delete("/users/me/skills/offered/9999", headers=auth_headers(user))
    assert skill.json() == {"error": "Skill not found"}

    login = client.post("/auth/login", json={"email": "nobody@test.edu", "password": "whatever-pass"})
    assert login.status_code == 401
    assert login.json() == {"error": "Invalid email or password"}

    unknown_route = client.get("/no-such-route")
    assert unknown_route.status_code == 404
    assert "error" in unknown_route.json()


def test_service_errors_map_to_status_codes(client, make_user, auth_headers):
    alice = make_user()

    assert _create(client, auth_headers(alice), alice.id).status_code == 400
    missing = _create(client, auth_headers(alice), 9999)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Receiver not found"}


def test_outsider_cannot_view_request(client, make_user, make_swap, auth_headers):
    alice, bob, carol = make_user(), make_user(), make_user()
    swap = make_swap(alice, bob)

    assert client.get(f"/swap-requests/{swap.id}", headers=auth_headers(bob)).status_code == 200
    assert client.get(f"/swap-requests/{swap.id}", headers=auth_headers(carol)).status_code == 403
    assert client.get("/swap-requests/424242", headers=auth_headers(carol)).status_code == 404


def test_accept_with_failing_invite_still_succeeds(client, make_user, make_swap, auth_headers, monkeypatch):
    alice, bob = make_user(), make_user()
    swap = make_swap(alice, bob)

    def broken_invite(**kwargs):
        raise TimeoutError("smtp timeout")

    monkeypatch.setattr(swap_service, "send_meeting_invite", broken_invite)

    response = client.post(
        f"/swap-requests/{swap.id}/accept",
        json={"message": "Let's do it", "meeting_link": "https://zoom.us/j/123"},
        headers=auth_headers(bob),
    )

    assert response.status_code == 200
    assert response.json()["swap_request"]["status"] == "ACCEPTED"
    assert response.json()["email_sent"] is False

    detail = client.get(f"/swap-requests/{swap.id}", headers=auth_headers(alice)).json()["swap_request"]
    assert detail["meeting"]["meeting_link"] == "https://zoom.us/j/123"
    assert [m["content"] for m in detail["messages"]] == ["Let's do it"]


def test_accept_by_requester_is_forbidden(client, make_user, make_swap, auth_headers):
    alice, bob = make_user(), make_user()
    swap = make_swap(alice, bob)

    response = client.post(f"/swap-requests/{swap.id}/accept", headers=auth_headers(alice))

    assert response.status_code == 403


def test_decline_and_cancel(client, make_user, make_swap, auth_headers):
    alice, bob = make_user(), make_user()
    declined = make_swap(alice, bob)
    response = client.post(
        f"/swap-requests/{declined.id}/decline", json={"message": "No time"}, headers=auth_headers(bob)
    )
    assert response.json()["swap_request"]["status"] == "DECLINED"

    pending = make_swap(alice, bob)
    assert client.delete(f"/swap-requests/{pending.id}", headers=auth_headers(bob)).status_code == 403
    assert client.delete(f"/swap-requests/{pending.id}", headers=auth_headers(alice)).status_code == 200
    assert client.get(f"/swap-requests/{pending.id}", headers=auth_headers(alice)).status_code == 404


def test_generic_status_update(client, make_user, make_swap, auth_headers):
    alice, bob = make_user(), make_user()
    swap = make_swap(alice, bob)

    bad = client.put(f"/swap-requests/{swap.id}/status", json={"status": "expired"}, headers=auth_headers(bob))
    assert bad.status_code == 400

    ok = client.put(f"/swap-requests/{swap.id}/status", json={"status": "accepted"}, headers=auth_headers(bob))
    assert ok.status_code == 200
    assert ok.json()["swap_request"]["status"] == "ACCEPTED"


def test_schedule_and_complete(client, make_user, make_swap, auth_headers):
    alice, bob = make_user(), make_user()
    swap = make_swap(alice, bob, status=SwapStatus.ACCEPTED, duration=90)

    scheduled = client.post(
        f"/swap-requests/{swap.id}/schedule",
        json={"date": "2030-01-15T18:00:00", "duration": 90, "platform": "Zoom"},
        headers=auth_headers(alice),
    )
    assert scheduled.status_code == 200
    assert scheduled.json()["swap_request"]["scheduled_session"]["platform"] == "Zoom"

    completed = client.post(f"/swap-requests/{swap.id}/complete", headers=auth_headers(bob))
    assert completed.status_code == 200
    assert completed.json()["swap_request"]["status"] == "COMPLETED"
    assert completed.json()["credits_awarded"] == 30

    credits = client.get("/credits", headers=auth_headers(alice)).json()
    assert credits["balance"] == 30


def test_listing_and_stats(client, make_user, make_swap, auth_headers):
    alice, bob, carol = make_user(), make_user(), make_user()
    make_swap(alice, bob)
    make_swap(carol, alice, status=SwapStatus.DECLINED)
    headers = auth_headers(alice)

    assert len(client.get("/swap-requests", headers=headers).json()["swap_requests"]) == 2
    assert len(client.get("/swap-requests/sent", headers=headers).json()["swap_requests"]) == 1
    received = client.get("/swap-requests/received", params={"status": "declined"}, headers=headers).json()
    assert [s["status"] for s in received["swap_requests"]] == ["DECLINED"]

    stats = client.get("/swap-requests/stats", headers=headers).json()["stats"]
    assert stats["PENDING"] == 1
    assert stats["DECLINED"] == 1
    assert stats["total"] == 2


# ======================
# REVIEWS / CREDITS / NOTIFICATIONS
# ======================

def test_review_endpoints(client, make_user, make_swap, auth_headers):
    alice, bob = make_user("Alice"), make_user("Bob")
    swap = make_swap(alice, bob, status=SwapStatus.COMPLETED)

    created = client.post(
        "/reviews",
        json={"swap_request_id": swap.id, "overall": 5, "comment": "Patient and clear"},
        headers=auth_headers(alice),
    )
    assert created.status_code == 201
    assert created.json()["review"]["reviewer_name"] == "Alice"

    duplicate = client.post(
        "/reviews", json={"swap_request_id": swap.id, "overall": 4}, headers=auth_headers(alice)
    )
    assert duplicate.status_code == 400

    reputation = client.get(f"/reviews/user/{bob.id}/reputation").json()
    assert reputation["overall_rating"] == 5.0
    assert reputation["trust_score"] == 100.0

    assert client.get(f"/reviews/user/{bob.id}", params={"filter": "negative"}).json()["reviews"] == []
    assert client.get(f"/reviews/user/{bob.id}/stats").json()["total_reviews"] == 1


def test_credit_transfer_endpoint(client, make_user, auth_headers):
    alice, bob = make_user(credits=50), make_user()

    ok = client.post("/credits/transfer", json={"receiver_id": bob.id, "amount": 20}, headers=auth_headers(alice))
    assert ok.status_code == 200
    assert ok.json()["new_balance"] == 30

    broke = client.post("/credits/transfer", json={"receiver_id": bob.id, "amount": 31}, headers=auth_headers(alice))
    assert broke.status_code == 400
    assert "Insufficient credits" in broke.json()["error"]

    assert client.post(
        "/credits/transfer", json={"receiver_id": bob.id, "amount": 0}, headers=auth_headers(alice)
    ).status_code == 400

    history = client.get("/credits/transactions", headers=auth_headers(bob)).json()
    assert [t["amount"] for t in history["transactions"]] == [20]


def test_notification_endpoints(client, make_user, make_swap, auth_headers):
    alice, bob = make_user(), make_user()
    _create(client, auth_headers(alice), bob.id)
    headers = auth_headers(bob)

    assert client.get("/notifications/unread-count", headers=headers).json()["unread_count"] == 1
    notes = client.get("/notifications/my", headers=headers).json()
    assert notes[0]["event_type"] == "SWAP_REQUEST"

    assert client.patch(f"/notifications/{notes[0]['id']}/read", headers=auth_headers(alice)).status_code == 404
    assert client.patch(f"/notifications/{notes[0]['id']}/read", headers=headers).status_code == 200
    assert client.get("/notifications/unread-count", headers=headers).json()["unread_count"] == 0


def test_register_and_login(client):
    registered = client.post(
        "/auth/register",
        json={"name": "New Person", "email": "New@Test.edu", "password": "s3cret-pass"},
    )
    assert registered.status_code == 201
    token = registered.json()["access_token"]

    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new@test.edu"

    assert client.post("/auth/login", json={"email": "new@test.edu", "password": "s3cret-pass"}).status_code == 200
    assert client.post("/auth/login", json={"email": "new@test.edu", "password": "wrong-pass"}).status_code == 401
    assert client.post(
        "/auth/register",
        json={"name": "Again", "email": "new@test.edu", "password": "s3cret-pass"},
    ).status_code == 400


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
