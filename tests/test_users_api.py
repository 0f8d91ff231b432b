from skill_swap.services import achievement_service


def test_profile_update_and_public_view(client, make_user, auth_headers):
    user = make_user("Priya")
    headers = auth_headers(user)

    updated = client.put("/users/me", json={"bio": "Jazz pianist", "location": "Austin"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["bio"] == "Jazz pianist"

    public = client.get(f"/users/{user.id}").json()
    assert public["name"] == "Priya"
    assert public["reputation"]["trust_score"] == 0.0
    assert "email" not in public


def test_private_profile_is_hidden(client, make_user):
    hidden = make_user(is_public=False)
    assert client.get(f"/users/{hidden.id}").status_code == 404


def test_skills_crud(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)

    offered = client.post(
        "/users/me/skills/offered",
        json={"name": "  Python  ", "category": "Technology", "level": "EXPERT"},
        headers=headers,
    )
    assert offered.status_code == 201
    assert offered.json()["name"] == "Python"

    wanted = client.post("/users/me/skills/wanted", json={"name": "Salsa", "priority": "HIGH"}, headers=headers)
    assert wanted.status_code == 201

    me = client.get("/users/me", headers=headers).json()
    assert [s["name"] for s in me["skills_offered"]] == ["Python"]
    assert [s["name"] for s in me["skills_wanted"]] == ["Salsa"]

    skill_id = offered.json()["id"]
    assert client.delete(f"/users/me/skills/offered/{skill_id}", headers=headers).status_code == 200
    assert client.delete(f"/users/me/skills/offered/{skill_id}", headers=headers).status_code == 404

    assert client.post(
        "/users/me/skills/offered", json={"name": "Chess", "category": "Games"}, headers=headers
    ).status_code == 400


def test_offering_diverse_skills_unlocks_achievement(client, db_session, make_user, auth_headers):
    achievement_service.seed_default_achievements(db_session)
    user = make_user()
    headers = auth_headers(user)

    for name, category in (("Python", "Technology"), ("Pottery", "Creative"), ("Japanese", "Languages")):
        client.post("/users/me/skills/offered", json={"name": name, "category": category}, headers=headers)

    achievements = client.get("/gamification/achievements", headers=headers).json()
    assert [a["name"] for a in achievements["earned"]] == ["Renaissance Learner"]

    progress = client.get("/gamification/progress", headers=headers).json()
    assert progress["achievements_earned"] == 1
    assert progress["credit_balance"] == 20


def test_gamification_routes(client, make_user, auth_headers):
    viewer, other = make_user(), make_user("Other", credits=40)
    headers = auth_headers(viewer)

    assert client.get(f"/gamification/achievements/{other.id}", headers=headers).status_code == 200
    assert client.get("/gamification/achievements/9999", headers=headers).status_code == 404

    board = client.get("/gamification/leaderboard", params={"metric": "credits"}).json()
    assert board[0]["name"] == "Other"
    assert client.get("/gamification/leaderboard", params={"metric": "karma"}).status_code == 400
