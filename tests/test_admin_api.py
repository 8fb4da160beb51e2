def test_list_users(client):
    client.post("/api/users", json={"uid": "uid-a", "email": "a@b.com"})
    client.post("/api/users", json={"uid": "uid-b", "email": "b@b.com"})

    response = client.get("/api/admin/users")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert {u["uid"] for u in body["users"]} == {"uid-a", "uid-b"}


def test_force_delete_user(client, identity):
    identity.add_user("uid-a", "a@b.com")
    client.post("/api/users", json={"uid": "uid-a", "email": "a@b.com"})

    response = client.post("/api/debug/delete-user", json={"email": "a@b.com"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "User deleted (if existed)"}
    assert identity.deleted == ["uid-a"]
    assert client.get("/api/users/uid-a").status_code == 404
    assert client.post("/api/check-email", json={"email": "a@b.com"}).json()["available"] is True


def test_force_delete_unknown_user(client, identity):
    response = client.post("/api/debug/delete-user", json={"email": "ghost@b.com"})
    assert response.status_code == 200
    assert identity.deleted == []


def test_force_delete_requires_email(client):
    response = client.post("/api/debug/delete-user", json={})
    assert response.status_code == 400


def test_debug_endpoints_disabled(settings, client):
    settings.enable_debug_endpoints = False

    assert client.get("/api/admin/users").status_code == 404
    assert client.post("/api/debug/delete-user", json={"email": "a@b.com"}).status_code == 404
