# tests/test_api/test_users_api.py


def test_create_user(client, user_payload):
    response = client.post("/users", json=user_payload)
    assert response.status_code == 201
    body = response.json()
    assert body["id"] > 0
    assert body["status"] == "ACTIVE"
    assert body["membership_type"] == "STUDENT"
    assert body["active_loans"] == 0
    assert body["join_date"]


def test_create_user_duplicate_email(client, create_user, user_payload):
    create_user()
    response = client.post("/users", json={**user_payload, "name": "Someone Else"})
    assert response.status_code == 400
    assert "john.silva@example.com" in response.json()["error"]


def test_create_user_invalid(client, user_payload):
    response = client.post("/users", json={**user_payload, "email": "not-an-email", "membership_type": "ALUMNI"})
    assert response.status_code == 400
    fields = {detail["loc"][-1] for detail in response.json()["details"]}
    assert fields == {"email", "membership_type"}


def test_get_user_with_active_loans(client, create_user, create_book):
    user = create_user()
    book = create_book()
    client.post("/loans", json={"user_id": user["id"], "book_id": book["id"]})

    response = client.get(f"/users/{user['id']}")
    assert response.status_code == 200
    assert response.json()["active_loans"] == 1


def test_get_user_not_found(client):
    response = client.get("/users/999")
    assert response.status_code == 404
    assert response.json()["error"] == "User 999 not found"


def test_list_users(client, create_user):
    create_user(name="Zoe Costa", email="zoe@example.com")
    create_user(name="Ana Souza", email="ana@example.com")

    body = client.get("/users").json()
    assert body["total"] == 2
    assert [user["name"] for user in body["items"]] == ["Ana Souza", "Zoe Costa"]

    body = client.get("/users", params={"search": "zoe"}).json()
    assert [user["name"] for user in body["items"]] == ["Zoe Costa"]


def test_list_users_by_status(client, create_user, user_payload):
    create_user()
    suspended = create_user(name="Late Payer", email="late@example.com")
    client.put(f"/users/{suspended['id']}", json={
        **user_payload, "name": "Late Payer", "email": "late@example.com", "status": "SUSPENDED"
    })

    body = client.get("/users", params={"status": "SUSPENDED"}).json()
    assert [user["id"] for user in body["items"]] == [suspended["id"]]
    assert client.get("/users", params={"status": "GONE"}).status_code == 400


def test_update_user(client, create_user, user_payload):
    user = create_user()
    response = client.put(f"/users/{user['id']}", json={
        **user_payload, "membership_type": "TEACHER", "status": "INACTIVE"
    })
    assert response.status_code == 200
    body = response.json()
    assert body["membership_type"] == "TEACHER"
    assert body["status"] == "INACTIVE"


def test_update_user_email_conflict(client, create_user, user_payload):
    create_user()
    other = create_user(email="other@example.com")
    response = client.put(f"/users/{other['id']}", json={**user_payload, "status": "ACTIVE"})
    assert response.status_code == 400


def test_suspended_user_cannot_borrow(client, create_user, create_book, user_payload):
    user = create_user()
    book = create_book()
    client.put(f"/users/{user['id']}", json={**user_payload, "status": "SUSPENDED"})

    response = client.post("/loans", json={"user_id": user["id"], "book_id": book["id"]})
    assert response.status_code == 400
    assert client.get(f"/books/{book['id']}").json()["available_copies"] == 2


def test_delete_user(client, create_user):
    user = create_user()
    response = client.delete(f"/users/{user['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "User deleted"}
    assert client.get(f"/users/{user['id']}").status_code == 404


def test_delete_user_with_loan(client, create_user, create_book):
    user = create_user()
    book = create_book()
    client.post("/loans", json={"user_id": user["id"], "book_id": book["id"]})
    assert client.delete(f"/users/{user['id']}").status_code == 400


def test_delete_user_not_found(client):
    assert client.delete("/users/999").status_code == 404
