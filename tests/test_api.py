from api import create_app


USER = {
    "full_name": "Ada Lovelace",
    "email": "Ada@Example.com",
    "phone": "1234567890",
    "role": "User",
    "password": "secret123",
}

MESSAGE = {
    "name": "Grace",
    "email": "grace@example.com",
    "subject": "General",
    "message": "When does the library open on Sundays?",
}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["db"] is True


def test_user_lifecycle(client):
    response = client.post("/api/users", json=USER)
    assert response.status_code == 201
    created = response.json()
    assert isinstance(created["id"], int)
    assert created["email"] == "ada@example.com"
    assert "password" not in created

    listed = client.get("/api/users").json()
    assert [u["id"] for u in listed] == [created["id"]]
    assert "password" not in listed[0]

    update = dict(USER, role="Admin", password="")
    response = client.put(f"/api/users/{created['id']}", json=update)
    assert response.status_code == 200
    assert response.json() == {"message": "User updated successfully"}
    assert client.get("/api/users").json()[0]["role"] == "Admin"

    response = client.delete(f"/api/users/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}

    response = client.delete(f"/api/users/{created['id']}")
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_create_user_validation_errors_are_joined(client):
    response = client.post("/api/users", json=dict(USER, phone="12345", password="short"))
    assert response.status_code == 400
    assert response.json() == {
        "error": "Phone must be exactly 10 digits, Password must be at least 8 characters"
    }
    assert client.get("/api/users").json() == []


def test_create_duplicate_email(client):
    assert client.post("/api/users", json=USER).status_code == 201
    response = client.post("/api/users", json=dict(USER, email="ADA@example.com"))
    assert response.status_code == 400
    assert response.json() == {"error": "Email already exists"}


def test_update_missing_user(client):
    response = client.put("/api/users/12345", json=USER)
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_update_validates_before_lookup(client):
    response = client.put("/api/users/12345", json=dict(USER, role="Owner"))
    assert response.status_code == 400
    assert response.json() == {"error": "Role must be Admin, User, or Guest"}


def test_update_short_password_rejected(client):
    user_id = client.post("/api/users", json=USER).json()["id"]
    response = client.put(f"/api/users/{user_id}", json=dict(USER, password="short"))
    assert response.status_code == 400
    assert response.json() == {"error": "Password must be at least 8 characters"}


def test_update_to_duplicate_email(client):
    client.post("/api/users", json=USER)
    other = client.post("/api/users", json=dict(USER, email="other@example.com")).json()
    response = client.put(f"/api/users/{other['id']}", json=dict(USER, password=""))
    assert response.status_code == 400
    assert response.json() == {"error": "Email already exists"}


def test_non_object_body(client):
    response = client.post("/api/users", json=["not", "an", "object"])
    assert response.status_code == 400
    assert "error" in response.json()


def test_malformed_json(client):
    response = client.post(
        "/api/users", content="{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_non_integer_id_is_not_found(client):
    response = client.delete("/api/users/abc")
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}

    response = client.put("/api/users/abc", json=USER)
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}

    response = client.delete("/api/contacts/abc")
    assert response.status_code == 404
    assert response.json() == {"error": "Message not found"}


def test_non_integer_id_still_validates_body_first(client):
    response = client.put("/api/users/abc", json=dict(USER, phone="12345"))
    assert response.status_code == 400
    assert response.json() == {"error": "Phone must be exactly 10 digits"}


def test_id_beyond_64_bits_is_not_found(client):
    huge = "9" * 20
    response = client.delete(f"/api/users/{huge}")
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}

    response = client.put(f"/api/users/{huge}", json=USER)
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}

    response = client.delete(f"/api/contacts/{huge}")
    assert response.status_code == 404
    assert response.json() == {"error": "Message not found"}


def test_nul_in_text_fields_is_a_validation_error(client):
    response = client.post("/api/users", json=dict(USER, full_name="A\u0000da Lovelace"))
    assert response.status_code == 400
    assert response.json() == {"error": "Full Name must be between 2 and 50 characters"}

    response = client.post("/api/users", json=dict(USER, password="a\u0000bcdefgh"))
    assert response.status_code == 400
    assert response.json() == {"error": "Password must be at least 8 characters"}
    assert client.get("/api/users").json() == []


def test_store_failure_is_generic_500(client, monkeypatch):
    from store import StoreError, UserStore

    def broken(self):
        raise StoreError("Failed to fetch users")

    monkeypatch.setattr(UserStore, "list_users", broken)
    response = client.get("/api/users")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch users"}


def test_contact_lifecycle(client):
    response = client.post("/api/contacts", json=MESSAGE)
    assert response.status_code == 201
    created = response.json()
    assert created["subject"] == "General"
    assert created["created_at"]

    listed = client.get("/api/contacts").json()
    assert [m["id"] for m in listed] == [created["id"]]

    response = client.delete(f"/api/contacts/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Message deleted successfully"}

    response = client.delete(f"/api/contacts/{created['id']}")
    assert response.status_code == 404
    assert response.json() == {"error": "Message not found"}


def test_contact_validation(client):
    response = client.post("/api/contacts", json=dict(MESSAGE, subject="Spam", message="short"))
    assert response.status_code == 400
    assert response.json() == {
        "error": "Subject must be General, Support, Feedback, or Other, "
                 "Message must be between 10 and 1000 characters"
    }


def test_static_files_are_served(tmp_path):
    static = tmp_path / "public"
    static.mkdir()
    (static / "index.html").write_text("<h1>Library Desk</h1>")

    from fastapi.testclient import TestClient

    app = create_app(db_file=str(tmp_path / "static.db"), static_dir=str(static))
    with TestClient(app) as client:
        assert "Library Desk" in client.get("/").text
        assert client.get("/api/users").json() == []
