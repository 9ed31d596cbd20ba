from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from eventhub.database import get_db
from eventhub.main import create_app
from eventhub.seed import initialize_database

ADMIN_EMAIL = "admin@x.com"
ADMIN_PASSWORD = "AdminPass1!"


@pytest.fixture
def client(session_factory, issuer, storage):
    seed = session_factory()
    initialize_database(seed, admin_email=ADMIN_EMAIL, admin_password=ADMIN_PASSWORD)
    seed.close()

    app = create_app(upload_dir=storage.base_path)
    app.state.token_issuer = issuer
    app.state.file_storage = storage

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def register(client, email="a@x.com", password="Secret123!"):
    return client.post(
        "/api/auth/register",
        json={
            "first_name": "Ann",
            "last_name": "Lee",
            "email": email,
            "password": password,
            "date_of_birth": "1995-03-01",
        },
    )


def bearer(client, email, password):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.cookies['Access-Token']}"}


def future(days=30):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def create_category(client, admin, name="Music"):
    response = client.post("/api/categories", json={"name": name}, headers=admin)
    assert response.status_code == 201
    return response.json()["data"]


def create_event(client, admin, category_id, **overrides):
    body = {
        "name": "Jazz Night",
        "description": "Live jazz",
        "date_time": future(),
        "location": "Main Hall",
        "max_participants": 2,
        "category_id": category_id,
    }
    body.update(overrides)
    response = client.post("/api/events", json=body, headers=admin)
    assert response.status_code == 201
    return response.json()["data"]


# ----------------------- Auth -----------------------
def test_register_then_login_sets_cookies(client):
    registered = register(client)
    assert registered.status_code == 201
    assert registered.json()["code"] == 201

    login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "Secret123!"})

    assert login.status_code == 200
    assert login.cookies.get("Access-Token")
    assert login.cookies.get("Refresh-Token")
    assert "httponly" in login.headers["set-cookie"].lower()

    me = client.get("/api/users/me")
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "a@x.com"


def test_duplicate_registration_conflicts(client):
    register(client)

    response = register(client)

    assert response.status_code == 409
    assert response.json()["error"] == "AlreadyExists"


def test_register_validates_payload(client):
    response = register(client, email="not-an-email")

    assert response.status_code == 422


def test_login_failure_is_generic(client):
    register(client)

    wrong_password = client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope"})
    unknown_user = client.post("/api/auth/login", json={"email": "b@x.com", "password": "nope"})

    assert wrong_password.status_code == unknown_user.status_code == 400
    assert wrong_password.json()["message"] == unknown_user.json()["message"]


def test_refresh_rotates_and_old_token_is_forbidden(client):
    register(client)
    login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "Secret123!"})
    old_refresh = login.cookies["Refresh-Token"]

    refreshed = client.post("/api/auth/refresh")
    assert refreshed.status_code == 200
    assert refreshed.cookies["Refresh-Token"] != old_refresh

    client.cookies.clear()
    client.cookies.set("Refresh-Token", old_refresh)
    reused = client.post("/api/auth/refresh")
    assert reused.status_code == 403
    assert reused.json()["error"] == "Forbidden"


def test_refresh_without_cookie(client):
    response = client.post("/api/auth/refresh")

    assert response.status_code == 401


def test_logout_revokes_refresh_token(client):
    register(client)
    login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "Secret123!"})
    refresh_cookie = login.cookies["Refresh-Token"]

    logout = client.delete("/api/auth/logout")
    assert logout.status_code == 200

    client.cookies.clear()
    client.cookies.set("Refresh-Token", refresh_cookie)
    assert client.post("/api/auth/refresh").status_code == 403


def test_logout_all(client):
    register(client)
    headers = bearer(client, "a@x.com", "Secret123!")
    bearer(client, "a@x.com", "Secret123!")

    response = client.delete("/api/auth/logout-all", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["revoked"] == 2


# ----------------------- Authorization -----------------------
def test_anonymous_is_unauthorized(client):
    response = client.get("/api/users/me")

    assert response.status_code == 401
    assert response.json()["code"] == 401


def test_garbage_token_is_unauthorized(client):
    response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_non_admin_cannot_manage_categories(client):
    register(client)
    user = bearer(client, "a@x.com", "Secret123!")

    response = client.post("/api/categories", json={"name": "Music"}, headers=user)

    assert response.status_code == 403


def test_user_can_only_edit_self_unless_admin(client):
    register(client, email="a@x.com")
    register(client, email="b@x.com")
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    users = client.get("/api/users", headers=admin).json()["data"]["data"]
    target = next(u for u in users if u["email"] == "b@x.com")
    body = {"first_name": "Bea", "last_name": "Lee", "email": "b@x.com", "date_of_birth": "1990-01-01"}

    as_other = client.put(f"/api/users/{target['id']}", json=body, headers=bearer(client, "a@x.com", "Secret123!"))
    as_admin = client.put(f"/api/users/{target['id']}", json=body, headers=admin)

    assert as_other.status_code == 403
    assert as_admin.status_code == 200
    assert as_admin.json()["data"]["first_name"] == "Bea"


def test_delete_me(client):
    register(client)
    user = bearer(client, "a@x.com", "Secret123!")

    assert client.delete("/api/users/me", headers=user).status_code == 200
    assert client.post("/api/auth/login", json={"email": "a@x.com", "password": "Secret123!"}).status_code == 400


# ----------------------- Categories and events -----------------------
def test_pagination_parameters_are_clamped(client):
    response = client.get("/api/categories", params={"page": 0, "page_size": 1000})

    body = response.json()["data"]
    assert body["current_page"] == 1
    assert body["page_size"] == 100


def test_category_crud(client):
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    category = create_category(client, admin)

    renamed = client.put(f"/api/categories/{category['id']}", json={"name": "Concerts"}, headers=admin)
    assert renamed.json()["data"]["name"] == "Concerts"

    assert client.get(f"/api/categories/{category['id']}").status_code == 200
    assert client.delete(f"/api/categories/{category['id']}", headers=admin).status_code == 200
    assert client.get(f"/api/categories/{category['id']}").status_code == 404


def test_event_listing_and_filters(client):
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    music = create_category(client, admin, "Music")
    sport = create_category(client, admin, "Sport")
    create_event(client, admin, music["id"], name="Jazz Night", date_time=future(5))
    create_event(client, admin, sport["id"], name="Derby", location="City Stadium", date_time=future(40))

    everything = client.get("/api/events").json()["data"]
    assert [e["name"] for e in everything["data"]] == ["Derby", "Jazz Night"]

    sport_only = client.get("/api/events", params={"category_name": "SPORT"}).json()["data"]
    assert [e["name"] for e in sport_only["data"]] == ["Derby"]

    stadium = client.get("/api/events", params={"location": "stadium"}).json()["data"]
    assert [e["category"]["name"] for e in stadium["data"]] == ["Sport"]


def test_event_filter_with_inverted_range_is_rejected(client):
    response = client.get(
        "/api/events",
        params={"date_from": "2030-02-01T00:00:00", "date_to": "2030-01-01T00:00:00"},
    )

    assert response.status_code == 422


def test_event_in_the_past_is_rejected(client):
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    category = create_category(client, admin)

    response = client.post(
        "/api/events",
        json={
            "name": "Old",
            "description": "Gone",
            "date_time": "2000-01-01T10:00:00Z",
            "location": "Nowhere",
            "max_participants": 5,
            "category_id": category["id"],
        },
        headers=admin,
    )

    assert response.status_code == 422


def test_event_image_upload_and_delete(client, storage):
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    event = create_event(client, admin, create_category(client, admin)["id"])

    uploaded = client.post(
        f"/api/events/{event['id']}/image",
        files={"image": ("poster.png", b"\x89PNG fake", "image/png")},
        headers=admin,
    )
    assert uploaded.status_code == 200
    stored_path = uploaded.json()["data"]["stored_path"]
    assert storage.exists(stored_path)

    fetched = client.get(f"/api/events/{event['id']}").json()["data"]
    assert fetched["image"]["content_type"] == "image/png"

    served = client.get(fetched["image"]["url"])
    assert fetched["image"]["url"] == "/uploads" + stored_path
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake"

    removed = client.delete(f"/api/events/{event['id']}/image", headers=admin)
    assert removed.status_code == 200
    assert not storage.exists(stored_path)


def test_event_image_size_limit(client):
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    event = create_event(client, admin, create_category(client, admin)["id"])

    response = client.post(
        f"/api/events/{event['id']}/image",
        files={"image": ("huge.png", b"0" * (10 * 1024 * 1024 + 1), "image/png")},
        headers=admin,
    )

    assert response.status_code == 413


def test_participation_flow(client):
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    event = create_event(client, admin, create_category(client, admin)["id"], max_participants=2)
    for email in ["a@x.com", "b@x.com", "c@x.com"]:
        register(client, email=email)
    a, b, c = (bearer(client, email, "Secret123!") for email in ["a@x.com", "b@x.com", "c@x.com"])
    url = f"/api/users/participate/{event['id']}"

    assert client.post(url, headers=a).status_code == 200
    assert client.post(url, headers=a).status_code == 409
    assert client.post(url, headers=b).status_code == 200
    full = client.post(url, headers=c)
    assert full.status_code == 400
    assert full.json()["message"] == "The maximum number of participants has been reached."

    joined = client.get("/api/users/participated-events", headers=a).json()["data"]
    assert [p["event"]["name"] for p in joined["data"]] == ["Jazz Night"]

    assert client.delete(url, headers=a).status_code == 200
    assert client.delete(url, headers=a).status_code == 404


def test_deleting_event_removes_participations(client):
    admin = bearer(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    event = create_event(client, admin, create_category(client, admin)["id"])
    register(client)
    user = bearer(client, "a@x.com", "Secret123!")
    client.post(f"/api/users/participate/{event['id']}", headers=user)

    assert client.delete(f"/api/events/{event['id']}", headers=admin).status_code == 200

    joined = client.get("/api/users/participated-events", headers=user).json()["data"]
    assert joined["total_items"] == 0
