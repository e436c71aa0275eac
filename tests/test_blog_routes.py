"""
Tests for the registry HTTP surface.
"""
import pytest
from fastapi.testclient import TestClient

from blog_registry.main import create_app
from blog_registry.routes.blog_dependencies import get_registry


@pytest.fixture
def client(registry):
    app = create_app()
    app.dependency_overrides[get_registry] = lambda: registry
    return TestClient(app)


def _headers(signer, deposit=None):
    headers = {"X-Signer-Account-Id": signer}
    if deposit is not None:
        headers["X-Attached-Deposit"] = str(deposit)
    return headers


def _create(client, author, title="Post"):
    response = client.post(
        "/registry/create_blog_post",
        json={"title": title, "content_ref": f"cid-{title}", "thumbnail_ref": f"thumb-{title}"},
        headers=_headers(author),
    )
    assert response.status_code == 200, response.text
    return response.json()


def test_register_and_list_authors(client):
    """Test registering over HTTP and listing authors."""
    response = client.post("/registry/register", json={}, headers=_headers("alice", 1))
    assert response.status_code == 200

    response = client.get("/registry/get_authors")
    assert response.json() == ["alice"]


def test_register_without_deposit(client):
    """Test that a missing deposit maps to 402."""
    response = client.post("/registry/register", json={}, headers=_headers("alice"))

    assert response.status_code == 402
    assert "deposit" in response.json()["detail"]


def test_register_without_signer(client):
    """Test that a missing signer header maps to 401."""
    response = client.post("/registry/register", json={})

    assert response.status_code == 401


def test_denylisted_register(client):
    """Test that denylisted accounts get 403."""
    response = client.post("/registry/register", json={}, headers=_headers("mallory", 1))

    assert response.status_code == 403
    assert response.json()["detail"] == "This account is in the denylist!"


def test_add_moderators_permissions(client, state):
    """Test moderator management permissions over HTTP."""
    response = client.post(
        "/registry/add_moderators", json={"moderators": ["carol"]}, headers=_headers("random", 1)
    )
    assert response.status_code == 403

    response = client.post(
        "/registry/add_moderators", json={"moderators": ["carol"]}, headers=_headers("blog-registry", 1)
    )
    assert response.status_code == 200

    response = client.post(
        "/registry/remove_moderators", json={"moderators": ["carol"]}, headers=_headers("carol", 1)
    )
    assert response.status_code == 200


def test_post_lifecycle(client):
    """Test creating, updating, reading and removing a post over HTTP."""
    client.post("/registry/register", json={}, headers=_headers("alice", 1))
    post = _create(client, "alice")
    assert post["author_id"] == "alice"

    response = client.post(
        "/registry/update_blog_post",
        json={"blog_id": post["id"], "update_blog": {"title": "new"}},
        headers=_headers("alice"),
    )
    assert response.status_code == 200
    assert response.json()["title"] == "new"

    response = client.post(
        "/registry/update_blog_post",
        json={"blog_id": post["id"], "update_blog": {"unknown_field": "x"}},
        headers=_headers("alice"),
    )
    assert response.status_code == 200
    assert response.json()["title"] == "new"

    response = client.get("/registry/get_blog_post", params={"blog_id": post["id"]})
    assert response.json()["title"] == "new"

    response = client.post("/registry/remove_blog_post", json={"blog_id": post["id"]}, headers=_headers("alice"))
    assert response.status_code == 200
    assert response.json()["id"] == post["id"]

    response = client.get("/registry/get_blog_post", params={"blog_id": post["id"]})
    assert response.status_code == 200
    assert response.json() is None


def test_create_post_as_non_author(client):
    """Test that non-authors get 403 on create."""
    response = client.post(
        "/registry/create_blog_post",
        json={"title": "t", "content_ref": "c", "thumbnail_ref": "th"},
        headers=_headers("alice"),
    )

    assert response.status_code == 403


def test_update_missing_post(client):
    """Test updating a post that does not exist."""
    client.post("/registry/register", json={}, headers=_headers("alice", 1))

    response = client.post(
        "/registry/update_blog_post",
        json={"blog_id": "missing", "update_blog": {"title": "x"}},
        headers=_headers("alice"),
    )

    assert response.status_code == 404


def test_get_blog_posts_pagination(client):
    """Test author filtering and pagination over HTTP."""
    client.post("/registry/register", json={}, headers=_headers("alice", 1))
    client.post("/registry/register", json={}, headers=_headers("bob", 1))
    for index in range(1, 6):
        _create(client, "alice", f"p{index}")
    _create(client, "bob", "b1")

    response = client.get("/registry/get_blog_posts", params={"limit": 2, "from": 1, "author_id": "alice"})

    assert response.status_code == 200
    assert [post["title"] for post in response.json()] == ["p2", "p3"]


def test_update_with_list_author_is_bad_request(client):
    """Test that a list-valued author_id maps to 400."""
    client.post("/registry/register", json={}, headers=_headers("alice", 1))
    post = _create(client, "alice")

    response = client.post(
        "/registry/update_blog_post",
        json={"blog_id": post["id"], "update_blog": {"author_id": ["bob"]}},
        headers=_headers("alice"),
    )

    assert response.status_code == 400
    assert client.get("/registry/get_blog_post", params={"blog_id": post["id"]}).json()["author_id"] == "alice"


def test_negative_deposit_is_payment_required(client):
    """Test that a negative deposit is rejected by the deposit guard."""
    response = client.post("/registry/register", json={}, headers=_headers("alice", -1))

    assert response.status_code == 402


def test_negative_pagination_is_rejected(client):
    """Test that a negative from is a validation error."""
    response = client.get("/registry/get_authors", params={"from": -1})

    assert response.status_code == 422


def test_health(client):
    """Test the health endpoint."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["storage_backend"] == "memory"
