"""
Pytest configuration and fixtures for testing the OTT CMS.
"""

import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Tests must never touch a real server directory
os.environ.setdefault("OTT_CMS_DIR", str(Path(__file__).parent.parent / "test_artifacts"))

from ott_cms.common.storage import StorageService
from ott_cms.content import CmsConfig, create_app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-secret"
USER_PASSWORD = "user-secret"

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"


def image_file(name: str = "poster.png") -> tuple[str, bytes, str]:
    return (name, PNG_BYTES, "image/png")


def video_file(name: str = "trailer.mp4") -> tuple[str, bytes, str]:
    return (name, MP4_BYTES, "video/mp4")


def stored_files(media_dir: Path) -> list[Path]:
    """Every regular file currently under the upload root."""
    return sorted(p for p in media_dir.rglob("*") if p.is_file())


@pytest.fixture(scope="function")
def media_dir(tmp_path):
    """Fresh upload root per test."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture(scope="function")
def test_config(tmp_path, media_dir):
    """Configuration pointing at a throwaway database and upload root."""
    return CmsConfig(
        database_url=f"sqlite:///{tmp_path / 'cms.db'}",
        media_storage_dir=media_dir,
        no_migrate=True,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        jwt_secret="test-secret",
        max_image_size=64 * 1024,
        max_video_size=256 * 1024,
    )


@pytest.fixture(scope="function")
def app(test_config):
    return create_app(test_config)


@pytest.fixture(scope="function")
def client(app):
    """Test client with the lifespan (schema, storage, bootstrap admin) running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(app, client):
    """Session on the same database the running app uses."""
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def storage(media_dir):
    return StorageService(media_dir)


@pytest.fixture
def admin_token(client):
    response = client.post(
        "/api/admin/v1/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]["token"]


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def create_user(client, admin_headers):
    """Factory creating a user through the API; returns the user record."""

    def _create(email: str = "viewer@example.com", status: str = "ACTIVE", name: str = "Viewer"):
        response = client.post(
            "/api/user/v1/user",
            json={"name": name, "email": email, "password": USER_PASSWORD, "status": status},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def user(create_user):
    return create_user()


@pytest.fixture
def user_headers(client, user):
    response = client.post(
        "/api/user/v1/login", json={"email": user["email"], "password": USER_PASSWORD}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture
def category(client, admin_headers):
    response = client.post(
        "/api/category/v1/category", data={"name": "Drama"}, headers=admin_headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def service(client, admin_headers):
    response = client.post(
        "/api/service/v1/service",
        json={"name": "Blood Test", "description": "Complete blood count", "amount": 500},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def uploaded_movie(client, admin_headers, category):
    """A movie with an uploaded poster and video."""
    response = client.post(
        "/api/movie/v1/movie",
        data={"name": "Night Train", "description": "A thriller", "categoryId": category["id"]},
        files={"image": image_file(), "movie": video_file()},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
