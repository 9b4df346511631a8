"""Tests for the files API endpoints."""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from conftest import b64, basic_auth
from filestore.exceptions import StorageError
from filestore.main import create_app
from filestore.repositories.file_repository import FileRepository
from thumbnailer.thumbnail_worker import ThumbnailWorker


def register(client, email, password="secret123"):
    return client.post("/users", json={"email": email, "password": password})


def login(client, email, password="secret123"):
    register(client, email, password)
    response = client.get("/connect", headers={"Authorization": basic_auth(email, password)})
    assert response.status_code == 200
    return {"X-Token": response.json()["token"]}


@pytest.fixture
def alice(client):
    return login(client, "alice@example.com")


@pytest.fixture
def bob(client):
    return login(client, "bob@example.com")


def upload(client, headers, name, kind="file", data=b"hello", parent_id=None):
    body = {"name": name, "type": kind}
    if kind != "folder":
        body["data"] = b64(data)
    if parent_id is not None:
        body["parentId"] = parent_id
    return client.post("/files", json=body, headers=headers)


class TestUsers:

    def test_register(self, client):
        response = register(client, "alice@example.com")

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "alice@example.com"
        assert set(body) == {"id", "email"}

    def test_register_twice(self, client):
        register(client, "alice@example.com")

        response = register(client, "alice@example.com")

        assert response.status_code == 400
        assert response.json() == {"error": "Already exist"}

    def test_register_missing_email(self, client):
        response = client.post("/users", json={"password": "secret123"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing email"}

    def test_register_missing_password(self, client):
        response = client.post("/users", json={"email": "alice@example.com"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing password"}

    def test_register_malformed_body(self, client):
        response = client.post("/users", content=b"not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}

    def test_me(self, client, alice):
        response = client.get("/users/me", headers=alice)

        assert response.status_code == 200
        assert response.json()["email"] == "alice@example.com"

    def test_me_with_bearer_token(self, client, alice):
        response = client.get("/users/me", headers={"Authorization": f"Bearer {alice['X-Token']}"})

        assert response.status_code == 200

    def test_me_without_token(self, client):
        response = client.get("/users/me")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}


class TestSessions:

    def test_connect_with_wrong_password(self, client):
        register(client, "alice@example.com")

        response = client.get("/connect", headers={"Authorization": basic_auth("alice@example.com", "nope")})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_connect_without_header(self, client):
        assert client.get("/connect").status_code == 401

    def test_disconnect(self, client, alice):
        response = client.get("/disconnect", headers=alice)

        assert response.status_code == 204
        assert client.get("/users/me", headers=alice).status_code == 401

    def test_disconnect_twice(self, client, alice):
        client.get("/disconnect", headers=alice)

        assert client.get("/disconnect", headers=alice).status_code == 204

    def test_disconnect_without_token(self, client):
        assert client.get("/disconnect").status_code == 401

    def test_response_carries_request_id(self, client):
        response = client.get("/status")

        assert response.headers["X-Request-ID"]


class TestFiles:

    def test_upload_file(self, client, alice):
        response = upload(client, alice, "hello.txt")

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"id", "userId", "name", "type", "isPublic", "parentId"}
        assert body["type"] == "file"
        assert body["isPublic"] is False
        assert body["parentId"] == "0"

    def test_upload_requires_token(self, client):
        assert upload(client, {}, "hello.txt").status_code == 401

    def test_upload_missing_name(self, client, alice):
        response = client.post("/files", json={"type": "file", "data": b64(b"x")}, headers=alice)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing name"}

    def test_upload_missing_data(self, client, alice):
        response = client.post("/files", json={"name": "a.txt", "type": "file"}, headers=alice)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing data"}

    def test_upload_unknown_parent(self, client, alice):
        response = upload(client, alice, "a.txt", parent_id="nope")

        assert response.status_code == 400
        assert response.json() == {"error": "Parent not found"}

    def test_upload_into_file_parent(self, client, alice):
        text = upload(client, alice, "a.txt").json()

        response = upload(client, alice, "b.txt", parent_id=text["id"])

        assert response.status_code == 400
        assert response.json() == {"error": "Parent is not a folder"}

    def test_numeric_root_parent(self, client, alice):
        response = upload(client, alice, "docs", kind="folder", parent_id=0)

        assert response.status_code == 201
        assert response.json()["parentId"] == "0"

    def test_private_file_is_hidden_until_published(self, client, alice, bob):
        node = upload(client, bob, "secret.txt", data=b"bob's data").json()

        assert client.get(f"/files/{node['id']}", headers=alice).status_code == 404
        assert client.get(f"/files/{node['id']}/data").status_code == 404

        published = client.put(f"/files/{node['id']}/publish", headers=bob)
        assert published.status_code == 200
        assert published.json()["isPublic"] is True

        assert client.get(f"/files/{node['id']}").json()["isPublic"] is True
        data = client.get(f"/files/{node['id']}/data")
        assert data.status_code == 200
        assert data.content == b"bob's data"
        assert data.headers["content-type"].startswith("text/plain")

    def test_only_owner_can_publish(self, client, alice, bob):
        node = upload(client, bob, "a.txt").json()

        response = client.put(f"/files/{node['id']}/publish", headers=alice)

        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    def test_unpublish(self, client, alice):
        node = upload(client, alice, "a.txt").json()
        client.put(f"/files/{node['id']}/publish", headers=alice)

        response = client.put(f"/files/{node['id']}/unpublish", headers=alice)

        assert response.json()["isPublic"] is False
        assert client.get(f"/files/{node['id']}").status_code == 404

    def test_owner_reads_private_data(self, client, alice):
        node = upload(client, alice, "a.txt", data=b"mine").json()

        response = client.get(f"/files/{node['id']}/data", headers=alice)

        assert response.content == b"mine"

    def test_folder_has_no_data(self, client, alice):
        folder = upload(client, alice, "docs", kind="folder").json()

        response = client.get(f"/files/{folder['id']}/data", headers=alice)

        assert response.status_code == 400
        assert response.json() == {"error": "A folder doesn't have content"}

    def test_invalid_size(self, client, alice, png_bytes):
        node = upload(client, alice, "pic.png", kind="image", data=png_bytes).json()

        response = client.get(f"/files/{node['id']}/data", params={"size": "42"}, headers=alice)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid size"}

    def test_image_upload_then_thumbnail(self, client, alice, container, thumbnail_queue, png_bytes):
        node = upload(client, alice, "pic.png", kind="image", data=png_bytes).json()

        assert thumbnail_queue.jobs == [(node["userId"], node["id"])]
        before = client.get(f"/files/{node['id']}/data", params={"size": "100"}, headers=alice)
        assert before.status_code == 404

        worker = ThumbnailWorker(FileRepository(container.database), container.blobs)
        worker.process(*thumbnail_queue.jobs[0])

        after = client.get(f"/files/{node['id']}/data", params={"size": "100"}, headers=alice)
        assert after.status_code == 200
        assert after.headers["content-type"] == "image/png"
        assert Image.open(io.BytesIO(after.content)).width == 100


class TestListing:

    def test_pagination(self, client, alice):
        folder = upload(client, alice, "docs", kind="folder").json()
        for i in range(25):
            upload(client, alice, f"f{i}.txt", parent_id=folder["id"])

        page0 = client.get("/files", params={"parentId": folder["id"]}, headers=alice).json()
        page1 = client.get("/files", params={"parentId": folder["id"], "page": 1}, headers=alice).json()
        page2 = client.get("/files", params={"parentId": folder["id"], "page": 2}, headers=alice).json()

        assert [n["name"] for n in page0] == [f"f{i}.txt" for i in range(20)]
        assert [n["name"] for n in page1] == [f"f{i}.txt" for i in range(20, 25)]
        assert page2 == []

    def test_root_listing_is_per_user(self, client, alice, bob):
        upload(client, alice, "a.txt")
        upload(client, bob, "b.txt")

        names = [n["name"] for n in client.get("/files", headers=alice).json()]

        assert names == ["a.txt"]

    def test_non_numeric_page(self, client, alice):
        upload(client, alice, "a.txt")

        response = client.get("/files", params={"page": "abc"}, headers=alice)

        assert [n["name"] for n in response.json()] == ["a.txt"]

    def test_listing_requires_token(self, client):
        assert client.get("/files").status_code == 401


class TestInternalErrors:

    @pytest.fixture
    def lenient_client(self, container):
        return TestClient(create_app(container), raise_server_exceptions=False)

    def test_unexpected_os_error_is_json(self, lenient_client, client, alice, container, monkeypatch):
        node = upload(client, alice, "a.txt").json()

        def broken_stream(path, piece_size=None):
            raise OSError("I/O error")

        monkeypatch.setattr(container.blobs, "stream", broken_stream)

        response = lenient_client.get(f"/files/{node['id']}/data", headers=alice)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_storage_error_is_json(self, lenient_client, alice, container, monkeypatch):
        def failing_put(data):
            raise StorageError("disk full")

        monkeypatch.setattr(container.blobs, "put", failing_put)

        response = upload(lenient_client, alice, "a.txt")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


class TestStatus:

    def test_status(self, client):
        assert client.get("/status").json() == {"redis": True, "db": True}

    def test_status_with_redis_down(self, client, fake_redis):
        fake_redis.available = False

        assert client.get("/status").json() == {"redis": False, "db": True}

    def test_stats(self, client, alice, bob):
        upload(client, alice, "a.txt")
        upload(client, alice, "docs", kind="folder")

        assert client.get("/stats").json() == {"users": 2, "files": 2}
