"""
Test file node endpoints
"""

import uuid

import pytest
from httpx import AsyncClient

from conftest import OBJECT_STORAGE_URL, FakeObjectStore

BASE = "/api/v1/files"
USER = {"x-user-id": "user-1"}
OTHER_USER = {"x-user-id": "user-2"}


async def create_folder(client: AsyncClient, name: str, parent_id: str | None = None, headers=USER) -> dict:
    response = await client.post(f"{BASE}/", json={"name": name, "parent_id": parent_id}, headers=headers)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_and_get_folder(client: AsyncClient):
    """Test folder creation"""
    data = await create_folder(client, "Docs")

    assert data["name"] == "Docs"
    assert data["path"] == "/Docs"
    assert data["is_folder"] is True
    assert data["owner_id"] == "user-1"
    assert data["parent_id"] is None
    assert "id" in data

    response = await client.get(f"{BASE}/{data['id']}", headers=USER)
    assert response.status_code == 200
    assert response.json()["id"] == data["id"]


@pytest.mark.asyncio
async def test_create_file_record(client: AsyncClient):
    docs = await create_folder(client, "Docs")
    payload = {
        "name": "report.pdf",
        "parent_id": docs["id"],
        "variant": "file",
        "size": 1024,
        "type": "application/pdf",
        "file_url": f"{OBJECT_STORAGE_URL}/user-1/report.pdf",
    }

    response = await client.post(f"{BASE}/", json=payload, headers=USER)
    assert response.status_code == 201
    data = response.json()
    assert data["is_folder"] is False
    assert data["path"] == "/Docs/report.pdf"
    assert data["size"] == 1024
    assert data["type"] == "application/pdf"


@pytest.mark.asyncio
async def test_create_file_record_with_foreign_url_is_rejected(client: AsyncClient, object_store: FakeObjectStore):
    """Another owner's object, or any other host, cannot be attached (and later deleted) through a file record"""
    upload = await client.post(
        f"{BASE}/upload",
        files={"file": ("secret.txt", b"top secret", "text/plain")},
        headers=OTHER_USER,
    )
    assert upload.status_code == 201
    secret_url = upload.json()["file_url"]

    for url in (secret_url, "http://evil.test/steal"):
        payload = {"name": "x.txt", "variant": "file", "file_url": url}
        response = await client.post(f"{BASE}/", json=payload, headers=USER)
        assert response.status_code == 400

    root = await client.get(f"{BASE}/", headers=USER)
    assert root.json() == []

    response = await client.delete(f"{BASE}/trash", headers=USER)
    assert response.status_code == 200
    assert object_store.objects[secret_url] == b"top secret"
    assert [method for method, _ in object_store.requests] == ["PUT"]


@pytest.mark.asyncio
async def test_missing_owner_header_is_rejected(client: AsyncClient):
    response = await client.get(f"{BASE}/")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


@pytest.mark.asyncio
async def test_invalid_name_is_unprocessable(client: AsyncClient):
    response = await client.post(f"{BASE}/", json={"name": "a/b"}, headers=USER)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_children(client: AsyncClient):
    docs = await create_folder(client, "Docs")
    await create_folder(client, "A", docs["id"])
    await create_folder(client, "B", docs["id"])
    await create_folder(client, "Mine", headers=OTHER_USER)

    root = await client.get(f"{BASE}/", headers=USER)
    assert root.status_code == 200
    assert [n["name"] for n in root.json()] == ["Docs"]

    children = await client.get(f"{BASE}/", params={"parent_id": docs["id"]}, headers=USER)
    assert children.status_code == 200
    assert sorted(n["name"] for n in children.json()) == ["A", "B"]

    limited = await client.get(f"{BASE}/", params={"parent_id": docs["id"], "limit": 1}, headers=USER)
    assert len(limited.json()) == 1


@pytest.mark.asyncio
async def test_other_owners_node_is_not_found(client: AsyncClient):
    theirs = await create_folder(client, "Theirs", headers=OTHER_USER)

    response = await client.get(f"{BASE}/{theirs['id']}", headers=USER)
    assert response.status_code == 404

    response = await client.get(f"{BASE}/", params={"parent_id": theirs["id"]}, headers=USER)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_duplicate_name_conflict(client: AsyncClient):
    await create_folder(client, "Docs")

    response = await client.post(f"{BASE}/", json={"name": "Docs"}, headers=USER)
    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_under_missing_parent(client: AsyncClient):
    response = await client.post(f"{BASE}/", json={"name": "x", "parent_id": str(uuid.uuid4())}, headers=USER)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_rename_and_path(client: AsyncClient):
    docs = await create_folder(client, "Docs")
    sub = await create_folder(client, "Sub", docs["id"])

    response = await client.put(f"{BASE}/{docs['id']}/rename", json={"name": "Papers"}, headers=USER)
    assert response.status_code == 200
    assert response.json()["path"] == "/Papers"

    response = await client.get(f"{BASE}/{sub['id']}/path", headers=USER)
    assert response.status_code == 200
    data = response.json()
    assert data["path"] == "/Papers/Sub"
    assert [n["name"] for n in data["ancestors"]] == ["Papers", "Sub"]


@pytest.mark.asyncio
async def test_move(client: AsyncClient):
    docs = await create_folder(client, "Docs")
    sub = await create_folder(client, "Sub", docs["id"])
    archive = await create_folder(client, "Archive")

    response = await client.put(f"{BASE}/{sub['id']}/move", json={"new_parent_id": archive["id"]}, headers=USER)
    assert response.status_code == 200
    assert response.json()["path"] == "/Archive/Sub"

    response = await client.put(f"{BASE}/{archive['id']}/move", json={"new_parent_id": sub["id"]}, headers=USER)
    assert response.status_code == 409

    response = await client.put(f"{BASE}/{sub['id']}/move", json={"new_parent_id": None}, headers=USER)
    assert response.status_code == 200
    assert response.json()["parent_id"] is None


@pytest.mark.asyncio
async def test_star_and_option_listing(client: AsyncClient):
    docs = await create_folder(client, "Docs")

    response = await client.put(f"{BASE}/{docs['id']}/star", json={"is_starred": True}, headers=USER)
    assert response.status_code == 200
    assert response.json()["is_starred"] is True

    response = await client.get(f"{BASE}/option/starred", headers=USER)
    assert [n["id"] for n in response.json()] == [docs["id"]]

    response = await client.get(f"{BASE}/option/unknown", headers=USER)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_trash_restore_and_purge(client: AsyncClient):
    docs = await create_folder(client, "Docs")
    await create_folder(client, "Sub", docs["id"])

    response = await client.put(f"{BASE}/{docs['id']}/trash", headers=USER)
    assert response.status_code == 200
    assert response.json() == {"file_id": docs["id"], "affected": 2}

    trash = await client.get(f"{BASE}/option/trash", headers=USER)
    assert [n["id"] for n in trash.json()] == [docs["id"]]

    response = await client.put(f"{BASE}/{docs['id']}/restore", headers=USER)
    assert response.status_code == 200
    assert response.json()["affected"] == 2

    response = await client.delete(f"{BASE}/{docs['id']}", headers=USER)
    assert response.status_code == 200
    assert len(response.json()["purged_ids"]) == 2

    response = await client.get(f"{BASE}/{docs['id']}", headers=USER)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_empty_trash(client: AsyncClient):
    docs = await create_folder(client, "Docs")
    keep = await create_folder(client, "Keep")
    await client.put(f"{BASE}/{docs['id']}/trash", headers=USER)

    response = await client.delete(f"{BASE}/trash", headers=USER)
    assert response.status_code == 200
    assert response.json()["purged_ids"] == [docs["id"]]

    root = await client.get(f"{BASE}/", params={"include_trash": True}, headers=USER)
    assert [n["id"] for n in root.json()] == [keep["id"]]


@pytest.mark.asyncio
async def test_upload(client: AsyncClient, object_store: FakeObjectStore):
    docs = await create_folder(client, "Docs")

    response = await client.post(
        f"{BASE}/upload",
        files={"file": ("photo.png", b"\x89PNG data", "image/png")},
        data={"parent_id": docs["id"]},
        headers=USER,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["path"] == "/Docs/photo.png"
    assert data["size"] == len(b"\x89PNG data")
    assert data["type"] == "image/png"
    assert data["thumbnail_url"] == data["file_url"]
    assert object_store.objects[data["file_url"]] == b"\x89PNG data"


@pytest.mark.asyncio
async def test_upload_when_storage_is_down(client: AsyncClient, object_store: FakeObjectStore):
    object_store.fail_uploads = True

    response = await client.post(
        f"{BASE}/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=USER,
    )
    assert response.status_code == 503


#
# Route guard and fallbacks
#


@pytest.mark.asyncio
async def test_unknown_route_returns_page_not_found(client: AsyncClient):
    response = await client.get("/api/v1/does-not-exist", headers=USER)
    assert response.status_code == 404
    assert response.json() == {"detail": "Page not found", "home": "/"}


@pytest.mark.asyncio
async def test_signed_in_user_is_redirected_from_sign_in(client: AsyncClient):
    response = await client.get("/sign-in", headers=USER)
    assert response.status_code == 307
    assert response.headers["location"] == "/dashboard"


@pytest.mark.asyncio
async def test_anonymous_user_is_redirected_to_sign_in(client: AsyncClient):
    response = await client.get("/dashboard")
    assert response.status_code == 307
    assert response.headers["location"] == "/sign-in"


@pytest.mark.asyncio
async def test_root_is_public(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
