"""Integration tests for the HTTP API.

The app runs in-process with FastAPI's TestClient against in-memory stores.
"""

import base64
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from folio.api.main import create_app
from folio.errors import AssetStoreError
from folio.lifecycle.registry import set_content_service
from folio.schemas.assets import DeleteOutcome
from folio.settings import AssetStoreSettings, settings


@pytest.fixture
def client(service):
    set_content_service(service)
    with TestClient(create_app()) as test_client:
        yield test_client
    set_content_service(None)


def _post(client, hosted, identifier="posts/abc", **overrides) -> dict:
    payload = {
        "title": "Launch",
        "excerpt": "We launched",
        "content": "Body",
        "category": "news",
        "image": hosted(identifier).model_dump(),
        **overrides,
    }
    response = client.post("/api/posts", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["record"]


# =============================================================================
# Health
# =============================================================================


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_status_lists_policies(client):
    body = client.get("/api/status").json()

    assert body["record_types"]["post"] == {
        "delete_policy": "strict",
        "bulk_delete_policy": "best-effort",
    }
    assert body["record_types"]["case-study"]["delete_policy"] == "best-effort"
    assert "api_secret" not in body


def test_status_reports_missing_asset_credentials(client):
    unconfigured = AssetStoreSettings(provider="cloudinary", cloud_name="", api_key="", api_secret="")
    with patch.object(settings, "assets", unconfigured):
        body = client.get("/api/status").json()

    assert body["status"] == "degraded"
    assert body["asset_store_configured"] is False


def test_status_memory_assets_need_no_credentials(client):
    with patch.object(settings, "assets", AssetStoreSettings(provider="memory")):
        body = client.get("/api/status").json()

    assert body["status"] == "ok"
    assert body["asset_store_configured"] is True


# =============================================================================
# Records
# =============================================================================


def test_post_lifecycle(client, assets, hosted):
    """Create, replace the image, then delete; each superseded image is removed once."""
    post = _post(client, hosted)

    response = client.put(f"/api/posts/{post['id']}", json={"image": hosted("posts/def").model_dump()})
    assert response.status_code == 200
    assert response.json()["record"]["image"]["identifier"] == "posts/def"
    assert assets.delete_calls == ["posts/abc"]

    response = client.delete(f"/api/posts/{post['id']}")
    assert response.status_code == 200
    assert response.json()["report"]["failed"] == []
    assert assets.delete_calls == ["posts/abc", "posts/def"]

    assert client.get(f"/api/posts/{post['id']}").status_code == 404


def test_create_validation_error(client):
    response = client.post("/api/posts", json={"title": "No image"})

    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert {"excerpt", "content", "category", "image"} <= fields


def test_strict_delete_failure_returns_502(client, assets, hosted):
    post = _post(client, hosted)
    assets.script("posts/abc", DeleteOutcome.ERROR)

    response = client.delete(f"/api/posts/{post['id']}")

    assert response.status_code == 502
    assert [d["identifier"] for d in response.json()["failed"]] == ["posts/abc"]
    assert client.get(f"/api/posts/{post['id']}").status_code == 200


def test_list_filters_and_paginates(client, hosted):
    for i in range(3):
        _post(client, hosted, f"posts/{i}", title=f"Post {i}", featured=i == 0)

    body = client.get("/api/posts", params={"featured": "true"}).json()
    assert body["total"] == 1
    assert body["items"][0]["title"] == "Post 0"
    assert body["items"][0]["image"]["identifier"] == "posts/0"

    body = client.get("/api/posts", params={"limit": 2, "page": 2, "sort_by": "title", "sort_order": "asc"}).json()
    assert [p["title"] for p in body["items"]] == ["Post 2"]
    assert body["total_pages"] == 2
    assert body["has_prev"] is True


def test_bulk_delete(client, assets, hosted):
    ids = [_post(client, hosted, f"posts/{n}", title=n)["id"] for n in ("a", "b", "c")]
    assets.script("posts/b", AssetStoreError("boom"))

    response = client.post("/api/posts/bulk/delete", json={"ids": ids})

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["deleted_count"] == 3
    assert [d["identifier"] for d in result["failed"]] == ["posts/b"]
    assert client.get("/api/posts").json()["total"] == 0


def test_bulk_delete_without_ids(client):
    response = client.post("/api/posts/bulk/delete", json={"ids": []})

    assert response.status_code == 400


def test_inquiry_update_limited_to_admin_fields(client):
    response = client.post(
        "/api/inquiries",
        json={
            "name": "Ada",
            "email": "ADA@Example.com",
            "phone": "555-0100",
            "project_type": "consulting",
            "budget": "discuss",
            "message": "Hello",
            "terms": True,
        },
    )
    assert response.status_code == 201
    inquiry = response.json()["record"]
    assert inquiry["email"] == "ada@example.com"

    response = client.put(
        f"/api/inquiries/{inquiry['id']}", json={"status": "contacted", "email": "x@y.zz"}
    )
    assert response.status_code == 200
    assert response.json()["record"]["status"] == "contacted"
    assert response.json()["record"]["email"] == "ada@example.com"


def test_inquiry_requires_terms(client):
    response = client.post(
        "/api/inquiries",
        json={
            "name": "Ada",
            "email": "ada@example.com",
            "phone": "555-0100",
            "project_type": "consulting",
            "budget": "discuss",
            "message": "Hello",
            "terms": False,
        },
    )

    assert response.status_code == 400


# =============================================================================
# Assets
# =============================================================================


def test_upload_and_delete_image(client, assets):
    image = "data:image/png;base64," + base64.b64encode(b"png-bytes").decode()

    response = client.post("/api/assets/upload", json={"image": image, "folder": "team", "identifier": "ada"})
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["identifier"] == "team/ada"

    response = client.post("/api/assets/delete", json={"identifier": "team/ada"})
    assert response.status_code == 200
    assert response.json()["outcome"] == "ok"
    assert assets.objects == {}


def test_upload_requires_image(client):
    assert client.post("/api/assets/upload", json={}).status_code == 400


def test_delete_image_error_outcome(client, assets):
    assets.script("team/ada", DeleteOutcome.ERROR)

    response = client.post("/api/assets/delete", json={"identifier": "team/ada"})

    assert response.status_code == 502


def test_upload_returns_storable_reference(client, assets):
    image = base64.b64encode(b"png-bytes").decode()

    response = client.post("/api/assets/upload", json={"image": image, "folder": "clients", "identifier": "acme"})

    assert response.status_code == 200
    body = response.json()
    assert body["reference"] == {"url": body["result"]["url"], "identifier": "clients/acme"}

    response = client.post("/api/clients", json={"name": "Acme", "logo": body["reference"]})
    assert response.status_code == 201
    assert response.json()["record"]["logo"]["identifier"] == "clients/acme"


# =============================================================================
# Slug lookup, bulk update, reorder
# =============================================================================


def test_case_study_by_id_or_slug(client, hosted):
    response = client.post(
        "/api/case-studies",
        json={
            "title": "Online Shop",
            "excerpt": "Storefront rebuild",
            "project_overview": "Rebuilt the storefront",
            "client_name": "Acme",
            "completed_date": "2024-05-01T00:00:00Z",
            "technologies": ["python"],
            "category": "ecommerce",
            "main_image": hosted("cs/main").model_dump(),
        },
    )
    assert response.status_code == 201
    study = response.json()["record"]
    assert study["slug"] == "online-shop"
    assert study["category_name"] == "E-commerce"

    by_slug = client.get("/api/case-studies/online-shop")
    assert by_slug.status_code == 200
    assert by_slug.json()["id"] == study["id"]
    assert client.get(f"/api/case-studies/{study['id']}").json()["slug"] == "online-shop"
    assert client.get("/api/case-studies/no-such-study").status_code == 404


def _inquiry(client, name: str) -> dict:
    response = client.post(
        "/api/inquiries",
        json={
            "name": name,
            "email": f"{name.lower()}@example.com",
            "phone": "555-0100",
            "project_type": "consulting",
            "budget": "discuss",
            "message": "Hello",
            "terms": True,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["record"]


def test_inquiry_bulk_update(client):
    a, b, c = (_inquiry(client, n)["id"] for n in ("Ada", "Bob", "Cy"))

    response = client.post(
        "/api/inquiries/bulk/update",
        json={"ids": [a, b], "update_data": {"status": "contacted", "priority": "high"}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["updated_count"] == 2
    assert sorted(body["updated_ids"]) == sorted([a, b])
    assert client.get(f"/api/inquiries/{a}").json()["priority"] == "high"
    assert client.get(f"/api/inquiries/{c}").json()["status"] == "new"


def test_inquiry_bulk_update_rejects_bad_input(client):
    a = _inquiry(client, "Ada")["id"]

    def bulk_update(body):
        return client.post("/api/inquiries/bulk/update", json=body).status_code

    assert bulk_update({"ids": [], "update_data": {"status": "closed"}}) == 400
    assert bulk_update({"ids": [a], "update_data": {}}) == 400
    assert bulk_update({"ids": [a], "update_data": {"status": "bogus"}}) == 400
    assert client.get(f"/api/inquiries/{a}").json()["status"] == "new"


def test_team_reorder(client, hosted):
    ids = []
    for i, name in enumerate(["ada", "bob", "cy"]):
        response = client.post(
            "/api/team",
            json={
                "name": name,
                "role": "Engineer",
                "experience": "5 years",
                "expertise": ["python", "apis"],
                "avatar": hosted(f"team/{name}").model_dump(),
                "order": i,
            },
        )
        assert response.status_code == 201
        ids.append(response.json()["record"]["id"])

    response = client.put(
        "/api/team/bulk/reorder",
        json={"updates": [{"id": ids[0], "order": 2}, {"id": ids[2], "order": 0}]},
    )

    assert response.status_code == 200
    assert response.json()["updated_count"] == 2
    assert [m["name"] for m in client.get("/api/team").json()["items"]] == ["cy", "bob", "ada"]


def test_bulk_update_and_reorder_only_where_supported(client):
    assert client.post("/api/posts/bulk/update", json={"ids": ["x"], "update_data": {}}).status_code in (404, 405)
    assert client.put("/api/posts/bulk/reorder", json={"updates": []}).status_code in (404, 405)
