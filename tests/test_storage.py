"""
Tests for the hosted storage listing adapter and the routes that use it.

The storage REST API is simulated with httpx.MockTransport; routes receive
the mocked client through the get_storage dependency.
"""

import httpx
import pytest

from adapters.storage_adapter import StorageClient, extension_of, is_image_name, is_pdf_name
from app.config import settings
from app.exceptions import StorageServiceError
from test_fixtures import (
    client,
    auth,
    register,
    install_storage,
    request_json,
    storage_client,
    storage_row,
)


def test_file_name_helpers():
    assert extension_of("Diploma.PDF") == "pdf"
    assert extension_of("README") == ""
    assert is_image_name("photo.JPG")
    assert is_image_name("cover.webp")
    assert not is_image_name("scan.pdf")
    assert is_pdf_name("scan.pdf")


def test_list_folder_request_and_filtering():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = request_json(request)
        return httpx.Response(
            200,
            json=[
                {"name": "nested", "id": None, "metadata": None},
                storage_row(".emptyFolderPlaceholder", size=0),
                storage_row("My Diploma.pdf"),
                storage_row("photo.png", size=2048, mimetype="image/png"),
            ],
        )

    items = storage_client(handler).list_folder("nutritionist_documents", "/abc/certificates/")

    assert seen["url"] == "https://storage.test/storage/v1/object/list/nutritionist_documents"
    assert seen["headers"]["authorization"] == "Bearer service-key"
    assert seen["headers"]["apikey"] == "service-key"
    assert seen["body"] == {
        "prefix": "abc/certificates",
        "limit": 200,
        "offset": 0,
        "sortBy": {"column": "updated_at", "order": "desc"},
    }

    assert [i.name for i in items] == ["My Diploma.pdf", "photo.png"]
    pdf, png = items
    assert pdf.path == "abc/certificates/My Diploma.pdf"
    assert pdf.public_url == (
        "https://storage.test/storage/v1/object/public/nutritionist_documents/"
        "abc/certificates/My%20Diploma.pdf"
    )
    assert pdf.is_pdf and not pdf.is_image
    assert png.is_image
    assert png.size == 2048
    assert png.mimetype == "image/png"


def test_list_folder_not_configured():
    storage = StorageClient(base_url=None, api_key=None)
    with pytest.raises(StorageServiceError) as exc_info:
        storage.list_folder("nutritionist_documents")
    assert exc_info.value.code == "STORAGE_NOT_CONFIGURED"


def test_list_folder_http_error():
    def handler(request):
        return httpx.Response(500, json={"error": "boom"})

    with pytest.raises(StorageServiceError) as exc_info:
        storage_client(handler).list_folder("nutritionist_documents", "abc")
    assert exc_info.value.message == "Storage HTTP 500"
    assert exc_info.value.details == {"bucket": "nutritionist_documents", "prefix": "abc"}


# =============================================================================
# ROUTES
# =============================================================================


def test_storage_route_lists_allowed_bucket():
    user = register("client")
    install_storage(lambda request: httpx.Response(200, json=[storage_row("menu.pdf")]))

    resp = client.get(
        f"/storage/{settings.storage_docs_bucket}", params={"prefix": "x/other"}, headers=auth(user)
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()[0]["path"] == "x/other/menu.pdf"


def test_storage_route_rejects_unknown_bucket():
    user = register("client")
    install_storage(lambda request: httpx.Response(200, json=[]))
    resp = client.get("/storage/private-bucket", headers=auth(user))
    assert resp.status_code == 404


def test_storage_failure_is_reported():
    user = register("client")
    install_storage(lambda request: httpx.Response(503, text="unavailable"))
    resp = client.get(f"/storage/{settings.storage_media_bucket}", headers=auth(user))
    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "STORAGE_ERROR"


def test_specialist_documents():
    specialist = register("specialist")
    viewer = register("client")
    root = specialist["user_id"]

    def handler(request: httpx.Request) -> httpx.Response:
        prefix = request_json(request)["prefix"]
        bucket = request.url.path.rsplit("/", 1)[-1]
        rows = {
            (settings.storage_media_bucket, f"{root}/avatar"): [
                storage_row("notes.txt", mimetype="text/plain"),
                storage_row("me.png", mimetype="image/png"),
            ],
            (settings.storage_docs_bucket, f"{root}/certificates"): [storage_row("cert.pdf")],
            (settings.storage_docs_bucket, f"{root}/portfolio"): [
                storage_row("before-after.jpg", mimetype="image/jpeg")
            ],
        }
        return httpx.Response(200, json=rows.get((bucket, prefix), []))

    install_storage(handler)
    resp = client.get(f"/specialists/{root}/documents", headers=auth(viewer))

    assert resp.status_code == 200, resp.text
    docs = resp.json()
    assert docs["avatar_url"].endswith(f"/{settings.storage_media_bucket}/{root}/avatar/me.png")
    assert [d["name"] for d in docs["certificates"]] == ["cert.pdf"]
    assert docs["diplomas"] == []
    assert docs["other"] == []
    assert docs["portfolio"][0]["is_image"] is True


def test_documents_of_unknown_specialist():
    viewer = register("client")
    install_storage(lambda request: httpx.Response(200, json=[]))
    resp = client.get(f"/specialists/{viewer['user_id']}/documents", headers=auth(viewer))
    assert resp.status_code == 404
