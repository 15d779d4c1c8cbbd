"""
Listing adapter for the hosted object storage REST API.

Uploads and deletes happen directly between the browser and the storage
service; the backend only lists folders and builds public URLs.
"""

from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import quote

import httpx

from app.config import settings
from app.exceptions import StorageServiceError
from domain.schemas.storage_schemas import StorageItem

logger = logging.getLogger("nutricoach.storage")

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif", "bmp"}
PLACEHOLDER_NAME = ".emptyFolderPlaceholder"


def extension_of(name: str) -> str:
    i = name.rfind(".")
    return name[i + 1:].lower() if i >= 0 else ""


def is_image_name(name: str) -> bool:
    return extension_of(name) in IMAGE_EXTENSIONS


def is_pdf_name(name: str) -> bool:
    return extension_of(name) == "pdf"


class StorageClient:
    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        timeout_sec: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout = httpx.Timeout(timeout_sec, connect=5.0)
        self._transport = transport

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{quote(path)}"

    def list_folder(self, bucket: str, prefix: str = "", limit: int = 200) -> List[StorageItem]:
        """
        List files directly inside a folder, newest first.

        Sub-folders and the placeholder object the storage service keeps in
        empty folders are skipped.
        """
        if not self.base_url or not self.api_key:
            raise StorageServiceError("Storage is not configured", code="STORAGE_NOT_CONFIGURED")

        prefix = prefix.strip("/")
        body = {
            "prefix": prefix,
            "limit": limit,
            "offset": 0,
            "sortBy": {"column": "updated_at", "order": "desc"},
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
        }
        url = f"{self.base_url}/storage/v1/object/list/{bucket}"

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.post(url, json=body, headers=headers)
                resp.raise_for_status()
                rows = resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"storage_list_failed bucket={bucket} prefix={prefix} status={e.response.status_code}"
            )
            raise StorageServiceError(
                f"Storage HTTP {e.response.status_code}",
                details={"bucket": bucket, "prefix": prefix},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"storage_list_failed bucket={bucket} prefix={prefix} error={e!r}")
            raise StorageServiceError(f"Storage request failed: {e}") from e

        items: List[StorageItem] = []
        for row in rows if isinstance(rows, list) else []:
            if not isinstance(row, dict):
                continue
            name = row.get("name")
            # folders come back without an id
            if not name or name == PLACEHOLDER_NAME or row.get("id") is None:
                continue
            meta = row.get("metadata") if isinstance(row.get("metadata"), dict) else {}
            path = f"{prefix}/{name}" if prefix else name
            size = meta.get("size")
            mimetype = meta.get("mimetype")
            items.append(
                StorageItem(
                    name=name,
                    path=path,
                    public_url=self.public_url(bucket, path),
                    is_image=is_image_name(name),
                    is_pdf=is_pdf_name(name),
                    size=size if isinstance(size, int) and not isinstance(size, bool) else None,
                    mimetype=mimetype if isinstance(mimetype, str) else None,
                    created_at=row.get("created_at"),
                    updated_at=row.get("updated_at"),
                )
            )
        logger.info(f"storage_listed bucket={bucket} prefix={prefix} count={len(items)}")
        return items


def get_storage_client() -> StorageClient:
    """Build a client from settings (FastAPI dependency)."""
    return StorageClient(
        base_url=settings.storage_url,
        api_key=settings.storage_api_key,
        timeout_sec=settings.storage_timeout_sec,
    )
