"""
Text recognition for lab report images.

The browser uploads the scan to private storage and sends a signed URL; the
image is downloaded here and read with tesseract.
"""

from __future__ import annotations

import io
import logging
from typing import Optional, Tuple

import httpx
import pytesseract
from PIL import Image, UnidentifiedImageError

from app.config import settings
from app.exceptions import OCRServiceError, ServiceValidationError

logger = logging.getLogger("nutricoach.ocr")


class OCRReader:
    def __init__(self, timeout_sec: float = 30.0, transport: Optional[httpx.BaseTransport] = None):
        self.timeout = httpx.Timeout(timeout_sec, connect=5.0)
        self._transport = transport

    def fetch_image(self, url: str) -> Tuple[bytes, str]:
        """Download the file; only images (png, jpg, webp...) are accepted"""
        try:
            with httpx.Client(
                timeout=self.timeout, transport=self._transport, follow_redirects=True
            ) as client:
                resp = client.get(url)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"ocr_fetch_failed error={e!r}")
            raise ServiceValidationError(
                "Could not download the file from the signed URL", code="LAB_REPORT_FETCH_FAILED"
            ) from e

        content_type = resp.headers.get("content-type", "").split(";")[0].strip().lower()
        if not content_type.startswith("image/"):
            raise ServiceValidationError(
                "Only images (png, jpg, webp) are supported; take a screenshot of a PDF page",
                details={"content_type": content_type},
                code="LAB_REPORT_NOT_IMAGE",
            )
        return resp.content, content_type

    def recognize(self, image: bytes, lang: str) -> str:
        try:
            with Image.open(io.BytesIO(image)) as img:
                text = pytesseract.image_to_string(img, lang=lang)
        except UnidentifiedImageError as e:
            raise ServiceValidationError(
                "The file is not a readable image", code="LAB_REPORT_NOT_IMAGE"
            ) from e
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            logger.error(f"ocr_failed lang={lang} error={e!r}")
            raise OCRServiceError(details={"lang": lang}) from e
        logger.info(f"ocr_done lang={lang} chars={len(text)} bytes={len(image)}")
        return text

    def read_url(self, url: str, lang: str) -> Tuple[str, str]:
        """Recognized text and content type of the image behind `url`"""
        image, content_type = self.fetch_image(url)
        return self.recognize(image, lang), content_type


def get_ocr_reader() -> OCRReader:
    """Build a reader from settings (FastAPI dependency)."""
    return OCRReader(timeout_sec=settings.ocr_fetch_timeout_sec)
