"""
Chat completion client for an OpenAI-compatible API.

One POST per call, no retries. Every failure is raised as LLMServiceError so
route handlers render it through the common error envelope.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import httpx

from app.config import settings
from app.exceptions import LLMServiceError

logger = logging.getLogger("nutricoach.llm")

Message = Dict[str, str]

DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 800
ERROR_BODY_LIMIT = 2000


class LLMClient:
    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        model: str,
        timeout_sec: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = httpx.Timeout(timeout_sec, connect=10.0)
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/v1/chat/completions"

    def chat(
        self,
        messages: List[Message],
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = False,
    ) -> str:
        """Send messages and return the stripped text of the first choice."""
        if not self.api_key:
            raise LLMServiceError("LLM API key is not set", code="LLM_NOT_CONFIGURED")

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        logger.info(
            f"llm_request model={self.model} messages={len(messages)} "
            f"json_mode={json_mode} max_tokens={max_tokens}"
        )
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.post(self.endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"llm_transport_error error={e!r}")
            raise LLMServiceError(f"LLM request failed: {e}") from e

        if resp.status_code < 200 or resp.status_code >= 300:
            body = resp.text or resp.reason_phrase
            logger.warning(f"llm_http_error status={resp.status_code}")
            raise LLMServiceError(
                f"LLM HTTP {resp.status_code}: {body[:ERROR_BODY_LIMIT]}",
                details={"status": resp.status_code},
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMServiceError("LLM response is not JSON") from e

        content = _first_choice_content(data)
        if not content or not content.strip():
            raise LLMServiceError(_upstream_error_message(data) or "No model content")

        logger.info(f"llm_response chars={len(content)}")
        return content.strip()


def _first_choice_content(data) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def _upstream_error_message(data) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return None


def get_llm_client() -> LLMClient:
    """Build a client from settings (FastAPI dependency)."""
    return LLMClient(
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        model=settings.llm_model,
        timeout_sec=settings.llm_timeout_sec,
    )
