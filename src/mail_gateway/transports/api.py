# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Transport backed by the Resend transactional-email HTTP API."""

from __future__ import annotations

from typing import Any

import aiohttp

from ..errors import TransportError
from ..logger import get_logger
from ..models import ApiConfig, MailMode, SendRequest
from .base import SendResult, Transport

logger = get_logger("ApiTransport")


def extract_message_id(payload: Any) -> str | None:
    """Return the provider id from either ``{"id": ...}`` or ``{"data": {"id": ...}}``."""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, dict) and data.get("id"):
        return str(data["id"])
    if payload.get("id"):
        return str(payload["id"])
    return None


class ApiTransport(Transport):
    """Send mail through ``POST {base_url}/emails`` with bearer authentication.

    Attributes:
        config: The API key, sender and base URL to use.
        timeout: Total timeout applied to the HTTP round trip, in seconds.
    """

    mode = MailMode.API

    def __init__(self, config: ApiConfig, timeout: float = 30.0):
        self.config = config
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/emails"

    def build_payload(self, request: SendRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "from": self.config.sender,
            "to": [request.to],
            "subject": request.subject,
        }
        if request.text:
            payload["text"] = request.text
        if request.html:
            payload["html"] = request.html
        return payload

    async def send(self, request: SendRequest) -> SendResult:
        headers = {"Authorization": f"Bearer {self.config.api_key}"}
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.post(self.endpoint, json=self.build_payload(request), headers=headers) as resp:
                    try:
                        body = await resp.json(content_type=None)
                    except ValueError:
                        body = None
                    status = resp.status
        except aiohttp.ClientError as exc:
            logger.error("Resend request failed: %s", exc)
            raise TransportError(f"Resend request failed: {exc}") from exc

        if status >= 400:
            detail = body.get("message") if isinstance(body, dict) else None
            logger.error("Resend rejected message (status=%s): %s", status, detail or "-")
            raise TransportError(detail or f"Resend API returned status {status}")

        message_id = extract_message_id(body)
        if not message_id:
            raise TransportError("Resend API response did not include a message id")
        return SendResult(message_id=message_id)
