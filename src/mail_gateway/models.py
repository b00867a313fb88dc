# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Data models for the mail gateway.

Models:
    - MailMode: the transport selector read from ``MAIL_MODE``
    - SendRequest: body accepted by ``POST /send``
    - SendResponse: uniform envelope returned by ``POST /send``
    - ApiConfig, SmtpConfig, DisposableConfig: per-mode transport settings

Request and response schemas are pydantic models so FastAPI can parse and
serialise them. Transport configurations are frozen dataclasses: they are
built once from the environment and only ever read.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidRequestError

ETHEREAL_HOST = "smtp.ethereal.email"
ETHEREAL_PORT = 587
ETHEREAL_SENDER = '"Mail Gateway (Test)" <test@ethereal.email>'
RESEND_API_URL = "https://api.resend.com"
RESEND_DEFAULT_SENDER = "Mail Gateway <onboarding@resend.dev>"


class MailMode(str, Enum):
    """Outbound channels the gateway can deliver through.

    Attributes:
        API: Resend transactional-email API.
        SMTP: A real SMTP relay.
        ETHEREAL: Ethereal disposable test account; never delivers to real inboxes.
    """

    API = "api"
    SMTP = "smtp"
    ETHEREAL = "ethereal"


class SendRequest(BaseModel):
    """Body of ``POST /send``.

    Fields are optional at the schema level so that missing values produce
    the gateway's own 400 envelope through :meth:`check_required`.
    """

    model_config = ConfigDict(extra="ignore")

    to: Annotated[str | None, Field(default=None, description="Recipient address")]
    subject: Annotated[str | None, Field(default=None, description="Subject line")]
    text: Annotated[str | None, Field(default=None, description="Plain-text body")]
    html: Annotated[str | None, Field(default=None, description="HTML body")]

    def check_required(self) -> SendRequest:
        """Ensure ``to``, ``subject`` and at least one body are non-empty.

        Raises:
            InvalidRequestError: If any required field is missing or blank.
        """
        if not self.to or not self.subject or (not self.text and not self.html):
            raise InvalidRequestError()
        return self


class SendResponse(BaseModel):
    """Uniform envelope for ``POST /send`` replies.

    ``messageId`` is the delivery identifier for every transport. The API
    transport mirrors it under ``id`` as well. Failures carry only ``ok``
    and ``error``.
    """

    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    message_id: str | None = Field(default=None, alias="messageId")
    id: str | None = None
    preview_url: str | None = Field(default=None, alias="previewUrl")
    error: str | None = None


@dataclass(frozen=True)
class ApiConfig:
    """Settings for the Resend API transport."""

    api_key: str
    sender: str = RESEND_DEFAULT_SENDER
    base_url: str = RESEND_API_URL

    mode = MailMode.API


@dataclass(frozen=True)
class SmtpConfig:
    """Settings for a real SMTP relay."""

    host: str
    user: str
    password: str
    port: int = 587
    secure: bool = False
    sender: str | None = None

    mode = MailMode.SMTP

    @property
    def envelope_sender(self) -> str:
        return self.sender or self.user


@dataclass(frozen=True)
class DisposableConfig:
    """Settings for the Ethereal test relay; host, port and sender are fixed."""

    user: str
    password: str
    host: str = ETHEREAL_HOST
    port: int = ETHEREAL_PORT
    secure: bool = False
    sender: str = ETHEREAL_SENDER

    mode = MailMode.ETHEREAL


TransportConfig = Union[ApiConfig, SmtpConfig, DisposableConfig]
