# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SMTP transport built on aiosmtplib.

A fresh connection is opened for every send and closed afterwards, so one
transport instance can serve concurrent requests without sharing sockets.

TLS behaviour follows the ``secure`` flag:
- ``secure=True``: implicit TLS from the first byte (typically port 465)
- ``secure=False``: plain connect, upgraded with STARTTLS when the server
  advertises it (typically port 587)
"""

from __future__ import annotations

import asyncio
from email.message import EmailMessage
from email.utils import formatdate, make_msgid, parseaddr

import aiosmtplib

from ..errors import TransportError
from ..logger import get_logger
from ..models import MailMode, SendRequest, SmtpConfig
from .base import SendResult, Transport

SMTP_TIMEOUT = 10.0

logger = get_logger("SmtpTransport")


def header_value(value: str) -> str:
    """Fold a caller-supplied header value onto a single line."""
    return " ".join(part.strip() for part in value.splitlines() if part.strip())


def build_message(request: SendRequest, sender: str, fallback_domain: str = "localhost") -> EmailMessage:
    """Build the MIME message for ``request``.

    Both bodies present yields ``multipart/alternative`` with the plain part
    first; otherwise a single ``text/plain`` or ``text/html`` part.

    The Message-ID uses the sender's domain, or ``fallback_domain`` when the
    sender is not an address, so no hostname lookup happens here.
    """
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = header_value(request.to)
    msg["Subject"] = header_value(request.subject)
    msg["Date"] = formatdate(localtime=True)
    _, address = parseaddr(sender)
    _, at, domain = address.rpartition("@")
    if not at or not domain:
        domain = fallback_domain
    msg["Message-ID"] = make_msgid(domain=domain)
    if request.text and request.html:
        msg.set_content(request.text)
        msg.add_alternative(request.html, subtype="html")
    elif request.html:
        msg.set_content(request.html, subtype="html")
    else:
        msg.set_content(request.text or "")
    return msg


class SmtpTransport(Transport):
    """Deliver mail through an authenticated SMTP relay.

    Attributes:
        host: Relay hostname.
        port: Relay port.
        secure: Whether to use implicit TLS.
        user: Login name.
        password: Login password.
        sender: Value of the ``From`` header and envelope sender.
    """

    mode = MailMode.SMTP

    def __init__(self, config: SmtpConfig):
        self.host = config.host
        self.port = config.port
        self.secure = config.secure
        self.user = config.user
        self.password = config.password
        self.sender = config.envelope_sender

    def _client(self) -> aiosmtplib.SMTP:
        if self.secure:
            return aiosmtplib.SMTP(
                hostname=self.host, port=self.port, use_tls=True, start_tls=False, timeout=SMTP_TIMEOUT
            )
        # start_tls=None upgrades only when the server offers STARTTLS
        return aiosmtplib.SMTP(
            hostname=self.host, port=self.port, use_tls=False, start_tls=None, timeout=SMTP_TIMEOUT
        )

    async def _submit(self, msg: EmailMessage) -> str:
        """Connect, authenticate, send ``msg`` and return the server's DATA reply."""
        smtp = self._client()
        try:
            await smtp.connect()
            if self.user and self.password:
                await smtp.login(self.user, self.password)
            _errors, response = await smtp.send_message(msg)
        except asyncio.CancelledError:
            # no QUIT handshake once the caller has given up
            smtp.close()
            raise
        except (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError) as exc:
            logger.error("SMTP delivery via %s:%s failed: %s", self.host, self.port, exc)
            raise TransportError(f"SMTP delivery failed: {exc}") from exc
        finally:
            if smtp.is_connected:
                try:
                    await smtp.quit()
                except (aiosmtplib.SMTPException, OSError) as exc:
                    logger.debug("Ignoring error while closing SMTP session: %s", exc)
        return response

    def _result(self, msg: EmailMessage, response: str) -> SendResult:
        return SendResult(message_id=msg["Message-ID"])

    async def send(self, request: SendRequest) -> SendResult:
        msg = build_message(request, self.sender, fallback_domain=self.host)
        response = await self._submit(msg)
        logger.debug("Relay %s accepted %s: %s", self.host, msg["Message-ID"], response)
        return self._result(msg, response)
