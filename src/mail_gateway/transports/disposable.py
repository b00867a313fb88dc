# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Transport for Ethereal disposable test accounts.

Ethereal accepts submissions like any SMTP relay but only captures them.
Its reply to DATA ends with ``[STATUS=new MSGID=<id>]``; the id addresses
the captured message in the Ethereal web interface.
"""

from __future__ import annotations

import re
from email.message import EmailMessage

from ..models import DisposableConfig, MailMode, SmtpConfig
from .base import SendResult
from .smtp import SmtpTransport

ETHEREAL_WEB = "https://ethereal.email"

_TRAILER_RE = re.compile(r"\[([^\]]+)\]\s*$")
_PROP_RE = re.compile(r"\b([A-Z0-9]+)=(\S+)")


def preview_url(response: str | None, web: str = ETHEREAL_WEB) -> str | None:
    """Compute the Ethereal preview link from a DATA reply, or ``None``."""
    if not response:
        return None
    trailer = _TRAILER_RE.search(response)
    if not trailer:
        return None
    props = dict(_PROP_RE.findall(trailer.group(1)))
    if "STATUS" in props and "MSGID" in props:
        return f"{web}/message/{props['MSGID']}"
    return None


class DisposableTransport(SmtpTransport):
    """SMTP transport pinned to Ethereal with a fixed test sender."""

    mode = MailMode.ETHEREAL

    def __init__(self, config: DisposableConfig):
        super().__init__(
            SmtpConfig(
                host=config.host,
                user=config.user,
                password=config.password,
                port=config.port,
                secure=config.secure,
                sender=config.sender,
            )
        )

    def _result(self, msg: EmailMessage, response: str) -> SendResult:
        # Without a MSGID trailer the mailbox listing still shows the capture
        url = preview_url(response) or f"{ETHEREAL_WEB}/messages"
        return SendResult(message_id=msg["Message-ID"], preview_url=url)
