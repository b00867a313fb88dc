# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base class and result type shared by every outbound transport."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..models import MailMode, SendRequest


@dataclass(frozen=True)
class SendResult:
    """Outcome of a successful send.

    Attributes:
        message_id: Identifier assigned by the provider or the Message-ID header.
        preview_url: Link to the captured message; only disposable transports set it.
    """

    message_id: str
    preview_url: str | None = None


class Transport(ABC):
    """Abstract outbound mail channel.

    Implementations must be safe to use from concurrent tasks: they hold
    only immutable configuration and open their network resources per send.
    """

    mode: MailMode

    @abstractmethod
    async def send(self, request: SendRequest) -> SendResult:
        """Deliver ``request`` through this channel.

        Raises:
            TransportError: If the remote service fails or rejects the message.
        """
