# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Outbound mail transports and the selector that picks one per mode.

Example:
    Building the transport for the configured mode::

        config = resolve(settings.mail_mode, settings)
        transport = select_transport(config, timeout=settings.send_timeout)
        result = await transport.send(request)
"""

from __future__ import annotations

from ..errors import ConfigError
from ..models import ApiConfig, DisposableConfig, SmtpConfig, TransportConfig
from .api import ApiTransport
from .base import SendResult, Transport
from .disposable import DisposableTransport
from .smtp import SmtpTransport

__all__ = [
    "ApiTransport",
    "DisposableTransport",
    "SendResult",
    "SmtpTransport",
    "Transport",
    "select_transport",
]


def select_transport(config: TransportConfig, timeout: float = 30.0) -> Transport:
    """Instantiate the transport matching ``config``'s variant.

    Args:
        config: A resolved transport configuration.
        timeout: HTTP timeout for the API transport, in seconds.

    Raises:
        ConfigError: If ``config`` is not one of the known variants.
    """
    if isinstance(config, DisposableConfig):
        return DisposableTransport(config)
    if isinstance(config, SmtpConfig):
        return SmtpTransport(config)
    if isinstance(config, ApiConfig):
        return ApiTransport(config, timeout=timeout)
    raise ConfigError(f"No transport for configuration {type(config).__name__}")
