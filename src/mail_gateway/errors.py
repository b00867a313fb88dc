# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Error taxonomy shared by the resolver, the transports and the HTTP layer.

Every error carries the HTTP status it maps to and a short machine code, so
the API boundary can render them uniformly as ``{"ok": false, "error": ...}``.
"""

from __future__ import annotations


class MailGatewayError(RuntimeError):
    """Base class for failures surfaced to HTTP callers."""

    status_code = 500
    code = "error"

    def __init__(self, message: str = "Error sending mail"):
        super().__init__(message)


class InvalidRequestError(MailGatewayError):
    """Raised when a send request is missing required fields."""

    status_code = 400
    code = "invalid_request"

    def __init__(self, message: str = "Required fields: to, subject, and text or html"):
        super().__init__(message)


class ConfigError(MailGatewayError):
    """Raised when a setting required by the active mail mode is absent or malformed.

    The message names the setting, never its value.
    """

    code = "missing_configuration"

    def __init__(self, message: str = "Missing mail configuration"):
        super().__init__(message)


class TransportError(MailGatewayError):
    """Raised when the provider API or the SMTP relay rejects or fails a send."""

    code = "transport_error"
