# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration resolver for the mail gateway.

Settings are read once from the process environment into an immutable
:class:`Settings` snapshot. The per-mode transport configuration is then
derived from that snapshot by :func:`resolve`, which fails with
:class:`~mail_gateway.errors.ConfigError` when a setting required by the
selected mode is missing.

Environment variables:
    PORT            HTTP listen port (default: 3001)
    HOST            HTTP listen host (default: 0.0.0.0)
    CORS_ORIGIN     Comma-separated allowed origins (default: any origin)
    MAIL_MODE       api | smtp | ethereal (default: api)
    RESEND_API_KEY  Resend credential, required for MAIL_MODE=api
    RESEND_FROM     Sender for the API transport
    RESEND_API_URL  Base URL of the Resend API
    SMTP_HOST, SMTP_USER, SMTP_PASS
                    Required for MAIL_MODE=smtp
    SMTP_PORT       SMTP port (default: 587)
    SMTP_SECURE     Implicit TLS, textual boolean (default: false)
    MAIL_FROM       SMTP sender (default: SMTP_USER)
    ETHEREAL_USER, ETHEREAL_PASS
                    Required for MAIL_MODE=ethereal
    SEND_TIMEOUT    Upper bound in seconds for one send (default: 30)
    LOG_LEVEL       Logging level (default: INFO)

Example:
    Resolving the active transport configuration::

        settings = load_settings()
        config = resolve(settings.mail_mode, settings)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigError
from .logger import get_logger
from .models import (
    RESEND_API_URL,
    RESEND_DEFAULT_SENDER,
    ApiConfig,
    DisposableConfig,
    MailMode,
    SmtpConfig,
    TransportConfig,
)

DEFAULT_PORT = 3001
DEFAULT_SMTP_PORT = 587
DEFAULT_SEND_TIMEOUT = 30.0
DEFAULT_MODE = MailMode.API

MODE_ALIASES = {
    "api": MailMode.API,
    "smtp": MailMode.SMTP,
    "ethereal": MailMode.ETHEREAL,
    "disposable": MailMode.ETHEREAL,
    "test": MailMode.ETHEREAL,
}

logger = get_logger("MailGatewayConfig")


@dataclass(frozen=True)
class Settings:
    """Raw gateway settings as read from the environment.

    Values are kept as text; :func:`resolve` interprets the ones that matter
    for the selected mode.
    """

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    cors_origin: str | None = None
    mail_mode: str | None = None
    resend_api_key: str | None = None
    resend_from: str | None = None
    resend_api_url: str | None = None
    smtp_host: str | None = None
    smtp_port: str | None = None
    smtp_secure: str | None = None
    smtp_user: str | None = None
    smtp_pass: str | None = None
    mail_from: str | None = None
    ethereal_user: str | None = None
    ethereal_pass: str | None = None
    send_timeout: float = DEFAULT_SEND_TIMEOUT
    log_level: str = "INFO"

    @property
    def cors_origins(self) -> list[str]:
        """Allowed origins; ``["*"]`` when ``CORS_ORIGIN`` is unset."""
        origins = [item.strip() for item in (self.cors_origin or "").split(",") if item.strip()]
        return origins or ["*"]

    @property
    def allows_any_origin(self) -> bool:
        return self.cors_origins == ["*"]


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Interpret a textual boolean; unrecognised values yield ``default``."""
    if value is None:
        return default
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(key: str, value: str | None, default: int) -> int:
    if value is None or not str(value).strip():
        return default
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer") from exc


def _parse_float(key: str, value: str | None, default: float) -> float:
    if value is None or not str(value).strip():
        return default
    try:
        parsed = float(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number") from exc
    if parsed <= 0:
        raise ConfigError(f"{key} must be greater than zero")
    return parsed


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build a :class:`Settings` snapshot from ``environ`` (default ``os.environ``).

    Empty values are treated as unset.

    Raises:
        ConfigError: If ``PORT`` or ``SEND_TIMEOUT`` is not numeric.
    """
    env = os.environ if environ is None else environ

    def get(key: str) -> str | None:
        value = env.get(key)
        if value is None:
            return None
        value = value.strip()
        return value or None

    return Settings(
        host=get("HOST") or "0.0.0.0",
        port=_parse_int("PORT", get("PORT"), DEFAULT_PORT),
        cors_origin=get("CORS_ORIGIN"),
        mail_mode=get("MAIL_MODE"),
        resend_api_key=get("RESEND_API_KEY"),
        resend_from=get("RESEND_FROM"),
        resend_api_url=get("RESEND_API_URL"),
        smtp_host=get("SMTP_HOST"),
        smtp_port=get("SMTP_PORT"),
        smtp_secure=get("SMTP_SECURE"),
        smtp_user=get("SMTP_USER"),
        smtp_pass=get("SMTP_PASS"),
        mail_from=get("MAIL_FROM"),
        ethereal_user=get("ETHEREAL_USER"),
        ethereal_pass=get("ETHEREAL_PASS"),
        send_timeout=_parse_float("SEND_TIMEOUT", get("SEND_TIMEOUT"), DEFAULT_SEND_TIMEOUT),
        log_level=get("LOG_LEVEL") or "INFO",
    )


def parse_mode(value: str | MailMode | None) -> MailMode:
    """Map a ``MAIL_MODE`` value to :class:`MailMode`, case-insensitively.

    Raises:
        ConfigError: If the value names no known mode.
    """
    if isinstance(value, MailMode):
        return value
    if value is None or not value.strip():
        return DEFAULT_MODE
    mode = MODE_ALIASES.get(value.strip().lower())
    if mode is None:
        raise ConfigError(f"Unknown MAIL_MODE '{value}' (expected api, smtp or ethereal)")
    return mode


def _require(mode: MailMode, **values: str | None) -> None:
    missing = [key for key, value in values.items() if not value]
    if missing:
        raise ConfigError(f"Missing {', '.join(missing)} for MAIL_MODE={mode.value}")


def resolve(mode: str | MailMode | None, settings: Settings) -> TransportConfig:
    """Derive the transport configuration for ``mode`` from ``settings``.

    Args:
        mode: The requested mode; ``None`` selects the default (api).
        settings: The settings snapshot to read from.

    Returns:
        An :class:`ApiConfig`, :class:`SmtpConfig` or :class:`DisposableConfig`.

    Raises:
        ConfigError: If a mandatory setting of the selected mode is absent.
    """
    selected = parse_mode(mode)

    if selected is MailMode.API:
        _require(selected, RESEND_API_KEY=settings.resend_api_key)
        return ApiConfig(
            api_key=settings.resend_api_key,
            sender=settings.resend_from or RESEND_DEFAULT_SENDER,
            base_url=(settings.resend_api_url or RESEND_API_URL).rstrip("/"),
        )

    if selected is MailMode.SMTP:
        _require(
            selected,
            SMTP_HOST=settings.smtp_host,
            SMTP_USER=settings.smtp_user,
            SMTP_PASS=settings.smtp_pass,
        )
        return SmtpConfig(
            host=settings.smtp_host,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            port=_parse_int("SMTP_PORT", settings.smtp_port, DEFAULT_SMTP_PORT),
            secure=parse_bool(settings.smtp_secure, default=False),
            sender=settings.mail_from or settings.smtp_user,
        )

    _require(selected, ETHEREAL_USER=settings.ethereal_user, ETHEREAL_PASS=settings.ethereal_pass)
    return DisposableConfig(user=settings.ethereal_user, password=settings.ethereal_pass)


def validate_settings(settings: Settings) -> TransportConfig:
    """Resolve the configured mode eagerly, logging the outcome.

    Raises:
        ConfigError: Propagated from :func:`resolve`.
    """
    try:
        config = resolve(settings.mail_mode, settings)
    except ConfigError as exc:
        logger.warning("Mail configuration incomplete: %s", exc)
        raise
    logger.info("Mail mode %s configured", config.mode.value)
    return config
