# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""FastAPI application factory for the mail gateway.

Endpoints:
- ``GET /health``: liveness probe, independent of mail configuration
- ``POST /send``: validate, resolve the transport for ``MAIL_MODE`` and send
- ``GET /metrics``: Prometheus counters

Every failure of ``/send`` is logged and rendered as
``{"ok": false, "error": "..."}`` with status 400 (invalid request) or 500
(configuration or transport failure).

Example:
    Creating and running the application::

        from mail_gateway.api import create_app
        from mail_gateway.config import load_settings

        app = create_app(load_settings())
        uvicorn.run(app, host="0.0.0.0", port=3001)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import Settings, resolve
from .errors import InvalidRequestError, MailGatewayError
from .models import SendRequest, SendResponse, TransportConfig
from .prometheus import GatewayMetrics
from .transports import Transport, select_transport

logger = logging.getLogger(__name__)

GENERIC_SEND_ERROR = "Error sending mail"

TransportFactory = Callable[[TransportConfig], Transport]


def error_response(status_code: int, message: str) -> JSONResponse:
    """Render the uniform failure envelope."""
    envelope = SendResponse(ok=False, error=message or GENERIC_SEND_ERROR)
    return JSONResponse(status_code=status_code, content=envelope.model_dump(by_alias=True, exclude_none=True))


def create_app(
    settings: Settings,
    transport_factory: TransportFactory | None = None,
    metrics: GatewayMetrics | None = None,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings:
        Immutable settings snapshot; read on every request, never mutated.
    transport_factory:
        Builds a transport from a resolved configuration. Defaults to
        :func:`mail_gateway.transports.select_transport`.
    metrics:
        Metrics collector; a fresh one is created when omitted.
    lifespan:
        Optional lifespan context manager for startup/shutdown events.

    Returns
    -------
    FastAPI
        A configured application ready to be served by uvicorn.
    """
    api = FastAPI(title="Mail Gateway", lifespan=lifespan)
    api.state.settings = settings
    metrics = metrics or GatewayMetrics()
    api.state.metrics = metrics

    if transport_factory is None:
        def transport_factory(config: TransportConfig) -> Transport:
            return select_transport(config, timeout=settings.send_timeout)

    if settings.allows_any_origin:
        logger.warning("CORS_ORIGIN not set: accepting requests from any origin (development only)")
    api.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @api.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Map malformed bodies to the gateway's 400 envelope."""
        logger.error(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        metrics.inc_rejected()
        return error_response(InvalidRequestError.status_code, str(InvalidRequestError()))

    @api.get("/health")
    async def health():
        """Liveness probe; never touches mail configuration."""
        return {"ok": True}

    @api.post("/send", response_model=SendResponse, response_model_exclude_none=True)
    async def send(payload: SendRequest):
        """Send one message through the transport selected by ``MAIL_MODE``."""
        try:
            payload.check_required()
        except InvalidRequestError as exc:
            logger.warning("Rejected send request: %s", exc)
            metrics.inc_rejected()
            return error_response(exc.status_code, str(exc))

        mode = (settings.mail_mode or "api").lower()
        try:
            config = resolve(settings.mail_mode, settings)
            mode = config.mode.value
            transport = transport_factory(config)
            result = await asyncio.wait_for(transport.send(payload), timeout=settings.send_timeout)
        except MailGatewayError as exc:
            logger.error("SEND ERROR (mode=%s, code=%s): %s", mode, exc.code, exc)
            metrics.inc_error(mode, exc.code)
            return error_response(exc.status_code, str(exc))
        except asyncio.TimeoutError:
            logger.error("SEND ERROR (mode=%s): timed out after %ss", mode, settings.send_timeout)
            metrics.inc_error(mode, "timeout")
            return error_response(500, f"Timed out sending mail after {settings.send_timeout:g}s")
        except Exception:
            logger.exception("SEND ERROR (mode=%s): unexpected failure", mode)
            metrics.inc_error(mode, "unexpected")
            return error_response(500, GENERIC_SEND_ERROR)

        logger.info("Message %s sent via %s", result.message_id, mode)
        metrics.inc_sent(mode)
        return SendResponse(
            ok=True,
            message_id=result.message_id,
            id=result.message_id if mode == "api" else None,
            preview_url=result.preview_url,
        )

    @api.get("/metrics")
    async def metrics_endpoint():
        """Expose Prometheus metrics collected by the gateway."""
        return Response(content=metrics.generate_latest(), media_type="text/plain; version=0.0.4")

    return api
