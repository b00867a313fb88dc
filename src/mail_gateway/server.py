# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""ASGI application entry point for uvicorn.

Loads ``.env`` (if present) and the process environment once at import
time, configures logging and builds the application.

Usage:
    uvicorn mail_gateway.server:app --host 0.0.0.0 --port 3001
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from .api import create_app
from .config import load_settings, validate_settings
from .errors import ConfigError
from .logger import configure_logging, get_logger

load_dotenv()
_settings = load_settings()
configure_logging(_settings.log_level)
logger = get_logger("MailGatewayServer")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Report the mail configuration at startup without refusing to serve.

    ``/health`` must answer even when the mail settings are incomplete;
    ``/send`` then replies 500 with the missing setting's name.
    """
    try:
        validate_settings(_settings)
    except ConfigError:
        logger.warning("Starting anyway; /send will fail until the configuration is fixed")
    logger.info("Mail server listening on http://%s:%s", _settings.host, _settings.port)
    yield


app = create_app(_settings, lifespan=lifespan)
