# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logging utilities for the mail gateway.

Modules obtain their logger through :func:`get_logger`. Handlers and format
are installed once by the entry point (``server`` or ``cli``) through
:func:`configure_logging`, never by library modules, to avoid duplicate
handlers.

Example:
    Typical usage in a module::

        from mail_gateway.logger import get_logger

        logger = get_logger("SmtpTransport")
        logger.info("Message accepted by relay")
"""

import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str = "MailGateway") -> logging.Logger:
    """Retrieve a logger instance.

    Args:
        name: The logger name. Defaults to "MailGateway".

    Returns:
        A ``logging.Logger`` instance bound to the given name.
    """
    return logging.getLogger(name)


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler for the running process.

    Unknown level names fall back to INFO.
    """
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=True,  # uvicorn may have configured the root logger already
    )
