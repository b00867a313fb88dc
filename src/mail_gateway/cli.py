# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command-line interface for the mail gateway.

Usage:
    mail-gateway serve [--host HOST] [--port PORT] [--reload]
    mail-gateway check [--json]
    mail-gateway send --to someone@example.com --subject Hi --text "Hello"

Settings come from the environment and from a ``.env`` file in the current
directory, exactly as for the HTTP server.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import os
import sys
from typing import Any, Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings, validate_settings
from .errors import MailGatewayError
from .logger import configure_logging
from .models import SendRequest, TransportConfig
from .transports import select_transport

console = Console()
err_console = Console(stderr=True)

SECRET_FIELDS = {"api_key", "password"}


def run_async(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_json(data: Any) -> None:
    """Print data as formatted JSON."""
    console.print_json(json.dumps(data, indent=2, default=str))


def describe_config(config: TransportConfig) -> dict[str, Any]:
    """Return the config's fields with secrets masked."""
    described: dict[str, Any] = {"mode": config.mode.value}
    for field in dataclasses.fields(config):
        value = getattr(config, field.name)
        described[field.name] = "********" if field.name in SECRET_FIELDS and value else value
    return described


def _settings() -> Settings:
    load_dotenv()
    try:
        settings = load_settings()
    except MailGatewayError as exc:
        print_error(str(exc))
        sys.exit(1)
    configure_logging(settings.log_level)
    return settings


@click.group()
@click.version_option(package_name="mail-gateway")
def main() -> None:
    """mail-gateway CLI - relay send-email requests to Resend or SMTP.

    Examples:

        mail-gateway serve --port 3001

        mail-gateway check

        mail-gateway send --to me@example.com --subject Test --text Hello
    """


@main.command("serve")
@click.option("--host", "-h", default=None, help="Host to bind to (default: HOST or 0.0.0.0).")
@click.option("--port", "-p", type=int, default=None, help="Port to listen on (default: PORT or 3001).")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development.")
def serve(host: Optional[str], port: Optional[int], reload: bool) -> None:
    """Run the HTTP gateway under uvicorn."""
    import uvicorn

    settings = _settings()
    host = host or settings.host
    port = port or settings.port

    # server.py reads its settings from the environment
    os.environ["HOST"] = host
    os.environ["PORT"] = str(port)

    console.print("\n[bold cyan]Starting mail gateway[/bold cyan]")
    console.print(f"  Mode:    {settings.mail_mode or 'api'}")
    console.print(f"  Listen:  {host}:{port}")
    console.print()

    uvicorn.run("mail_gateway.server:app", host=host, port=port, reload=reload, log_level="info")


@main.command("check")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def check(as_json: bool) -> None:
    """Validate the configuration of the active MAIL_MODE."""
    settings = _settings()
    try:
        config = validate_settings(settings)
    except MailGatewayError as exc:
        print_error(str(exc))
        sys.exit(1)

    described = describe_config(config)
    described["cors_origins"] = settings.cors_origins
    if as_json:
        print_json(described)
        return

    table = Table(title="Mail gateway configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in described.items():
        table.add_row(key, ", ".join(value) if isinstance(value, list) else str(value))
    console.print(table)
    if settings.allows_any_origin:
        console.print("[yellow]CORS_ORIGIN is not set: any origin may call the gateway.[/yellow]")
    print_success(f"MAIL_MODE={config.mode.value} is ready")


@main.command("send")
@click.option("--to", "to", required=True, help="Recipient address.")
@click.option("--subject", "-s", required=True, help="Subject line.")
@click.option("--text", "-t", default=None, help="Plain-text body.")
@click.option("--html", default=None, help="HTML body.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def send(to: str, subject: str, text: Optional[str], html: Optional[str], as_json: bool) -> None:
    """Send one message through the configured transport."""
    settings = _settings()

    async def _send():
        request = SendRequest(to=to, subject=subject, text=text, html=html).check_required()
        config = validate_settings(settings)
        transport = select_transport(config, timeout=settings.send_timeout)
        return await asyncio.wait_for(transport.send(request), timeout=settings.send_timeout)

    try:
        result = run_async(_send())
    except MailGatewayError as exc:
        print_error(str(exc))
        sys.exit(1)
    except asyncio.TimeoutError:
        print_error(f"Timed out sending mail after {settings.send_timeout:g}s")
        sys.exit(1)

    if as_json:
        print_json({"ok": True, "messageId": result.message_id, "previewUrl": result.preview_url})
        return
    print_success(f"Sent {result.message_id}")
    if result.preview_url:
        console.print(f"  Preview: {result.preview_url}")


if __name__ == "__main__":
    main()
