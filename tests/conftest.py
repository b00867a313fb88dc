import pytest

from tests.helpers import DummySMTP

GATEWAY_ENV_KEYS = (
    "HOST",
    "PORT",
    "CORS_ORIGIN",
    "MAIL_MODE",
    "RESEND_API_KEY",
    "RESEND_FROM",
    "RESEND_API_URL",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_SECURE",
    "SMTP_USER",
    "SMTP_PASS",
    "MAIL_FROM",
    "ETHEREAL_USER",
    "ETHEREAL_PASS",
    "SEND_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every gateway variable from the process environment."""
    for key in GATEWAY_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def patch_aiosmtplib(monkeypatch):
    """Replace ``aiosmtplib.SMTP`` in the SMTP transport; returns created clients."""
    created = []

    def factory(**kwargs):
        smtp = DummySMTP(**kwargs)
        created.append(smtp)
        return smtp

    monkeypatch.setattr("mail_gateway.transports.smtp.aiosmtplib.SMTP", factory)
    return created
