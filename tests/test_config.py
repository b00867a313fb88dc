"""Tests for settings loading and per-mode configuration resolution."""

import pytest

from mail_gateway.config import (
    Settings,
    load_settings,
    parse_bool,
    parse_mode,
    resolve,
    validate_settings,
)
from mail_gateway.errors import ConfigError
from mail_gateway.models import (
    ETHEREAL_HOST,
    RESEND_API_URL,
    RESEND_DEFAULT_SENDER,
    ApiConfig,
    DisposableConfig,
    MailMode,
    SmtpConfig,
)


class TestLoadSettings:
    def test_defaults_from_empty_environment(self):
        settings = load_settings({})
        assert settings.port == 3001
        assert settings.host == "0.0.0.0"
        assert settings.mail_mode is None
        assert settings.send_timeout == 30.0
        assert settings.cors_origins == ["*"]
        assert settings.allows_any_origin is True

    def test_reads_recognised_keys(self):
        settings = load_settings(
            {
                "PORT": "8080",
                "MAIL_MODE": "SMTP",
                "SMTP_HOST": "smtp.example.com",
                "SMTP_USER": "mailer",
                "SMTP_PASS": "secret",
                "CORS_ORIGIN": "https://a.example.com,https://b.example.com",
                "SEND_TIMEOUT": "12.5",
            }
        )
        assert settings.port == 8080
        assert settings.mail_mode == "SMTP"
        assert settings.smtp_host == "smtp.example.com"
        assert settings.send_timeout == 12.5
        assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]
        assert settings.allows_any_origin is False

    def test_blank_values_count_as_unset(self):
        settings = load_settings({"SMTP_HOST": "   ", "CORS_ORIGIN": ""})
        assert settings.smtp_host is None
        assert settings.cors_origins == ["*"]

    def test_invalid_port_names_the_key(self):
        with pytest.raises(ConfigError, match="PORT"):
            load_settings({"PORT": "eighty"})

    @pytest.mark.parametrize("value", ["soon", "0", "-3"])
    def test_invalid_send_timeout(self, value):
        with pytest.raises(ConfigError, match="SEND_TIMEOUT"):
            load_settings({"SEND_TIMEOUT": value})

    def test_reads_process_environment_by_default(self, clean_env):
        clean_env.setenv("MAIL_MODE", "ethereal")
        clean_env.setenv("ETHEREAL_USER", "eth-user")
        settings = load_settings()
        assert settings.mail_mode == "ethereal"
        assert settings.ethereal_user == "eth-user"


class TestParsing:
    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes", "on", " True "])
    def test_parse_bool_truthy(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "off"])
    def test_parse_bool_falsy(self, value):
        assert parse_bool(value, default=True) is False

    @pytest.mark.parametrize("value", [None, "maybe", ""])
    def test_parse_bool_unrecognised_uses_default(self, value):
        assert parse_bool(value) is False

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, MailMode.API),
            ("", MailMode.API),
            ("api", MailMode.API),
            ("API", MailMode.API),
            ("Smtp", MailMode.SMTP),
            ("ethereal", MailMode.ETHEREAL),
            ("disposable", MailMode.ETHEREAL),
            ("test", MailMode.ETHEREAL),
            (MailMode.SMTP, MailMode.SMTP),
        ],
    )
    def test_parse_mode(self, value, expected):
        assert parse_mode(value) is expected

    def test_parse_mode_rejects_unknown(self):
        with pytest.raises(ConfigError, match="MAIL_MODE"):
            parse_mode("pigeon")


class TestResolveApi:
    def test_requires_api_key(self):
        with pytest.raises(ConfigError) as excinfo:
            resolve("api", Settings())
        assert "RESEND_API_KEY" in str(excinfo.value)

    def test_defaults(self):
        config = resolve("api", Settings(resend_api_key="re_key"))
        assert config == ApiConfig(api_key="re_key", sender=RESEND_DEFAULT_SENDER, base_url=RESEND_API_URL)

    def test_overrides_and_trailing_slash(self):
        settings = Settings(
            resend_api_key="re_key",
            resend_from="Shop <shop@example.com>",
            resend_api_url="http://localhost:9999/",
        )
        config = resolve(None, settings)
        assert config.sender == "Shop <shop@example.com>"
        assert config.base_url == "http://localhost:9999"


class TestResolveSmtp:
    BASE = dict(smtp_host="smtp.example.com", smtp_user="mailer@example.com", smtp_pass="secret")

    def test_defaults(self):
        config = resolve("smtp", Settings(**self.BASE))
        assert isinstance(config, SmtpConfig)
        assert config.port == 587
        assert config.secure is False
        assert config.sender == "mailer@example.com"
        assert config.envelope_sender == "mailer@example.com"

    def test_explicit_port_secure_and_sender(self):
        settings = Settings(**self.BASE, smtp_port="465", smtp_secure="true", mail_from="News <news@example.com>")
        config = resolve("smtp", settings)
        assert config.port == 465
        assert config.secure is True
        assert config.sender == "News <news@example.com>"

    @pytest.mark.parametrize("value", ["1", "yes", "on"])
    def test_numeric_and_word_secure_values_enable_tls(self, value):
        config = resolve("smtp", Settings(**self.BASE, smtp_secure=value))
        assert config.secure is True

    def test_unrecognised_secure_value_is_false(self):
        config = resolve("smtp", Settings(**self.BASE, smtp_secure="sometimes"))
        assert config.secure is False

    def test_invalid_port(self):
        with pytest.raises(ConfigError, match="SMTP_PORT"):
            resolve("smtp", Settings(**self.BASE, smtp_port="abc"))

    @pytest.mark.parametrize("missing", ["smtp_host", "smtp_user", "smtp_pass"])
    def test_each_mandatory_setting(self, missing):
        values = dict(self.BASE)
        values.pop(missing)
        with pytest.raises(ConfigError) as excinfo:
            resolve("smtp", Settings(**values))
        message = str(excinfo.value)
        assert missing.upper() in message
        assert "smtp" in message.lower()

    def test_lists_all_missing_settings_without_values(self):
        with pytest.raises(ConfigError) as excinfo:
            resolve("smtp", Settings(smtp_pass="topsecret"))
        message = str(excinfo.value)
        assert "SMTP_HOST" in message and "SMTP_USER" in message
        assert "topsecret" not in message


class TestResolveEthereal:
    def test_requires_credentials(self):
        with pytest.raises(ConfigError) as excinfo:
            resolve("ethereal", Settings(ethereal_user="eth"))
        assert "ETHEREAL_PASS" in str(excinfo.value)

    def test_fixed_host_and_port(self):
        config = resolve("ethereal", Settings(ethereal_user="eth", ethereal_pass="pw"))
        assert isinstance(config, DisposableConfig)
        assert config.host == ETHEREAL_HOST
        assert config.port == 587
        assert config.secure is False

    def test_smtp_settings_are_irrelevant(self):
        settings = Settings(ethereal_user="eth", ethereal_pass="pw", smtp_host="smtp.example.com", smtp_port="oops")
        config = resolve("ethereal", settings)
        assert config.host == ETHEREAL_HOST


def test_validate_settings_uses_configured_mode():
    config = validate_settings(Settings(mail_mode="smtp", smtp_host="h", smtp_user="u", smtp_pass="p"))
    assert config.mode is MailMode.SMTP


def test_validate_settings_propagates_config_error():
    with pytest.raises(ConfigError):
        validate_settings(Settings(mail_mode="ethereal"))
